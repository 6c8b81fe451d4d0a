"""
Verification of identity-provider session tokens.

Authentication itself is delegated to Clerk. The browser sends the Clerk
session JWT either as a bearer token or in the `__session` cookie; this module
only checks the signature against Clerk's published JWKS and extracts the
claims. Any failure is treated as "no identity".
"""

import logging
from typing import Any, Dict, List, Optional

import jwt
from jwt import PyJWKClient

from app.core.config import settings

logger = logging.getLogger(__name__)

SESSION_COOKIE_NAME = "__session"


class AuthenticationError(Exception):
    """Raised when a session token cannot be verified."""
    pass


class ClerkTokenVerifier:
    """Verifies Clerk session tokens (RS256) using the instance's JWKS endpoint."""

    def __init__(
        self,
        jwks_url: str,
        issuer: Optional[str] = None,
        authorized_parties: Optional[List[str]] = None,
        jwks_client: Optional[PyJWKClient] = None,
    ):
        self.jwks_url = jwks_url
        self.issuer = issuer
        self.authorized_parties = authorized_parties or []
        self.jwks_client = jwks_client or PyJWKClient(jwks_url)

    def verify(self, token: str) -> Dict[str, Any]:
        """
        Validate a session token and return its claims.

        Raises:
            AuthenticationError: if the token is expired, malformed, signed by an
                unknown key, or issued for a party that is not authorized.
        """
        try:
            signing_key = self.jwks_client.get_signing_key_from_jwt(token)
            claims = jwt.decode(
                token,
                signing_key.key,
                algorithms=["RS256"],
                issuer=self.issuer,
                options={"verify_aud": False, "verify_iss": self.issuer is not None},
            )
        except jwt.ExpiredSignatureError as e:
            raise AuthenticationError("Session token has expired") from e
        except (jwt.InvalidTokenError, jwt.PyJWKClientError) as e:
            raise AuthenticationError(f"Invalid session token: {e}") from e

        azp = claims.get("azp")
        if self.authorized_parties and azp and azp not in self.authorized_parties:
            raise AuthenticationError(f"Token issued for unauthorized party: {azp}")
        if not claims.get("sub"):
            raise AuthenticationError("Session token has no subject")
        return claims


_verifier: Optional[ClerkTokenVerifier] = None


def get_token_verifier() -> Optional[ClerkTokenVerifier]:
    """
    Returns the process-wide verifier, or None when CLERK_JWKS_URL is not configured.
    """
    global _verifier
    if _verifier is None and settings.CLERK_JWKS_URL:
        _verifier = ClerkTokenVerifier(
            jwks_url=settings.CLERK_JWKS_URL,
            issuer=settings.CLERK_ISSUER,
            authorized_parties=settings.CLERK_AUTHORIZED_PARTIES,
        )
    return _verifier


def extract_session_token(authorization: Optional[str], session_cookie: Optional[str]) -> Optional[str]:
    """Picks the bearer token from the Authorization header, falling back to the session cookie."""
    if authorization:
        scheme, _, credentials = authorization.partition(" ")
        if scheme.lower() == "bearer" and credentials.strip():
            return credentials.strip()
    return session_cookie or None

import logging
from typing import Any, Dict, Optional

from fastapi import Cookie, Depends, Header, HTTPException, status

from app.core.auth import (
    AuthenticationError,
    SESSION_COOKIE_NAME,
    extract_session_token,
    get_token_verifier,
)

logger = logging.getLogger(__name__)


# --- Caller Identity Dependencies ---
def get_current_claims(
    authorization: Optional[str] = Header(None),
    session_cookie: Optional[str] = Cookie(None, alias=SESSION_COOKIE_NAME),
) -> Optional[Dict[str, Any]]:
    """
    Resolves the claims of the calling user's session token, or None when the
    request carries no verifiable identity.
    """
    token = extract_session_token(authorization, session_cookie)
    if not token:
        return None

    verifier = get_token_verifier()
    if verifier is None:
        logger.error("Auth: CLERK_JWKS_URL is not configured; rejecting session token.")
        return None

    try:
        return verifier.verify(token)
    except AuthenticationError as e:
        logger.warning(f"Auth: Session token rejected: {e}")
        return None


def get_current_user_id(claims: Optional[Dict[str, Any]] = Depends(get_current_claims)) -> Optional[str]:
    """The identity provider's user id (`sub` claim) of the caller, or None."""
    return claims.get("sub") if claims else None


def require_claims(claims: Optional[Dict[str, Any]] = Depends(get_current_claims)) -> Dict[str, Any]:
    """Like get_current_claims, but answers 401 for anonymous callers."""
    if not claims:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")
    return claims

import re
import json
import logging
from typing import List, Dict, Any, Optional, Union
from dataclasses import dataclass
from enum import Enum

# LangChain is the abstraction layer over the chat model providers,
# so switching between Gemini, OpenAI, Azure or a local Ollama is a config change.
from langchain_openai import ChatOpenAI, AzureChatOpenAI
from langchain_google_genai import ChatGoogleGenerativeAI
from langchain_community.chat_models import ChatOllama
from langchain_core.messages import HumanMessage, SystemMessage, AIMessage

from app.core.config import Settings, settings as app_settings

logger = logging.getLogger(__name__)

# Matches an opening or closing Markdown fence, with an optional `json` tag and trailing newline.
CODE_FENCE_RE = re.compile(r"```(?:json)?\n?")


class LLMProvider(Enum):
    """Supported LLM providers."""
    GEMINI = "gemini"
    AZURE = "azure"
    OPENAI = "openai"
    OLLAMA = "ollama"


@dataclass
class LLMConfig:
    """Configuration for LLM providers."""
    provider: LLMProvider
    model: str
    temperature: float = 0.7
    max_tokens: Optional[int] = None
    timeout: int = 30

    # Provider-specific configs
    api_key: Optional[str] = None
    api_base: Optional[str] = None
    api_version: Optional[str] = None
    deployment_name: Optional[str] = None
    credentials_path: Optional[str] = None


class LLMError(Exception):
    """Base exception for LLM-related errors."""
    pass


class ConfigurationError(LLMError):
    """Raised when LLM configuration is invalid."""
    pass


class ProviderError(LLMError):
    """Raised when LLM provider call fails."""
    pass


def _reject_constant(name: str) -> None:
    raise ValueError(f"{name} is not a valid JSON number")


def parse_json(text: str) -> Any:
    """
    Parses strict JSON. Unlike plain `json.loads`, the non-standard constants
    NaN, Infinity and -Infinity are rejected with a ValueError.
    """
    return json.loads(text, parse_constant=_reject_constant)


def strip_code_fences(text: str) -> str:
    """
    Removes every Markdown code fence marker (``` or ```json) from a model reply
    and trims the surrounding whitespace.
    """
    return CODE_FENCE_RE.sub("", text).strip()


class LLMManager:
    """
    Unified LLM interface over the supported providers.

    Everything the rest of the application needs from a model goes through
    `get_response`, so tests can substitute any object exposing that method.
    """

    DEFAULT_MODELS = {
        LLMProvider.GEMINI: "gemini-1.5-flash",
        LLMProvider.AZURE: "gpt-4o",
        LLMProvider.OPENAI: "gpt-4o",
        LLMProvider.OLLAMA: "llama3",
    }

    def __init__(self, config: LLMConfig):
        self.config = config
        logger.debug(f"LLMManager: Initializing provider {config.provider.value} with model {config.model}")
        self._validate_config()
        self.llm = self._initialize_llm()
        logger.info(f"LLMManager: LLM initialized for provider: {config.provider.value}")

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None, provider: Optional[str] = None) -> "LLMManager":
        """Create an LLMManager from the application settings."""
        return cls(cls.load_config(settings or app_settings, provider))

    @classmethod
    def load_config(cls, settings: Settings, provider: Optional[str] = None) -> LLMConfig:
        """Build an LLMConfig for the selected provider out of the settings object."""
        provider_str = provider or settings.LLM_PROVIDER or "gemini"
        try:
            provider_enum = LLMProvider(provider_str.lower())
        except ValueError as e:
            valid_providers = [p.value for p in LLMProvider]
            logger.error(f"LLMManager: Invalid LLM_PROVIDER '{provider_str}'. Valid options: {valid_providers}")
            raise ConfigurationError(
                f"Invalid LLM_PROVIDER: {provider_str}. "
                f"Valid options: {valid_providers}"
            ) from e

        common = dict(
            temperature=settings.LLM_TEMPERATURE if settings.LLM_TEMPERATURE is not None else 0.7,
            max_tokens=settings.LLM_MAX_TOKENS,
            timeout=settings.LLM_TIMEOUT or 30,
        )
        default_model = cls.DEFAULT_MODELS[provider_enum]

        if provider_enum == LLMProvider.GEMINI:
            return LLMConfig(
                provider=provider_enum,
                model=settings.GEMINI_MODEL or default_model,
                api_key=settings.GOOGLE_API_KEY,
                credentials_path=settings.GOOGLE_APPLICATION_CREDENTIALS,
                **common
            )
        if provider_enum == LLMProvider.AZURE:
            deployment_name = settings.AZURE_DEPLOYMENT_NAME or default_model
            return LLMConfig(
                provider=provider_enum,
                model=deployment_name, # Azure addresses models by deployment name
                api_key=settings.AZURE_OPENAI_KEY,
                api_base=settings.AZURE_OPENAI_BASE,
                api_version=settings.AZURE_API_VERSION,
                deployment_name=deployment_name,
                **common
            )
        if provider_enum == LLMProvider.OPENAI:
            return LLMConfig(
                provider=provider_enum,
                model=settings.OPENAI_MODEL or default_model,
                api_key=settings.OPENAI_API_KEY,
                api_base=settings.OPENAI_API_BASE or "https://api.openai.com/v1",
                **common
            )
        return LLMConfig(
            provider=provider_enum,
            model=settings.OLLAMA_MODEL or default_model,
            api_base=settings.OLLAMA_BASE_URL or "http://localhost:11434",
            **common
        )

    def _validate_config(self) -> None:
        """Validate the current configuration."""
        if self.config.provider == LLMProvider.GEMINI:
            if not (self.config.api_key or self.config.credentials_path):
                raise ConfigurationError("Gemini requires either GOOGLE_API_KEY or GOOGLE_APPLICATION_CREDENTIALS.")
        elif self.config.provider == LLMProvider.AZURE:
            missing = [var for var in ["api_key", "api_base", "api_version", "deployment_name"] if not getattr(self.config, var)]
            if missing:
                raise ConfigurationError(f"Missing required Azure config: {missing}")
        elif self.config.provider == LLMProvider.OPENAI:
            if not self.config.api_key:
                raise ConfigurationError("OpenAI requires OPENAI_API_KEY.")
        elif self.config.provider == LLMProvider.OLLAMA:
            if not self.config.api_base:
                raise ConfigurationError("Ollama requires OLLAMA_BASE_URL.")

    def _initialize_llm(self):
        """Initialize the appropriate LangChain chat model."""
        config = self.config
        try:
            if config.provider == LLMProvider.GEMINI:
                return ChatGoogleGenerativeAI(
                    model=config.model, temperature=config.temperature,
                    max_output_tokens=config.max_tokens, timeout=config.timeout,
                    google_api_key=config.api_key,
                )
            if config.provider == LLMProvider.AZURE:
                return AzureChatOpenAI(
                    azure_deployment=config.deployment_name, openai_api_version=config.api_version,
                    azure_endpoint=config.api_base, api_key=config.api_key,
                    temperature=config.temperature, max_tokens=config.max_tokens, timeout=config.timeout,
                )
            if config.provider == LLMProvider.OPENAI:
                return ChatOpenAI(
                    model=config.model, api_key=config.api_key, base_url=config.api_base,
                    temperature=config.temperature, max_tokens=config.max_tokens, timeout=config.timeout,
                )
            return ChatOllama(model=config.model, base_url=config.api_base, temperature=config.temperature)
        except Exception as e:
            logger.critical(f"LLMManager: Failed to initialize {config.provider.value} LLM: {e}")
            raise ConfigurationError(f"Failed to initialize {config.provider.value} LLM: {e}") from e

    def _format_messages(self, messages: List[Dict[str, str]]) -> List[Union[HumanMessage, SystemMessage, AIMessage]]:
        """Convert message dictionaries to LangChain message objects."""
        formatted_messages = []
        for msg in messages:
            role, content = msg.get("role", "").lower(), msg.get("content", "")
            if role == "system":
                formatted_messages.append(SystemMessage(content=content))
            elif role in ("assistant", "ai"):
                formatted_messages.append(AIMessage(content=content))
            else:
                if role not in ("user", "human"):
                    logger.warning(f"LLMManager: Unknown message role: {role}, treating as human.")
                formatted_messages.append(HumanMessage(content=content))
        return formatted_messages

    def get_response(self, messages: List[Dict[str, str]]) -> str:
        """Get the text of the model's reply to the given conversation."""
        try:
            logger.info(f"LLMManager: Calling {self.config.provider.value} with {len(messages)} messages.")
            response = self.llm.invoke(self._format_messages(messages))
            content = response.content
            # Some chat models return a list of content parts instead of a plain string.
            if isinstance(content, list):
                content = "".join(part if isinstance(part, str) else part.get("text", "") for part in content)
            logger.info(f"LLMManager: Received response from {self.config.provider.value}. Content length: {len(content)}")
            return content
        except Exception as e:
            error_msg = f"{self.config.provider.value} call failed: {str(e)}"
            logger.error(f"LLMManager: {error_msg}")
            raise ProviderError(error_msg) from e


_llm_manager: Optional[LLMManager] = None

def get_llm_manager() -> Optional[LLMManager]:
    """
    Returns the shared LLMManager built from settings, or None when the provider
    is not configured. A failed initialization is retried on the next call.
    """
    global _llm_manager
    if _llm_manager is None:
        try:
            _llm_manager = LLMManager.from_settings()
        except LLMError as e:
            logger.critical(f"LLM Manager failed to initialize: {e}", exc_info=True)
    return _llm_manager


def get_llm_json(llm: Any, messages: List[Dict[str, str]]) -> Any:
    """
    Asks the model for JSON and parses the reply after stripping Markdown fences.

    Raises:
        ProviderError: if the model call fails.
        ValueError: if the cleaned reply is not valid JSON.
    """
    raw = llm.get_response(messages)
    cleaned = strip_code_fences(raw)
    try:
        return parse_json(cleaned)
    except ValueError as e:
        logger.error(f"get_llm_json: Failed to parse model reply as JSON: {e}. Raw response: {cleaned[:500]}...")
        raise ValueError(f"Model reply was not valid JSON: {e}") from e

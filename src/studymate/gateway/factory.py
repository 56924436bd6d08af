"""Gateway factory for creating AI gateway instances."""

from typing import Any

from loguru import logger

from studymate.config.settings import Settings
from studymate.errors import ConfigurationError

from .base import BaseAIGateway
from .providers.openai_compatible import OpenAICompatibleGateway


class GatewayFactory:
    """Factory for creating AI gateways based on type.

    This factory maintains a registry of available gateway types
    and creates instances based on string identifiers.
    """

    _registry: dict[str, type[BaseAIGateway]] = {
        "openai": OpenAICompatibleGateway,
    }

    @classmethod
    def create(cls, gateway_type: str, **params: Any) -> BaseAIGateway:
        """Create a gateway instance by type.

        Raises:
            ConfigurationError: If the gateway type is not registered
        """
        if gateway_type not in cls._registry:
            available = ", ".join(cls._registry.keys()) if cls._registry else "none"
            raise ConfigurationError(
                f"Unknown gateway type: '{gateway_type}'. "
                f"Available types: {available}"
            )

        gateway_class = cls._registry[gateway_type]
        logger.debug(f"Creating {gateway_class.__name__}")
        return gateway_class(**params)

    @classmethod
    def create_from_settings(cls, settings: Settings) -> BaseAIGateway:
        """Create the gateway described by the application settings."""
        if settings.GATEWAY_TYPE != "openai":
            return cls.create(settings.GATEWAY_TYPE)
        return cls.create(
            "openai",
            base_url=settings.LLM_BASE_URL,
            api_key=settings.LLM_API_KEY,
            model=settings.LLM_MODEL,
            upload_dir=settings.UPLOAD_DIR,
            temperature=settings.LLM_TEMPERATURE,
            timeout=settings.LLM_TIMEOUT,
            max_upload_bytes=int(settings.MAX_UPLOAD_MB * 1024 * 1024),
        )

    @classmethod
    def register(cls, gateway_type: str, gateway_class: type[BaseAIGateway]):
        """Register a new gateway type.

        Raises:
            TypeError: If gateway_class is not a subclass of BaseAIGateway
        """
        if not issubclass(gateway_class, BaseAIGateway):
            raise TypeError(
                f"{gateway_class.__name__} must be a subclass of BaseAIGateway"
            )

        cls._registry[gateway_type] = gateway_class
        logger.info(f"Registered gateway type '{gateway_type}': {gateway_class.__name__}")

    @classmethod
    def list_types(cls) -> list[str]:
        return list(cls._registry.keys())

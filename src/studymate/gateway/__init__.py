"""AI gateway: upload, extraction and prompt invocation."""

from .base import BaseAIGateway, ExtractionResult, ExtractionStatus, UploadedFile
from .factory import GatewayFactory
from .providers import OpenAICompatibleGateway

__all__ = [
    "BaseAIGateway",
    "ExtractionResult",
    "ExtractionStatus",
    "UploadedFile",
    "GatewayFactory",
    "OpenAICompatibleGateway",
]

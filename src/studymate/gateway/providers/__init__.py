from .openai_compatible import OpenAICompatibleGateway

__all__ = ["OpenAICompatibleGateway"]

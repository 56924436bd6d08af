from abc import ABC, abstractmethod
from typing import Any


class BasePipeline(ABC):
    """
    Abstract base class for all pipelines.
    Pipelines orchestrate the gateway and entity stores to achieve one
    user-level action. Each step waits for the previous one.
    """

    @abstractmethod
    async def run(self, *args, **kwargs) -> Any:
        """Execute the pipeline."""
        pass

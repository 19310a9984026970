from abc import ABC, abstractmethod

from agrom.common.logging import get_logger


class BaseIntegration(ABC):
    """A client of one hosted backend surface (rows, auth, storage)."""

    def __init__(self, name: str):
        self.name = name
        self.logger = get_logger(f"integrations.{name}")

    @abstractmethod
    async def health_check(self) -> bool:
        ...

    async def status(self) -> str:
        if await self.health_check():
            return "up"
        self.logger.warning("%s is not answering its health check", self.name)
        return "down"

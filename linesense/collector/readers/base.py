"""Base class for reading sources."""

from abc import ABC, abstractmethod
import logging

from linesense.shared.models import Reading

logger = logging.getLogger(__name__)


class ReadingSource(ABC):
    """Base class for everything that produces power-line readings."""

    @abstractmethod
    async def get_reading(self) -> Reading:
        """Get the latest reading."""
        pass

    @abstractmethod
    def check_health(self) -> bool:
        """Basic health check - did our last attempt to read succeed?"""
        pass

    async def close(self) -> None:
        """Release any underlying connection. No-op by default."""
        return None

"""Seeded mock readings, used when no feed is configured or the feed fails."""

import random
from datetime import datetime, timezone
from typing import Callable, Optional
import logging

from linesense.shared.models import Reading
from .base import ReadingSource

logger = logging.getLogger(__name__)

# Nominal line values and the spread of the uniform noise around them
NOMINAL_VOLTAGE = 230.0
VOLTAGE_SPREAD = 20.0
BASE_CURRENT = 10.0
CURRENT_SPREAD = 8.0
VIBRATION_SPREAD = 0.6


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class SyntheticReader(ReadingSource):
    def __init__(
        self,
        seed: Optional[int] = None,
        rng: Optional[random.Random] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        """
        Generates uniform mock readings:
            voltage   230 +/- 10 V
            current   10..18 A
            vibration 0..0.6 g

        Pass ``seed`` (or a ready ``rng``) for a reproducible sequence and
        ``clock`` to pin timestamps in tests.
        """
        self.rng = rng if rng is not None else random.Random(seed)
        self.clock = clock or _utc_now
        logger.info(f"Initialized SyntheticReader (seed={seed})")

    def generate(self) -> Reading:
        """Produce the next reading synchronously."""
        voltage = NOMINAL_VOLTAGE + (self.rng.random() - 0.5) * VOLTAGE_SPREAD
        current = BASE_CURRENT + self.rng.random() * CURRENT_SPREAD
        vibration = self.rng.random() * VIBRATION_SPREAD
        return Reading(
            voltage=voltage,
            current=current,
            vibration=vibration,
            timestamp=self.clock(),
        )

    async def get_reading(self) -> Reading:
        return self.generate()

    def check_health(self) -> bool:
        # Synthetic reader is always healthy
        return True

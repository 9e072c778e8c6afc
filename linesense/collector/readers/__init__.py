"""Reading sources for the monitor loop."""

from .base import ReadingSource
from .feed import RemoteFeedReader, parse_feed_payload
from .synthetic import SyntheticReader

__all__ = [
    "ReadingSource",
    "RemoteFeedReader",
    "SyntheticReader",
    "parse_feed_payload",
]

"""Reading collection for the grid monitor."""

from .readers import ReadingSource, RemoteFeedReader, SyntheticReader

__all__ = ["ReadingSource", "RemoteFeedReader", "SyntheticReader"]

"""Exception types shared across linesense services."""


class LineSenseError(Exception):
    """Base class for all linesense errors."""


class FeedUnavailable(LineSenseError):
    """The remote reading feed could not produce a usable reading.

    Raised for timeouts, connection failures, non-2xx responses and bodies
    that are not a list of reading objects. Callers fall back to the
    synthetic generator for the current tick.
    """


class MalformedReading(LineSenseError):
    """A reading carries out-of-domain values (negative or non-finite)."""


class ConfigurationError(LineSenseError):
    """Startup configuration is unusable (bad topology, bad node ids, bad settings)."""

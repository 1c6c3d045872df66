"""Exceptions raised by chronostep.

Every exception derives from :class:`ChronostepError` and from the builtin a caller
would naturally catch, so ``except ValueError`` keeps working for configuration
problems and ``except IndexError`` for queue misuse.
"""


class ChronostepError(Exception):
    """Base class for all chronostep errors."""


class InvalidConfiguration(ChronostepError, ValueError):  # noqa: N818
    """Step-size bounds are non-positive, NaN, or inverted."""


class OutOfRange(ChronostepError, ValueError):  # noqa: N818
    """A step size outside ``[dt_min, dt_max]`` was requested."""


class PrecondNegativeRecurrence(ChronostepError, ValueError):  # noqa: N818
    """An event was scheduled with a negative recurrence interval."""


class EmptyQueueError(ChronostepError, IndexError):
    """The event queue was inspected while empty."""

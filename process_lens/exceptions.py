"""
Error taxonomy for the analysis core.

Contract violations raise immediately; nothing in the core skips bad
records, since a silently dropped event would skew every downstream
statistic. The only non-fatal condition is a degenerate process model,
which is reported through the ``warnings`` machinery.
"""


class ProcessLensError(Exception):
    """Base class for all errors raised by the analysis core."""


class EmptyLogError(ProcessLensError, ValueError):
    """The event log contains zero events."""


class InvalidTraceError(ProcessLensError, ValueError):
    """A trace has no events or mixes events from several cases."""


class InvalidEventError(ProcessLensError, ValueError):
    """An event (or raw event record) violates the event schema."""


class DegenerateModelWarning(UserWarning):
    """
    The discovered model is too small to be meaningful.

    Issued when fewer than two distinct activities were observed or
    the ideal path has fewer than two steps.
    """

"""Failures surfaced by the scheduler and the due-card finder."""


class SchedulingError(Exception):
    """Base class for every failure raised by this package."""


class MalformedTimestampError(SchedulingError):
    """An attempt timestamp is not a valid civil (naive) date-time."""

    def __init__(self, value, reason: str = "not an ISO-8601 date-time"):
        self.value = value
        self.reason = reason
        super().__init__(f"Malformed attempt timestamp {value!r}: {reason}")


class UnscheduledPatternError(SchedulingError):
    """No scheduling rule matches the attempt history.

    Raised instead of guessing an interval, so callers can tell a gap in the
    formula apart from a legitimate next-attempt time.
    """

    def __init__(self, count: int, recent: tuple):
        self.count = count
        self.recent = recent
        outcomes = ", ".join("correct" if c else "incorrect" for c in recent)
        super().__init__(
            f"No scheduling rule for {count} attempt(s), most recent first: {outcomes}"
        )


class CollaboratorError(SchedulingError):
    """The card store failed while cards or attempts were being read."""

    def __init__(self, operation: str):
        self.operation = operation
        super().__init__(f"Card store failed during {operation}")

"""Exceptions raised by the ATC radio core."""


class ATCError(Exception):
    """Base class for ATC radio errors."""


class UnknownAirport(ATCError):
    """Raised when a tune target is not in the airport directory."""

    def __init__(self, code: str) -> None:
        super().__init__(f"Airport not found: {code}")
        self.code = code


class NotFound(ATCError):
    """Raised when a lookup over an empty airport directory has no answer."""


class NotTuned(ATCError):
    """Raised when a message is sent with no active frequency."""

    def __init__(self) -> None:
        super().__init__("Set frequency first")


class OutOfRange(ATCError):
    """Raised when the aircraft is too far from the tuned airport."""

    def __init__(self, code: str, distance_nm: float, limit_nm: float) -> None:
        super().__init__(
            f"Out of ATC range: {code} is {distance_nm:.1f} nm away (limit {limit_nm:.0f} nm)"
        )
        self.code = code
        self.distance_nm = distance_nm
        self.limit_nm = limit_nm


class EmptyMessage(ATCError):
    """Raised when a blank transmission is appended to a conversation."""


class WeatherUnavailable(ATCError):
    """Raised inside the weather feed when a METAR cannot be obtained.

    Never escapes WeatherFeed.fetch(); the feed degrades to a placeholder.
    """


class DialogueUnavailable(ATCError):
    """Raised when the chat-completion service fails or returns nothing."""

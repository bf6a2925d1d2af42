"""Radio-specific exceptions for error handling."""


class RadioError(Exception):
    """Base exception for stream resolution and playback."""

    pass


class InvalidURLError(RadioError):
    """Raised when a station locator is malformed or uses an unknown scheme."""

    pass


class NoStreamFoundError(RadioError):
    """Raised when a remote call succeeded but yielded no usable stream."""

    pass


# Broadcaster APIs report an empty body and a missing field the same way
NoStreamURLError = NoStreamFoundError


class PlaybackFailedError(RadioError):
    """Raised when the player fails or stalls after a stream was accepted."""

    pass

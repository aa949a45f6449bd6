"""Exception classes for Tinct.

Malformed markup never raises; it degrades to literal text. Everything
here signals a programming error or a bad user-supplied pattern.
"""

from __future__ import annotations


class TinctError(Exception):
    """Base exception for all Tinct errors.

    Subclass this for specific error categories.
    """

    pass


class InvalidRangeError(TinctError, ValueError):
    """A character range is inverted or falls outside the text.

    Raised at construction time, never silently clamped.
    """

    def __init__(self, start: int, end: int, length: int | None = None) -> None:
        """Initialize range error.

        Args:
            start: Range start offset
            end: Range end offset (exclusive)
            length: Length of the text the range was checked against (optional)
        """
        self.start = start
        self.end = end
        self.length = length

        if length is None:
            message = f"invalid range [{start}, {end})"
        else:
            message = f"range [{start}, {end}) is not within text of length {length}"
        super().__init__(message)


class DetectionError(TinctError):
    """Pattern detection failed for one styling call.

    Raised when a user-supplied pattern does not compile or a detector
    returns something that is not a range. The builder that issued the
    call is left exactly as it was.
    """

    def __init__(self, detector: str, message: str) -> None:
        """Initialize detection error.

        Args:
            detector: Name of the detector or the offending pattern
            message: Description of the failure
        """
        self.detector = detector
        super().__init__(f"Detector '{detector}': {message}")


class StyleError(TinctError):
    """A style function returned something other than an attribute mapping."""

    pass

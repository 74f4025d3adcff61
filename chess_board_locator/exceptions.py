"""
Per-frame failures of the chess board locator.

None of these are fatal: the locator logs them and moves on to the next
image/cloud pair.
"""


class LocatorError(Exception):
    """Base class for frame-level locator failures."""


class ImageConversionError(LocatorError, ValueError):
    """The color image could not be converted for line detection."""


class NoSolutionError(LocatorError):
    """No board pose could be estimated for the frame."""


class NoIntersectionsError(NoSolutionError):
    """The frame produced no intersection points at all."""

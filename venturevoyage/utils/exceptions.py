"""
Exception types raised by VentureVoyage services.
"""


class VentureVoyageError(Exception):
    """Base class for all VentureVoyage errors."""


class TransportError(VentureVoyageError):
    """The request to the AI endpoint could not be completed."""

    def __init__(self, cause: Exception):
        super().__init__(f"Transport failure: {cause}")
        self.cause = cause


class DecodeError(VentureVoyageError):
    """The AI response envelope did not have the expected shape."""


class DiskIOError(VentureVoyageError):
    """A disk cache file could not be written or removed."""

    def __init__(self, key: str, cause: Exception):
        super().__init__(f"Disk cache operation failed for '{key}': {cause}")
        self.key = key
        self.cause = cause


class IdeaNotFoundError(VentureVoyageError):
    """No business idea with the given id is loaded."""

    def __init__(self, idea_id: str):
        super().__init__(f"Business idea not found: {idea_id}")
        self.idea_id = idea_id

"""Error taxonomy for versemem.

Every error is recoverable by the caller: fix the input or retry the I/O.
"""


class VerseMemError(Exception):
    """Base class for all versemem errors."""


class InvalidRating(VerseMemError, ValueError):
    """Quality rating outside the integer range 0-5."""

    def __init__(self, quality: object):
        self.quality = quality
        super().__init__(f"Quality must be an integer between 0 and 5, got {quality!r}")


class InvalidItem(VerseMemError, ValueError):
    """Item fields supplied by a caller are unusable (e.g. blank reference)."""


class SessionComplete(VerseMemError):
    """submit() was called on a session with no item awaiting a rating."""

    def __init__(self):
        super().__init__("Practice session is already complete")


class StoreError(VerseMemError):
    """Failure surfaced by a store adapter. Propagated as-is by the core."""


class ItemNotFound(StoreError):
    def __init__(self, item_id: str):
        self.item_id = item_id
        super().__init__(f"Memory item not found: {item_id}")


class DuplicateItem(StoreError):
    def __init__(self, reference: str):
        self.reference = reference
        super().__init__(f"'{reference}' is already in your memory list")

"""Identifier generation for memory items."""

from ulid import ULID

from versemem.domain.constants import ITEM_ID_PREFIX


def generate_item_id() -> str:
    """Generate a stable, sortable item ID using ULID."""
    return f"{ITEM_ID_PREFIX}{ULID()}"

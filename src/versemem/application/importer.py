"""Parse memory-verse lists from YAML files."""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml  # type: ignore
import yaml.error

from versemem.domain.errors import InvalidItem

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ImportEntry:
    reference: str
    content: str
    translation: str | None = None


def parse_verse_yaml(text: str) -> list[ImportEntry]:
    """
    Parse a YAML document into import entries.

    Accepts either a top-level list or a mapping with a `verses` list.
    Each entry needs `reference` and `text` (or `content`); `translation`
    is optional.

    Raises:
        InvalidItem: Malformed YAML or an entry missing required keys.
    """
    try:
        data = yaml.safe_load(text)
    except yaml.error.YAMLError as e:
        mark = getattr(e, "problem_mark", None)
        where = f" (line {mark.line + 1})" if mark is not None else ""
        raise InvalidItem(f"Could not parse YAML{where}: {e}") from e

    if data is None:
        return []
    if isinstance(data, dict):
        data = data.get("verses", [])
    if not isinstance(data, list):
        raise InvalidItem("Expected a list of verses or a 'verses:' key")

    entries = []
    for index, raw in enumerate(data, start=1):
        entries.append(_to_entry(index, raw))
    return entries


def load_verse_file(path: Path) -> list[ImportEntry]:
    logger.info(f"Loading verses from {path}")
    return parse_verse_yaml(path.read_text(encoding="utf-8"))


def _to_entry(index: int, raw: Any) -> ImportEntry:
    if not isinstance(raw, dict):
        raise InvalidItem(f"Entry {index}: expected a mapping, got {type(raw).__name__}")

    reference = str(raw.get("reference") or "").strip()
    content = str(raw.get("text") or raw.get("content") or "").strip()
    if not reference or not content:
        raise InvalidItem(f"Entry {index}: 'reference' and 'text' are required")

    translation = raw.get("translation")
    return ImportEntry(
        reference=reference,
        content=content,
        translation=str(translation).strip() if translation else None,
    )

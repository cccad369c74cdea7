"""
Load bundled catalog files into immutable record tuples.

Supported layouts:
  - YAML with a top-level list under `traits:` (data/traits/*.yaml)
  - JSON holding a bare list of records (data/perks.json)

Any failure (missing file, parse error, schema error, duplicate names) is raised as
DataLoadError so the API refuses to start instead of serving an empty catalog.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, List, Sequence, Tuple, Type, TypeVar

import yaml
from pydantic import BaseModel, ValidationError

from catalog.models import Perk, Trait

logger = logging.getLogger(__name__)

RecordT = TypeVar("RecordT", bound=BaseModel)


class DataLoadError(RuntimeError):
    """Raised when a bundled catalog file cannot be read or parsed."""


def _read_raw(path: Path) -> Any:
    with path.open("r", encoding="utf-8") as f:
        if path.suffix.lower() in (".yaml", ".yml"):
            return yaml.safe_load(f)
        return json.load(f)


def _extract_items(raw: Any, root_key: str | None, path: Path) -> List[Any]:
    if isinstance(raw, list):
        return raw
    if isinstance(raw, dict) and root_key and isinstance(raw.get(root_key), list):
        return raw[root_key]
    expected = f"a list or a mapping with a '{root_key}' list" if root_key else "a list"
    raise DataLoadError(f"{path}: expected {expected}, got {type(raw).__name__}")


def ensure_unique_names(records: Sequence[BaseModel], path: Path | str) -> None:
    seen = set()
    for rec in records:
        name = getattr(rec, "name")
        if name in seen:
            raise DataLoadError(f"{path}: duplicate record name {name!r}")
        seen.add(name)


def load_records(
    path: str | Path,
    model: Type[RecordT],
    root_key: str | None = None,
) -> Tuple[RecordT, ...]:
    """Read `path` and validate every entry against `model`, preserving file order."""
    p = Path(path)
    logger.info("Loading %s records from: %s", model.__name__, p)
    try:
        raw = _read_raw(p)
    except FileNotFoundError as e:
        raise DataLoadError(f"Catalog file not found: {p}") from e
    except (OSError, yaml.YAMLError, json.JSONDecodeError) as e:
        raise DataLoadError(f"Could not parse catalog file {p}: {e}") from e

    items = _extract_items(raw, root_key, p)
    try:
        records = tuple(model.model_validate(item) for item in items)
    except ValidationError as e:
        raise DataLoadError(f"{p}: invalid {model.__name__} record: {e}") from e

    ensure_unique_names(records, p)
    logger.info("Loaded %d %s records", len(records), model.__name__)
    return records


def load_traits(path: str | Path) -> Tuple[Trait, ...]:
    return load_records(path, Trait, root_key="traits")


def load_perks(path: str | Path) -> Tuple[Perk, ...]:
    return load_records(path, Perk, root_key="perks")

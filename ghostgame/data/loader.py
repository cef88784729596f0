"""Shared JSON reading for the packaged master-data catalogs."""
from __future__ import annotations
import json
from pathlib import Path
from typing import Any, Callable, Dict, List, TypeVar

from ghostgame.core.errors import DataLoadError, ValidationError
from ghostgame.core.logging import logger

T = TypeVar("T")

def read_records(path: Path) -> List[Dict[str, Any]]:
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        raise DataLoadError(str(path), str(e)) from e
    if not isinstance(raw, list):
        raise DataLoadError(str(path), "expected a JSON list of records")
    return raw

def build_catalog(path: Path, parse: Callable[[Dict[str, Any]], T]) -> Dict[str, T]:
    """Parse and validate every record of ``path`` into an id -> record mapping."""
    catalog: Dict[str, T] = {}
    for raw in read_records(path):
        try:
            rec = parse(raw)
            rec.validate()  # type: ignore[attr-defined]
        except (KeyError, ValueError, TypeError, ValidationError) as e:
            raise DataLoadError(str(path), f"bad record {raw.get('id', '?')!r}: {e}") from e
        if rec.id in catalog:  # type: ignore[attr-defined]
            raise DataLoadError(str(path), f"duplicate id {rec.id!r}")  # type: ignore[attr-defined]
        catalog[rec.id] = rec  # type: ignore[attr-defined]
    logger.debug("CatalogLoaded", path=path.name, records=len(catalog))
    return catalog

__all__ = ["read_records", "build_catalog"]

# src/storage/catalog_writer.py - v2
"""Write the catalog artifact (``presets.json``)."""

from __future__ import annotations

import json
import logging
from collections.abc import Sequence
from pathlib import Path

from presetindex.core.models import PresetRecord

logger = logging.getLogger(__name__)


async def write_catalog(records: Sequence[PresetRecord], path: Path) -> None:
    """Overwrite ``path`` with the records as a JSON array.

    Unannotated records simply omit description, rating and tags.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    payload = [record.to_json_dict() for record in records]
    path.write_text(json.dumps(payload, ensure_ascii=False, indent=2), encoding="utf-8")
    logger.info(
        "Wrote %d catalog entries (%d annotated) to %s",
        len(payload), sum(r.annotated for r in records), path,
    )

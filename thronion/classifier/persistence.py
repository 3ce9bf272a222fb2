"""JSON snapshots of learned regions."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List, Union

from thronion.classifier.region import Region
from thronion.classifier.store import RegionStore

FORMAT_VERSION = 1

PathLike = Union[str, Path]


def dump_regions(regions: List[Region]) -> Dict[str, Any]:
    return {
        "version": FORMAT_VERSION,
        "regions": [region.as_dict() for region in regions],
    }


def parse_regions(payload: Any) -> List[Region]:
    if not isinstance(payload, dict):
        raise ValueError("region snapshot must contain a JSON object")
    version = payload.get("version")
    if version != FORMAT_VERSION:
        raise ValueError(f"unsupported region snapshot version: {version!r}")
    entries = payload.get("regions", [])
    if not isinstance(entries, list):
        raise ValueError("'regions' must be a list")
    return [Region.from_dict(entry) for entry in entries]


def save_regions(store: RegionStore, path: PathLike) -> int:
    """Write a snapshot of ``store`` to ``path`` and return the region count.

    The file is written beside the target and moved into place, so a reader
    never observes a partial snapshot.
    """

    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    regions = store.snapshot()
    tmp_path = target.with_suffix(target.suffix + ".tmp")
    try:
        with tmp_path.open("w", encoding="utf-8") as fh:
            json.dump(dump_regions(regions), fh, indent=2, sort_keys=True)
        tmp_path.replace(target)
    except BaseException:
        tmp_path.unlink(missing_ok=True)
        raise
    return len(regions)


def load_regions(store: RegionStore, path: PathLike) -> int:
    """Replace the contents of ``store`` with the snapshot at ``path``."""

    with Path(path).open("r", encoding="utf-8") as fh:
        data = json.load(fh)
    regions = parse_regions(data)
    store.restore(regions)
    return len(regions)


__all__ = ["FORMAT_VERSION", "dump_regions", "load_regions", "parse_regions", "save_regions"]

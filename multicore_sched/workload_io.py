from __future__ import annotations

import csv
import json
from pathlib import Path
from typing import Iterable, List

from .config import DEFAULT_PRIORITY
from .errors import InvalidProcess
from .models import ProcessDescriptor

_TRUE = {"1", "true", "yes", "y", "rt"}
_FALSE = {"", "0", "false", "no", "n"}


def load_workload(path: str | Path) -> List[ProcessDescriptor]:
    """
    Load process descriptors from a JSON or CSV file.

    Ids are not read from the file; the scheduler assigns them in file order.
    """
    path = Path(path)
    suffix = path.suffix.lower()

    if suffix == ".json":
        return _load_json(path)
    if suffix == ".csv":
        return _load_csv(path)

    raise ValueError(f"Unsupported workload format: {suffix} (use .json or .csv)")


def _load_json(path: Path) -> List[ProcessDescriptor]:
    with path.open("r", encoding="utf-8") as f:
        raw = json.load(f)

    if not isinstance(raw, Iterable) or isinstance(raw, (str, dict)):
        raise ValueError("JSON workload must be a list of process objects")

    return [_descriptor_from_mapping(entry) for entry in raw]


def _load_csv(path: Path) -> List[ProcessDescriptor]:
    descriptors: List[ProcessDescriptor] = []
    with path.open("r", encoding="utf-8", newline="") as f:
        reader = csv.DictReader(f)
        for row in reader:
            descriptors.append(_descriptor_from_mapping(row))
    return descriptors


def _optional_int(mapping, key: str, default: int) -> int:
    value = mapping.get(key)
    if value in (None, ""):
        return default
    return int(value)


def _parse_bool(value) -> bool:
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower() if value is not None else ""
    if text in _TRUE:
        return True
    if text in _FALSE:
        return False
    raise ValueError(f"not a boolean: {value!r}")


def _descriptor_from_mapping(mapping) -> ProcessDescriptor:
    try:
        burst_time = int(mapping["burst_time"])
        priority = _optional_int(mapping, "priority", DEFAULT_PRIORITY)
        deadline = _optional_int(mapping, "deadline", 0)
        is_real_time = _parse_bool(mapping.get("is_real_time"))
    except (AttributeError, KeyError, TypeError, ValueError) as exc:
        raise InvalidProcess(f"Invalid process entry: {mapping!r}") from exc

    try:
        return ProcessDescriptor(
            burst_time=burst_time,
            priority=priority,
            deadline=deadline,
            is_real_time=is_real_time,
        )
    except InvalidProcess as exc:
        raise InvalidProcess(f"Invalid process entry {mapping!r}: {exc}") from exc

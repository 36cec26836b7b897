"""Loading pool snapshots from JSON and serializing results."""

import dataclasses
import json
from decimal import Decimal
from enum import Enum
from pathlib import Path
from typing import Any, Iterable

from amm_arbitrage.core.pool import DEFAULT_FEE_DEN, DEFAULT_FEE_NUM, Pool, PoolKind

_REQUIRED_KEYS = ("pool_id", "kind", "token_x", "reserves_x", "token_y", "reserves_y")


class SnapshotError(ValueError):
    """A snapshot document could not be turned into pools."""

    def __init__(self, message: str, index: int | None = None):
        self.index = index
        prefix = f"pool #{index}: " if index is not None else ""
        super().__init__(prefix + message)


def _as_int(value: Any, field: str, index: int) -> int:
    # bool is an int subclass but never a valid amount
    if isinstance(value, bool):
        raise SnapshotError(f"{field} must be an integer, got {value!r}", index)
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.strip().lstrip("-").isdigit():
        return int(value)
    raise SnapshotError(f"{field} must be an integer, got {value!r}", index)


def _as_name(value: Any, field: str, index: int) -> str | None:
    if value is None or isinstance(value, str):
        return value
    raise SnapshotError(f"{field} must be a string, got {value!r}", index)


def pool_from_dict(item: Any, index: int = 0) -> Pool:
    if not isinstance(item, dict):
        raise SnapshotError(f"expected an object, got {type(item).__name__}", index)
    missing = [key for key in _REQUIRED_KEYS if key not in item]
    if missing:
        raise SnapshotError(f"missing keys: {', '.join(missing)}", index)
    try:
        kind = PoolKind(item["kind"])
    except ValueError:
        raise SnapshotError(f"unknown pool kind {item['kind']!r}", index) from None

    try:
        return Pool(
            pool_id=str(item["pool_id"]),
            kind=kind,
            token_x=str(item["token_x"]),
            reserves_x=_as_int(item["reserves_x"], "reserves_x", index),
            token_y=str(item["token_y"]),
            reserves_y=_as_int(item["reserves_y"], "reserves_y", index),
            fee_num=_as_int(item.get("fee_num", DEFAULT_FEE_NUM), "fee_num", index),
            fee_den=_as_int(item.get("fee_den", DEFAULT_FEE_DEN), "fee_den", index),
            name_x=_as_name(item.get("name_x"), "name_x", index),
            name_y=_as_name(item.get("name_y"), "name_y", index),
        )
    except SnapshotError:
        raise
    except ValueError as e:
        raise SnapshotError(str(e), index) from e


def pools_from_dicts(items: Any) -> list[Pool]:
    """Convert a decoded JSON document (list, or ``{"pools": [...]}``) to pools."""
    if isinstance(items, dict):
        if "pools" not in items:
            raise SnapshotError('expected a list of pools or an object with a "pools" key')
        items = items["pools"]
    if not isinstance(items, list):
        raise SnapshotError(f"expected a list of pools, got {type(items).__name__}")
    return [pool_from_dict(item, i) for i, item in enumerate(items)]


def load_pools(path: str | Path) -> list[Pool]:
    """Read a JSON pool snapshot from ``path``."""
    try:
        document = json.loads(Path(path).read_text())
    except (OSError, UnicodeDecodeError) as e:
        raise SnapshotError(f"cannot read {path}: {e}") from e
    except json.JSONDecodeError as e:
        raise SnapshotError(f"invalid JSON in {path}: {e}") from e
    return pools_from_dicts(document)


def pool_to_dict(pool: Pool) -> dict[str, Any]:
    return to_jsonable(pool)


def dump_pools(pools: Iterable[Pool], path: str | Path) -> None:
    Path(path).write_text(json.dumps([pool_to_dict(p) for p in pools], indent=2))


def to_jsonable(value: Any) -> Any:
    """Convert result dataclasses to plain JSON types.

    Decimals become strings so no precision is lost; enums become their values.
    """
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return {f.name: to_jsonable(getattr(value, f.name)) for f in dataclasses.fields(value)}
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, dict):
        return {str(k): to_jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_jsonable(v) for v in value]
    return value

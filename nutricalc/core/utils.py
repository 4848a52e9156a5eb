import dataclasses
import math
from datetime import date, datetime
from enum import Enum
from typing import Any, Optional


def to_float(v: Any) -> Optional[float]:
    """Parse a record/form value into a float; blanks and garbage become None."""
    if v is None or isinstance(v, bool):
        return None
    if isinstance(v, str):
        v = v.strip()
        if not v:
            return None
    try:
        x = float(v)
    except (TypeError, ValueError):
        return None
    # "nan" and "inf" parse but are not measurements
    return x if math.isfinite(x) else None


def positive(v: Optional[float]) -> Optional[float]:
    # non-positive and non-finite values count as missing
    if v is None or not math.isfinite(v) or v <= 0:
        return None
    return v


def fmt(x: float, nd: int = 1) -> str:
    return f"{x:.{nd}f}"


def to_jsonable(obj: Any) -> Any:
    """Deep-copy dataclasses/enums/dates into plain JSON-ready structures."""
    if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
        return {f.name: to_jsonable(getattr(obj, f.name)) for f in dataclasses.fields(obj)}
    if isinstance(obj, Enum):
        return obj.value
    if isinstance(obj, (datetime, date)):
        return obj.isoformat()
    if isinstance(obj, dict):
        return {str(k): to_jsonable(v) for k, v in obj.items()}
    if isinstance(obj, (list, tuple)):
        return [to_jsonable(v) for v in obj]
    return obj


def round_half_up(x: float, nd: int = 0) -> float:
    """Clinical display rounding: halves go up, unlike ``round``'s banker's rounding."""
    q = 10 ** nd
    return math.floor(x * q + 0.5) / q

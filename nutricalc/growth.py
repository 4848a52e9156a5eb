"""
Pediatric growth percentiles from LMS reference curves.

For a measurement X and the curve parameters (L, M, S) at the child's age
(or height, for weight-for-height) the z-score is::

    z = ((X / M) ** L - 1) / (L * S)     if L != 0
    z = ln(X / M) / S                    if L == 0

and the percentile is the standard normal CDF of z, times 100.
"""
import logging
import math
import tomllib
from dataclasses import dataclass
from enum import Enum
from functools import lru_cache
from pathlib import Path
from typing import Dict, Optional, Tuple

import numpy as np
from scipy.stats import norm

from nutricalc.core.types import Sex
from nutricalc.core.utils import positive

logger = logging.getLogger(__name__)

REFERENCE_PATH = Path(__file__).resolve().parent / "data" / "growth_reference.toml"


class Indicator(str, Enum):
    WEIGHT_FOR_AGE = "weight_for_age"
    HEIGHT_FOR_AGE = "height_for_age"
    WEIGHT_FOR_HEIGHT = "weight_for_height"
    BMI_FOR_AGE = "bmi_for_age"


@dataclass(frozen=True)
class LmsCurve:
    key: np.ndarray
    l: np.ndarray
    m: np.ndarray
    s: np.ndarray

    def covers(self, x: float) -> bool:
        return bool(self.key[0] <= x <= self.key[-1])

    def at(self, x: float) -> Optional[Tuple[float, float, float]]:
        if not self.covers(x):
            return None
        return (float(np.interp(x, self.key, self.l)),
                float(np.interp(x, self.key, self.m)),
                float(np.interp(x, self.key, self.s)))


def _curve(raw: dict) -> LmsCurve:
    arrays = [np.asarray(raw[k], dtype=float) for k in ("key", "L", "M", "S")]
    if len({a.size for a in arrays}) != 1:
        raise ValueError("LMS curve arrays must have equal length")
    return LmsCurve(*arrays)


@lru_cache(maxsize=None)
def load_reference(path: Path = REFERENCE_PATH) -> Dict[Tuple[Indicator, Sex], LmsCurve]:
    with open(path, "rb") as f:
        cfg = tomllib.load(f)
    curves = {}
    for ind in Indicator:
        for sex in Sex:
            curves[(ind, sex)] = _curve(cfg[ind.value][sex.value])
    logger.debug("Loaded %d growth curves from %s", len(curves), path)
    return curves


def lms_zscore(x: float, l: float, m: float, s: float) -> float:
    if abs(l) < 1e-9:
        return math.log(x / m) / s
    return ((x / m) ** l - 1.0) / (l * s)


def zscore_to_percentile(z: float) -> float:
    return float(norm.cdf(z) * 100.0)


def percentile(indicator: Indicator, sex: Sex, key: Optional[float], value: Optional[float],
               path: Path = REFERENCE_PATH) -> Optional[float]:
    """Percentile of ``value`` at ``key`` (age in months or height in cm); None outside the curve."""
    if key is None or not math.isfinite(key) or positive(value) is None:
        return None
    lms = load_reference(path)[(indicator, sex)].at(key)
    if lms is None:
        return None
    return zscore_to_percentile(lms_zscore(value, *lms))

"""
Enteral nutrition plan: delivered energy/protein for a formula and daily
volume, goal coverage, and infusion time <-> rate derivation.

Editing volume, infusion time or infusion rate keeps the edited value and
re-derives its counterpart (see ``scores.derive_infusion``).
"""
from dataclasses import dataclass, replace
from typing import Any, Dict, List, Optional, Tuple

from nutricalc.core import bands
from nutricalc.core.types import CalculatorResult, ResultItem, Value, VitalsSnapshot
from nutricalc.core.utils import fmt, positive, round_half_up
from nutricalc.scores import InfusionField, derive_infusion

id = "nutritionalSupport"
title = "Plan de Soporte Nutricional"


@dataclass(frozen=True)
class EnteralFormula:
    id: str
    name: str
    kcal_per_ml: float
    protein_per_liter: float


ENTERAL_FORMULAS: Dict[str, EnteralFormula] = {f.id: f for f in (
    EnteralFormula("jevity_1_5", "Jevity 1.5 kcal", 1.5, 63.8),
    EnteralFormula("ensure_plus", "Ensure Plus", 1.5, 54.4),
    EnteralFormula("osmolite_1_2", "Osmolite 1.2 kcal", 1.2, 55.5),
    EnteralFormula("glucerna_1_2", "Glucerna 1.2 kcal", 1.2, 60.0),
    EnteralFormula("nepro_hp", "Nepro HP", 1.8, 81.0),
    EnteralFormula("two_cal_hn", "TwoCal HN", 2.0, 83.5),
)}

DEFAULT_FORMULA = "jevity_1_5"

_INFUSION_FIELDS = {
    "volume_ml": InfusionField.VOLUME,
    "infusion_time_h": InfusionField.TIME,
    "infusion_rate_ml_h": InfusionField.RATE,
}


@dataclass(frozen=True)
class SupportInputs:
    formula_id: str = DEFAULT_FORMULA
    goal_kcal: Optional[float] = 1800.0
    goal_protein_g: Optional[float] = 90.0
    volume_ml: Optional[float] = None
    infusion_time_h: Optional[float] = None
    infusion_rate_ml_h: Optional[float] = None

    @property
    def formula(self) -> EnteralFormula:
        return ENTERAL_FORMULAS[self.formula_id]


def inputs(snapshot: VitalsSnapshot) -> SupportInputs:
    # the plan is built from scratch; nothing in the snapshot seeds it
    return SupportInputs()


def update(current: SupportInputs, changes: Dict[str, Any]) -> SupportInputs:
    if "formula_id" in changes and changes["formula_id"] not in ENTERAL_FORMULAS:
        raise ValueError(f"unknown enteral formula {changes['formula_id']!r}")
    edited = [k for k in changes if k in _INFUSION_FIELDS]
    new = replace(current, **changes)
    if not edited:
        return new
    time, rate = derive_infusion(new.volume_ml, new.infusion_time_h, new.infusion_rate_ml_h,
                                 _INFUSION_FIELDS[edited[-1]])
    return replace(new, infusion_time_h=time, infusion_rate_ml_h=rate)


def _coverage(delivered: float, goal: Optional[float]) -> Optional[float]:
    if positive(goal) is None:
        return None
    return delivered / goal * 100.0


def compute(d: SupportInputs) -> Optional[CalculatorResult]:
    volume = positive(d.volume_ml)
    if volume is None:
        return None
    f = d.formula
    kcal = volume * f.kcal_per_ml
    protein = volume / 1000.0 * f.protein_per_liter

    values: Dict[str, Value] = {
        "formula_name": f.name,
        "total_kcal": round_half_up(kcal, 1),
        "total_protein_g": round_half_up(protein, 1),
    }
    if d.infusion_rate_ml_h is not None:
        values["infusion_rate_ml_h"] = d.infusion_rate_ml_h
    if d.infusion_time_h is not None:
        values["infusion_time_h"] = d.infusion_time_h

    items: List[ResultItem] = []
    kcal_cov = _coverage(kcal, d.goal_kcal)
    kcal_band = bands.classify(kcal_cov, bands.GOAL_COVERAGE_BANDS)
    if kcal_cov is not None:
        values["kcal_coverage_pct"] = round_half_up(kcal_cov, 1)
    items.append(ResultItem("Energía", values["total_kcal"], kcal_band, "kcal/día"))

    protein_cov = _coverage(protein, d.goal_protein_g)
    protein_band = bands.classify(protein_cov, bands.GOAL_COVERAGE_BANDS)
    if protein_cov is not None:
        values["protein_coverage_pct"] = round_half_up(protein_cov, 1)
    items.append(ResultItem("Proteína", values["total_protein_g"], protein_band, "g/día"))

    return CalculatorResult(values=values, interpretation=kcal_band, items=tuple(items))


def export_inputs(d: SupportInputs) -> Dict[str, Any]:
    return {
        "formula_id": d.formula_id,
        "formula_name": d.formula.name,
        "goals": {"kcal": d.goal_kcal, "protein": d.goal_protein_g},
        "volume_ml": d.volume_ml,
        "infusion_time_h": d.infusion_time_h,
        "infusion_rate_ml_h": d.infusion_rate_ml_h,
    }


def describe(d: SupportInputs, result: CalculatorResult) -> Optional[Tuple[str, str]]:
    v = result.values
    rate = fmt(d.infusion_rate_ml_h) if d.infusion_rate_ml_h is not None else "N/A"
    return ("Plan de Soporte Nutricional",
            f"Plan Soporte Enteral ({v['formula_name']}): {fmt(d.volume_ml, 0)}ml/día a {rate}ml/h. "
            f"Aporte: {fmt(v['total_kcal'], 0)} kcal, {fmt(v['total_protein_g'], 0)}g proteína.")

from dataclasses import dataclass, replace
from typing import Any, Dict, Optional, Tuple

from nutricalc.core.types import CalculatorResult, ResultItem, Sex, VitalsSnapshot
from nutricalc.core.utils import round_half_up
from nutricalc.scores import EnergyFormula, bmr, total_energy_expenditure

id = "energyCalculator"
title = "Requerimiento Energético (GET)"

ACTIVITY_LEVELS: Dict[float, str] = {
    1.2: "Sedentario (poco o nada)",
    1.375: "Actividad Ligera (1-3 días/sem)",
    1.55: "Actividad Moderada (3-5 días/sem)",
    1.725: "Actividad Intensa (6-7 días/sem)",
    1.9: "Actividad Muy Intensa (trabajo físico)",
}

STRESS_LEVELS: Dict[float, str] = {
    1.0: "Paciente sano, sin estrés",
    1.2: "Cirugía menor / Infección leve",
    1.4: "Traumatismo / Cáncer",
    1.6: "Sepsis / Quemaduras graves",
}


@dataclass(frozen=True)
class EnergyInputs:
    weight_kg: Optional[float] = None
    height_cm: Optional[float] = None
    age_years: Optional[float] = None
    sex: Sex = Sex.FEMALE
    formula: EnergyFormula = EnergyFormula.MIFFLIN
    activity_factor: float = 1.2
    stress_factor: float = 1.0


def _level(value: Any, levels: Dict[float, str], name: str) -> float:
    v = float(value)
    if v not in levels:
        raise ValueError(f"{name} must be one of {sorted(levels)}, got {value!r}")
    return v


def inputs(snapshot: VitalsSnapshot) -> EnergyInputs:
    return EnergyInputs(
        weight_kg=snapshot.weight_kg,
        height_cm=snapshot.height_cm,
        age_years=snapshot.age_years,
        sex=snapshot.sex or Sex.FEMALE,
    )


def update(current: EnergyInputs, changes: Dict[str, Any]) -> EnergyInputs:
    changes = dict(changes)
    if "formula" in changes:
        changes["formula"] = EnergyFormula(changes["formula"])
    if "sex" in changes:
        changes["sex"] = Sex(changes["sex"])
    if "activity_factor" in changes:
        changes["activity_factor"] = _level(changes["activity_factor"], ACTIVITY_LEVELS, "activity_factor")
    if "stress_factor" in changes:
        changes["stress_factor"] = _level(changes["stress_factor"], STRESS_LEVELS, "stress_factor")
    return replace(current, **changes)


def compute(data: EnergyInputs) -> Optional[CalculatorResult]:
    basal = bmr(data.formula, data.sex, data.weight_kg, data.height_cm, data.age_years)
    if basal is None:
        return None
    get = total_energy_expenditure(basal, data.activity_factor, data.stress_factor)
    tmb_kcal = int(round_half_up(basal))
    get_kcal = int(round_half_up(get))
    return CalculatorResult(
        values={"tmb": tmb_kcal, "get": get_kcal},
        items=(
            ResultItem("TMB", tmb_kcal, unit="kcal/día"),
            ResultItem("GET", get_kcal, unit="kcal/día"),
        ),
    )


def export_inputs(data: EnergyInputs) -> Dict[str, Any]:
    return {
        "weight_kg": data.weight_kg,
        "height_cm": data.height_cm,
        "age_years": data.age_years,
        "sex": data.sex.value,
        "formula": data.formula.value,
        "formula_name": data.formula.display_name,
        "activity_factor": data.activity_factor,
        "activity_factor_label": ACTIVITY_LEVELS[data.activity_factor],
        "stress_factor": data.stress_factor,
        "stress_factor_label": STRESS_LEVELS[data.stress_factor],
    }


def describe(data: EnergyInputs, result: CalculatorResult) -> Optional[Tuple[str, str]]:
    return f"Cálculo GET ({data.formula.display_name})", f"GET: {result.values['get']} kcal/día"

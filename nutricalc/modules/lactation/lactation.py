from dataclasses import dataclass
from typing import Optional, Tuple

from nutricalc.core.types import CalculatorResult, ResultItem, Sex, VitalsSnapshot
from nutricalc.core.utils import round_half_up
from nutricalc import scores

id = "lactation"
title = "Requerimientos en Lactancia"

PROTEIN_ADDON_G = 25
WATER_TOTAL_L = 3.8


@dataclass(frozen=True)
class LactationInputs:
    weight_kg: Optional[float] = None
    height_cm: Optional[float] = None
    age_years: Optional[float] = None
    months_postpartum: int = 0
    activity_factor: float = 1.2


def inputs(snapshot: VitalsSnapshot) -> LactationInputs:
    return LactationInputs(
        weight_kg=snapshot.weight_kg,
        height_cm=snapshot.height_cm,
        age_years=snapshot.age_years,
    )


def period_label(months_postpartum: int) -> str:
    return "0-6" if months_postpartum <= 6 else "7-12"


def compute(d: LactationInputs) -> Optional[CalculatorResult]:
    basal = scores.bmr(scores.EnergyFormula.MIFFLIN, Sex.FEMALE, d.weight_kg, d.height_cm, d.age_years)
    if basal is None:
        return None
    addon = scores.lactation_energy_addon(d.months_postpartum)
    total = int(round_half_up(basal * d.activity_factor + addon))
    return CalculatorResult(
        values={
            "tmb": int(round_half_up(basal)),
            "extra_kcal": addon,
            "total_energy": total,
            "protein_addon_g": PROTEIN_ADDON_G,
            "water_total_l": WATER_TOTAL_L,
            "period": period_label(d.months_postpartum),
        },
        items=(
            ResultItem("Requerimiento energético", total, unit="kcal/día"),
            ResultItem("Proteína adicional", PROTEIN_ADDON_G, unit="g/día"),
            ResultItem("Agua total", WATER_TOTAL_L, unit="L/día"),
        ),
    )


def describe(d: LactationInputs, result: CalculatorResult) -> Optional[Tuple[str, str]]:
    v = result.values
    return "Requerimientos Lactancia", f"Periodo {v['period']}m: {v['total_energy']} kcal/día."

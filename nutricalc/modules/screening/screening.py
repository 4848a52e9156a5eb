"""
MUST (Malnutrition Universal Screening Tool).

Three components are scored independently and summed; the risk band depends
only on the total.
"""
from dataclasses import dataclass
from typing import Optional, Tuple

from nutricalc.core import bands
from nutricalc.core.types import CalculatorResult, ResultItem, VitalsSnapshot
from nutricalc.core.utils import round_half_up
from nutricalc import scores

id = "mustScreening"
title = "Tamizaje Universal de Malnutrición (MUST)"

NO_DATA = "Sin datos"


@dataclass(frozen=True)
class MustInputs:
    weight_kg: Optional[float] = None
    height_cm: Optional[float] = None
    previous_weight_kg: Optional[float] = None
    period_months: int = 3
    acutely_ill: bool = False


def inputs(snapshot: VitalsSnapshot) -> MustInputs:
    return MustInputs(weight_kg=snapshot.weight_kg, height_cm=snapshot.height_cm)


def compute(d: MustInputs) -> Optional[CalculatorResult]:
    bmi = scores.bmi(d.weight_kg, d.height_cm)
    change = scores.weight_change_percent(d.weight_kg, d.previous_weight_kg)

    bmi_score = scores.must_bmi_score(bmi)
    loss_score = scores.must_weight_loss_score(change)
    acute_score = scores.must_acute_disease_score(d.acutely_ill)
    total = bmi_score + loss_score + acute_score

    risk = bands.classify(total, bands.MUST_BANDS)
    bmi_shown = round_half_up(bmi, 1) if bmi is not None else NO_DATA
    change_shown = f"{change:+.1f}%" if change is not None else NO_DATA
    return CalculatorResult(
        values={
            "bmi": bmi_shown,
            "bmi_score": bmi_score,
            "weight_change": change_shown,
            "weight_loss_score": loss_score,
            "acute_disease_score": acute_score,
            "total_score": total,
            "risk_level": risk.label,
            "action": bands.MUST_ACTIONS[risk.label],
        },
        interpretation=risk,
        derived_text=bands.MUST_ACTIONS[risk.label],
        items=(
            ResultItem("IMC", bmi_shown),
            ResultItem("Puntaje IMC", bmi_score),
            ResultItem(f"Pérdida de peso ({d.period_months} meses)", change_shown),
            ResultItem("Puntaje pérdida de peso", loss_score),
            ResultItem("Puntaje enfermedad aguda", acute_score),
            ResultItem("Puntaje total", total, risk),
        ),
    )


def describe(d: MustInputs, result: CalculatorResult) -> Optional[Tuple[str, str]]:
    v = result.values
    return "Tamizaje MUST", f"Riesgo: {v['risk_level']} ({v['total_score']} pts)."

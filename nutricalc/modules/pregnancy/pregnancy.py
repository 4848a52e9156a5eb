"""
Gestational weight gain (IOM 2009) and energy needs during pregnancy.

Expected gain is flat 1.5 kg through week 13, then grows linearly at the
weekly rate of the pre-gestational BMI category. Energy uses Mifflin-St Jeor
on the pre-gestational weight times 1.2 plus the trimester add-on.
"""
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from nutricalc.core import bands
from nutricalc.core.types import CalculatorResult, ResultItem, Sex, Value, VitalsSnapshot
from nutricalc.core.utils import fmt, positive, round_half_up
from nutricalc import scores

id = "maternal"
title = "Evaluación Embarazo"

PREGNANCY_ACTIVITY = 1.2


@dataclass(frozen=True)
class PregnancyInputs:
    pre_weight_kg: Optional[float] = None
    height_cm: Optional[float] = None
    age_years: Optional[float] = None
    week: Optional[int] = None
    current_weight_kg: Optional[float] = None


def inputs(snapshot: VitalsSnapshot) -> PregnancyInputs:
    return PregnancyInputs(
        pre_weight_kg=snapshot.weight_kg,
        height_cm=snapshot.height_cm,
        age_years=snapshot.age_years,
        current_weight_kg=snapshot.weight_kg,
    )


def compute(d: PregnancyInputs) -> Optional[CalculatorResult]:
    pre_bmi = scores.bmi(d.pre_weight_kg, d.height_cm)
    category = scores.iom_category(pre_bmi)
    if category is None:
        return None

    lo, hi = category.total_gain
    values: Dict[str, Value] = {
        "pregestational_bmi": round_half_up(pre_bmi, 1),
        "category": category.label,
        "total_gain_range": f"{lo:g} - {hi:g} kg",
        "weekly_rate": category.weekly_rate,
    }
    items: List[ResultItem] = [
        ResultItem("IMC pregestacional", values["pregestational_bmi"], unit="kg/m²"),
        ResultItem("Ganancia total recomendada", values["total_gain_range"]),
    ]
    interpretation = None

    expected = scores.expected_gestational_gain(d.week, category.weekly_rate)
    cw = d.current_weight_kg
    # weight below the pre-gestational value is not assessed
    if expected is not None and positive(cw) is not None and cw >= d.pre_weight_kg:
        actual = cw - d.pre_weight_kg
        interpretation = bands.gestational_gain_band(actual, expected)
        values["actual_gain"] = round_half_up(actual, 1)
        values["expected_gain"] = round_half_up(expected, 2)
        values["gain_interpretation"] = interpretation.label
        items.append(ResultItem("Ganancia actual", values["actual_gain"], interpretation, "kg"))
        items.append(ResultItem("Ganancia esperada", values["expected_gain"], unit="kg"))

    addon = scores.gestational_energy_addon(d.week)
    basal = scores.bmr(scores.EnergyFormula.MIFFLIN, Sex.FEMALE, d.pre_weight_kg, d.height_cm, d.age_years)
    if addon is not None and basal is not None:
        values["trimester"] = scores.trimester(d.week)
        values["energy_addon"] = addon
        values["energy_need"] = int(round_half_up(basal * PREGNANCY_ACTIVITY + addon))
        items.append(ResultItem("Requerimiento energético", values["energy_need"], unit="kcal/día"))

    return CalculatorResult(values=values, interpretation=interpretation, items=tuple(items))


def describe(d: PregnancyInputs, result: CalculatorResult) -> Optional[Tuple[str, str]]:
    v = result.values
    if "actual_gain" not in v:
        return None
    return ("Evaluación Embarazo",
            f"Semana {d.week}: Ganancia {fmt(v['actual_gain'])}kg ({v['gain_interpretation']}).")

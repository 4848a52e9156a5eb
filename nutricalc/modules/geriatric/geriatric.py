from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from nutricalc.core import bands
from nutricalc.core.types import CalculatorResult, ResultItem, Sex, Value, VitalsSnapshot
from nutricalc.core.utils import fmt, positive, round_half_up
from nutricalc import scores

id = "geriatric"
title = "Evaluación Geriátrica"

PROTEIN_G_PER_KG = (1.0, 1.2)
WATER_ML_PER_KG = 30
NOT_ASSESSED = "No evaluado"


@dataclass(frozen=True)
class GeriatricInputs:
    weight_kg: Optional[float] = None
    height_cm: Optional[float] = None
    age_years: Optional[float] = None
    sex: Sex = Sex.FEMALE
    calf_cm: Optional[float] = None
    activity_factor: float = 1.2


def inputs(snapshot: VitalsSnapshot) -> GeriatricInputs:
    return GeriatricInputs(
        weight_kg=snapshot.weight_kg,
        height_cm=snapshot.height_cm,
        age_years=snapshot.age_years,
        sex=snapshot.sex or Sex.FEMALE,
        calf_cm=snapshot.calf_cm,
    )


def compute(d: GeriatricInputs) -> Optional[CalculatorResult]:
    values: Dict[str, Value] = {}
    items: List[ResultItem] = []

    bmi = scores.bmi(d.weight_kg, d.height_cm)
    bmi_band = bands.classify(bmi, bands.GERIATRIC_BMI_BANDS)
    if bmi is not None:
        values["bmi"] = round_half_up(bmi, 1)
        values["bmi_class"] = bmi_band.label
        items.append(ResultItem("IMC (Lipschitz)", values["bmi"], bmi_band, "kg/m²"))

    calf = positive(d.calf_cm)
    calf_band = bands.classify(calf, bands.CALF_BANDS)
    values["sarcopenia_risk"] = calf_band.label if calf_band else NOT_ASSESSED
    if calf_band is not None:
        items.append(ResultItem("Circunferencia de pantorrilla", calf, calf_band, "cm"))

    if positive(d.weight_kg) is not None:
        lo, hi = PROTEIN_G_PER_KG
        values["protein_min_g"] = round_half_up(d.weight_kg * lo, 1)
        values["protein_max_g"] = round_half_up(d.weight_kg * hi, 1)
        values["water_ml"] = int(round_half_up(d.weight_kg * WATER_ML_PER_KG))
        items.append(ResultItem("Proteína", f"{fmt(values['protein_min_g'])} - {fmt(values['protein_max_g'])}", unit="g/día"))
        items.append(ResultItem("Agua", values["water_ml"], unit="ml/día"))

    basal = scores.bmr(scores.EnergyFormula.MIFFLIN, d.sex, d.weight_kg, d.height_cm, d.age_years)
    if basal is not None:
        values["energy_need"] = int(round_half_up(basal * d.activity_factor))
        items.append(ResultItem("Requerimiento energético", values["energy_need"], unit="kcal/día"))

    if not items:
        return None
    return CalculatorResult(values=values, interpretation=bmi_band, items=tuple(items))


def describe(d: GeriatricInputs, result: CalculatorResult) -> Optional[Tuple[str, str]]:
    v = result.values
    if "bmi" not in v:
        return None
    calf = fmt(d.calf_cm) if positive(d.calf_cm) is not None else "-"
    return ("Evaluación Geriátrica",
            f"IMC: {fmt(v['bmi'])} ({v['bmi_class']}). Pantorrilla: {calf}cm ({v['sarcopenia_risk']}).")

from dataclasses import dataclass, replace
from typing import Any, Dict, List, Optional, Tuple

from nutricalc.core import bands
from nutricalc.core.types import CalculatorResult, ResultItem, Sex, Value, VitalsSnapshot
from nutricalc.core.utils import fmt, round_half_up
from nutricalc import scores

id = "anthropometryPanel"
title = "Panel Antropométrico y de Riesgo"

PRESENT, ABSENT = "Presente", "Ausente"
CRITERION_MET, CRITERION_NOT_MET = "Cumple", "No cumple"


@dataclass(frozen=True)
class AnthropometryInputs:
    weight_kg: Optional[float] = None
    height_cm: Optional[float] = None
    sex: Sex = Sex.FEMALE
    waist_cm: Optional[float] = None
    hip_cm: Optional[float] = None
    previous_weight_kg: Optional[float] = None
    change_months: Optional[float] = None
    systolic: Optional[float] = None
    diastolic: Optional[float] = None
    triglycerides: Optional[float] = None
    hdl: Optional[float] = None
    glucose: Optional[float] = None
    on_bp_meds: bool = False
    on_tg_meds: bool = False
    on_hdl_meds: bool = False
    on_glucose_meds: bool = False


def inputs(snapshot: VitalsSnapshot) -> AnthropometryInputs:
    bp = snapshot.blood_pressure
    labs = snapshot.labs
    return AnthropometryInputs(
        weight_kg=snapshot.weight_kg,
        height_cm=snapshot.height_cm,
        sex=snapshot.sex or Sex.FEMALE,
        waist_cm=snapshot.waist_cm,
        hip_cm=snapshot.hip_cm,
        systolic=bp.systolic if bp else None,
        diastolic=bp.diastolic if bp else None,
        triglycerides=labs.triglycerides,
        hdl=labs.hdl,
        glucose=labs.glucose,
    )


def update(current: AnthropometryInputs, changes: Dict[str, Any]) -> AnthropometryInputs:
    if "sex" in changes:
        changes = {**changes, "sex": Sex(changes["sex"])}
    return replace(current, **changes)


def _has_metabolic_data(d: AnthropometryInputs) -> bool:
    measured = (d.waist_cm, d.systolic, d.diastolic, d.triglycerides, d.hdl, d.glucose)
    flags = (d.on_bp_meds, d.on_tg_meds, d.on_hdl_meds, d.on_glucose_meds)
    return any(v is not None for v in measured) or any(flags)


def compute(d: AnthropometryInputs) -> Optional[CalculatorResult]:
    values: Dict[str, Value] = {}
    items: List[ResultItem] = []

    bmi = scores.bmi(d.weight_kg, d.height_cm)
    bmi_band = bands.classify(bmi, bands.BMI_BANDS)
    if bmi is not None:
        values["bmi"] = round_half_up(bmi, 1)
        values["bmi_class"] = bmi_band.label
        items.append(ResultItem("IMC", values["bmi"], bmi_band, "kg/m²"))

    healthy = scores.healthy_weight_range(d.height_cm)
    if healthy is not None:
        lo, hi = healthy
        values["healthy_weight_min"] = round_half_up(lo, 1)
        values["healthy_weight_max"] = round_half_up(hi, 1)
        items.append(ResultItem("Peso saludable", f"{fmt(lo)} - {fmt(hi)}", unit="kg"))

    whr = scores.waist_hip_ratio(d.waist_cm, d.hip_cm)
    if whr is not None:
        table = bands.whr_bands(bands.WHR_HIGH_RISK[d.sex.value])
        whr_band = bands.classify(whr, table)
        values["waist_hip_ratio"] = round_half_up(whr, 2)
        values["waist_hip_risk"] = whr_band.label
        items.append(ResultItem("Índice Cintura-Cadera", values["waist_hip_ratio"], whr_band))

    whtr = scores.waist_height_ratio(d.waist_cm, d.height_cm)
    if whtr is not None:
        whtr_band = bands.classify(whtr, bands.WHTR_BANDS)
        values["waist_height_ratio"] = round_half_up(whtr, 2)
        values["waist_height_risk"] = whtr_band.label
        items.append(ResultItem("Índice Cintura-Talla", values["waist_height_ratio"], whtr_band))

    change = scores.weight_change_percent(d.weight_kg, d.previous_weight_kg)
    if change is not None:
        shown = f"{change:+.1f}%"
        values["weight_change_pct"] = round_half_up(change, 1)
        values["weight_change_display"] = shown
        if change > 0:
            # gain never gets a loss-severity band
            trend = bands.weight_gain_trend(change, d.change_months)
            if trend is not None:
                values["weight_change_trend"] = trend
            items.append(ResultItem("Cambio de peso", shown))
        elif change < 0:
            loss_band = bands.weight_loss_band(-change, d.change_months)
            if loss_band is not None:
                values["weight_change_class"] = loss_band.label
            items.append(ResultItem("Cambio de peso", shown, loss_band))
        else:
            items.append(ResultItem("Cambio de peso", shown))

    if _has_metabolic_data(d):
        criteria = scores.metabolic_syndrome_criteria(
            d.sex, d.waist_cm, d.systolic, d.diastolic, d.triglycerides, d.hdl, d.glucose,
            on_bp_meds=d.on_bp_meds, on_tg_meds=d.on_tg_meds,
            on_hdl_meds=d.on_hdl_meds, on_glucose_meds=d.on_glucose_meds,
        )
        count = sum(criteria.values())
        ms_band = bands.classify(count, bands.METABOLIC_SYNDROME_BANDS)
        values["metabolic_criteria_met"] = count
        values["metabolic_syndrome"] = PRESENT if count >= 3 else ABSENT
        for name, met in criteria.items():
            values[f"criterion_{name}"] = CRITERION_MET if met else CRITERION_NOT_MET
        items.append(ResultItem("Síndrome Metabólico (ATP III)", f"{count}/5", ms_band))

    if not values:
        return None
    return CalculatorResult(values=values, interpretation=bmi_band, items=tuple(items))


def describe(d: AnthropometryInputs, result: CalculatorResult) -> Optional[Tuple[str, str]]:
    v = result.values
    if "bmi" not in v or "metabolic_criteria_met" not in v:
        return None
    return ("Evaluación Antropométrica",
            f"Evaluación completa: IMC {fmt(v['bmi'])}, Síndrome Metabólico {v['metabolic_syndrome']} ({v['metabolic_criteria_met']}/5).")

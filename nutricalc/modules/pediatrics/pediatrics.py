from dataclasses import dataclass, field, replace
from datetime import date
from typing import Any, Dict, List, Optional, Tuple

from nutricalc.core import bands
from nutricalc.core.types import CalculatorResult, ResultItem, Sex, Value, VitalsSnapshot
from nutricalc.core.utils import round_half_up
from nutricalc.core.vitals import parse_date
from nutricalc import scores
from nutricalc.growth import Indicator, percentile

id = "pediatrics"
title = "Percentiles de Crecimiento Pediátrico"

BIRTH_AFTER_MEASUREMENT = "La fecha de nacimiento no puede ser posterior a la fecha de medición."

# WHO weight-for-height is defined for children under five
WEIGHT_FOR_HEIGHT_MAX_MONTHS = 60


@dataclass(frozen=True)
class PediatricsInputs:
    sex: Sex = Sex.MALE
    birth_date: Optional[date] = None
    measurement_date: date = field(default_factory=date.today)
    weight_kg: Optional[float] = None
    height_cm: Optional[float] = None


def inputs(snapshot: VitalsSnapshot) -> PediatricsInputs:
    return PediatricsInputs(
        sex=snapshot.sex or Sex.MALE,
        birth_date=snapshot.birth_date,
        weight_kg=snapshot.weight_kg,
        height_cm=snapshot.height_cm,
    )


def update(current: PediatricsInputs, changes: Dict[str, Any]) -> PediatricsInputs:
    changes = dict(changes)
    for k in ("birth_date", "measurement_date"):
        if k in changes:
            changes[k] = parse_date(changes[k])
    if changes.get("measurement_date", current.measurement_date) is None:
        changes["measurement_date"] = date.today()
    if "sex" in changes:
        changes["sex"] = Sex(changes["sex"])
    return replace(current, **changes)


def age_label(months: int) -> str:
    years, rem = divmod(months, 12)
    return f"{years} años, {rem} meses"


def _item(metric: str, p: Optional[float], table: bands.Table) -> Optional[ResultItem]:
    if p is None:
        return None
    return ResultItem(metric, round_half_up(p, 1), bands.classify(p, table), "percentil")


def compute(d: PediatricsInputs) -> Optional[CalculatorResult]:
    if d.birth_date is None:
        return None
    months = scores.age_in_months(d.birth_date, d.measurement_date)
    if months is None:
        return CalculatorResult(values={}, derived_text=BIRTH_AFTER_MEASUREMENT)

    bmi = scores.bmi(d.weight_kg, d.height_cm)
    wfh_key = d.height_cm if months <= WEIGHT_FOR_HEIGHT_MAX_MONTHS else None
    percentiles = (
        ("weight_for_age", "Peso para la edad", percentile(Indicator.WEIGHT_FOR_AGE, d.sex, months, d.weight_kg),
         bands.PERCENTILE_BANDS),
        ("height_for_age", "Talla para la edad", percentile(Indicator.HEIGHT_FOR_AGE, d.sex, months, d.height_cm),
         bands.STATURE_PERCENTILE_BANDS),
        ("weight_for_height", "Peso para la talla", percentile(Indicator.WEIGHT_FOR_HEIGHT, d.sex, wfh_key, d.weight_kg),
         bands.PERCENTILE_BANDS),
        ("bmi_for_age", "IMC para la edad", percentile(Indicator.BMI_FOR_AGE, d.sex, months, bmi),
         bands.PERCENTILE_BANDS),
    )

    label = age_label(months)
    values: Dict[str, Value] = {"age_months": months, "age_display": label}
    items: List[ResultItem] = []
    for key, metric, p, table in percentiles:
        item = _item(metric, p, table)
        if item is None:
            continue
        values[key] = item.value
        values[f"{key}_class"] = item.band.label
        items.append(item)
    if bmi is not None:
        values["bmi"] = round_half_up(bmi, 1)
    return CalculatorResult(values=values, derived_text=f"Edad: {label}", items=tuple(items))


def describe(d: PediatricsInputs, result: CalculatorResult) -> Optional[Tuple[str, str]]:
    if "age_display" not in result.values:
        return None
    return "Evaluación Pediátrica", f"Edad: {result.values['age_display']}"

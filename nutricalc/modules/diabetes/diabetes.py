from dataclasses import dataclass
from typing import Optional, Tuple

from nutricalc.core import bands
from nutricalc.core.types import CalculatorResult, ResultItem, VitalsSnapshot
from nutricalc.core.utils import fmt, round_half_up
from nutricalc.scores import estimated_average_glucose

id = "eag"
title = "Glucosa Promedio Estimada (eAG)"


@dataclass(frozen=True)
class DiabetesInputs:
    hba1c: Optional[float] = None


def inputs(snapshot: VitalsSnapshot) -> DiabetesInputs:
    return DiabetesInputs(hba1c=snapshot.labs.hba1c)


def compute(d: DiabetesInputs) -> Optional[CalculatorResult]:
    eag = estimated_average_glucose(d.hba1c)
    if eag is None:
        return None
    b = bands.classify(eag, bands.EAG_BANDS)
    value = int(round_half_up(eag))
    return CalculatorResult(
        values={"eag": value, "interpretation": b.label},
        interpretation=b,
        items=(ResultItem("eAG", value, b, "mg/dL"),),
    )


def describe(d: DiabetesInputs, result: CalculatorResult) -> Optional[Tuple[str, str]]:
    return "Cálculo eAG", f"HbA1c: {fmt(d.hba1c)}%, eAG: {result.values['eag']} mg/dL"

"""
Renal function (CKD-EPI 2021) and protein targets.

The protein stage is a two-state machine:

* AUTO: the effective stage follows the stage implied by the computed eGFR
  (G1-G3b -> ``g1-g3``, G4-G5 -> ``g4-g5``). When no eGFR can be computed the
  user's last CKD choice is used.
* PINNED: a dialysis stage was chosen and stays in effect whatever the eGFR.

Choosing a dialysis stage pins; choosing a CKD stage returns to AUTO.
"""
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Dict, Optional, Tuple

from nutricalc.core import bands
from nutricalc.core.types import CalculatorResult, ResultItem, Sex, Value, VitalsSnapshot
from nutricalc.core.utils import fmt, positive, round_half_up
from nutricalc.scores import ckd_epi_2021

id = "renalEvaluation"
title = "Panel de Evaluación Renal"


class ProteinStage(str, Enum):
    CKD_EARLY = "g1-g3"
    CKD_LATE = "g4-g5"
    HEMODIALYSIS = "hemodialysis"
    PERITONEAL = "peritoneal"

    @property
    def is_dialysis(self) -> bool:
        return self in (ProteinStage.HEMODIALYSIS, ProteinStage.PERITONEAL)


class StageMode(str, Enum):
    AUTO = "auto"
    PINNED = "pinned"


# stage -> (label, g/kg min, g/kg max)
PROTEIN_TARGETS: Dict[ProteinStage, Tuple[str, float, float]] = {
    ProteinStage.CKD_EARLY: ("Estadio G1-G3 (Pre-diálisis)", 0.8, 1.0),
    ProteinStage.CKD_LATE: ("Estadio G4-G5 (Pre-diálisis)", 0.6, 0.8),
    ProteinStage.HEMODIALYSIS: ("Hemodiálisis", 1.0, 1.2),
    ProteinStage.PERITONEAL: ("Diálisis Peritoneal", 1.0, 1.3),
}


@dataclass(frozen=True)
class RenalInputs:
    creatinine_mg_dl: Optional[float] = None
    age_years: Optional[float] = None
    sex: Sex = Sex.FEMALE
    weight_kg: Optional[float] = None
    protein_stage: ProteinStage = ProteinStage.CKD_EARLY
    stage_mode: StageMode = StageMode.AUTO


def inputs(snapshot: VitalsSnapshot) -> RenalInputs:
    return RenalInputs(
        creatinine_mg_dl=snapshot.labs.creatinine,
        age_years=snapshot.age_years,
        sex=snapshot.sex or Sex.FEMALE,
        weight_kg=snapshot.weight_kg,
    )


def update(current: RenalInputs, changes: Dict[str, Any]) -> RenalInputs:
    changes = dict(changes)
    changes.pop("stage_mode", None)
    if "sex" in changes:
        changes["sex"] = Sex(changes["sex"])
    if "protein_stage" in changes:
        stage = ProteinStage(changes["protein_stage"])
        changes["protein_stage"] = stage
        changes["stage_mode"] = StageMode.PINNED if stage.is_dialysis else StageMode.AUTO
    return replace(current, **changes)


def stage_for_egfr(egfr: float) -> ProteinStage:
    return ProteinStage.CKD_LATE if egfr < 30 else ProteinStage.CKD_EARLY


def effective_stage(d: RenalInputs, egfr: Optional[float]) -> ProteinStage:
    if d.stage_mode is StageMode.PINNED or egfr is None:
        return d.protein_stage
    return stage_for_egfr(egfr)


def compute(d: RenalInputs) -> Optional[CalculatorResult]:
    values: Dict[str, Value] = {}
    items = []

    egfr = ckd_epi_2021(d.creatinine_mg_dl, d.age_years, d.sex)
    egfr_band = bands.classify(egfr, bands.EGFR_BANDS)
    if egfr is not None:
        values["egfr"] = int(round_half_up(egfr))
        values["egfr_stage"] = egfr_band.label
        items.append(ResultItem("TFG (CKD-EPI 2021)", values["egfr"], egfr_band, "ml/min/1.73m²"))

    stage = effective_stage(d, egfr)
    label, lo, hi = PROTEIN_TARGETS[stage]
    if positive(d.weight_kg) is not None:
        values["protein_stage"] = stage.value
        values["protein_stage_label"] = label
        values["protein_min_g"] = round_half_up(d.weight_kg * lo, 1)
        values["protein_max_g"] = round_half_up(d.weight_kg * hi, 1)
        values["protein_calculation"] = f"{fmt(d.weight_kg)} kg × ({lo}-{hi} g/kg)"
        items.append(ResultItem("Proteína", f"{fmt(values['protein_min_g'])} - {fmt(values['protein_max_g'])}", unit="g/día"))

    if not values:
        return None
    return CalculatorResult(values=values, interpretation=egfr_band, items=tuple(items))


def describe(d: RenalInputs, result: CalculatorResult) -> Optional[Tuple[str, str]]:
    v = result.values
    if "egfr" not in v or "protein_min_g" not in v:
        return None
    return ("Evaluación Renal",
            f"Evaluación Renal: TFG {v['egfr']} ({v['egfr_stage']}), "
            f"Proteína {fmt(v['protein_min_g'])} - {fmt(v['protein_max_g'])} g/día.")

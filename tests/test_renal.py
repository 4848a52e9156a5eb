from nutricalc.core.types import Sex, VitalsSnapshot
from nutricalc.modules.renal import renal
from nutricalc.modules.renal.renal import ProteinStage, StageMode


def test_egfr_scenario_and_auto_stage(make_calculator, adult_snapshot):
    calc = make_calculator(renal, adult_snapshot)
    calc.update(age_years=50)
    v = calc.result.values
    assert v["egfr"] == 78
    assert v["egfr_stage"] == "Estadio G2: Lig. disminuido"
    assert v["protein_stage"] == "g1-g3"
    assert (v["protein_min_g"], v["protein_max_g"]) == (56.0, 70.0)
    assert renal.describe(calc.inputs, calc.result) == (
        "Evaluación Renal",
        "Evaluación Renal: TFG 78 (Estadio G2: Lig. disminuido), Proteína 56.0 - 70.0 g/día.",
    )


def test_low_egfr_follows_to_late_stage(make_calculator, adult_snapshot):
    calc = make_calculator(renal, adult_snapshot)
    calc.update(creatinine_mg_dl=4.0, age_years=60)
    v = calc.result.values
    assert v["egfr_stage"].startswith("Estadio G5")
    assert v["protein_stage"] == "g4-g5"
    assert (v["protein_min_g"], v["protein_max_g"]) == (42.0, 56.0)


def test_dialysis_pins_stage_across_egfr_changes(make_calculator, adult_snapshot):
    calc = make_calculator(renal, adult_snapshot)
    calc.update(protein_stage="hemodialysis")
    assert calc.inputs.stage_mode is StageMode.PINNED
    calc.update(creatinine_mg_dl=0.6)
    assert calc.result.values["protein_stage"] == "hemodialysis"
    calc.update(creatinine_mg_dl=5.0)
    assert calc.result.values["protein_stage"] == "hemodialysis"
    assert calc.result.values["protein_max_g"] == 84.0


def test_choosing_ckd_stage_returns_to_auto(make_calculator, adult_snapshot):
    calc = make_calculator(renal, adult_snapshot)
    calc.update(protein_stage="peritoneal")
    calc.update(protein_stage="g4-g5")
    assert calc.inputs.stage_mode is StageMode.AUTO
    # eGFR is in G2, so the effective stage follows it
    assert calc.result.values["protein_stage"] == "g1-g3"


def test_without_egfr_user_ckd_choice_applies(make_calculator):
    calc = make_calculator(renal, VitalsSnapshot(weight_kg=70.0, sex=Sex.MALE))
    calc.update(protein_stage=ProteinStage.CKD_LATE)
    v = calc.result.values
    assert "egfr" not in v
    assert v["protein_stage"] == "g4-g5"
    assert renal.describe(calc.inputs, calc.result) is None


def test_stage_mode_cannot_be_set_directly(make_calculator, adult_snapshot):
    calc = make_calculator(renal, adult_snapshot)
    calc.update(stage_mode=StageMode.PINNED)
    assert calc.inputs.stage_mode is StageMode.AUTO


def test_reset_unpins(make_calculator, adult_snapshot):
    calc = make_calculator(renal, adult_snapshot)
    calc.update(protein_stage="hemodialysis")
    calc.reset(adult_snapshot)
    assert calc.inputs.protein_stage is ProteinStage.CKD_EARLY
    assert calc.inputs.stage_mode is StageMode.AUTO


def test_nothing_computable(make_calculator, empty_snapshot):
    assert make_calculator(renal, empty_snapshot).result is None

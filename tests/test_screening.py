import pytest

from nutricalc.core.types import VitalsSnapshot
from nutricalc.modules.screening import screening


def test_low_bmi_acutely_ill_without_prior_weight(make_calculator):
    calc = make_calculator(screening, VitalsSnapshot(weight_kg=49.13, height_cm=170.0))
    calc.update(acutely_ill=True)
    v = calc.result.values
    assert v["bmi"] == 17.0
    assert (v["bmi_score"], v["weight_loss_score"], v["acute_disease_score"]) == (2, 0, 2)
    assert v["weight_change"] == screening.NO_DATA
    assert v["total_score"] == 4
    assert v["risk_level"] == "Alto Riesgo"
    assert screening.describe(calc.inputs, calc.result) == ("Tamizaje MUST", "Riesgo: Alto Riesgo (4 pts).")


def test_weight_gain_shown_with_sign_scores_zero(make_calculator, adult_snapshot):
    calc = make_calculator(screening, adult_snapshot)
    calc.update(previous_weight_kg=63.0)
    v = calc.result.values
    assert v["weight_change"].startswith("+")
    assert v["weight_loss_score"] == 0
    assert v["risk_level"] == "Bajo Riesgo"


@pytest.mark.parametrize("weight, previous, ill, total, risk", [
    (70.0, None, False, 0, "Bajo Riesgo"),
    (70.0, 74.0, False, 1, "Riesgo Medio"),
    (70.0, 80.0, False, 2, "Alto Riesgo"),
    (70.0, None, True, 2, "Alto Riesgo"),
    (55.0, 58.0, False, 2, "Alto Riesgo"),
])
def test_risk_depends_only_on_total(make_calculator, weight, previous, ill, total, risk):
    calc = make_calculator(screening, VitalsSnapshot(weight_kg=weight, height_cm=170.0))
    calc.update(previous_weight_kg=previous, acutely_ill=ill)
    v = calc.result.values
    assert v["total_score"] == total
    assert v["risk_level"] == risk
    assert calc.result.derived_text == v["action"]


def test_maximum_total(make_calculator):
    calc = make_calculator(screening, VitalsSnapshot(weight_kg=45.0, height_cm=170.0))
    calc.update(previous_weight_kg=55.0, acutely_ill=True)
    assert calc.result.values["total_score"] == 6


def test_no_data_still_screens(make_calculator, empty_snapshot):
    v = make_calculator(screening, empty_snapshot).result.values
    assert v["bmi"] == screening.NO_DATA
    assert v["total_score"] == 0

import math

import pytest

from nutricalc.core import bands
from nutricalc.core.types import Severity


def label(value, table):
    return bands.classify(value, table).label


@pytest.mark.parametrize("bmi, expected", [
    (18.49, "Bajo Peso"), (18.5, "Peso Normal"), (24.99, "Peso Normal"),
    (25.0, "Sobrepeso"), (29.99, "Sobrepeso"), (30.0, "Obesidad"),
])
def test_bmi_bands(bmi, expected):
    assert label(bmi, bands.BMI_BANDS) == expected


@pytest.mark.parametrize("bmi, expected", [
    (21.99, "Bajo Peso (Riesgo)"), (22.0, "Peso Normal"), (27.0, "Peso Normal"), (27.01, "Sobrepeso"),
])
def test_geriatric_bands_include_27(bmi, expected):
    assert label(bmi, bands.GERIATRIC_BMI_BANDS) == expected


def test_waist_hip_threshold_is_exclusive():
    male = bands.whr_bands(bands.WHR_HIGH_RISK["male"])
    assert label(0.90, male) == "Riesgo Bajo"
    assert label(0.91, male) == "Riesgo Cardiovascular Elevado"
    female = bands.whr_bands(bands.WHR_HIGH_RISK["female"])
    assert label(0.86, female) == "Riesgo Cardiovascular Elevado"


def test_waist_height_threshold_is_inclusive():
    assert label(0.49, bands.WHTR_BANDS) == "Riesgo Bajo"
    assert label(0.5, bands.WHTR_BANDS) == "Riesgo Metabólico Elevado"


@pytest.mark.parametrize("egfr, stage", [
    (120, "G1"), (90, "G1"), (89.9, "G2"), (60, "G2"), (59.9, "G3a"),
    (45, "G3a"), (44.9, "G3b"), (30, "G3b"), (29.9, "G4"), (15, "G4"), (14.9, "G5"),
])
def test_egfr_stages(egfr, stage):
    assert label(egfr, bands.EGFR_BANDS).startswith(f"Estadio {stage}:")


@pytest.mark.parametrize("eag, expected", [
    (69.9, "Riesgo Hipoglucemia"), (70, "Buen Control (<7%)"),
    (154, "Control Regular (<8%)"), (183, "Control Deficiente"),
])
def test_eag_bands(eag, expected):
    assert label(eag, bands.EAG_BANDS) == expected


@pytest.mark.parametrize("total, expected", [(0, "Bajo Riesgo"), (1, "Riesgo Medio"), (2, "Alto Riesgo"), (6, "Alto Riesgo")])
def test_must_bands_have_actions(total, expected):
    assert label(total, bands.MUST_BANDS) == expected
    assert bands.MUST_ACTIONS[expected]


def test_percentile_bands():
    assert label(2.9, bands.PERCENTILE_BANDS) == "Desnutrición severa (<P3)"
    assert label(4, bands.PERCENTILE_BANDS) == "Bajo peso (<P5)"
    assert label(50, bands.PERCENTILE_BANDS) == "Normal"
    assert label(85, bands.PERCENTILE_BANDS) == "Riesgo de sobrepeso"
    assert label(95, bands.PERCENTILE_BANDS) == "Sobrepeso / Obesidad"
    assert label(97, bands.STATURE_PERCENTILE_BANDS) == "Talla alta"


def test_goal_coverage_bands():
    assert label(89.9, bands.GOAL_COVERAGE_BANDS) == "Por debajo de la meta"
    assert label(100, bands.GOAL_COVERAGE_BANDS) == "Meta cubierta"
    assert label(110, bands.GOAL_COVERAGE_BANDS) == "Meta cubierta"
    assert label(110.1, bands.GOAL_COVERAGE_BANDS) == "Por encima de la meta"


def test_classify_absent_value():
    assert bands.classify(None, bands.BMI_BANDS) is None


def test_every_table_is_exhaustive_and_sorted():
    tables = [v for k, v in vars(bands).items() if k.endswith("_BANDS") and isinstance(v, tuple)]
    assert tables
    for table in tables:
        uppers = [upper for upper, _ in table]
        assert uppers == sorted(uppers)
        assert math.isinf(uppers[-1])


@pytest.mark.parametrize("loss, months, expected", [
    (5.5, 1, "Pérdida Severa"),
    (5.5, 2, "Pérdida Significativa"),
    (8, 3, "Pérdida Severa"),
    (10.5, 6, "Pérdida Severa"),
    (1.5, 1, "No Significativa"),
])
def test_weight_loss_band(loss, months, expected):
    assert bands.weight_loss_band(loss, months).label == expected


def test_weight_loss_band_needs_period():
    assert bands.weight_loss_band(8, None) is None
    assert bands.weight_loss_band(8, 0) is None


def test_weight_gain_trend_is_a_label_only():
    assert bands.weight_gain_trend(3, 3) == "Aumento Significativo"
    assert bands.weight_gain_trend(6, 1) == "Aumento Severo"
    assert bands.weight_gain_trend(1, 1) == "No Significativo"


def test_gestational_gain_band():
    assert bands.gestational_gain_band(3.0, 4.44).label == "Ganancia Insuficiente"
    assert bands.gestational_gain_band(6.0, 4.44).label == "Ganancia Excesiva"
    assert bands.gestational_gain_band(4.44, 4.44).severity is Severity.NORMAL
    assert bands.gestational_gain_band(None, 4.44) is None

from datetime import date, datetime

from nutricalc.core.types import LabPanel, Sex
from nutricalc.core.utils import positive, to_float
from nutricalc.core.vitals import (
    age_in_years, parse_blood_pressure, parse_date, parse_labs, parse_sex, snapshot_from_records,
)


PERSON = {"gender": "female", "birth_date": "1990-04-12"}
CONSULTATION = {
    "weight_kg": "68.5",
    "height_cm": 162,
    "ta": " 130 / 85 ",
    "consultation_date": "2024-05-01T09:30:00Z",
    "lab_results": [
        {"hba1c": "6.1", "triglycerides_mg_dl": 180, "cholesterol_mg_dl": 42, "glucose_mg_dl": 104,
         "creatinine_mg_dl": 0.8},
        {"hba1c": 9.9},
    ],
}


def test_snapshot_from_records_maps_every_field():
    snap = snapshot_from_records(PERSON, CONSULTATION)
    assert snap.weight_kg == 68.5
    assert snap.height_cm == 162.0
    assert snap.sex is Sex.FEMALE
    assert snap.birth_date == date(1990, 4, 12)
    assert snap.age_years == 34
    assert snap.blood_pressure.systolic == 130.0
    assert snap.blood_pressure.diastolic == 85.0
    assert snap.labs == LabPanel(triglycerides=180.0, hdl=42.0, glucose=104.0, hba1c=6.1, creatinine=0.8)


def test_explicit_reference_date_wins():
    snap = snapshot_from_records(PERSON, CONSULTATION, today=date(2024, 4, 11))
    assert snap.age_years == 33


def test_missing_records_give_empty_snapshot():
    snap = snapshot_from_records()
    assert snap.weight_kg is None
    assert snap.sex is None
    assert snap.age_years is None
    assert snap.blood_pressure is None
    assert snap.labs == LabPanel()


def test_blank_values_are_absent_not_zero():
    snap = snapshot_from_records({"gender": ""}, {"weight_kg": "", "height_cm": "  ", "ta": ""})
    assert snap.weight_kg is None
    assert snap.height_cm is None
    assert snap.blood_pressure is None


def test_parse_blood_pressure():
    assert parse_blood_pressure("120/").systolic == 120.0
    assert parse_blood_pressure("120/").diastolic is None
    assert parse_blood_pressure("n/a") is None
    assert parse_blood_pressure(None) is None


def test_parse_labs_prefers_hdl_column():
    labs = parse_labs([{"hdl_mg_dl": 55, "cholesterol_mg_dl": 200}])
    assert labs.hdl == 55.0
    assert parse_labs([]) == LabPanel()


def test_parse_sex_aliases():
    assert parse_sex("Hombre") is Sex.MALE
    assert parse_sex("F") is Sex.FEMALE
    assert parse_sex(Sex.MALE) is Sex.MALE
    assert parse_sex("other") is None


def test_parse_date_variants():
    assert parse_date(datetime(2024, 1, 2, 10, 0)) == date(2024, 1, 2)
    assert parse_date("2024-01-02") == date(2024, 1, 2)
    assert parse_date("yesterday") is None
    assert parse_date("") is None


def test_age_in_years_birthday_boundary():
    assert age_in_years(date(2000, 6, 15), date(2024, 6, 14)) == 23
    assert age_in_years(date(2000, 6, 15), date(2024, 6, 15)) == 24
    assert age_in_years(date(2025, 1, 1), date(2024, 1, 1)) is None


def test_non_finite_values_are_absent():
    snap = snapshot_from_records(None, {"weight_kg": "NaN", "height_cm": "inf", "ta": "nan/80"})
    assert snap.weight_kg is None
    assert snap.height_cm is None
    assert snap.blood_pressure.systolic is None
    assert snap.blood_pressure.diastolic == 80.0
    assert to_float(float("-inf")) is None
    assert positive(float("nan")) is None
    assert positive(float("inf")) is None

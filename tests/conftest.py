from pathlib import Path
import sys

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

import asyncio
from datetime import date

import pytest

from nutricalc.core.orchestrator import Calculator
from nutricalc.core.types import BloodPressure, LabPanel, Sex, VitalsSnapshot


ADULT = dict(weight_kg=70.0, height_cm=170.0, age_years=30, sex=Sex.FEMALE)


@pytest.fixture
def adult_snapshot():
    """Female adult used for the worked energy example."""
    return VitalsSnapshot(
        **ADULT,
        birth_date=date(1994, 3, 1),
        waist_cm=90.0,
        hip_cm=100.0,
        blood_pressure=BloodPressure(systolic=120.0, diastolic=80.0),
        labs=LabPanel(triglycerides=160.0, hdl=45.0, glucose=90.0, hba1c=7.0, creatinine=0.9),
    )


@pytest.fixture
def empty_snapshot():
    return VitalsSnapshot()


@pytest.fixture
def make_calculator():
    def _make(module, snapshot=None):
        return Calculator(module, snapshot)

    return _make


@pytest.fixture
def run():
    """Drive a coroutine to completion from a sync test."""
    def _run(coro):
        return asyncio.run(coro)

    return _run

"""
Map person / consultation records into a VitalsSnapshot.

Records arrive as plain mappings from the persistence layer, e.g.::

    person = {"gender": "female", "birth_date": "1990-04-12"}
    consultation = {"weight_kg": 70, "height_cm": 170, "ta": "120/80",
                    "consultation_date": "2024-05-01",
                    "lab_results": [{"hba1c": 5.9, "triglycerides_mg_dl": 160}]}

Nothing is computed here beyond unit-free parsing: blanks and unparseable
strings become None so that a missing value is never mistaken for zero.
"""
import logging
from datetime import date, datetime
from typing import Any, Mapping, Optional

from nutricalc.core.types import BloodPressure, LabPanel, Sex, VitalsSnapshot
from nutricalc.core.utils import to_float

logger = logging.getLogger(__name__)


def parse_sex(v: Any) -> Optional[Sex]:
    if isinstance(v, Sex):
        return v
    s = str(v or "").strip().lower()
    if s in ("male", "m", "hombre", "masculino"):
        return Sex.MALE
    if s in ("female", "f", "mujer", "femenino"):
        return Sex.FEMALE
    return None


def parse_date(v: Any) -> Optional[date]:
    if v is None:
        return None
    if isinstance(v, datetime):
        return v.date()
    if isinstance(v, date):
        return v
    s = str(v).strip()
    if not s:
        return None
    try:
        # timestamps like "2024-05-01T10:00:00Z" keep only the date part
        return date.fromisoformat(s[:10])
    except ValueError:
        logger.debug("Unparseable date %r ignored", v)
        return None


def age_in_years(birth: Optional[date], on: date) -> Optional[int]:
    if birth is None or birth > on:
        return None
    return on.year - birth.year - ((on.month, on.day) < (birth.month, birth.day))


def parse_blood_pressure(ta: Any) -> Optional[BloodPressure]:
    """Parse a "SYS/DIA" string; either side may be blank."""
    if ta is None:
        return None
    parts = str(ta).split("/")
    systolic = to_float(parts[0]) if parts else None
    diastolic = to_float(parts[1]) if len(parts) > 1 else None
    if systolic is None and diastolic is None:
        if str(ta).strip():
            logger.debug("Unparseable blood pressure %r ignored", ta)
        return None
    return BloodPressure(systolic=systolic, diastolic=diastolic)


def parse_labs(lab_results: Any) -> LabPanel:
    # most recent panel first, as delivered by the consultation query
    if not lab_results:
        return LabPanel()
    lab = lab_results[0] or {}
    hdl = to_float(lab.get("hdl_mg_dl"))
    if hdl is None:
        # clinic records carry the HDL figure in the cholesterol column
        hdl = to_float(lab.get("cholesterol_mg_dl"))
    return LabPanel(
        triglycerides=to_float(lab.get("triglycerides_mg_dl")),
        hdl=hdl,
        glucose=to_float(lab.get("glucose_mg_dl")),
        hba1c=to_float(lab.get("hba1c")),
        creatinine=to_float(lab.get("creatinine_mg_dl")),
    )


def snapshot_from_records(
    person: Optional[Mapping[str, Any]] = None,
    consultation: Optional[Mapping[str, Any]] = None,
    today: Optional[date] = None,
) -> VitalsSnapshot:
    person = person or {}
    consultation = consultation or {}
    birth = parse_date(person.get("birth_date"))
    on = today or parse_date(consultation.get("consultation_date")) or date.today()
    return VitalsSnapshot(
        weight_kg=to_float(consultation.get("weight_kg")),
        height_cm=to_float(consultation.get("height_cm")),
        age_years=age_in_years(birth, on),
        sex=parse_sex(person.get("gender")),
        birth_date=birth,
        waist_cm=to_float(consultation.get("waist_cm")),
        hip_cm=to_float(consultation.get("hip_cm")),
        calf_cm=to_float(consultation.get("calf_cm")),
        blood_pressure=parse_blood_pressure(consultation.get("ta")),
        labs=parse_labs(consultation.get("lab_results")),
    )

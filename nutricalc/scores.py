import math
from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Dict, Optional, Tuple

from nutricalc.core.types import Sex
from nutricalc.core.utils import positive

# --- helpers ---

def _all_positive(*xs: Optional[float]) -> bool:
    return all(positive(x) is not None for x in xs)


def _height_m2(height_cm: float) -> float:
    return (height_cm / 100.0) ** 2

# --- Energy (BMR / TMB) ---

class EnergyFormula(str, Enum):
    MIFFLIN = "mifflin"
    HARRIS = "harris"
    OMS = "oms"

    @property
    def display_name(self) -> str:
        match self:
            case EnergyFormula.MIFFLIN:
                return "Mifflin-St Jeor"
            case EnergyFormula.HARRIS:
                return "Harris-Benedict"
            case EnergyFormula.OMS:
                return "OMS"


def bmr_mifflin(sex: Sex, weight: float, height: float, age: float) -> float:
    base = 10 * weight + 6.25 * height - 5 * age
    return base + 5 if sex == Sex.MALE else base - 161


def bmr_harris_benedict(sex: Sex, weight: float, height: float, age: float) -> float:
    if sex == Sex.MALE:
        return 66.473 + 13.7516 * weight + 5.0033 * height - 6.755 * age
    return 655.0955 + 9.5634 * weight + 1.8496 * height - 4.6756 * age


def bmr_who(sex: Sex, weight: float, age: float) -> float:
    # bands are in completed years: 18-29, 30-60, everything else (>60 and <18)
    years = int(age)
    if sex == Sex.MALE:
        if 18 <= years <= 29:
            return 15.3 * weight + 679
        if 30 <= years <= 60:
            return 11.6 * weight + 879
        return 13.5 * weight + 487
    if 18 <= years <= 29:
        return 14.7 * weight + 496
    if 30 <= years <= 60:
        return 8.7 * weight + 829
    return 10.5 * weight + 596


def bmr(formula: EnergyFormula, sex: Sex, weight, height, age) -> Optional[float]:
    if not _all_positive(weight, height, age):
        return None
    match formula:
        case EnergyFormula.MIFFLIN:
            return bmr_mifflin(sex, weight, height, age)
        case EnergyFormula.HARRIS:
            return bmr_harris_benedict(sex, weight, height, age)
        case EnergyFormula.OMS:
            return bmr_who(sex, weight, age)


def total_energy_expenditure(basal: Optional[float], activity: float, stress: float = 1.0) -> Optional[float]:
    if basal is None:
        return None
    return basal * activity * stress

# --- Anthropometry ---

def bmi(weight, height) -> Optional[float]:
    if not _all_positive(weight, height):
        return None
    return weight / _height_m2(height)


def healthy_weight_range(height) -> Optional[Tuple[float, float]]:
    if positive(height) is None:
        return None
    h2 = _height_m2(height)
    return 18.5 * h2, 24.9 * h2


def waist_hip_ratio(waist, hip) -> Optional[float]:
    if not _all_positive(waist, hip):
        return None
    return waist / hip


def waist_height_ratio(waist, height) -> Optional[float]:
    if not _all_positive(waist, height):
        return None
    return waist / height


def weight_change_percent(current, previous) -> Optional[float]:
    """Signed change relative to the previous weight; negative means loss."""
    if not _all_positive(current, previous):
        return None
    return (current - previous) / previous * 100.0


def metabolic_syndrome_criteria(
    sex: Sex,
    waist=None,
    systolic=None,
    diastolic=None,
    triglycerides=None,
    hdl=None,
    glucose=None,
    on_bp_meds: bool = False,
    on_tg_meds: bool = False,
    on_hdl_meds: bool = False,
    on_glucose_meds: bool = False,
) -> Dict[str, bool]:
    """ATP III criteria. A medication flag forces its criterion true whatever the measured value."""
    def ge(x, limit):
        return x is not None and x >= limit

    def lt(x, limit):
        return positive(x) is not None and x < limit

    waist_limit = 102 if sex == Sex.MALE else 88
    hdl_limit = 40 if sex == Sex.MALE else 50
    return {
        "waist": waist is not None and waist > waist_limit,
        "bp": on_bp_meds or ge(systolic, 130) or ge(diastolic, 85),
        "tg": on_tg_meds or ge(triglycerides, 150),
        "hdl": on_hdl_meds or lt(hdl, hdl_limit),
        "glucose": on_glucose_meds or ge(glucose, 100),
    }

# --- Renal ---

def ckd_epi_2021(creatinine, age, sex: Sex) -> Optional[float]:
    """Race-free CKD-EPI 2021 eGFR in ml/min/1.73m²."""
    if not _all_positive(creatinine, age):
        return None
    female = sex == Sex.FEMALE
    kappa = 0.7 if female else 0.9
    alpha = -0.241 if female else -0.302
    scr_over_kappa = creatinine / kappa
    return (142
            * min(scr_over_kappa, 1.0) ** alpha
            * max(scr_over_kappa, 1.0) ** -1.200
            * 0.9938 ** age
            * (1.012 if female else 1.0))

# --- Diabetes ---

def estimated_average_glucose(hba1c) -> Optional[float]:
    if positive(hba1c) is None:
        return None
    return 28.7 * hba1c - 46.7

# --- MUST ---

def must_bmi_score(bmi_value: Optional[float]) -> int:
    if bmi_value is None:
        return 0
    if bmi_value < 18.5:
        return 2
    if bmi_value < 20:
        return 1
    return 0


def must_weight_loss_score(change_pct: Optional[float]) -> int:
    # only loss scores; gain and missing data score 0
    if change_pct is None or change_pct >= 0:
        return 0
    loss = -change_pct
    if loss > 10:
        return 2
    if loss >= 5:
        return 1
    return 0


def must_acute_disease_score(acutely_ill: bool) -> int:
    return 2 if acutely_ill else 0

# --- Pregnancy / lactation (IOM) ---

@dataclass(frozen=True)
class IomCategory:
    label: str
    total_gain: Tuple[float, float]
    weekly_rate: float


IOM_CATEGORIES: Tuple[Tuple[float, IomCategory], ...] = (
    (18.5, IomCategory("Bajo Peso", (12.5, 18.0), 0.51)),
    (25.0, IomCategory("Peso Normal", (11.5, 16.0), 0.42)),
    (30.0, IomCategory("Sobrepeso", (7.0, 11.5), 0.28)),
    (math.inf, IomCategory("Obesidad", (5.0, 9.0), 0.22)),
)

FIRST_TRIMESTER_GAIN = 1.5


def iom_category(pregestational_bmi: Optional[float]) -> Optional[IomCategory]:
    if pregestational_bmi is None:
        return None
    for upper, cat in IOM_CATEGORIES:
        if pregestational_bmi < upper:
            return cat
    return IOM_CATEGORIES[-1][1]


def expected_gestational_gain(week, weekly_rate: float) -> Optional[float]:
    if positive(week) is None:
        return None
    if week <= 13:
        return FIRST_TRIMESTER_GAIN
    return FIRST_TRIMESTER_GAIN + (week - 13) * weekly_rate


def trimester(week: int) -> int:
    if week <= 13:
        return 1
    if week <= 27:
        return 2
    return 3


def gestational_energy_addon(week) -> Optional[int]:
    if positive(week) is None:
        return None
    return {1: 0, 2: 340, 3: 452}[trimester(week)]


def lactation_energy_addon(months_postpartum) -> int:
    return 500 if months_postpartum is None or months_postpartum <= 6 else 400

# --- Dates ---

def age_in_months(birth: date, measured: date) -> Optional[int]:
    """Completed months between two dates, None when birth is after measurement."""
    if birth > measured:
        return None
    months = (measured.year - birth.year) * 12 + (measured.month - birth.month)
    if measured.day < birth.day:
        months -= 1
    return months

# --- Enteral infusion ---

class InfusionField(str, Enum):
    VOLUME = "volume"
    TIME = "infusion_time"
    RATE = "infusion_rate"


def _ratio(num, den) -> Optional[float]:
    if not _all_positive(num, den):
        return None
    return round(num / den, 1)


def derive_infusion(volume, time, rate, last_edited: InfusionField) -> Tuple[Optional[float], Optional[float]]:
    """
    Resolve infusion (time h, rate ml/h) from daily volume and whichever field was
    edited last. The edited field is kept as entered and only its counterpart is
    recomputed, so a derived value never feeds back into its source.
    """
    has_volume = positive(volume) is not None
    match last_edited:
        case InfusionField.TIME:
            return time, (_ratio(volume, time) if has_volume else rate)
        case InfusionField.RATE:
            return (_ratio(volume, rate) if has_volume else time), rate
        case InfusionField.VOLUME:
            if positive(time) is not None:
                return time, _ratio(volume, time)
            return time, rate

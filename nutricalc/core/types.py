from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Protocol, Dict, Any, Optional, Tuple, Union, Mapping


class Sex(str, Enum):
    MALE = "male"
    FEMALE = "female"


class Severity(str, Enum):
    NORMAL = "normal"
    CAUTION = "caution"
    RISK = "risk"
    SEVERE = "severe"


@dataclass(frozen=True)
class BloodPressure:
    systolic: Optional[float]
    diastolic: Optional[float]


@dataclass(frozen=True)
class LabPanel:
    triglycerides: Optional[float] = None  # mg/dL
    hdl: Optional[float] = None  # mg/dL
    glucose: Optional[float] = None  # mg/dL
    hba1c: Optional[float] = None  # %
    creatinine: Optional[float] = None  # mg/dL


@dataclass(frozen=True)
class VitalsSnapshot:
    weight_kg: Optional[float] = None
    height_cm: Optional[float] = None
    age_years: Optional[int] = None
    sex: Optional[Sex] = None
    birth_date: Optional[date] = None
    waist_cm: Optional[float] = None
    hip_cm: Optional[float] = None
    calf_cm: Optional[float] = None
    blood_pressure: Optional[BloodPressure] = None
    labs: LabPanel = field(default_factory=LabPanel)


@dataclass(frozen=True)
class ClassificationBand:
    label: str
    severity: Severity


Value = Union[float, int, str]


@dataclass(frozen=True)
class ResultItem:
    metric: str
    value: Optional[Value]
    band: Optional[ClassificationBand] = None
    unit: str = ""


@dataclass(frozen=True)
class CalculatorResult:
    values: Dict[str, Value]
    interpretation: Optional[ClassificationBand] = None
    derived_text: Optional[str] = None
    items: Tuple[ResultItem, ...] = ()


@dataclass(frozen=True)
class SavedCalculationRecord:
    calculator_key: str
    log_type: str
    description: str
    inputs: Dict[str, Any]
    result: Dict[str, Any]
    person_id: Optional[str]
    timestamp: datetime


class CalculatorModule(Protocol):
    id: str
    title: str
    def inputs(self, snapshot: VitalsSnapshot) -> Any: ...
    def compute(self, inputs: Any) -> Optional[CalculatorResult]: ...
    def describe(self, inputs: Any, result: CalculatorResult) -> Optional[Tuple[str, str]]: ...


class LogSink(Protocol):
    async def __call__(self, calculator_key: str, log_type: str, description: str,
                       payload: Mapping[str, Any]) -> None: ...

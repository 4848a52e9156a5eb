"""
Ordered threshold tables mapping a numeric result to a named band.

Each table is a tuple of ``(upper, band)`` rows sorted by ``upper``. The first
row whose bound admits the value wins; the last row is always open-ended
(``math.inf``) so every table is exhaustive. Rows compare with ``<``; a row built
with ``through(x)`` admits ``x`` itself.
"""
import math
from typing import Optional, Tuple

from nutricalc.core.types import ClassificationBand, Severity

Table = Tuple[Tuple[float, ClassificationBand], ...]

NORMAL, CAUTION, RISK, SEVERE = Severity.NORMAL, Severity.CAUTION, Severity.RISK, Severity.SEVERE


def band(label: str, severity: Severity) -> ClassificationBand:
    return ClassificationBand(label=label, severity=severity)


def through(x: float) -> float:
    return math.nextafter(x, math.inf)


def classify(value: Optional[float], table: Table) -> Optional[ClassificationBand]:
    if value is None:
        return None
    for upper, b in table:
        if value < upper:
            return b
    return table[-1][1]


# ---------- anthropometry ----------
BMI_BANDS: Table = (
    (18.5, band("Bajo Peso", CAUTION)),
    (25.0, band("Peso Normal", NORMAL)),
    (30.0, band("Sobrepeso", CAUTION)),
    (math.inf, band("Obesidad", RISK)),
)

# Lipschitz cut-offs for older adults
GERIATRIC_BMI_BANDS: Table = (
    (22.0, band("Bajo Peso (Riesgo)", RISK)),
    (through(27.0), band("Peso Normal", NORMAL)),
    (math.inf, band("Sobrepeso", CAUTION)),
)

WHR_HIGH_RISK = {"male": 0.90, "female": 0.85}


def whr_bands(threshold: float) -> Table:
    return (
        (through(threshold), band("Riesgo Bajo", NORMAL)),
        (math.inf, band("Riesgo Cardiovascular Elevado", RISK)),
    )


WHTR_BANDS: Table = (
    (0.5, band("Riesgo Bajo", NORMAL)),
    (math.inf, band("Riesgo Metabólico Elevado", RISK)),
)

WEIGHT_LOSS_SEVERE = band("Pérdida Severa", SEVERE)
WEIGHT_LOSS_SIGNIFICANT = band("Pérdida Significativa", CAUTION)
WEIGHT_LOSS_NOT_SIGNIFICANT = band("No Significativa", NORMAL)

METABOLIC_SYNDROME_BANDS: Table = (
    (3, band("Síndrome Metabólico Ausente", NORMAL)),
    (math.inf, band("Síndrome Metabólico Presente", RISK)),
)

# ---------- renal ----------
EGFR_BANDS: Table = (
    (15.0, band("Estadio G5: Falla renal", SEVERE)),
    (30.0, band("Estadio G4: Severamente disminuido", SEVERE)),
    (45.0, band("Estadio G3b: Mod. a sev. disminuido", RISK)),
    (60.0, band("Estadio G3a: Lig. a mod. disminuido", RISK)),
    (90.0, band("Estadio G2: Lig. disminuido", CAUTION)),
    (math.inf, band("Estadio G1: Normal o elevado", NORMAL)),
)

# ---------- diabetes ----------
EAG_BANDS: Table = (
    (70.0, band("Riesgo Hipoglucemia", RISK)),
    (154.0, band("Buen Control (<7%)", NORMAL)),
    (183.0, band("Control Regular (<8%)", CAUTION)),
    (math.inf, band("Control Deficiente", SEVERE)),
)

# ---------- screening ----------
MUST_BANDS: Table = (
    (1, band("Bajo Riesgo", NORMAL)),
    (2, band("Riesgo Medio", CAUTION)),
    (math.inf, band("Alto Riesgo", SEVERE)),
)

MUST_ACTIONS = {
    "Bajo Riesgo": "Cuidado clínico rutinario: repetir tamizaje (hospital semanal, "
                   "residencias mensual, comunidad anual).",
    "Riesgo Medio": "Observar: documentar ingesta dietética por 3 días y repetir tamizaje.",
    "Alto Riesgo": "Tratar: referir a nutriólogo o equipo de soporte nutricional, "
                   "mejorar la ingesta y monitorear el plan de cuidado.",
}

# ---------- pediatrics (percentiles) ----------
PERCENTILE_BANDS: Table = (
    (3.0, band("Desnutrición severa (<P3)", SEVERE)),
    (5.0, band("Bajo peso (<P5)", RISK)),
    (85.0, band("Normal", NORMAL)),
    (95.0, band("Riesgo de sobrepeso", CAUTION)),
    (math.inf, band("Sobrepeso / Obesidad", RISK)),
)

STATURE_PERCENTILE_BANDS: Table = (
    (3.0, band("Talla baja severa (<P3)", SEVERE)),
    (5.0, band("Talla baja (<P5)", RISK)),
    (95.0, band("Normal", NORMAL)),
    (math.inf, band("Talla alta", CAUTION)),
)

# ---------- special populations ----------
GESTATIONAL_GAIN_EXCESSIVE = band("Ganancia Excesiva", RISK)
GESTATIONAL_GAIN_INSUFFICIENT = band("Ganancia Insuficiente", CAUTION)
GESTATIONAL_GAIN_ADEQUATE = band("Adecuada", NORMAL)

CALF_BANDS: Table = (
    (31.0, band("Posible Sarcopenia", RISK)),
    (math.inf, band("Normal", NORMAL)),
)

# ---------- nutritional support ----------
GOAL_COVERAGE_BANDS: Table = (
    (90.0, band("Por debajo de la meta", CAUTION)),
    (through(110.0), band("Meta cubierta", NORMAL)),
    (math.inf, band("Por encima de la meta", RISK)),
)


def weight_loss_band(loss_pct: Optional[float], months: Optional[float]) -> Optional[ClassificationBand]:
    """Severity of an involuntary loss; ``loss_pct`` is the positive magnitude."""
    if loss_pct is None or months is None or months <= 0:
        return None
    if (months <= 1 and loss_pct > 5) or (months <= 3 and loss_pct > 7.5) or (months <= 6 and loss_pct > 10):
        return WEIGHT_LOSS_SEVERE
    if loss_pct > 2:
        return WEIGHT_LOSS_SIGNIFICANT
    return WEIGHT_LOSS_NOT_SIGNIFICANT


def gestational_gain_band(actual: Optional[float], expected: Optional[float]) -> Optional[ClassificationBand]:
    if actual is None or expected is None:
        return None
    if actual > expected * 1.15:
        return GESTATIONAL_GAIN_EXCESSIVE
    if actual < expected * 0.85:
        return GESTATIONAL_GAIN_INSUFFICIENT
    return GESTATIONAL_GAIN_ADEQUATE


def weight_gain_trend(gain_pct: Optional[float], months: Optional[float]) -> Optional[str]:
    # gain is reported as a plain trend label, never as a severity band
    if gain_pct is None or months is None or months <= 0:
        return None
    if (months <= 1 and gain_pct > 5) or (months <= 3 and gain_pct > 7.5) or (months <= 6 and gain_pct > 10):
        return "Aumento Severo"
    if gain_pct > 2:
        return "Aumento Significativo"
    return "No Significativo"

import logging
import tomllib
from importlib import import_module
from pathlib import Path
from typing import Dict, List, Optional

from nutricalc.core.orchestrator import Calculator
from nutricalc.core.types import CalculatorModule, VitalsSnapshot

logger = logging.getLogger(__name__)

DEFAULT_CONFIG = Path(__file__).resolve().parent.parent / "config.toml"


def load_enabled_modules(config_path: Path = DEFAULT_CONFIG) -> List[CalculatorModule]:
    with open(config_path, "rb") as f:
        cfg = tomllib.load(f)
    mods = []
    mod_cfg = cfg.get("modules", {})
    ordered = sorted(((m, v.get("order", 999)) for m, v in mod_cfg.items() if v.get("enabled", True)), key=lambda x: x[1])
    for name, _ in ordered:
        mod = import_module(f"nutricalc.modules.{name}.{name}")
        mods.append(mod)
    logger.info("Loaded %d calculator modules from %s", len(mods), config_path)
    return mods


def build_calculators(snapshot: Optional[VitalsSnapshot] = None,
                      config_path: Path = DEFAULT_CONFIG) -> Dict[str, Calculator]:
    """One Calculator per enabled module, keyed by its commit key, in configured order."""
    return {mod.id: Calculator(mod, snapshot) for mod in load_enabled_modules(config_path)}

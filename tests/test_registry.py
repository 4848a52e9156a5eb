import pytest

from nutricalc.core.registry import DEFAULT_CONFIG, build_calculators, load_enabled_modules

ALL_KEYS = [
    "energyCalculator", "anthropometryPanel", "renalEvaluation", "eag", "mustScreening",
    "pediatrics", "maternal", "lactation", "geriatric", "nutritionalSupport",
]


def test_default_config_loads_every_calculator_in_order():
    mods = load_enabled_modules()
    assert [m.id for m in mods] == ALL_KEYS
    for m in mods:
        assert callable(m.inputs) and callable(m.compute) and callable(m.describe)
        assert m.title


def test_disabled_modules_are_skipped_and_order_respected(tmp_path):
    cfg = tmp_path / "config.toml"
    cfg.write_text(
        "[modules.renal]\norder = 2\n"
        "[modules.energy]\norder = 1\n"
        "[modules.screening]\nenabled = false\norder = 3\n"
    )
    assert [m.id for m in load_enabled_modules(cfg)] == ["energyCalculator", "renalEvaluation"]


def test_unknown_module_raises(tmp_path):
    cfg = tmp_path / "config.toml"
    cfg.write_text("[modules.nope]\nenabled = true\n")
    with pytest.raises(ImportError):
        load_enabled_modules(cfg)


def test_build_calculators_seeds_from_snapshot(adult_snapshot):
    calcs = build_calculators(adult_snapshot)
    assert list(calcs) == ALL_KEYS
    assert calcs["energyCalculator"].result.values["get"] == 1742
    assert calcs["eag"].result.values["eag"] == 154
    assert calcs["nutritionalSupport"].result is None


def test_calculators_do_not_share_inputs(adult_snapshot):
    calcs = build_calculators(adult_snapshot)
    calcs["energyCalculator"].update(weight_kg=90)
    assert calcs["anthropometryPanel"].inputs.weight_kg == 70.0
    assert calcs["mustScreening"].inputs.weight_kg == 70.0


def test_default_config_ships_with_package():
    assert DEFAULT_CONFIG.name == "config.toml"
    assert DEFAULT_CONFIG.exists()

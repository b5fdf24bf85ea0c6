from __future__ import annotations

from pathlib import Path

import pytest

from basisvault.config import PROTOCOL_PERFORMANCE_FEE_INDEX, ModuleConfig, config_from_dict, load_config

ROOT = Path(__file__).resolve().parents[1]


def test_example_config_loads() -> None:
    cfg = load_config(ROOT / "config" / "example_module.yaml")
    assert cfg.collateral_decimals == 6
    assert cfg.protocol_performance_fee_index == PROTOCOL_PERFORMANCE_FEE_INDEX


def test_fee_index_defaults(tmp_path: Path) -> None:
    path = tmp_path / "module.yaml"
    path.write_text("module_id: m\ncollateral_token: usdc\ncollateral_decimals: 18\n", encoding="utf-8")
    assert load_config(path) == ModuleConfig(module_id="m", collateral_token="usdc", collateral_decimals=18)


def test_unknown_key_rejected() -> None:
    with pytest.raises(ValueError, match="unknown config keys: colateral"):
        config_from_dict({"module_id": "m", "collateral_token": "usdc", "collateral_decimals": 6, "colateral": 1})


def test_non_mapping_rejected(tmp_path: Path) -> None:
    path = tmp_path / "module.yaml"
    path.write_text("- 1\n- 2\n", encoding="utf-8")
    with pytest.raises(TypeError):
        load_config(path)


@pytest.mark.parametrize("decimals", [-1, 19])
def test_decimals_out_of_range_rejected(decimals: int) -> None:
    with pytest.raises(ValueError):
        ModuleConfig(module_id="m", collateral_token="usdc", collateral_decimals=decimals)

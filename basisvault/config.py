"""
Module configuration loaded from YAML.

Example::

    module_id: "0xba515..."
    collateral_token: "0xaf88..."
    collateral_decimals: 6
    protocol_performance_fee_index: 1
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Mapping

import yaml

from .core.precise_math import PRECISE_DECIMALS

PROTOCOL_PERFORMANCE_FEE_INDEX = 1


@dataclass(frozen=True)
class ModuleConfig:
    module_id: str
    collateral_token: str
    collateral_decimals: int
    protocol_performance_fee_index: int = PROTOCOL_PERFORMANCE_FEE_INDEX

    def __post_init__(self) -> None:
        for name in ("module_id", "collateral_token"):
            v = getattr(self, name)
            if not isinstance(v, str) or not v:
                raise ValueError(f"{name} must be a non-empty string")
        for name in ("collateral_decimals", "protocol_performance_fee_index"):
            v = getattr(self, name)
            if not isinstance(v, int) or isinstance(v, bool):
                raise TypeError(f"{name} must be an int")
        if not (0 <= self.collateral_decimals <= PRECISE_DECIMALS):
            raise ValueError(f"collateral_decimals must be in [0, {PRECISE_DECIMALS}]: {self.collateral_decimals}")
        if self.protocol_performance_fee_index < 0:
            raise ValueError("protocol_performance_fee_index must be non-negative")


_CONFIG_KEYS = frozenset(f.name for f in fields(ModuleConfig))


def config_from_dict(d: Mapping[str, Any]) -> ModuleConfig:
    unknown = sorted(set(d) - _CONFIG_KEYS)
    if unknown:
        raise ValueError(f"unknown config keys: {', '.join(unknown)}")
    return ModuleConfig(**dict(d))


def load_config(path: str | Path) -> ModuleConfig:
    obj = yaml.safe_load(Path(path).read_text(encoding="utf-8"))
    if not isinstance(obj, Mapping):
        raise TypeError("config YAML must be a mapping")
    return config_from_dict(obj)

"""Engine-wide configuration helpers."""

from __future__ import annotations

import copy
from dataclasses import dataclass


@dataclass
class EngineConfig:
    """Tunables shared by the builder, the solver and the layout producers."""

    max_depth: int = 64
    solver_max_iterations: int = 100
    solver_epsilon: float = 1e-6
    default_container_width: float = 800.0
    default_container_height: float = 400.0
    refine_on_failure: bool = False


_ENGINE_CONFIG = EngineConfig()


def get_engine_config() -> EngineConfig:
    return copy.deepcopy(_ENGINE_CONFIG)


def set_engine_config(config: EngineConfig) -> None:
    global _ENGINE_CONFIG
    _ENGINE_CONFIG = copy.deepcopy(config)

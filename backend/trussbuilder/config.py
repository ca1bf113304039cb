"""Analysis configuration and defaults.

The empirical deflection constants (continuity factor, slenderness reference and
exponent) and the top-chord detection window are kept here as plain settings;
they are approximations carried over from the truss builder and are not derived
from a structural code.
"""
from __future__ import annotations
import os
from dataclasses import dataclass, field
from pathlib import Path


def _default_designs_dir() -> Path:
    env = os.environ.get("TRUSSBUILDER_DESIGNS_DIR")
    if env:
        return Path(env)
    return Path(__file__).resolve().parent.parent / "designs"


@dataclass(frozen=True)
class AnalysisConfig:
    """Settings shared by the load distributor, solver and checks."""

    # Drawing scale (editor units are pixels; y grows downward on screen)
    pixels_per_foot: float = 50.0
    grid_size: float = 50.0          # top-chord detection window, drawing units
    y_axis_down: bool = True

    # Loading
    tributary_width_ft: float = 2.0  # truss spacing

    # Method of joints
    collinear_tolerance: float = 1e-10
    singular_tolerance: float = 1e-10
    load_tolerance: float = 1e-10
    equilibrium_tolerance: float = 1e-6  # lb, closing check for fully known joints
    max_pass_factor: int = 2

    # Deflection estimate
    slenderness_reference: float = 200.0
    slenderness_exponent: float = 2.0
    continuity_factor: float = 0.5
    point_load_coefficient: float = 48.0  # P L^3 / (48 E I)

    # Code deflection limits (span / divisor)
    is_roof: bool = True
    roof_live_divisor: float = 240.0
    roof_total_divisor: float = 180.0
    floor_live_divisor: float = 360.0
    floor_total_divisor: float = 240.0
    no_deflection_ratio: int = 999999

    # Design files
    design_file_version: str = "1.0.0"
    designs_dir: Path = field(default_factory=_default_designs_dir)

    @property
    def inches_per_unit(self) -> float:
        return 12.0 / self.pixels_per_foot

    @property
    def live_divisor(self) -> float:
        return self.roof_live_divisor if self.is_roof else self.floor_live_divisor

    @property
    def total_divisor(self) -> float:
        return self.roof_total_divisor if self.is_roof else self.floor_total_divisor


# Global config instance
CONFIG = AnalysisConfig()

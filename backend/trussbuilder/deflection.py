"""Approximate joint deflections and the span-based code check.

This is not a stiffness solution. Each free joint collects the axial
elongation F L / (E A) of its members projected toward their far ends, with
compression members amplified by a slenderness correction, plus a local
point-load bending term when the joint carries a downward load:

    delta_bend = continuity * P * L_avg^3 / (48 * E * I_avg)

Displacements are in inches, y-up.
"""
from __future__ import annotations
from dataclasses import dataclass, field
from typing import Dict, Optional, Sequence, Tuple
import math
import numpy as np
from . import schemas
from .config import AnalysisConfig, CONFIG
from .geometry import build_node_map, connectivity, far_node_id, length_in, unit_vector


@dataclass
class DeflectionSummary:
    displacements: Dict[str, Tuple[float, float]] = field(default_factory=dict)
    max_deflection: float = 0.0
    max_deflection_node: Optional[str] = None


def amplification(force: float, length: float, area: float, inertia: float,
                  config: AnalysisConfig = CONFIG) -> float:
    """Slenderness amplification for compression members; 1 in tension."""
    if force >= 0:
        return 1.0
    r = math.sqrt(inertia / area)
    slenderness = length / r
    return 1.0 + (slenderness / config.slenderness_reference) ** config.slenderness_exponent


def bending_deflection(load: float, avg_length: float, avg_inertia: float, E: float,
                       config: AnalysisConfig = CONFIG) -> float:
    return config.continuity_factor * load * avg_length ** 3 / (config.point_load_coefficient * E * avg_inertia)


def estimate(nodes: Sequence[schemas.NodeInput], members: Sequence[schemas.MemberInput],
             forces: Dict[str, float], material: schemas.Material,
             node_forces: Dict[str, schemas.NodeForce],
             config: AnalysisConfig = CONFIG) -> DeflectionSummary:
    node_map = build_node_map(nodes)
    conn = connectivity(nodes, members)
    summary = DeflectionSummary()

    for node in nodes:
        if node.support:
            summary.displacements[node.id] = (0.0, 0.0)
            continue

        d = np.zeros(2, dtype=float)
        lengths = []
        inertias = []
        for m in conn[node.id]:
            other = node_map[far_node_id(m, node.id)]
            L = length_in(node, other, config)
            force = forces.get(m.id, 0.0)
            delta = force * L / (material.E * m.area)
            delta *= amplification(force, L, m.area, m.moment_of_inertia, config)
            d += delta * unit_vector(node, other, config)
            lengths.append(L)
            inertias.append(m.moment_of_inertia)

        ext = node_forces.get(node.id)
        if ext is not None and ext.fy < 0 and lengths:
            d[1] -= bending_deflection(-ext.fy, float(np.mean(lengths)), float(np.mean(inertias)), material.E, config)

        summary.displacements[node.id] = (float(d[0]), float(d[1]))

    for node in nodes:
        dx, dy = summary.displacements[node.id]
        total = math.hypot(dx, dy)
        if total > summary.max_deflection:
            summary.max_deflection = total
            summary.max_deflection_node = node.id
    return summary


def check_limits(max_deflection: float, span_ft: float, config: AnalysisConfig = CONFIG) -> schemas.DeflectionCheck:
    """Compare the worst deflection against span/240 (roof live load)."""
    span_in = span_ft * 12.0
    live_allowable = span_in / config.live_divisor
    total_allowable = span_in / config.total_divisor
    if max_deflection > 0:
        actual = math.floor(span_in / max_deflection)
    else:
        actual = config.no_deflection_ratio
    return schemas.DeflectionCheck(
        passes=max_deflection <= live_allowable,
        max_allowable=live_allowable,
        total_load_allowable=total_allowable,
        ratio=f"L/{actual}",
        limit_ratio=f"L/{config.live_divisor:g}",
    )

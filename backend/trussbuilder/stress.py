"""Axial stress check against the material allowables.

Tension is checked against Fb (bending-grade allowable) and compression
against Fc; a member fails when stress / allowable exceeds 1.
"""
from __future__ import annotations
from dataclasses import dataclass, field
from typing import Dict, List, Sequence
from . import schemas


@dataclass
class MemberStress:
    member_id: str
    force: float
    stress: float
    allowable: float
    ratio: float

    @property
    def failed(self) -> bool:
        return self.ratio > 1.0


@dataclass
class StressSummary:
    members: List[MemberStress] = field(default_factory=list)
    max_stress: float = 0.0
    max_ratio: float = 0.0
    failed_member_ids: List[str] = field(default_factory=list)

    @property
    def ratios(self) -> Dict[str, float]:
        return {ms.member_id: ms.ratio for ms in self.members}


def member_stress(force: float, area: float) -> float:
    """Axial stress magnitude (psi)."""
    return abs(force) / area


def allowable_stress(force: float, material: schemas.Material) -> float:
    return material.Fb if force > 0 else material.Fc


def evaluate(members: Sequence[schemas.MemberInput], forces: Dict[str, float],
             material: schemas.Material) -> StressSummary:
    summary = StressSummary()
    for m in members:
        force = forces.get(m.id, 0.0)
        stress = member_stress(force, m.area)
        allowable = allowable_stress(force, material)
        ms = MemberStress(m.id, force, stress, allowable, stress / allowable)
        summary.members.append(ms)
        summary.max_stress = max(summary.max_stress, stress)
        summary.max_ratio = max(summary.max_ratio, ms.ratio)
        if ms.failed:
            summary.failed_member_ids.append(m.id)
    return summary

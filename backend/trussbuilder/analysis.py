"""Full truss analysis pipeline: distribute -> solve -> stress -> deflection.

`run_analysis` never raises. Missing supports, bad geometry and unexpected
failures come back as an ERROR result; overstress or excessive deflection is a
normal FAILED result.
"""
from __future__ import annotations
from typing import List, Sequence
import logging
from . import schemas
from .config import AnalysisConfig, CONFIG
from .deflection import check_limits, estimate
from .geometry import TrussError, build_node_map, length_ft, span_ft, validate_members
from .loads import distribute, reactions, total_load
from .stress import evaluate
from .truss_solver import solve_member_forces

logger = logging.getLogger(__name__)


def _analyze(inp: schemas.AnalysisInput, config: AnalysisConfig) -> schemas.AnalysisResult:
    nodes = inp.nodes
    members = inp.members
    node_map = build_node_map(nodes)
    validate_members(node_map, members)

    span = inp.span if inp.span is not None else span_ft(nodes, config)
    logger.info("Truss analysis starting: %d nodes, %d members, span %.2f ft", len(nodes), len(members), span)

    node_forces = distribute(nodes, inp.loads, span, config)
    solution = solve_member_forces(nodes, members, node_forces, config)
    stresses = evaluate(members, solution.forces, inp.material)
    deflections = estimate(nodes, members, solution.forces, inp.material, node_forces, config)
    check = check_limits(deflections.max_deflection, span, config)

    failures: List[str] = []
    if stresses.max_ratio > 1:
        failures.append("Member overstressed")
    if not check.passes:
        failures.append(f"Deflection exceeds limit ({check.ratio} > {check.limit_ratio})")

    unsolved = set(solution.unsolved_members)
    member_results = [
        schemas.MemberResult(
            id=ms.member_id,
            force=ms.force,
            stress=ms.stress,
            allowable=ms.allowable,
            ratio=ms.ratio,
            length_ft=length_ft(node_map[m.start], node_map[m.end], config),
            solved=m.id not in unsolved,
        )
        for m, ms in zip(members, stresses.members)
    ]
    displacements = [
        schemas.NodeDisplacement(node_id=node_id, dx=dx, dy=dy)
        for node_id, (dx, dy) in deflections.displacements.items()
    ]

    status = "FAILED" if failures else "PASSED"
    logger.info("Truss analysis %s: max stress %.1f psi, max deflection %.4f in (%s)",
                status, stresses.max_stress, deflections.max_deflection, check.ratio)
    return schemas.AnalysisResult(
        status=status,
        member_forces=member_results,
        node_forces=list(node_forces.values()),
        node_displacements=displacements,
        reactions=reactions(nodes, inp.loads, span, config),
        max_stress=stresses.max_stress,
        stress_ratio=stresses.max_ratio,
        max_deflection=deflections.max_deflection,
        max_deflection_node=deflections.max_deflection_node,
        deflection_ratio=check.ratio,
        deflection_check=check,
        failures=failures,
        failed_members=stresses.failed_member_ids,
        unsolved_members=solution.unsolved_members,
        unbalanced_joints=solution.unbalanced_joints,
        span_ft=span,
        total_load=total_load(inp.loads, span, config),
    )


def run_analysis(inp: schemas.AnalysisInput, config: AnalysisConfig = CONFIG) -> schemas.AnalysisResult:
    try:
        return _analyze(inp, config)
    except TrussError as e:
        logger.error("Analysis failed: %s", e)
        return schemas.AnalysisResult(status="ERROR", failures=[str(e)])
    except Exception as e:
        logger.exception("Analysis failed unexpectedly")
        return schemas.AnalysisResult(status="ERROR", failures=[str(e) or type(e).__name__])


def apply_member_forces(members: Sequence[schemas.MemberInput],
                        result: schemas.AnalysisResult) -> List[schemas.MemberInput]:
    """Copies of `members` with the solved axial force filled in."""
    forces = {mr.id: mr.force for mr in result.member_forces}
    return [m.model_copy(update={"force": forces.get(m.id, 0.0)}) for m in members]

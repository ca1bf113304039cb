"""Planar pin-jointed truss solver using the method of joints.

Assumptions:
- All members are two-force members (axial only, no bending/shear, no weight).
- External nodal forces already include the support reactions (see loads.py),
  so every joint, supports included, is solved from its own equilibrium.
- Each joint can resolve at most two unknown member forces (sum Fx = 0,
  sum Fy = 0). Joints with more unknowns wait until neighbours supply forces.

Sign convention: tension positive. At joint j, with u_m the unit vector from j
toward the far end of member m (y-up),

    F_ext + sum(F_m * u_m) = 0

Members that can never be reached (indeterminate or mechanism regions) default
to zero force and are reported back to the caller instead of raising. Joints
whose forces are all known but do not balance stay unsolved and are listed in
`unbalanced_joints`.
"""
from __future__ import annotations
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple
import logging
import numpy as np
from . import schemas
from .config import AnalysisConfig, CONFIG
from .geometry import build_node_map, connectivity, drawing_vector, far_node_id, unit_vector

logger = logging.getLogger(__name__)

Incident = List[Tuple[schemas.MemberInput, np.ndarray]]


@dataclass
class JointSolution:
    forces: Dict[str, float]
    solved_joints: List[str] = field(default_factory=list)
    unsolved_members: List[str] = field(default_factory=list)
    zero_force_joints: List[str] = field(default_factory=list)
    unbalanced_joints: List[str] = field(default_factory=list)
    passes: int = 0

    @property
    def complete(self) -> bool:
        return not self.unsolved_members


def _incident_vectors(nodes, members, config: AnalysisConfig) -> Dict[str, Incident]:
    node_map = build_node_map(nodes)
    conn = connectivity(nodes, members)
    incident: Dict[str, Incident] = {}
    for n in nodes:
        incident[n.id] = [
            (m, unit_vector(n, node_map[far_node_id(m, n.id)], config)) for m in conn[n.id]
        ]
    return incident


def _zero_force_joints(nodes, members, node_forces, config: AnalysisConfig) -> List[str]:
    """Unloaded joints with exactly two collinear members."""
    node_map = build_node_map(nodes)
    conn = connectivity(nodes, members)
    joints = []
    for n in nodes:
        ms = conn[n.id]
        if len(ms) != 2:
            continue
        ext = node_forces.get(n.id)
        if ext is not None and (abs(ext.fx) >= config.load_tolerance or abs(ext.fy) >= config.load_tolerance):
            continue
        d1 = drawing_vector(n, node_map[far_node_id(ms[0], n.id)])
        d2 = drawing_vector(n, node_map[far_node_id(ms[1], n.id)])
        cross = abs(d1[0] * d2[1] - d2[0] * d1[1])
        if cross < config.collinear_tolerance:
            joints.append(n.id)
    return joints


def _solve_joint(ext: schemas.NodeForce, incident: Incident, forces: Dict[str, float],
                 config: AnalysisConfig) -> Optional[List[Tuple[schemas.MemberInput, float]]]:
    """Resolve the one or two unknown member forces at a joint, or None if singular."""
    residual = -np.array([ext.fx, ext.fy], dtype=float)
    unknowns: Incident = []
    for member, u in incident:
        if member.id in forces:
            residual -= forces[member.id] * u
        else:
            unknowns.append((member, u))

    if len(unknowns) == 1:
        member, u = unknowns[0]
        # Use the equation with the larger direction cosine
        if abs(u[0]) > abs(u[1]):
            return [(member, residual[0] / u[0])]
        return [(member, residual[1] / u[1])]

    if len(unknowns) == 2:
        (m1, u1), (m2, u2) = unknowns
        det = u1[0] * u2[1] - u2[0] * u1[1]
        if abs(det) < config.singular_tolerance:
            return None
        f1 = (residual[0] * u2[1] - u2[0] * residual[1]) / det
        f2 = (u1[0] * residual[1] - residual[0] * u1[1]) / det
        return [(m1, f1), (m2, f2)]

    return None


def _joint_residual(ext: schemas.NodeForce, incident: Incident, forces: Dict[str, float]) -> np.ndarray:
    r = np.array([ext.fx, ext.fy], dtype=float)
    for member, u in incident:
        r += forces.get(member.id, 0.0) * u
    return r


def solve_member_forces(nodes: Sequence[schemas.NodeInput], members: Sequence[schemas.MemberInput],
                        node_forces: Dict[str, schemas.NodeForce],
                        config: AnalysisConfig = CONFIG) -> JointSolution:
    incident = _incident_vectors(nodes, members, config)
    zero = schemas.NodeForce(node_id="")
    order = {n.id: i for i, n in enumerate(nodes)}

    forces: Dict[str, float] = {}
    solved: List[str] = []
    solved_set = set()
    unbalanced_set = set()

    zero_joints = _zero_force_joints(nodes, members, node_forces, config)
    for node_id in zero_joints:
        for member, _u in incident[node_id]:
            forces[member.id] = 0.0
        solved.append(node_id)
        solved_set.add(node_id)
        logger.debug("Node %s has zero-force members", node_id)

    max_passes = config.max_pass_factor * len(nodes)
    frontier = [n.id for n in nodes if n.id not in solved_set]
    passes = 0
    while frontier and passes < max_passes:
        passes += 1
        pending = set(frontier)
        next_round = set()
        for node_id in frontier:
            pending.discard(node_id)
            if node_id in solved_set:
                continue
            unknown = [m for m, _u in incident[node_id] if m.id not in forces]
            logger.debug("Node %s: %d unknowns, %d members", node_id, len(unknown), len(incident[node_id]))
            if not unknown:
                # Every force is known: close the joint only if it balances
                r = _joint_residual(node_forces.get(node_id, zero), incident[node_id], forces)
                if np.all(np.abs(r) < config.equilibrium_tolerance):
                    solved.append(node_id)
                    solved_set.add(node_id)
                elif node_id not in unbalanced_set:
                    unbalanced_set.add(node_id)
                    logger.warning("Node %s is out of balance by (%.1f, %.1f) lb", node_id, r[0], r[1])
                continue
            if len(unknown) > 2:
                continue
            result = _solve_joint(node_forces.get(node_id, zero), incident[node_id], forces, config)
            if result is None:
                continue
            for member, force in result:
                forces[member.id] = float(force)
                logger.debug("Solved member %s: force = %.1f lb", member.id, force)
                far = far_node_id(member, node_id)
                if far not in solved_set and far not in pending:
                    next_round.add(far)
            solved.append(node_id)
            solved_set.add(node_id)
        frontier = sorted(next_round - solved_set, key=order.get)

    if frontier:
        logger.warning("Joint solver stopped at the pass limit (%d) with %d joints queued", max_passes, len(frontier))

    unsolved = [m.id for m in members if m.id not in forces]
    for member_id in unsolved:
        forces[member_id] = 0.0
    if unsolved:
        logger.warning("Could not determine %d member forces (defaulting to 0): %s", len(unsolved), unsolved)
    logger.debug("Solver completed after %d passes. Solved %d/%d nodes.", passes, len(solved), len(nodes))

    return JointSolution(
        forces={m.id: forces[m.id] for m in members},
        solved_joints=solved,
        unsolved_members=unsolved,
        zero_force_joints=zero_joints,
        unbalanced_joints=[n.id for n in nodes if n.id in unbalanced_set],
        passes=passes,
    )


def joint_residuals(nodes: Sequence[schemas.NodeInput], members: Sequence[schemas.MemberInput],
                    node_forces: Dict[str, schemas.NodeForce], forces: Dict[str, float],
                    config: AnalysisConfig = CONFIG) -> Dict[str, Tuple[float, float]]:
    """Out-of-balance force (F_ext + sum F u) at every joint."""
    incident = _incident_vectors(nodes, members, config)
    zero = schemas.NodeForce(node_id="")
    residuals = {}
    for n in nodes:
        r = _joint_residual(node_forces.get(n.id, zero), incident[n.id], forces)
        residuals[n.id] = (float(r[0]), float(r[1]))
    return residuals

"""Load distribution onto truss joints.

Surface loads (psf) become a uniform line load through the tributary width, the
total is lumped evenly onto the top-chord joints, and each of the two extreme
supports takes half of it as an upward reaction.
"""
from __future__ import annotations
from typing import Dict, Sequence
import logging
from . import schemas
from .config import AnalysisConfig, CONFIG
from .geometry import (
    InsufficientSupports,
    NoLoadableNodes,
    free_nodes,
    height_above_top,
    support_nodes,
    topmost_y,
)

logger = logging.getLogger(__name__)


def line_load(loads: schemas.Loads, config: AnalysisConfig = CONFIG) -> float:
    """Uniform load along the truss (plf)."""
    return loads.total * config.tributary_width_ft


def total_load(loads: schemas.Loads, span_ft: float, config: AnalysisConfig = CONFIG) -> float:
    return line_load(loads, config) * span_ft


def extreme_supports(nodes: Sequence[schemas.NodeInput]):
    """Leftmost and rightmost support nodes (the later one wins on ties)."""
    supports = support_nodes(nodes)
    if len(supports) < 2:
        raise InsufficientSupports()
    left = supports[0]
    right = supports[0]
    for n in supports[1:]:
        if n.x <= left.x:
            left = n
        if n.x >= right.x:
            right = n
    return left, right


def reactions(nodes: Sequence[schemas.NodeInput], loads: schemas.Loads, span_ft: float,
              config: AnalysisConfig = CONFIG) -> schemas.Reactions:
    extreme_supports(nodes)
    half = total_load(loads, span_ft, config) / 2.0
    return schemas.Reactions(left=half, right=half)


def loaded_nodes(nodes: Sequence[schemas.NodeInput], config: AnalysisConfig = CONFIG):
    """Top-chord joints: free nodes within one grid unit of the topmost free node."""
    candidates = free_nodes(nodes)
    if not candidates:
        raise NoLoadableNodes()
    top = topmost_y(candidates, config)
    top_nodes = [n for n in candidates if height_above_top(n, top, config) <= config.grid_size]
    if not top_nodes:
        logger.debug("No top chord found; loading all %d free nodes", len(candidates))
        return candidates
    return top_nodes


def distribute(nodes: Sequence[schemas.NodeInput], loads: schemas.Loads, span_ft: float,
               config: AnalysisConfig = CONFIG) -> Dict[str, schemas.NodeForce]:
    """Return node id -> external nodal force (lb, y-up) for every node."""
    left, right = extreme_supports(nodes)
    targets = loaded_nodes(nodes, config)

    total = total_load(loads, span_ft, config)
    reaction = total / 2.0
    forces = {n.id: schemas.NodeForce(node_id=n.id) for n in nodes}
    forces[left.id].fy += reaction
    forces[right.id].fy += reaction

    per_node = -total / len(targets)
    for n in targets:
        forces[n.id].fy += per_node

    logger.debug(
        "Distributed %.1f lb over %.2f ft span: reactions %.1f lb at %s/%s, %.1f lb on %s",
        total, span_ft, reaction, left.id, right.id, per_node, [n.label or n.id for n in targets],
    )
    if total == 0:
        logger.warning("Load case is zero; all member forces will be zero")
    return forces

"""Truss geometry helpers.

Node coordinates arrive in drawing units with the editor's screen convention
(y grows downward). Everything physical (direction cosines, forces,
displacements) is expressed in a y-up frame in feet or inches. The conversion
lives here so the rest of the core never touches raw drawing coordinates.
"""
from __future__ import annotations
from typing import Dict, List, Sequence
import math
import numpy as np
from . import schemas
from .config import AnalysisConfig, CONFIG


class TrussError(Exception):
    pass


class InsufficientSupports(TrussError):
    def __init__(self, message: str = "Truss must have at least 2 supports for stability"):
        super().__init__(message)


class NoLoadableNodes(TrussError):
    def __init__(self, message: str = "No non-support nodes found to apply loads"):
        super().__init__(message)


class GeometryError(TrussError):
    pass


def build_node_map(nodes: Sequence[schemas.NodeInput]) -> Dict[str, schemas.NodeInput]:
    node_map: Dict[str, schemas.NodeInput] = {}
    for n in nodes:
        if n.id in node_map:
            raise GeometryError(f"Duplicate node id {n.id}")
        node_map[n.id] = n
    return node_map


def validate_members(node_map: Dict[str, schemas.NodeInput], members: Sequence[schemas.MemberInput]) -> None:
    """Reject members that cannot take part in a pin-jointed truss."""
    seen_ids = set()
    seen_pairs = set()
    for m in members:
        if m.id in seen_ids:
            raise GeometryError(f"Duplicate member id {m.id}")
        seen_ids.add(m.id)
        if m.start not in node_map:
            raise GeometryError(f"Member {m.id} references unknown node {m.start}")
        if m.end not in node_map:
            raise GeometryError(f"Member {m.id} references unknown node {m.end}")
        if m.start == m.end:
            raise GeometryError(f"Member {m.id} starts and ends at node {m.start}")
        pair = frozenset((m.start, m.end))
        if pair in seen_pairs:
            raise GeometryError(f"Member {m.id} duplicates an existing member between {m.start} and {m.end}")
        seen_pairs.add(pair)
        a, b = node_map[m.start], node_map[m.end]
        if math.hypot(b.x - a.x, b.y - a.y) <= 0:
            raise GeometryError(f"Member {m.id} has zero length")


def connectivity(nodes: Sequence[schemas.NodeInput], members: Sequence[schemas.MemberInput]) -> Dict[str, List[schemas.MemberInput]]:
    """Node id -> incident members, both in input order."""
    conn: Dict[str, List[schemas.MemberInput]] = {n.id: [] for n in nodes}
    for m in members:
        conn[m.start].append(m)
        conn[m.end].append(m)
    return conn


def far_node_id(member: schemas.MemberInput, node_id: str) -> str:
    return member.end if member.start == node_id else member.start


def drawing_vector(a: schemas.NodeInput, b: schemas.NodeInput) -> np.ndarray:
    """Raw a->b vector in drawing units."""
    return np.array([b.x - a.x, b.y - a.y], dtype=float)


def physical_vector(a: schemas.NodeInput, b: schemas.NodeInput, config: AnalysisConfig = CONFIG) -> np.ndarray:
    """a->b vector in feet, y-up."""
    d = drawing_vector(a, b) / config.pixels_per_foot
    if config.y_axis_down:
        d[1] = -d[1]
    return d


def unit_vector(a: schemas.NodeInput, b: schemas.NodeInput, config: AnalysisConfig = CONFIG) -> np.ndarray:
    d = physical_vector(a, b, config)
    L = float(np.hypot(d[0], d[1]))
    if L <= 0:
        raise GeometryError("Zero-length member")
    return d / L


def length_ft(a: schemas.NodeInput, b: schemas.NodeInput, config: AnalysisConfig = CONFIG) -> float:
    return math.hypot(b.x - a.x, b.y - a.y) / config.pixels_per_foot


def length_in(a: schemas.NodeInput, b: schemas.NodeInput, config: AnalysisConfig = CONFIG) -> float:
    return length_ft(a, b, config) * 12.0


def span_ft(nodes: Sequence[schemas.NodeInput], config: AnalysisConfig = CONFIG) -> float:
    """Horizontal extent of all nodes, in feet."""
    if not nodes:
        return 0.0
    xs = [n.x for n in nodes]
    return (max(xs) - min(xs)) / config.pixels_per_foot


def support_nodes(nodes: Sequence[schemas.NodeInput]) -> List[schemas.NodeInput]:
    return [n for n in nodes if n.support]


def free_nodes(nodes: Sequence[schemas.NodeInput]) -> List[schemas.NodeInput]:
    return [n for n in nodes if not n.support]


def height_above_top(node: schemas.NodeInput, top_y: float, config: AnalysisConfig = CONFIG) -> float:
    """Drawing-unit distance of a node below the topmost y (always >= 0 for real nodes)."""
    return node.y - top_y if config.y_axis_down else top_y - node.y


def topmost_y(nodes: Sequence[schemas.NodeInput], config: AnalysisConfig = CONFIG) -> float:
    ys = [n.y for n in nodes]
    return min(ys) if config.y_axis_down else max(ys)

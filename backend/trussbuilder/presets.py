"""Preset truss configurations.

Coordinates are drawing units (50 per foot, y grows downward). All presets
span 20 ft between x=100 and x=1100 except the cantilever, whose supports sit
inside the overhangs. Node ids are their labels (A, B, C, ...) and member ids
are "<start>-<end>".
"""
from __future__ import annotations
from typing import Dict, List, Optional, Sequence, Tuple
from . import schemas
from .catalog import apply_lumber, get_lumber, get_material

_Node = Tuple[float, float, Optional[str]]


def _preset(name: str, description: str, nodes: Sequence[_Node], members: Sequence[str]) -> Dict:
    labels = [chr(65 + i) for i in range(len(nodes))]
    node_models = [
        schemas.NodeInput(id=label, label=label, x=x, y=y, support=support)
        for label, (x, y, support) in zip(labels, nodes)
    ]
    member_models = [
        schemas.MemberInput(id=f"{pair[0]}-{pair[1]}", start=pair[0], end=pair[1])
        for pair in members
    ]
    return {"name": name, "description": description, "nodes": node_models, "members": member_models}


PRESET_TRUSSES: List[Dict] = [
    _preset(
        "King Post",
        "Simple triangular truss with center vertical member",
        [(100, 400, "fixed"), (1100, 400, "roller"), (600, 100, None), (600, 400, None)],
        ["AC", "CB", "AD", "DB", "CD"],
    ),
    _preset(
        "Queen Post",
        "Triangular truss with two vertical members",
        [(100, 400, "fixed"), (1100, 400, "roller"), (600, 100, None), (350, 400, None),
         (850, 400, None), (350, 250, None), (850, 250, None)],
        ["AF", "FC", "CG", "GB", "AD", "DE", "EB", "FD", "GE", "FG"],
    ),
    _preset(
        "Fink (W-Truss)",
        "W-shaped web configuration for longer spans",
        [(100, 400, "fixed"), (1100, 400, "roller"), (350, 250, None), (600, 100, None),
         (850, 250, None), (350, 400, None), (850, 400, None)],
        ["AC", "CD", "DE", "EB", "AF", "FG", "GB", "CF", "DF", "DG", "EG"],
    ),
    _preset(
        "Howe Truss",
        "Similar to King Post but with diagonal web members",
        [(100, 400, "fixed"), (1100, 400, "roller"), (600, 100, None), (350, 400, None),
         (850, 400, None), (350, 250, None), (850, 250, None)],
        ["AF", "FC", "CG", "GB", "AD", "DE", "EB", "FD", "GE", "DC", "CE"],
    ),
    _preset(
        "Simple Beam",
        "Horizontal beam with supports (for testing deflection)",
        [(100, 400, "fixed"), (1100, 400, "roller"), (350, 400, None), (600, 400, None), (850, 400, None)],
        ["AC", "CD", "DE", "EB"],
    ),
    _preset(
        "Pratt Truss",
        "Vertical members in compression, diagonals in tension",
        [(100, 400, "fixed"), (1100, 400, "roller"), (350, 250, None), (600, 100, None),
         (850, 250, None), (350, 400, None), (600, 400, None), (850, 400, None)],
        ["AC", "CD", "DE", "EB", "AF", "FG", "GH", "HB", "CF", "DG", "EH", "FD", "GE"],
    ),
    _preset(
        "Warren Truss",
        "Alternating diagonal members without verticals",
        [(100, 400, "fixed"), (1100, 400, "roller"), (350, 250, None), (600, 100, None),
         (850, 250, None), (350, 400, None), (600, 400, None), (850, 400, None)],
        ["AC", "CD", "DE", "EB", "AF", "FG", "GH", "HB", "CF", "FD", "DH", "HE"],
    ),
    _preset(
        "Scissor Truss",
        "Creates vaulted ceiling space with crossed members",
        [(100, 400, "fixed"), (1100, 400, "roller"), (300, 200, None), (600, 0, None),
         (900, 200, None), (400, 300, None), (800, 300, None)],
        ["AC", "CD", "DE", "EB", "AF", "FG", "GB", "CG", "EF"],
    ),
    _preset(
        "Fan Truss",
        "Radiating members from supports for uniform load distribution",
        [(100, 400, "fixed"), (1100, 400, "roller"), (350, 200, None), (600, 100, None),
         (850, 200, None), (350, 400, None), (600, 400, None), (850, 400, None)],
        ["AC", "AD", "AF", "CD", "DE", "BE", "BD", "BH", "FG", "GH", "CF", "DG", "EH"],
    ),
    _preset(
        "Bowstring Truss",
        "Curved top chord with vertical hangers",
        [(100, 400, "fixed"), (1100, 400, "roller"), (250, 240, None), (400, 120, None),
         (600, 50, None), (800, 120, None), (950, 240, None), (250, 400, None),
         (400, 400, None), (600, 400, None), (800, 400, None), (950, 400, None)],
        ["AC", "CD", "DE", "EF", "FG", "GB", "AH", "HI", "IJ", "JK", "KL", "LB",
         "CH", "DI", "EJ", "FK", "GL"],
    ),
    _preset(
        "Cantilever Truss",
        "Extends beyond support for overhanging structures",
        [(-100, 300, None), (100, 200, None), (400, 400, "fixed"), (800, 400, "roller"),
         (1100, 200, None), (1300, 300, None), (600, 100, None), (100, 400, None),
         (600, 400, None), (1100, 400, None)],
        ["AB", "BG", "GE", "EF", "AH", "HC", "CI", "ID", "DJ", "JF", "BH", "BC", "GI", "ED", "EJ"],
    ),
]


def list_presets() -> List[schemas.PresetSummary]:
    return [
        schemas.PresetSummary(
            name=p["name"],
            description=p["description"],
            node_count=len(p["nodes"]),
            member_count=len(p["members"]),
        )
        for p in PRESET_TRUSSES
    ]


def get_preset(name: str) -> Dict:
    for p in PRESET_TRUSSES:
        if p["name"] == name:
            return p
    raise KeyError(name)


def build_input(name: str, loads: Optional[schemas.Loads] = None,
                material: Optional[schemas.Material] = None,
                lumber: Optional[str] = None) -> schemas.AnalysisInput:
    """Fresh analysis input for a preset (the preset itself is never shared)."""
    preset = get_preset(name)
    nodes = [n.model_copy() for n in preset["nodes"]]
    members = [m.model_copy() for m in preset["members"]]
    if lumber is not None:
        members = apply_lumber(members, get_lumber(lumber))
    return schemas.AnalysisInput(
        nodes=nodes,
        members=members,
        loads=loads if loads is not None else schemas.Loads(),
        material=material if material is not None else get_material(),
    )

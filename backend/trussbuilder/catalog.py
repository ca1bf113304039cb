"""Wood species and lumber size catalogs.

Allowables are NDS-style reference values for visually graded lumber; actual
values vary by size and region. Section properties are computed from the
actual (dressed) dimensions.
"""
from __future__ import annotations
from typing import Dict, List, Sequence, Tuple
from . import schemas

WOOD_SPECIES: Dict[str, Dict[str, float]] = {
    "Hem-Fir #2": {"E": 1_300_000, "Fb": 850, "Fc": 1250, "density": 28},
    "Douglas Fir-Larch #2": {"E": 1_600_000, "Fb": 875, "Fc": 1300, "density": 32},
    "Southern Pine #2": {"E": 1_600_000, "Fb": 1000, "Fc": 1650, "density": 36},
    # SPF-South values
    "SPF (Spruce-Pine-Fir) #2": {"E": 1_200_000, "Fb": 875, "Fc": 1150, "density": 26},
}

DEFAULT_SPECIES = "SPF (Spruce-Pine-Fir) #2"

# name, category, nominal (w, h), actual (w, h) in inches, weight (lb/ft)
_LUMBER_TABLE: List[Tuple[str, str, Tuple[float, float], Tuple[float, float], float]] = [
    ("2x4", "Dimensional", (2, 4), (1.5, 3.5), 1.09),
    ("2x6", "Dimensional", (2, 6), (1.5, 5.5), 1.72),
    ("2x8", "Dimensional", (2, 8), (1.5, 7.25), 2.26),
    ("2x10", "Dimensional", (2, 10), (1.5, 9.25), 2.89),
    ("2x12", "Dimensional", (2, 12), (1.5, 11.25), 3.51),
    ("4x6", "Timber", (4, 6), (3.5, 5.5), 4.01),
    ("4x8", "Timber", (4, 8), (3.5, 7.25), 5.28),
    ("4x10", "Timber", (4, 10), (3.5, 9.25), 6.74),
    ("4x12", "Timber", (4, 12), (3.5, 11.25), 8.20),
    ("6x8", "Heavy Timber", (6, 8), (5.5, 7.5), 8.59),
    ("6x10", "Heavy Timber", (6, 10), (5.5, 9.5), 10.88),
    ("6x12", "Heavy Timber", (6, 12), (5.5, 11.5), 13.17),
    ("8x10", "Heavy Timber", (8, 10), (7.5, 9.5), 14.84),
    ("8x12", "Heavy Timber", (8, 12), (7.5, 11.5), 17.97),
    ("4x24", "Glulam/Special", (4, 24), (3.5, 23.25), 16.95),
    ("8x24", "Glulam/Special", (8, 24), (7.5, 23.25), 36.32),
    ("8x48", "Glulam/Special", (8, 48), (7.5, 47.25), 73.83),
]


def section_properties(width: float, height: float) -> Tuple[float, float]:
    """Area (in^2) and strong-axis moment of inertia b*h^3/12 (in^4) of a rectangle."""
    return width * height, width * height ** 3 / 12.0


def _build_lumber() -> List[schemas.LumberSize]:
    sizes = []
    for name, category, (nw, nh), (aw, ah), weight in _LUMBER_TABLE:
        area, inertia = section_properties(aw, ah)
        sizes.append(schemas.LumberSize(
            name=name,
            category=category,
            nominalWidth=nw,
            nominalHeight=nh,
            actualWidth=aw,
            actualHeight=ah,
            area=round(area, 3),
            momentOfInertia=round(inertia, 2),
            weight=weight,
        ))
    return sizes


LUMBER_SIZES: List[schemas.LumberSize] = _build_lumber()


def get_material(name: str = DEFAULT_SPECIES) -> schemas.Material:
    props = WOOD_SPECIES[name]
    return schemas.Material(name=name, **props)


def list_materials() -> List[schemas.Material]:
    return [get_material(name) for name in WOOD_SPECIES]


def get_lumber(name: str) -> schemas.LumberSize:
    for size in LUMBER_SIZES:
        if size.name == name:
            return size
    raise KeyError(name)


def apply_lumber(members: Sequence[schemas.MemberInput], size: schemas.LumberSize) -> List[schemas.MemberInput]:
    """Copies of `members` re-sectioned to a lumber size."""
    return [m.model_copy(update={"area": size.area, "moment_of_inertia": size.momentOfInertia}) for m in members]

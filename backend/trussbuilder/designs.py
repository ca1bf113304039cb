"""Save/load conversion for versioned truss design documents.

Only in-memory conversion lives here; reading and writing files is the
service layer's job (see main.py).
"""
from __future__ import annotations
from datetime import datetime, timezone
from typing import Any, Dict, Union
import json
from pydantic import ValidationError
from . import schemas
from .catalog import get_material
from .config import AnalysisConfig, CONFIG


class DesignFormatError(ValueError):
    pass


def export_design(inp: schemas.AnalysisInput, name: str = "Truss Design", description: str = "",
                  config: AnalysisConfig = CONFIG) -> schemas.DesignFile:
    return schemas.DesignFile(
        version=config.design_file_version,
        metadata=schemas.DesignMetadata(
            createdAt=datetime.now(timezone.utc).isoformat(),
            name=name,
            description=description,
        ),
        structure=schemas.DesignStructure(
            nodes=[
                schemas.DesignNode(id=n.id, x=n.x, y=n.y, label=n.label, support=n.support)
                for n in inp.nodes
            ],
            members=[
                schemas.DesignMember(id=m.id, start=m.start, end=m.end, area=m.area,
                                     momentOfInertia=m.moment_of_inertia)
                for m in inp.members
            ],
        ),
        parameters=schemas.DesignParameters(loads=inp.loads, material=inp.material),
    )


def parse_design(data: Union[str, Dict[str, Any]]) -> schemas.DesignFile:
    try:
        design = json.loads(data) if isinstance(data, str) else data
        if not isinstance(design, dict):
            raise DesignFormatError("Invalid file format: expected a JSON object")
        if not design.get("version"):
            raise DesignFormatError("Invalid file format: missing version")
        structure = design.get("structure")
        if not isinstance(structure, dict) or "nodes" not in structure or "members" not in structure:
            raise DesignFormatError("Invalid file format: missing structure data")
        return schemas.DesignFile.model_validate(design)
    except (DesignFormatError, json.JSONDecodeError, ValidationError) as e:
        raise DesignFormatError(f"Failed to import design: {e}") from e


def import_design(data: Union[str, Dict[str, Any]]) -> schemas.AnalysisInput:
    """Design document (dict or JSON text) -> analysis input."""
    design = parse_design(data)
    params = design.parameters
    return schemas.AnalysisInput(
        nodes=[
            schemas.NodeInput(id=n.id, x=n.x, y=n.y, label=n.label, support=n.support)
            for n in design.structure.nodes
        ],
        members=[
            schemas.MemberInput(id=m.id, start=m.start, end=m.end, area=m.area,
                                moment_of_inertia=m.momentOfInertia)
            for m in design.structure.members
        ],
        loads=params.loads,
        material=params.material if params.material is not None else get_material(),
    )

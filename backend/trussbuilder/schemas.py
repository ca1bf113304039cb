from __future__ import annotations
from typing import List, Literal, Optional
from pydantic import BaseModel, Field

SupportType = Literal["fixed", "roller"]
AnalysisStatus = Literal["NOT_ANALYZED", "PASSED", "FAILED", "ERROR"]

# 2x4 actual section (1.5 x 3.5 in)
DEFAULT_AREA = 5.25
DEFAULT_MOMENT_OF_INERTIA = 5.36


class NodeInput(BaseModel):
    """Truss joint in drawing units (y grows downward)."""
    id: str
    x: float
    y: float
    label: Optional[str] = None
    support: Optional[SupportType] = None


class MemberInput(BaseModel):
    id: str
    start: str = Field(..., description="ID of start node")
    end: str = Field(..., description="ID of end node")
    area: float = Field(DEFAULT_AREA, gt=0, description="Cross-sectional area (in^2)")
    moment_of_inertia: float = Field(DEFAULT_MOMENT_OF_INERTIA, gt=0, description="Second moment of area (in^4)")
    force: float = Field(0.0, description="Axial force result (lb, + tension)")


class Loads(BaseModel):
    """Surface loads in psf, combined by plain summation."""
    dead: float = Field(15.0, ge=0)
    live: float = Field(40.0, ge=0)
    snow: float = Field(0.0, ge=0)

    @property
    def total(self) -> float:
        return self.dead + self.live + self.snow


class Material(BaseModel):
    name: str = "SPF (Spruce-Pine-Fir) #2"
    E: float = Field(1_200_000.0, gt=0, description="Modulus of elasticity (psi)")
    Fb: float = Field(875.0, gt=0, description="Allowable bending stress (psi)")
    Fc: float = Field(1150.0, gt=0, description="Allowable compression parallel to grain (psi)")
    density: float = Field(26.0, ge=0, description="Density (pcf)")


class AnalysisInput(BaseModel):
    nodes: List[NodeInput]
    members: List[MemberInput]
    loads: Loads = Field(default_factory=Loads)
    material: Material = Field(default_factory=Material)
    span: Optional[float] = Field(None, gt=0, description="Truss span (ft); defaults to the node x-extent")


class NodeForce(BaseModel):
    node_id: str
    fx: float = 0.0
    fy: float = 0.0


class MemberResult(BaseModel):
    id: str
    force: float
    stress: float
    allowable: float
    ratio: float
    length_ft: float
    solved: bool = True


class NodeDisplacement(BaseModel):
    node_id: str
    dx: float
    dy: float


class Reactions(BaseModel):
    left: float = 0.0
    right: float = 0.0


class DeflectionCheck(BaseModel):
    passes: bool
    max_allowable: float
    total_load_allowable: float
    ratio: str
    limit_ratio: str


class AnalysisResult(BaseModel):
    status: AnalysisStatus
    member_forces: List[MemberResult] = []
    node_forces: List[NodeForce] = []
    node_displacements: List[NodeDisplacement] = []
    reactions: Reactions = Field(default_factory=Reactions)
    max_stress: float = 0.0
    stress_ratio: float = 0.0
    max_deflection: float = 0.0
    max_deflection_node: Optional[str] = None
    deflection_ratio: Optional[str] = None
    deflection_check: Optional[DeflectionCheck] = None
    failures: List[str] = []
    failed_members: List[str] = []
    unsolved_members: List[str] = []
    unbalanced_joints: List[str] = []
    span_ft: float = 0.0
    total_load: float = 0.0

    @classmethod
    def not_analyzed(cls) -> "AnalysisResult":
        return cls(status="NOT_ANALYZED")


class LumberSize(BaseModel):
    name: str
    category: str
    nominalWidth: float
    nominalHeight: float
    actualWidth: float
    actualHeight: float
    area: float
    momentOfInertia: float
    weight: float  # lb per ft


class PresetSummary(BaseModel):
    name: str
    description: str
    node_count: int
    member_count: int


# ----------------------------- Design files -----------------------------

class DesignMetadata(BaseModel):
    createdAt: Optional[str] = None
    name: str = "Truss Design"
    description: str = ""
    software: str = "Truss Simulator"


class DesignNode(BaseModel):
    id: str
    x: float
    y: float
    label: Optional[str] = None
    support: Optional[SupportType] = None


class DesignMember(BaseModel):
    id: str
    start: str
    end: str
    area: float = DEFAULT_AREA
    momentOfInertia: float = DEFAULT_MOMENT_OF_INERTIA


class DesignStructure(BaseModel):
    nodes: List[DesignNode]
    members: List[DesignMember]


class DesignParameters(BaseModel):
    loads: Loads = Field(default_factory=Loads)
    material: Optional[Material] = None


class DesignFile(BaseModel):
    """Versioned design document as written by the save/load panel."""
    version: str
    metadata: DesignMetadata = Field(default_factory=DesignMetadata)
    structure: DesignStructure
    parameters: DesignParameters = Field(default_factory=DesignParameters)


class DesignListItem(BaseModel):
    name: str
    modified: float

"""Analysis core for an interactive 2D wood truss builder.

    loads.py          Dead/live/snow surface loads -> joint forces and reactions
    truss_solver.py   Method of joints (member axial forces)
    stress.py         Axial stress vs. Fb/Fc allowables
    deflection.py     Approximate joint deflections and L/240 check
    analysis.py       run_analysis pipeline
    catalog.py        Wood species and lumber sizes
    presets.py        Preset truss geometries
    designs.py        Versioned design documents
    main.py           FastAPI service
"""

__version__ = "0.1.0"

from .analysis import apply_member_forces, run_analysis
from .geometry import GeometryError, InsufficientSupports, NoLoadableNodes, TrussError

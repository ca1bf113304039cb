import os
import json
import time
import re
import logging
from pathlib import Path
from typing import Optional
from fastapi import FastAPI, HTTPException
from fastapi import Body
from fastapi.middleware.cors import CORSMiddleware

from . import __version__, schemas
from .analysis import run_analysis
from .catalog import LUMBER_SIZES, list_materials
from .config import CONFIG
from .designs import DesignFormatError, parse_design
from .presets import build_input, list_presets

logger = logging.getLogger("trussbuilder")
if not logger.handlers:
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter('[%(levelname)s] %(name)s: %(message)s'))
    logger.addHandler(handler)
logger.setLevel(logging.INFO)

app = FastAPI(title="Truss Builder Analysis API", version=__version__)

# Allow all origins during early development (tighten later)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

@app.get("/health")
async def health():
    return {"status": "ok"}

@app.post("/analyze", response_model=schemas.AnalysisResult)
async def analyze(payload: schemas.AnalysisInput):
    """Run the truss analysis. Analysis errors come back as status ERROR, not HTTP errors."""
    return run_analysis(payload)


# ----------------------------- Presets & Catalogs -----------------------------

@app.get("/presets", response_model=list[schemas.PresetSummary])
async def get_presets():
    return list_presets()

@app.get("/presets/{name}", response_model=schemas.AnalysisInput)
async def get_preset(name: str, lumber: Optional[str] = None):
    try:
        return build_input(name, lumber=lumber)
    except KeyError as e:
        raise HTTPException(status_code=404, detail=f"Unknown preset or lumber size: {e}")

@app.get("/materials", response_model=list[schemas.Material])
async def get_materials():
    return list_materials()

@app.get("/lumber", response_model=list[schemas.LumberSize])
async def get_lumber():
    return LUMBER_SIZES


# ----------------------------- Design Save / Load -----------------------------
DESIGNS_DIR = CONFIG.designs_dir

_SAFE_NAME_RE = re.compile(r"^[A-Za-z0-9_-]+$")

def _design_path(name: str) -> Path:
    if not _SAFE_NAME_RE.match(name):
        raise HTTPException(status_code=400, detail="Invalid design name (use letters, numbers, hyphen, underscore)")
    return DESIGNS_DIR / f"{name}.json"

@app.get("/designs", response_model=list[schemas.DesignListItem])
async def list_designs():
    items: list[schemas.DesignListItem] = []
    if not DESIGNS_DIR.exists():
        return items
    for p in DESIGNS_DIR.glob("*.json"):
        try:
            stat = p.stat()
        except OSError:
            continue
        items.append(schemas.DesignListItem(name=p.stem, modified=stat.st_mtime))
    # newest first
    items.sort(key=lambda x: x.modified, reverse=True)
    return items

@app.get("/designs/{name}", response_model=schemas.DesignFile)
async def load_design(name: str):
    path = _design_path(name)
    if not path.exists():
        raise HTTPException(status_code=404, detail="Design not found")
    try:
        with path.open("r", encoding="utf-8") as f:
            data = json.load(f)
    except OSError as e:
        raise HTTPException(status_code=500, detail=f"Read error: {e}")
    except json.JSONDecodeError as e:
        raise HTTPException(status_code=500, detail=f"Corrupt design file: {e}")
    try:
        return parse_design(data)
    except DesignFormatError as e:
        raise HTTPException(status_code=500, detail=f"Corrupt design file: {e}")

@app.post("/designs/{name}", response_model=schemas.DesignFile)
async def save_design(name: str, design: dict = Body(...)):
    """Persist a design document. Accepts a loose dict for forward compatibility.

    The version and metadata name are injected before validation so older
    editors that omit them can still save.
    """
    path = _design_path(name)
    payload = dict(design)
    payload.setdefault("version", CONFIG.design_file_version)
    metadata = dict(payload.get("metadata") or {})
    metadata["name"] = name
    metadata.setdefault("createdAt", time.strftime("%Y-%m-%dT%H:%M:%SZ", time.gmtime()))
    payload["metadata"] = metadata
    try:
        validated = parse_design(payload)
    except DesignFormatError as e:
        raise HTTPException(status_code=422, detail=f"Validation failed: {e}")
    path.parent.mkdir(parents=True, exist_ok=True)
    try:
        with path.open("w", encoding="utf-8") as f:
            json.dump(validated.model_dump(), f, indent=2)
            f.flush()
            os.fsync(f.fileno())
    except OSError as e:
        raise HTTPException(status_code=500, detail=f"Write error: {e}")
    logger.info("Saved design '%s' to %s", name, path)
    return validated

# To run (dev): uvicorn trussbuilder.main:app --reload

import logging
import time

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field
from typing import List, Optional

from starsystem.config import Settings, load_settings
from starsystem.errors import ConfigurationError, SingularGeometryError
from starsystem.physics import build_system, sample_frames
from starsystem.presets import PRESETS

logger = logging.getLogger(__name__)


class BodyConfig(BaseModel):
    name: str
    category: str = "planet"
    mass: float
    radius: float
    position: List[float] = Field(default_factory=lambda: [0.0, 0.0, 0.0])
    velocity: List[float] = Field(default_factory=lambda: [0.0, 0.0, 0.0])


class SimulateRequest(BaseModel):
    presets: List[str] = []
    bodies: List[BodyConfig] = []
    gravitationalConstant: Optional[float] = None
    stepSize: Optional[float] = None
    steps: int = 1
    every: int = 1


class BodyMetadata(BaseModel):
    name: str
    category: str
    kind: str
    radius: float
    mass: float


class Frame(BaseModel):
    step: int
    positions: List[List[float]]


class SimulateResponse(BaseModel):
    bodyMetadata: List[BodyMetadata]
    samples: List[Frame]
    meta: dict


class PresetInfo(BaseModel):
    name: str
    category: str
    mass: float
    radius: float


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or load_settings()
    logging.basicConfig(level=settings.log_level)

    app = FastAPI(title="starsystem")
    app.state.settings = settings
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/api/presets", response_model=List[PresetInfo])
    def list_presets():
        return [
            {
                "name": name,
                "category": preset.category.name,
                "mass": preset.mass,
                "radius": preset.radius,
            }
            for name, preset in PRESETS.items()
        ]

    @app.post("/api/simulate", response_model=SimulateResponse)
    def simulate(req: SimulateRequest):
        if req.steps < 0 or req.steps > settings.max_steps:
            raise HTTPException(
                status_code=422,
                detail=f"steps must be between 0 and {settings.max_steps}",
            )
        payload = req.model_dump()
        if payload["gravitationalConstant"] is None:
            payload["gravitationalConstant"] = settings.gravitational_constant
        if payload["stepSize"] is None:
            payload["stepSize"] = settings.step_size

        start = time.perf_counter()
        try:
            system = build_system(payload, workers=settings.workers)
            result = sample_frames(system, req.steps, every=req.every)
        except SingularGeometryError as exc:
            raise HTTPException(status_code=409, detail=str(exc)) from exc
        except ConfigurationError as exc:
            raise HTTPException(status_code=422, detail=str(exc)) from exc
        elapsed_ms = (time.perf_counter() - start) * 1000.0

        logger.info(
            "Simulated %d bodies for %d steps in %.1f ms",
            len(system.bodies), req.steps, elapsed_ms,
        )
        return {
            "bodyMetadata": result["bodyMetadata"],
            "samples": result["samples"],
            "meta": {
                "steps": req.steps,
                "stepSize": payload["stepSize"],
                "gravitationalConstant": system.gravitational_constant.value,
                "elapsedMs": elapsed_ms,
            },
        }

    logger.info("starsystem API ready (G=%g, step size=%g)", settings.gravitational_constant, settings.step_size)
    return app


app = create_app()

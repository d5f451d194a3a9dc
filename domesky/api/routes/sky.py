"""REST API endpoints for sky evaluation and animation control."""

from typing import Optional
from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field

from domesky.api.routes.websocket import get_engine
from domesky.dynamics.time_parameters import normalize_time_parameters
from domesky.simulation.sky import compute_sky_state


router = APIRouter(prefix="/api/sky", tags=["sky"])


class EngineConfigRequest(BaseModel):
    """Animation configuration."""
    timeWarp: Optional[float] = Field(
        None, gt=0, allow_inf_nan=False, description="Time warp factor"
    )


class TimeRequest(BaseModel):
    """Slider input. Omitted fields keep their current value."""
    dayOfYear: Optional[int] = Field(None, ge=1, le=365)
    hourOfDay: Optional[float] = Field(None, ge=0, lt=24, allow_inf_nan=False)
    moonPhaseDay: Optional[float] = Field(None, ge=0, allow_inf_nan=False)


class ComputeRequest(BaseModel):
    """One-shot evaluation request. Values are wrapped into their domains."""
    dayOfYear: int
    hourOfDay: float = Field(..., allow_inf_nan=False)
    moonPhaseDay: float = Field(..., allow_inf_nan=False)
    includeShadowModel: bool = False


@router.get("/state")
async def get_state():
    """Get current engine state."""
    engine = get_engine()
    return {
        "state": engine.state.name,
        "timeWarp": engine.time_warp,
        "time": engine.time.to_dict(),
    }


@router.get("/telemetry")
async def get_telemetry():
    """Get current sky snapshot."""
    engine = get_engine()
    return engine.get_telemetry()


@router.put("/time")
async def set_time(request: TimeRequest):
    """Set the calendar time."""
    engine = get_engine()
    params = engine.set_time(
        day_of_year=request.dayOfYear,
        hour_of_day=request.hourOfDay,
        moon_phase_day=request.moonPhaseDay,
    )
    return {"status": "ok", "time": params.to_dict()}


@router.post("/start")
async def start_animation():
    """Start the animation."""
    engine = get_engine()
    engine.start()
    return {"status": "ok", "state": engine.state.name}


@router.post("/pause")
async def pause_animation():
    """Pause the animation."""
    engine = get_engine()
    engine.pause()
    return {"status": "ok", "state": engine.state.name}


@router.post("/stop")
async def stop_animation():
    """Stop the animation."""
    engine = get_engine()
    engine.stop()
    return {"status": "ok", "state": engine.state.name}


@router.post("/reset")
async def reset_animation():
    """Reset time to the initial moment."""
    engine = get_engine()
    engine.reset()
    return {"status": "ok", "state": engine.state.name}


@router.post("/step")
async def step_animation():
    """Advance the animation by one tick and return the new sky."""
    engine = get_engine()
    engine.step()
    return engine.get_telemetry()


@router.put("/config")
async def update_config(config: EngineConfigRequest):
    """Update animation configuration."""
    engine = get_engine()

    if config.timeWarp is not None:
        try:
            engine.set_time_warp(config.timeWarp)
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))

    return {
        "status": "ok",
        "timeWarp": engine.time_warp,
    }


@router.post("/compute")
async def compute(request: ComputeRequest):
    """Evaluate the sky for an arbitrary moment without touching the engine."""
    engine = get_engine()

    try:
        params = normalize_time_parameters(
            request.dayOfYear, request.hourOfDay, request.moonPhaseDay, engine.config
        )
        sky = compute_sky_state(
            params,
            engine.config,
            include_shadow_model=request.includeShadowModel,
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return sky.to_dict()

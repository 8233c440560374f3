from __future__ import annotations

import logging
from typing import Optional

from fastapi import FastAPI, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware

from ..config import load_config
from ..motion.easing import PRESETS, DomainError, InvalidControlPoint
from ..motion.models import SampleRequest, Timeline
from ..motion.planner import sample_timeline

log = logging.getLogger(__name__)


cfg = load_config()

app = FastAPI(title="Bezier Timing API", version="0.1.0")
app.add_middleware(
    CORSMiddleware,
    allow_origins=cfg.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/api/presets")
def api_presets():
    return {name: list(curve.control_points) for name, curve in PRESETS.items()}


@app.post("/api/sample")
def api_sample(req: SampleRequest):
    """Evaluate one easing at one x.

    - linear eases report t == x.
    - Invalid control points (strict mode) and out-of-range x (reject mode)
      are answered with 422.
    """
    try:
        curve = req.ease.to_curve(strict=cfg.strict, domain=cfg.domain, epsilon=cfg.epsilon)
        if curve is None:
            x = min(max(req.x, 0.0), 1.0)
            return {"x": req.x, "y": x, "t": x}
        t = curve.solve(req.x)
        return {"x": req.x, "y": curve.y_at(t), "t": t}
    except (DomainError, InvalidControlPoint) as e:
        log.info(f"Rejected sample request: {e}")
        raise HTTPException(422, detail=str(e))


@app.post("/api/timeline")
def api_timeline(timeline: Timeline, dt: Optional[float] = Query(default=None, gt=0)):
    try:
        times, values = sample_timeline(timeline, dt=dt, cfg=cfg)
    except ValueError as e:
        log.info(f"Rejected timeline: {e}")
        raise HTTPException(422, detail=str(e))
    return {"times": times, "values": values}

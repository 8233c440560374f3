from __future__ import annotations

import logging
import math
from typing import Callable, List, Optional, Tuple

from ..config import TimingConfig
from .easing import linear
from .models import Keyframe, Timeline

log = logging.getLogger(__name__)


def easing_for(kf: Keyframe, cfg: Optional[TimingConfig] = None) -> Callable[[float], float]:
    cfg = cfg or TimingConfig()
    curve = kf.ease.to_curve(strict=cfg.strict, domain=cfg.domain, epsilon=cfg.epsilon)
    if curve is None:
        return linear
    return curve.sample


def sample_timeline(
    timeline: Timeline,
    dt: Optional[float] = None,
    cfg: Optional[TimingConfig] = None,
) -> Tuple[List[float], List[float]]:
    """Sample the timeline into time and value arrays.

    - dt: sampling interval in seconds (default cfg.sample_dt, 10ms)
    Each segment is eased by the curve stored on its arrival keyframe.
    Returns (times, values)
    """
    cfg = cfg or TimingConfig()
    if dt is None:
        dt = cfg.sample_dt
    if not math.isfinite(dt) or dt <= 0:
        raise ValueError("dt must be finite and > 0")

    kfs = timeline.keyframes
    # One curve per arrival keyframe, built once for the whole walk
    eases = [easing_for(k, cfg) for k in kfs]
    times: List[float] = []
    values: List[float] = []
    total_t = kfs[-1].t
    n_samples = int(total_t // dt) + 2
    if n_samples > cfg.max_samples:
        raise ValueError(f"Timeline needs {n_samples} samples at dt={dt}, limit is {cfg.max_samples}")

    seg_start_idx = 0
    step = 0
    t = 0.0
    while t <= total_t + 1e-9:
        # Find current segment
        while seg_start_idx < len(kfs) - 2 and t > kfs[seg_start_idx + 1].t:
            seg_start_idx += 1
        k0 = kfs[seg_start_idx]
        k1 = kfs[seg_start_idx + 1]
        u = (t - k0.t) / (k1.t - k0.t)
        u = 0.0 if u < 0.0 else (1.0 if u > 1.0 else u)
        f = eases[seg_start_idx + 1]  # easing stored on arrival keyframe
        values.append(k0.value + (k1.value - k0.value) * f(u))
        times.append(t)
        step += 1
        t = step * dt

    # Ensure last sample is exactly last keyframe
    if times[-1] < total_t:
        times.append(total_t)
        values.append(kfs[-1].value)
    else:
        times[-1] = total_t
        values[-1] = kfs[-1].value

    log.debug(f"Sampled timeline of {len(kfs)} keyframes into {len(times)} points (dt={dt})")
    return times, values

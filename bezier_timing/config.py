from __future__ import annotations

import math
import os
from dataclasses import dataclass, field
from typing import List

from .motion.easing import DEFAULT_EPSILON, DOMAIN_POLICIES, DomainPolicy


@dataclass
class TimingConfig:
    # Curve construction
    domain: DomainPolicy = "clamp"     # x outside [0,1]: clamp | extrapolate | reject
    strict: bool = False               # reject p1x/p2x outside [0,1] instead of clamping
    epsilon: float = DEFAULT_EPSILON   # |a| below this is a degenerate cubic

    # Timeline sampling
    sample_dt: float = 0.01            # seconds
    max_samples: int = 100_000         # per sampled timeline

    # Server
    cors_origins: List[str] = field(default_factory=lambda: ["*"])


def load_config() -> TimingConfig:
    cfg = TimingConfig()
    # Allow simple env overrides
    domain = os.getenv("TIMING_DOMAIN", cfg.domain).strip().lower()
    if domain not in DOMAIN_POLICIES:
        raise ValueError(f"TIMING_DOMAIN must be one of {DOMAIN_POLICIES}, got {domain!r}")
    cfg.domain = domain  # type: ignore
    cfg.strict = os.getenv("TIMING_STRICT", "false").lower() in ("1", "true", "yes")
    cfg.epsilon = float(os.getenv("TIMING_EPSILON", cfg.epsilon))
    if not math.isfinite(cfg.epsilon) or cfg.epsilon <= 0:
        raise ValueError("TIMING_EPSILON must be > 0")
    cfg.sample_dt = float(os.getenv("TIMING_SAMPLE_DT", cfg.sample_dt))
    if not math.isfinite(cfg.sample_dt) or cfg.sample_dt <= 0:
        raise ValueError("TIMING_SAMPLE_DT must be > 0")
    cfg.max_samples = int(os.getenv("TIMING_MAX_SAMPLES", cfg.max_samples))
    if cfg.max_samples < 2:
        raise ValueError("TIMING_MAX_SAMPLES must be >= 2")
    origins = os.getenv("TIMING_CORS_ORIGINS")
    if origins:
        cfg.cors_origins = [o.strip() for o in origins.split(",") if o.strip()]
    return cfg

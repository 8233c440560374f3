from __future__ import annotations

import math
from typing import List, Literal, Optional
from pydantic import BaseModel, Field, model_validator

from .easing import DEFAULT_EPSILON, PRESETS, DomainPolicy, EasingCurve, get_preset


class Ease(BaseModel):
    type: Literal["linear", "cubic-bezier", "preset"] = "linear"
    p: Optional[list[float]] = Field(default=None, description="Bezier control points [x1,y1,x2,y2]")
    name: Optional[str] = Field(default=None, description="CSS timing keyword, e.g. ease-in-out")

    @model_validator(mode="after")
    def validate_ease(self):
        if self.type == "cubic-bezier":
            if not self.p or len(self.p) != 4:
                raise ValueError("cubic-bezier requires p=[x1,y1,x2,y2]")
            if not all(math.isfinite(v) for v in self.p):
                raise ValueError("cubic-bezier control points must be finite")
        elif self.type == "preset":
            if self.name not in PRESETS:
                raise ValueError(f"preset requires name in {sorted(PRESETS)}")
        return self

    def to_curve(
        self,
        strict: bool = False,
        domain: DomainPolicy = "clamp",
        epsilon: float = DEFAULT_EPSILON,
    ) -> Optional[EasingCurve]:
        """Build the curve this ease describes; None for linear."""
        if self.type == "cubic-bezier":
            x1, y1, x2, y2 = self.p  # type: ignore
            return EasingCurve.create(x1, y1, x2, y2, strict=strict, domain=domain, epsilon=epsilon)
        if self.type == "preset":
            preset = get_preset(self.name)  # type: ignore
            if preset.domain == domain and preset.epsilon == epsilon:
                return preset
            return EasingCurve(*preset.control_points, domain=domain, epsilon=epsilon)
        return None


class Keyframe(BaseModel):
    t: float = Field(..., ge=0.0, description="Time in seconds")
    value: float = Field(..., description="Animated value at time t")
    ease: Ease = Field(default_factory=Ease)


class Timeline(BaseModel):
    keyframes: List[Keyframe]

    @model_validator(mode="after")
    def validate_keyframes(self):
        if not self.keyframes or len(self.keyframes) < 2:
            raise ValueError("At least two keyframes required")
        # sort and ensure increasing time
        self.keyframes.sort(key=lambda k: k.t)
        last_t = -1.0
        for k in self.keyframes:
            if k.t <= last_t:
                raise ValueError("Keyframe times must be strictly increasing")
            last_t = k.t
        return self


class SampleRequest(BaseModel):
    ease: Ease
    x: float = Field(..., description="Elapsed fraction, normally in [0,1]")

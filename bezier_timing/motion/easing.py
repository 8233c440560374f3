from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Dict, Literal, Tuple

log = logging.getLogger(__name__)


DomainPolicy = Literal["clamp", "extrapolate", "reject"]
DOMAIN_POLICIES: Tuple[str, ...] = ("clamp", "extrapolate", "reject")

DEFAULT_EPSILON = 1e-6

_TWO_PI_3 = 2.0 * math.pi / 3.0
# Relative to |p^3|
_DISC_TOL = 1e-12


class InvalidControlPoint(ValueError):
    pass


class DomainError(ValueError):
    pass


def linear(u: float) -> float:
    if u <= 0.0:
        return 0.0
    if u >= 1.0:
        return 1.0
    return u


def _cbrt(v: float) -> float:
    # Real cube root; keeps the sign for negative arguments
    return math.copysign(abs(v) ** (1.0 / 3.0), v)


def _nearest_unit(*roots: float) -> float:
    # Root with the smallest distance to [0, 1]
    return min(roots, key=lambda t: max(-t, t - 1.0, 0.0))


@dataclass(frozen=True)
class EasingCurve:
    """Cubic Bezier timing function with endpoints fixed at (0,0) and (1,1).

    Everything that does not depend on the sampled x is computed once in
    ``__post_init__``; ``sample`` then solves x(t) = x in closed form
    (Cardano's formula) and evaluates y(t). Instances are immutable and can be
    shared between threads freely.

    Policies:
    - ``domain``: what ``sample`` does with x outside [0,1] ("clamp" returns
      the endpoints, "extrapolate" solves anyway, "reject" raises DomainError).
    - ``epsilon``: |a| below it (never less than DEFAULT_EPSILON) marks the
      cubic as degenerate; those curves are solved through the reduced
      quadratic/linear equation.
    """

    # Control points (x1, y1, x2, y2); start is (0,0) end is (1,1)
    p1x: float
    p1y: float
    p2x: float
    p2y: float
    domain: DomainPolicy = "clamp"
    epsilon: float = DEFAULT_EPSILON

    # x(t) = a*t^3 + b*t^2 + c*t
    a: float = field(init=False, repr=False, compare=False)
    b: float = field(init=False, repr=False, compare=False)
    c: float = field(init=False, repr=False, compare=False)
    degenerate: bool = field(init=False, repr=False, compare=False)

    # Cardano invariants
    _numerator: float = field(init=False, repr=False, compare=False)
    _a_sq27: float = field(init=False, repr=False, compare=False)
    _a_cb54: float = field(init=False, repr=False, compare=False)
    _shift: float = field(init=False, repr=False, compare=False)
    _p_cb: float = field(init=False, repr=False, compare=False)
    _trig_scale: float = field(init=False, repr=False, compare=False)
    _trig_norm: float = field(init=False, repr=False, compare=False)

    # y(t) = ya*t^3 + yb*t^2 + yc*t
    _ya: float = field(init=False, repr=False, compare=False)
    _yb: float = field(init=False, repr=False, compare=False)
    _yc: float = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        for name in ("p1x", "p1y", "p2x", "p2y"):
            value = getattr(self, name)
            if not math.isfinite(value):
                raise InvalidControlPoint(f"{name} must be finite, got {value!r}")
        if self.domain not in DOMAIN_POLICIES:
            raise ValueError(f"Unknown domain policy {self.domain!r}; expected one of {DOMAIN_POLICIES}")
        if not math.isfinite(self.epsilon) or self.epsilon <= 0:
            raise ValueError(f"epsilon must be finite and > 0, got {self.epsilon!r}")

        # The control points can't go out of the horizontal bounds
        p1x = float(min(max(self.p1x, 0.0), 1.0))
        p2x = float(min(max(self.p2x, 0.0), 1.0))
        if p1x != self.p1x or p2x != self.p2x:
            log.debug(f"Clamped control x from ({self.p1x}, {self.p2x}) to ({p1x}, {p2x})")

        _set = object.__setattr__
        _set(self, "p1x", p1x)
        _set(self, "p2x", p2x)
        _set(self, "p1y", float(self.p1y))
        _set(self, "p2y", float(self.p2y))

        # Bx(t) = 3*(1-t)^2*t*x1 + 3*(1-t)*t^2*x2 + t^3, which expands to
        # (3*x1 - 3*x2 + 1)*t^3 + (-6*x1 + 3*x2)*t^2 + 3*x1*t
        p1x3 = 3 * p1x
        p2x3 = 3 * p2x
        a = p1x3 - p2x3 + 1
        b = -2 * p1x3 + p2x3
        c = p1x3
        _set(self, "a", a)
        _set(self, "b", b)
        _set(self, "c", c)

        p1y3 = 3 * self.p1y
        p2y3 = 3 * self.p2y
        _set(self, "_ya", p1y3 - p2y3 + 1)
        _set(self, "_yb", -2 * p1y3 + p2y3)
        _set(self, "_yc", p1y3)

        # The threshold never drops below DEFAULT_EPSILON
        degenerate = not abs(a) >= max(self.epsilon, DEFAULT_EPSILON)
        _set(self, "degenerate", degenerate)
        if degenerate:
            log.debug(f"Degenerate cubic (a={a!r}) for {self.control_points}; using reduced equation")
            for name in ("_numerator", "_a_sq27", "_a_cb54", "_shift", "_p_cb", "_trig_scale", "_trig_norm"):
                _set(self, name, 0.0)
            return

        a_sq = a * a
        b_sq = b * b
        ac3 = 3 * a * c
        _set(self, "_numerator", 3 * b * ac3 - 2 * b_sq * b)
        _set(self, "_a_sq27", 27 * a_sq)
        _set(self, "_a_cb54", 54 * a_sq * a)
        _set(self, "_shift", b / (3 * a))

        # Cardano only needs p^3, the trigonometric form needs sqrt(-p)
        p = (ac3 - b_sq) / (9 * a_sq)
        p_cb = p * p * p
        _set(self, "_p_cb", p_cb)
        if p < 0:
            _set(self, "_trig_scale", 2 * math.sqrt(-p))
            _set(self, "_trig_norm", math.sqrt(-p_cb))
        else:
            _set(self, "_trig_scale", 0.0)
            _set(self, "_trig_norm", 0.0)

    @classmethod
    def create(
        cls,
        p1x: float,
        p1y: float,
        p2x: float,
        p2y: float,
        *,
        strict: bool = False,
        domain: DomainPolicy = "clamp",
        epsilon: float = DEFAULT_EPSILON,
    ) -> "EasingCurve":
        """Build a curve; with ``strict`` an x component outside [0,1] is an error instead of being clamped."""
        if strict:
            for name, value in (("p1x", p1x), ("p2x", p2x)):
                if not 0.0 <= value <= 1.0:
                    raise InvalidControlPoint(f"{name}={value!r} is outside [0, 1]")
        return cls(p1x, p1y, p2x, p2y, domain=domain, epsilon=epsilon)

    @property
    def control_points(self) -> Tuple[float, float, float, float]:
        return (self.p1x, self.p1y, self.p2x, self.p2y)

    def x_at(self, t: float) -> float:
        return ((self.a * t + self.b) * t + self.c) * t

    def y_at(self, t: float) -> float:
        return ((self._ya * t + self._yb) * t + self._yc) * t

    def solve(self, x: float) -> float:
        """Return the curve parameter t for which x(t) == x."""
        x = self._check_domain(x)
        if self.domain == "clamp":
            if x <= 0.0:
                return 0.0
            if x >= 1.0:
                return 1.0
        if self.degenerate:
            t = self._solve_reduced(x)
        else:
            t = self._solve_cubic(x)
        if self.domain == "clamp":
            return min(max(t, 0.0), 1.0)
        return t

    def sample(self, x: float) -> float:
        """Return y for a given x in [0,1], solving x(t) = x, then y(t).

        x is the elapsed fraction of the animation, the result is the eased
        progress. Under the default "clamp" policy x <= 0 gives 0.0 and
        x >= 1 gives 1.0.
        """
        if self.domain == "clamp":
            if x <= 0.0:
                return 0.0
            if x >= 1.0:
                return 1.0
        t = self.solve(x)
        return ((self._ya * t + self._yb) * t + self._yc) * t

    __call__ = sample

    def _check_domain(self, x: float) -> float:
        if math.isnan(x):
            raise DomainError("x must not be NaN")
        if 0.0 <= x <= 1.0 or self.domain == "extrapolate":
            return x
        if self.domain == "reject":
            raise DomainError(f"x={x!r} is outside [0, 1]")
        return 0.0 if x < 0.0 else 1.0

    def _solve_cubic(self, x: float) -> float:
        # Cardano's formula for a*t^3 + b*t^2 + c*t + d = 0 with d = -x:
        # t = r + s - b / (3 * a), r = cbrt(q + sqrt(p^3 + q^2)), s = cbrt(q - sqrt(p^3 + q^2)),
        # p = (3*a*c - b^2) / (9*a^2), q = (9*a*b*c - 27*a^2*d - 2*b^3) / (54*a^3)
        d = -x
        q = (self._numerator - self._a_sq27 * d) / self._a_cb54
        disc = self._p_cb + q * q
        if self._trig_norm == 0.0 or disc > _DISC_TOL * -self._p_cb:
            root = math.sqrt(disc)
            return _cbrt(q + root) + _cbrt(q - root) - self._shift

        # Three real roots (x'(t) vanishes somewhere), trigonometric form.
        # Also taken when disc is rounding noise around a double root.
        cos_arg = min(max(q / self._trig_norm, -1.0), 1.0)
        phi = math.acos(cos_arg) / 3.0
        scale = self._trig_scale
        shift = self._shift
        return _nearest_unit(
            scale * math.cos(phi) - shift,
            scale * math.cos(phi - _TWO_PI_3) - shift,
            scale * math.cos(phi - 2 * _TWO_PI_3) - shift,
        )

    def _solve_reduced(self, x: float) -> float:
        # a ~ 0: b*t^2 + c*t - x = 0; a + b + c == 1 so b and c can't both vanish
        b = self.b
        c = self.c
        if abs(b) < max(self.epsilon, DEFAULT_EPSILON):
            return x / c
        disc = c * c + 4.0 * b * x
        if disc < 0.0:
            return -c / (2.0 * b)
        k = -0.5 * (c + math.copysign(math.sqrt(disc), c))
        if k == 0.0:
            return 0.0
        return _nearest_unit(k / b, -x / k)


# CSS named timing functions
PRESETS: Dict[str, EasingCurve] = {
    "linear": EasingCurve(0.0, 0.0, 1.0, 1.0),
    "ease": EasingCurve(0.25, 0.1, 0.25, 1.0),
    "ease-in": EasingCurve(0.42, 0.0, 1.0, 1.0),
    "ease-out": EasingCurve(0.0, 0.0, 0.58, 1.0),
    "ease-in-out": EasingCurve(0.42, 0.0, 0.58, 1.0),
}


def get_preset(name: str) -> EasingCurve:
    try:
        return PRESETS[name]
    except KeyError:
        raise KeyError(f"Unknown preset {name!r}; known: {sorted(PRESETS)}") from None

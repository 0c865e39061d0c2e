# MIT License (see LICENSE)
"""
Typed parameter sets resolved once per frame.

The host supplies a flat ``{name: float}`` mapping every frame. Each
simulation declares a frozen dataclass whose fields carry:
  - the external key (e.g. "magneticField"),
  - the default value,
  - the accepted range (values outside are clamped, never rejected),
  - whether the value is an integer count.

Resolution rules:
  - missing keys keep the previous value,
  - NaN/inf values are ignored (previous value kept),
  - out-of-range values are clamped to the nearest bound,
  - integer fields are rounded.

Example:
    @dataclass(frozen=True)
    class HelixParams(Parameters):
        charge: float = param(1.0, "charge", -5.0, 5.0)

    p = HelixParams()
    p = p.resolve({"charge": 9.0})   # p.charge == 5.0
    p = p.resolve({})                # unchanged
"""
from __future__ import annotations
import logging
import math
from dataclasses import dataclass, field, fields, replace
from typing import Any, Mapping, TypeVar

logger = logging.getLogger(__name__)

P = TypeVar("P", bound="Parameters")


def param(
    default: float,
    key: str,
    lo: float = -math.inf,
    hi: float = math.inf,
    integer: bool = False,
) -> Any:
    """
    Declare a parameter field.

    Args:
        default: Value used until the host supplies one.
        key: Name of the parameter in the host's mapping.
        lo: Lower clamp bound (inclusive).
        hi: Upper clamp bound (inclusive).
        integer: Round to the nearest integer after clamping.
    """
    return field(default=default, metadata={"key": key, "lo": lo, "hi": hi, "integer": integer})


def _coerce(f, value: float) -> float:
    lo, hi = f.metadata["lo"], f.metadata["hi"]
    out = float(value)
    if out < lo or out > hi:
        # integer fields are population counts and presets
        log = logger.warning if f.metadata["integer"] else logger.debug
        log("parameter %s=%r clamped into [%s, %s]", f.metadata["key"], value, lo, hi)
        out = min(max(out, lo), hi)
    if f.metadata["integer"]:
        out = int(round(out))
    return out


@dataclass(frozen=True)
class Parameters:
    """Base class for per-simulation parameter sets."""

    def __post_init__(self) -> None:
        for f in fields(self):
            if "key" not in f.metadata:
                continue
            object.__setattr__(self, f.name, _coerce(f, getattr(self, f.name)))

    @classmethod
    def keys(cls) -> dict[str, str]:
        """Map external key -> field name."""
        return {f.metadata["key"]: f.name for f in fields(cls) if "key" in f.metadata}

    def resolve(self: P, mapping: Mapping[str, float] | None) -> P:
        """
        Return a copy updated from a host parameter mapping.

        Unknown keys are ignored; the host may share one mapping between
        several simulations.
        """
        if not mapping:
            return self
        updates: dict[str, float] = {}
        for key, name in self.keys().items():
            if key not in mapping:
                continue
            value = mapping[key]
            try:
                value = float(value)
            except (TypeError, ValueError):
                logger.debug("parameter %s=%r is not numeric; keeping %r", key, value, getattr(self, name))
                continue
            if not math.isfinite(value):
                logger.debug("parameter %s is not finite; keeping %r", key, getattr(self, name))
                continue
            updates[name] = value
        if not updates:
            return self
        return replace(self, **updates)

    @classmethod
    def from_mapping(cls: type[P], mapping: Mapping[str, float] | None) -> P:
        """Defaults overlaid with ``mapping``."""
        return cls().resolve(mapping)

    def to_mapping(self) -> dict[str, float]:
        """External-key view, suitable for JSON presets."""
        return {key: getattr(self, name) for key, name in self.keys().items()}

"""Legacy ``E-x`` / ``E-xt`` input keys and their structured equivalents.

The static keys ``E-x``, ``E-y``, ``E-z`` take ``n a phase`` and map to
``electric-field/<axis>/E0``. The dynamic keys ``E-xt``, ``E-yt``, ``E-zt``
take ``1 omega 0`` or ``3 omega 0 t0 0 sigma 0`` and map to
``electric-field/<axis>/{omega,t0,sigma}``.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any

from efield_sim.errors import InputGrammarError
from efield_sim.models.field import AXIS_NAMES

SECTION = "electric-field"


def _to_int(token: str) -> int:
    try:
        return int(token)
    except ValueError as exc:
        raise InputGrammarError(f"Invalid term count {token!r} for electric field") from exc


def _to_real(token: str) -> float:
    try:
        return float(token)
    except ValueError as exc:
        raise InputGrammarError(f"Invalid number {token!r} for electric field") from exc


def convert_static_parameters(value: str) -> float:
    """Convert a static ``E-x`` value to the amplitude E0."""
    tokens = value.split()
    if not tokens:
        return 0.0
    n = _to_int(tokens[0])
    if n <= 0:
        return 0.0
    if n != 1:
        raise InputGrammarError("Only one electric field term supported for each dimension")
    # The trailing phase token of the old format is optional and ignored.
    if len(tokens) not in (2, 3):
        raise InputGrammarError("Expected exactly one electric field amplitude value")
    return _to_real(tokens[1])


def convert_dynamic_parameters(value: str) -> dict[str, float]:
    """Convert a dynamic ``E-xt`` value to omega, and optionally t0 and sigma."""
    tokens = value.split()
    if not tokens:
        return {}
    n = _to_int(tokens[0])
    if n == 1:
        if len(tokens) != 3:
            raise InputGrammarError("Please specify 1 omega 0 for non-pulsed fields")
        return {"omega": _to_real(tokens[1])}
    if n == 3:
        if len(tokens) != 7:
            raise InputGrammarError("Please specify 3 omega 0 t0 0 sigma 0 for pulsed fields")
        return {
            "omega": _to_real(tokens[1]),
            "t0": _to_real(tokens[3]),
            "sigma": _to_real(tokens[5]),
        }
    raise InputGrammarError("Incomprehensible input for electric field")


@dataclass(frozen=True, slots=True)
class TransformRule:
    """Maps one legacy key onto values of one ``electric-field/<axis>`` section."""

    source_key: str
    axis: str
    convert: Callable[[str], dict[str, float]]

    def apply(self, value: str) -> dict[str, float]:
        return self.convert(value)


def _static_rule(value: str) -> dict[str, float]:
    return {"E0": convert_static_parameters(value)}


class TransformRules:
    """Collection of legacy-key rules registered by input-record extensions."""

    def __init__(self) -> None:
        self._rules: dict[str, TransformRule] = {}

    def add_rule(self, rule: TransformRule) -> None:
        if rule.source_key in self._rules:
            raise ValueError(f"Duplicate transform rule for key {rule.source_key!r}.")
        self._rules[rule.source_key] = rule

    def __contains__(self, key: object) -> bool:
        return key in self._rules

    def __iter__(self):
        return iter(self._rules.values())

    def transform(self, legacy: Mapping[str, str]) -> dict[str, Any]:
        """Apply all rules; unknown keys are left for other consumers."""
        sections: dict[str, dict[str, float]] = {}
        for key, raw in legacy.items():
            rule = self._rules.get(key)
            if rule is None:
                continue
            values = rule.apply(str(raw))
            section = sections.setdefault(rule.axis, {})
            for name, value in values.items():
                if name in section:
                    raise InputGrammarError(
                        f"Parameter {SECTION}/{rule.axis}/{name} is set by more than one key"
                    )
                section[name] = value
        return {SECTION: sections} if sections else {}


def register_electric_field_rules(rules: TransformRules) -> None:
    for axis in AXIS_NAMES:
        rules.add_rule(TransformRule(f"E-{axis}", axis, _static_rule))
        rules.add_rule(TransformRule(f"E-{axis}t", axis, convert_dynamic_parameters))


def transform_legacy_parameters(legacy: Mapping[str, str]) -> dict[str, Any]:
    """Normalize legacy ``E-*`` keys into a nested ``electric-field`` mapping."""
    rules = TransformRules()
    register_electric_field_rules(rules)
    return rules.transform(legacy)


def parse_mdp(text: str) -> dict[str, str]:
    """Parse ``key = value`` lines; ``;`` starts a comment."""
    values: dict[str, str] = {}
    for lineno, raw in enumerate(text.splitlines(), start=1):
        line = raw.split(";", 1)[0].strip()
        if not line:
            continue
        if "=" not in line:
            raise InputGrammarError(f"Line {lineno}: expected 'key = value', got {raw.strip()!r}")
        key, value = (part.strip() for part in line.split("=", 1))
        # Older files spell keys with underscores.
        key = key.replace("_", "-")
        if not key:
            raise InputGrammarError(f"Line {lineno}: missing key")
        if key in values:
            raise InputGrammarError(f"Parameter {key!r} is specified more than once")
        values[key] = value
    return values


def merge_parameters(
    structured: Mapping[str, Any] | None, legacy: Mapping[str, str] | None
) -> dict[str, Any]:
    """Combine a structured ``electric-field`` mapping with transformed legacy keys.

    A parameter supplied both ways is rejected.
    """
    merged: dict[str, dict[str, Any]] = {
        axis: dict(values) for axis, values in (structured or {}).items()
    }
    transformed = transform_legacy_parameters(legacy or {}).get(SECTION, {})
    for axis, values in transformed.items():
        section = merged.setdefault(axis, {})
        for name, value in values.items():
            if name in section:
                raise InputGrammarError(
                    f"Parameter {SECTION}/{axis}/{name} is given in both legacy and "
                    "structured form"
                )
            section[name] = value
    return merged

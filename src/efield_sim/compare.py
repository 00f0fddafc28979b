from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from efield_sim.models.field import AXIS_NAMES, DIM, PARAMETER_NAMES, FieldModel


class FieldMismatch(BaseModel):
    model_config = ConfigDict(frozen=True)

    axis: str
    parameter: str
    value_a: float
    value_b: float


def values_equal(x: float, y: float, reltol: float, abstol: float) -> bool:
    return abs(x - y) <= max(abstol, reltol * max(abs(x), abs(y)))


def compare_field_models(
    a: FieldModel, b: FieldModel, reltol: float = 0.0, abstol: float = 0.0
) -> list[FieldMismatch]:
    """Return one entry per parameter that differs beyond tolerance."""
    lhs = a.as_array()
    rhs = b.as_array()
    mismatches: list[FieldMismatch] = []
    for m in range(DIM):
        for p, name in enumerate(PARAMETER_NAMES):
            x = float(lhs[p, m])
            y = float(rhs[p, m])
            if not values_equal(x, y, reltol, abstol):
                mismatches.append(
                    FieldMismatch(axis=AXIS_NAMES[m], parameter=name, value_a=x, value_b=y)
                )
    return mismatches


def format_mismatches(mismatches: list[FieldMismatch]) -> str:
    return "".join(
        f"electric-field[{item.axis}].{item.parameter}: {item.value_a:g} - {item.value_b:g}\n"
        for item in mismatches
    )

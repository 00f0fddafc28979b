from __future__ import annotations

import math
from dataclasses import dataclass
from dataclasses import field as dataclass_field

import numpy as np
from pydantic import BaseModel, ConfigDict, Field, field_validator

DIM = 3
AXIS_NAMES: tuple[str, str, str] = ("x", "y", "z")
PARAMETER_NAMES: tuple[str, str, str, str] = ("E0", "omega", "t0", "sigma")


class FieldTerm(BaseModel):
    """One spatial component of the applied field.

    ``sigma == 0`` selects a plain cosine (static when ``omega == 0``);
    ``sigma > 0`` multiplies the cosine by a Gaussian centred on ``t0``.
    """

    model_config = ConfigDict(frozen=True)

    amplitude: float = Field(default=0.0, description="Field amplitude E0 in V/nm.")
    omega: float = Field(default=0.0, description="Angular frequency in 1/ps.")
    t0: float = Field(default=0.0, description="Time of the pulse peak in ps.")
    sigma: float = Field(
        default=0.0,
        description="Width of the pulse in ps; zero means no pulse envelope.",
    )

    @field_validator("sigma")
    @classmethod
    def _validate_sigma(cls, value: float) -> float:
        if value < 0.0:
            raise ValueError("FieldTerm.sigma must be >= 0.")
        return value

    @property
    def is_static(self) -> bool:
        return self.omega == 0.0 and self.t0 == 0.0 and self.sigma == 0.0

    def evaluate(self, t: float) -> float:
        """Return the field strength (V/nm) at time ``t`` (ps)."""
        if self.sigma > 0:
            dt = t - self.t0
            return self.amplitude * (
                math.cos(self.omega * dt) * math.exp(-(dt * dt) / (2.0 * self.sigma * self.sigma))
            )
        return self.amplitude * math.cos(self.omega * t)


def evaluate_series(term: FieldTerm, times: np.ndarray) -> np.ndarray:
    """Vectorized ``FieldTerm.evaluate`` over an array of times."""

    t = np.asarray(times, dtype=float)
    if term.sigma > 0:
        dt = t - term.t0
        return term.amplitude * (
            np.cos(term.omega * dt) * np.exp(-(dt * dt) / (2.0 * term.sigma * term.sigma))
        )
    return term.amplitude * np.cos(term.omega * t)


def _check_axis(axis: int) -> int:
    if not 0 <= axis < DIM:
        raise IndexError(f"Axis index must be 0, 1 or 2, got {axis}.")
    return axis


@dataclass(slots=True)
class FieldModel:
    """The applied field: exactly one ``FieldTerm`` per spatial axis."""

    terms: list[FieldTerm] = dataclass_field(
        default_factory=lambda: [FieldTerm() for _ in range(DIM)]
    )

    def __post_init__(self) -> None:
        if len(self.terms) != DIM:
            raise ValueError(
                f"FieldModel requires exactly {DIM} terms (one per axis), got {len(self.terms)}."
            )
        self.terms = list(self.terms)

    def set_field_term(self, axis: int, a: float, omega: float, t0: float, sigma: float) -> None:
        self.terms[_check_axis(axis)] = FieldTerm(amplitude=a, omega=omega, t0=t0, sigma=sigma)

    def term(self, axis: int) -> FieldTerm:
        return self.terms[_check_axis(axis)]

    def is_active(self) -> bool:
        return any(term.amplitude != 0 for term in self.terms)

    def field(self, axis: int, t: float) -> float:
        return self.term(axis).evaluate(t)

    def field_vector(self, t: float) -> tuple[float, float, float]:
        return (self.terms[0].evaluate(t), self.terms[1].evaluate(t), self.terms[2].evaluate(t))

    def as_array(self) -> np.ndarray:
        """Pack into a (4, 3) float64 array; rows are E0, omega, t0, sigma."""
        return np.array(
            [
                [term.amplitude for term in self.terms],
                [term.omega for term in self.terms],
                [term.t0 for term in self.terms],
                [term.sigma for term in self.terms],
            ],
            dtype=np.float64,
        )

    def install_array(self, values: np.ndarray) -> None:
        arr = np.asarray(values, dtype=np.float64)
        if arr.shape != (4, DIM):
            raise ValueError(f"Expected a (4, {DIM}) parameter array, got shape {arr.shape}.")
        for m in range(DIM):
            self.set_field_term(
                m, float(arr[0, m]), float(arr[1, m]), float(arr[2, m]), float(arr[3, m])
            )

    @classmethod
    def from_array(cls, values: np.ndarray) -> FieldModel:
        model = cls()
        model.install_array(values)
        return model


def format_parameters(model: FieldModel, indent: int = 0) -> str:
    pad = " " * indent
    lines = [f"{pad}ElectricField:"]
    for name, term in zip(AXIS_NAMES, model.terms):
        lines.append(
            f"{pad}   -{name.upper()} E0 = {term.amplitude:g} omega = {term.omega:g} "
            f"t0 = {term.t0:g} sigma = {term.sigma:g}"
        )
    return "\n".join(lines) + "\n"

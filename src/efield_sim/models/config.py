from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from efield_sim.models.field import AXIS_NAMES, FieldModel


class AxisFieldCfg(BaseModel):
    """One ``electric-field/<axis>`` section: E0 (V/nm), omega (1/ps), t0 and sigma (ps)."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="forbid")

    e0: float = Field(default=0.0, alias="E0")
    omega: float = 0.0
    t0: float = 0.0
    sigma: float = 0.0

    @field_validator("sigma")
    @classmethod
    def _validate_sigma(cls, value: float) -> float:
        if value < 0.0:
            raise ValueError("electric-field sigma must be >= 0.")
        return value


class ElectricFieldCfg(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    x: AxisFieldCfg = Field(default_factory=AxisFieldCfg)
    y: AxisFieldCfg = Field(default_factory=AxisFieldCfg)
    z: AxisFieldCfg = Field(default_factory=AxisFieldCfg)

    def to_field_model(self) -> FieldModel:
        model = FieldModel()
        for m, name in enumerate(AXIS_NAMES):
            section: AxisFieldCfg = getattr(self, name)
            model.set_field_term(m, section.e0, section.omega, section.t0, section.sigma)
        return model


class OutputCfg(BaseModel):
    model_config = ConfigDict(frozen=True)

    trace_file: str | None = "field.xvg"
    append: bool = False
    archive_precision: Literal["single", "double"] = "double"


class ParticlesCfg(BaseModel):
    model_config = ConfigDict(frozen=True)

    charges: list[float] = Field(default_factory=lambda: [1.0])
    n_local: int | None = None

    @field_validator("n_local")
    @classmethod
    def _validate_n_local(cls, value: int | None) -> int | None:
        if value is not None and value < 0:
            raise ValueError("ParticlesCfg.n_local must be >= 0.")
        return value


class RunCfg(BaseModel):
    model_config = ConfigDict(frozen=True)

    n_steps: int = 100
    dt_ps: float = 0.002
    t_start_ps: float = 0.0

    @field_validator("n_steps")
    @classmethod
    def _validate_n_steps(cls, value: int) -> int:
        if value < 0:
            raise ValueError("RunCfg.n_steps must be >= 0.")
        return value

    @field_validator("dt_ps")
    @classmethod
    def _validate_dt(cls, value: float) -> float:
        if value <= 0.0:
            raise ValueError("RunCfg.dt_ps must be > 0.")
        return value


class SimulationConfig(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    electric_field: ElectricFieldCfg = Field(
        default_factory=ElectricFieldCfg, alias="electric-field"
    )
    particles: ParticlesCfg = Field(default_factory=ParticlesCfg)
    run: RunCfg = Field(default_factory=RunCfg)
    output: OutputCfg = Field(default_factory=OutputCfg)

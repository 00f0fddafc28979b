from efield_sim.models.config import (
    AxisFieldCfg,
    ElectricFieldCfg,
    OutputCfg,
    ParticlesCfg,
    RunCfg,
    SimulationConfig,
)
from efield_sim.models.field import (
    AXIS_NAMES,
    DIM,
    PARAMETER_NAMES,
    FieldModel,
    FieldTerm,
    evaluate_series,
    format_parameters,
)

__all__ = [
    "AXIS_NAMES",
    "AxisFieldCfg",
    "DIM",
    "ElectricFieldCfg",
    "FieldModel",
    "FieldTerm",
    "OutputCfg",
    "PARAMETER_NAMES",
    "ParticlesCfg",
    "RunCfg",
    "SimulationConfig",
    "evaluate_series",
    "format_parameters",
]

from efield_sim.extensions.base import InputRecExtension
from efield_sim.extensions.electric_field import ElectricField
from efield_sim.extensions.registry import EXTENSION_BACKENDS, build_extension, build_extensions

__all__ = [
    "EXTENSION_BACKENDS",
    "ElectricField",
    "InputRecExtension",
    "build_extension",
    "build_extensions",
]

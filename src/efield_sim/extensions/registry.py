from __future__ import annotations

from collections.abc import Iterable

from efield_sim.extensions.base import InputRecExtension
from efield_sim.extensions.electric_field import ElectricField

EXTENSION_BACKENDS: dict[str, type[InputRecExtension]] = {"electric-field": ElectricField}


def build_extension(name: str) -> InputRecExtension:
    try:
        return EXTENSION_BACKENDS[name]()
    except KeyError as exc:
        raise ValueError(f"Unknown input-record extension: {name!r}") from exc


def build_extensions(names: Iterable[str] = ("electric-field",)) -> list[InputRecExtension]:
    return [build_extension(name) for name in names]

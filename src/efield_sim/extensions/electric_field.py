from __future__ import annotations

import logging
import warnings
from pathlib import Path
from typing import BinaryIO, Literal, TextIO

import numpy as np

from efield_sim.citations import please_cite
from efield_sim.codec import Precision, read_field_record, write_field_record
from efield_sim.compare import FieldMismatch, compare_field_models
from efield_sim.config_transform import TransformRules, register_electric_field_rules
from efield_sim.extensions.base import InputRecExtension
from efield_sim.force import calculate_forces
from efield_sim.models.config import ElectricFieldCfg
from efield_sim.models.field import FieldModel, format_parameters
from efield_sim.parallel import Communicator, broadcast_field_model
from efield_sim.physics.units import FIELDFAC
from efield_sim.trace import FieldTrace

logger = logging.getLogger(__name__)

Lifecycle = Literal["unconfigured", "configured", "distributed", "active", "closed"]


class ElectricField(InputRecExtension):
    """Time dependent electric field along X, Y and Z.

    Each component can be static, oscillating, or an oscillation under a
    Gaussian pulse envelope.
    """

    name = "electric-field"

    def __init__(self, model: FieldModel | None = None, *, field_fac: float = FIELDFAC):
        self.model = model if model is not None else FieldModel()
        self.field_fac = field_fac
        self.lifecycle: Lifecycle = "configured" if model is not None else "unconfigured"
        self._trace: FieldTrace | None = None

    @property
    def trace(self) -> FieldTrace | None:
        return self._trace

    def is_active(self) -> bool:
        return self.model.is_active()

    def init_mdp_transform(self, rules: TransformRules) -> None:
        register_electric_field_rules(rules)

    def bind_options(self, section: ElectricFieldCfg) -> None:
        self.model = section.to_field_model()
        self.lifecycle = "configured"
        if not self.model.is_active() and any(
            not term.is_static for term in self.model.terms
        ):
            warnings.warn(
                "Electric-field omega/t0/sigma are set but every E0 is zero; "
                "the field is inactive.",
                stacklevel=2,
            )

    def write_archive(self, fp: BinaryIO, *, precision: Precision = "double") -> None:
        write_field_record(fp, self.model, precision=precision)

    def read_archive(self, fp: BinaryIO, *, precision: Precision = "double") -> None:
        self.model = read_field_record(fp, precision=precision)
        self.lifecycle = "configured"

    def broadcast(self, comm: Communicator | None, *, root: int = 0) -> None:
        broadcast_field_model(self.model, comm, root=root)
        self.lifecycle = "distributed"

    def compare(
        self, other: InputRecExtension, reltol: float, abstol: float
    ) -> list[FieldMismatch]:
        if not isinstance(other, ElectricField):
            raise TypeError(f"Cannot compare ElectricField with {type(other).__name__}.")
        return compare_field_models(self.model, other.model, reltol, abstol)

    def print_parameters(self, fp: TextIO, indent: int = 0) -> None:
        fp.write(format_parameters(self.model, indent))

    def init_output(
        self,
        log: TextIO | None,
        *,
        is_coordinator: bool,
        trace_path: str | Path | None = None,
        append: bool = False,
    ) -> None:
        if self.lifecycle != "distributed" or self._trace is not None:
            raise RuntimeError(
                f"Electric field output initialized in state {self.lifecycle!r}; "
                "output is opened once, after the parameters are broadcast."
            )
        self.lifecycle = "active"
        if not self.is_active() or not is_coordinator:
            return
        please_cite(log, "Caleman2008a")
        if trace_path is not None:
            self._trace = FieldTrace(trace_path, append=append).open()
            logger.info("Writing applied field to %s", trace_path)

    def finish_output(self) -> None:
        if self._trace is not None:
            self._trace.close()
            self._trace = None
        self.lifecycle = "closed"

    def provides_forces(self) -> bool:
        return self.is_active()

    def calculate_forces(
        self,
        charges: np.ndarray,
        n_local: int,
        force: np.ndarray,
        t: float,
        *,
        is_coordinator: bool,
    ) -> None:
        if self.lifecycle not in ("distributed", "active"):
            raise RuntimeError(
                f"Electric field forces requested in state {self.lifecycle!r}; "
                "parameters must be broadcast before the first step."
            )
        self.lifecycle = "active"
        calculate_forces(
            self.model,
            charges,
            n_local,
            force,
            t,
            is_coordinator=is_coordinator,
            trace=self._trace,
            field_fac=self.field_fac,
        )

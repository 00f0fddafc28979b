from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, BinaryIO, TextIO

import numpy as np

from efield_sim.codec import Precision
from efield_sim.config_transform import TransformRules
from efield_sim.parallel import Communicator


class InputRecExtension(ABC):
    """Capabilities a simulation feature exposes to the driver.

    The driver keeps a list of these without knowing concrete types and calls
    them in lifecycle order: configure (``init_mdp_transform`` + ``bind_options``
    or ``read_archive``), ``broadcast``, ``init_output``, ``calculate_forces``
    every step, then ``finish_output``.
    """

    name: str

    @abstractmethod
    def init_mdp_transform(self, rules: TransformRules) -> None: ...

    @abstractmethod
    def bind_options(self, section: Any) -> None: ...

    @abstractmethod
    def write_archive(self, fp: BinaryIO, *, precision: Precision = "double") -> None: ...

    @abstractmethod
    def read_archive(self, fp: BinaryIO, *, precision: Precision = "double") -> None: ...

    @abstractmethod
    def broadcast(self, comm: Communicator | None, *, root: int = 0) -> None: ...

    @abstractmethod
    def compare(self, other: InputRecExtension, reltol: float, abstol: float) -> list[Any]: ...

    @abstractmethod
    def print_parameters(self, fp: TextIO, indent: int = 0) -> None: ...

    @abstractmethod
    def init_output(
        self,
        log: TextIO | None,
        *,
        is_coordinator: bool,
        trace_path: str | Path | None = None,
        append: bool = False,
    ) -> None: ...

    @abstractmethod
    def finish_output(self) -> None: ...

    @abstractmethod
    def provides_forces(self) -> bool: ...

    @abstractmethod
    def calculate_forces(
        self,
        charges: np.ndarray,
        n_local: int,
        force: np.ndarray,
        t: float,
        *,
        is_coordinator: bool,
    ) -> None: ...

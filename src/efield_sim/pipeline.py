from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, TextIO

import numpy as np

from efield_sim.config_transform import SECTION, merge_parameters
from efield_sim.extensions import ElectricField, InputRecExtension, build_extensions
from efield_sim.models import DIM, SimulationConfig, evaluate_series
from efield_sim.parallel import Communicator, is_coordinator

logger = logging.getLogger(__name__)


def resolve_config(payload: Mapping[str, Any]) -> SimulationConfig:
    """Validate a raw config mapping, folding ``legacy`` E-* keys into ``electric-field``."""
    data = dict(payload)
    legacy = data.pop("legacy", None) or {}
    if not isinstance(legacy, Mapping):
        raise ValueError("Config 'legacy' entry must be a mapping of key -> string.")
    structured = data.get(SECTION) or {}
    if not isinstance(structured, Mapping):
        raise ValueError(f"Config '{SECTION}' entry must be a mapping.")
    data[SECTION] = merge_parameters(structured, {k: str(v) for k, v in legacy.items()})
    return SimulationConfig.model_validate(data)


@dataclass(slots=True)
class FieldRunResult:
    times: np.ndarray
    field: np.ndarray
    forces: np.ndarray
    active: bool
    extensions: list[InputRecExtension] = field(default_factory=list)

    @property
    def electric_field(self) -> ElectricField:
        for ext in self.extensions:
            if isinstance(ext, ElectricField):
                return ext
        raise LookupError("No electric-field extension in this run.")


def _option_section(cfg: SimulationConfig, ext: InputRecExtension) -> Any:
    return getattr(cfg, ext.name.replace("-", "_"))


def run_field_simulation(
    cfg: SimulationConfig,
    *,
    comm: Communicator | None = None,
    log: TextIO | None = None,
    trace_path: str | Path | None = None,
    extensions: list[InputRecExtension] | None = None,
) -> FieldRunResult:
    """Drive the extension lifecycle over ``cfg.run.n_steps`` steps.

    Each step starts from a zeroed force buffer so the returned ``forces`` hold
    exactly the applied-field contribution per step.
    """
    if extensions is None:
        exts = build_extensions()
        for ext in exts:
            ext.bind_options(_option_section(cfg, ext))
    else:
        exts = extensions
    coordinator = is_coordinator(comm)

    for ext in exts:
        ext.broadcast(comm)

    charges = np.asarray(cfg.particles.charges, dtype=np.float64)
    n_local = cfg.particles.n_local if cfg.particles.n_local is not None else charges.size
    n_local = min(n_local, charges.size)
    n_steps = cfg.run.n_steps
    times = cfg.run.t_start_ps + cfg.run.dt_ps * np.arange(n_steps, dtype=np.float64)
    forces = np.zeros((n_steps, charges.size, 3), dtype=np.float64)

    for ext in exts:
        ext.init_output(
            log,
            is_coordinator=coordinator,
            trace_path=trace_path,
            append=cfg.output.append,
        )
    try:
        providers = [ext for ext in exts if ext.provides_forces()]
        logger.info(
            "Running %d steps with %d force provider(s), %d local particle(s)",
            n_steps,
            len(providers),
            n_local,
        )
        for step, t in enumerate(times):
            for ext in providers:
                ext.calculate_forces(
                    charges, n_local, forces[step], float(t), is_coordinator=coordinator
                )
    finally:
        for ext in exts:
            ext.finish_output()

    efield = next((ext for ext in exts if isinstance(ext, ElectricField)), None)
    if efield is not None:
        samples = np.column_stack(
            [evaluate_series(efield.model.term(m), times) for m in range(DIM)]
        )
        active = efield.is_active()
    else:
        samples = np.zeros((n_steps, DIM))
        active = False
    return FieldRunResult(
        times=times, field=samples, forces=forces, active=active, extensions=exts
    )

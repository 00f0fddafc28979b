from __future__ import annotations

import numpy as np

from efield_sim.models.field import DIM, FieldModel
from efield_sim.physics.units import FIELDFAC
from efield_sim.trace import FieldTrace


def calculate_forces(
    model: FieldModel,
    charges: np.ndarray,
    n_local: int,
    force: np.ndarray,
    t: float,
    *,
    is_coordinator: bool = True,
    trace: FieldTrace | None = None,
    field_fac: float = FIELDFAC,
) -> None:
    """Add ``q_i * FIELDFAC * E(t)`` to ``force[:n_local]`` in place.

    ``force`` has shape (N, 3) and belongs to the caller; entries are only
    incremented. Uses the unperturbed charges, so results are not correct for
    runs with perturbed charges.
    """
    if not model.is_active():
        return

    q = np.asarray(charges)[:n_local]
    for m in range(DIM):
        ext = field_fac * model.field(m, t)
        if ext != 0:
            force[:n_local, m] += q * ext

    if is_coordinator and trace is not None and trace.is_open:
        trace.write(t, *model.field_vector(t))

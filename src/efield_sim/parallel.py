from __future__ import annotations

import logging
from typing import Any, Protocol, runtime_checkable

import numpy as np

from efield_sim.models.field import DIM, FieldModel

logger = logging.getLogger(__name__)


@runtime_checkable
class Communicator(Protocol):
    """Subset of the ``mpi4py.MPI.Comm`` API used for parameter distribution."""

    def Get_rank(self) -> int: ...

    def Get_size(self) -> int: ...

    def Bcast(self, buf: Any, root: int = 0) -> None: ...


def is_coordinator(comm: Communicator | None, root: int = 0) -> bool:
    if comm is None:
        return True
    return comm.Get_rank() == root


def broadcast_field_model(
    model: FieldModel, comm: Communicator | None, *, root: int = 0
) -> FieldModel:
    """Replicate the root's field parameters onto every rank.

    Blocking and collective: all ranks must call it once before the first force
    evaluation. Non-root ranks overwrite whatever they parsed locally.
    """
    if comm is None:
        return model

    # Rows: E0, omega, t0, sigma; columns: X, Y, Z.
    buf = np.zeros((4, DIM), dtype=np.float64)
    coordinator = is_coordinator(comm, root)
    if coordinator:
        buf[...] = model.as_array()
    comm.Bcast(buf, root=root)
    if not coordinator:
        model.install_array(buf)
    logger.debug(
        "Electric-field parameters broadcast from rank %d (rank %d of %d)",
        root,
        comm.Get_rank(),
        comm.Get_size(),
    )
    return model


def world_communicator() -> Communicator:
    """Return ``MPI.COMM_WORLD``; requires the ``mpi`` extra."""
    try:
        from mpi4py import MPI
    except ImportError as exc:
        raise RuntimeError(
            "mpi4py is required for parallel runs; install efield-sim[mpi]."
        ) from exc
    return MPI.COMM_WORLD

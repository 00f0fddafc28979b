"""Binary archive record for the applied electric field.

The record layout has been stable since the feature was introduced and has
no version field. For each axis in X, Y, Z order::

    int32  n         number of static terms (always 1 on write)
    int32  nt        number of time-dependent terms (0 or 1)
    real[n]  E0
    real[n]  t0
    real[nt] omega
    real[nt] sigma

All values are big-endian (XDR). The stored order E0, t0, omega, sigma
differs from the parameter order used everywhere else and must stay that way
for existing archives to remain readable.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import BinaryIO, Literal

import numpy as np

from efield_sim.errors import ArchiveCompatibilityError
from efield_sim.models.field import AXIS_NAMES, DIM, FieldModel

logger = logging.getLogger(__name__)

Precision = Literal["single", "double"]

_INT_DTYPE = np.dtype(">i4")
_REAL_DTYPES: dict[str, np.dtype] = {
    "single": np.dtype(">f4"),
    "double": np.dtype(">f8"),
}


def _real_dtype(precision: Precision) -> np.dtype:
    try:
        return _REAL_DTYPES[precision]
    except KeyError as exc:
        raise ValueError(
            f"Unknown archive precision {precision!r}. Expected one of: single, double."
        ) from exc


def _read_values(fp: BinaryIO, dtype: np.dtype, count: int) -> np.ndarray:
    nbytes = dtype.itemsize * count
    data = fp.read(nbytes)
    if len(data) != nbytes:
        raise ArchiveCompatibilityError(
            f"Truncated electric-field record: expected {nbytes} bytes, got {len(data)}."
        )
    return np.frombuffer(data, dtype=dtype, count=count)


def write_field_record(fp: BinaryIO, model: FieldModel, *, precision: Precision = "double") -> None:
    real = _real_dtype(precision)
    for m in range(DIM):
        term = model.term(m)
        n = 1
        nt = 0 if term.is_static else 1
        fp.write(np.array([n, nt], dtype=_INT_DTYPE).tobytes())
        fp.write(np.array([term.amplitude], dtype=real)[:n].tobytes())
        fp.write(np.array([term.t0], dtype=real)[:n].tobytes())
        fp.write(np.array([term.omega], dtype=real)[:nt].tobytes())
        fp.write(np.array([term.sigma], dtype=real)[:nt].tobytes())


def read_field_record(fp: BinaryIO, *, precision: Precision = "double") -> FieldModel:
    real = _real_dtype(precision)
    model = FieldModel()
    for m in range(DIM):
        n, nt = (int(v) for v in _read_values(fp, _INT_DTYPE, 2))
        if n < 0 or nt < 0:
            raise ArchiveCompatibilityError(
                f"Corrupt electric-field record for axis {AXIS_NAMES[m]}: n={n}, nt={nt}."
            )
        if n > 1 or nt > 1:
            raise ArchiveCompatibilityError(
                "Can not handle archives with more than one electric field term per direction "
                f"(axis {AXIS_NAMES[m]}: n={n}, nt={nt})."
            )
        # Legacy sizing: one slot beyond the count, zero filled.
        aa = np.zeros(n + 1, dtype=np.float64)
        phi = np.zeros(n + 1, dtype=np.float64)
        at = np.zeros(nt + 1, dtype=np.float64)
        phit = np.zeros(nt + 1, dtype=np.float64)
        aa[:n] = _read_values(fp, real, n)
        phi[:n] = _read_values(fp, real, n)
        at[:nt] = _read_values(fp, real, nt)
        phit[:nt] = _read_values(fp, real, nt)
        if n > 0:
            model.set_field_term(m, float(aa[0]), float(at[0]), float(phi[0]), float(phit[0]))
    return model


def write_field_archive(
    path: str | Path, model: FieldModel, *, precision: Precision = "double"
) -> Path:
    out = Path(path)
    with out.open("wb") as fh:
        write_field_record(fh, model, precision=precision)
    logger.debug("Wrote electric-field archive %s (%s precision)", out, precision)
    return out


def read_field_archive(path: str | Path, *, precision: Precision = "double") -> FieldModel:
    with Path(path).open("rb") as fh:
        return read_field_record(fh, precision=precision)

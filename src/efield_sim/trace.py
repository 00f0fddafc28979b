from __future__ import annotations

import logging
from pathlib import Path
from typing import TextIO

logger = logging.getLogger(__name__)

_XVG_HEADER = (
    '@    title "Applied electric field"\n'
    '@    xaxis  label "Time (ps)"\n'
    '@    yaxis  label "E (V/nm)"\n'
    "@TYPE xy\n"
)


class FieldTrace:
    """Append-only ``t Ex Ey Ez`` text stream.

    A fresh file starts with an xvg header; ``append=True`` continues an
    existing file (restarts) without one.
    """

    def __init__(self, path: str | Path, *, append: bool = False):
        self.path = Path(path)
        self.append = append
        self._fh: TextIO | None = None

    @property
    def is_open(self) -> bool:
        return self._fh is not None

    def open(self) -> FieldTrace:
        if self._fh is not None:
            raise RuntimeError(f"Field trace {self.path} is already open.")
        if self.append:
            self._fh = self.path.open("a", encoding="utf-8")
        else:
            self._fh = self.path.open("w", encoding="utf-8")
            self._fh.write(_XVG_HEADER)
        logger.debug("Opened field trace %s (append=%s)", self.path, self.append)
        return self

    def write(self, t: float, ex: float, ey: float, ez: float) -> None:
        if self._fh is None:
            raise RuntimeError(f"Field trace {self.path} is not open.")
        self._fh.write(f"{t:10g}  {ex:10g}  {ey:10g}  {ez:10g}\n")

    def close(self) -> None:
        if self._fh is not None:
            self._fh.close()
            self._fh = None


def read_trace(path: str | Path) -> list[tuple[float, float, float, float]]:
    """Read the numeric rows of a trace file, skipping xvg header lines."""
    rows: list[tuple[float, float, float, float]] = []
    for line in Path(path).read_text(encoding="utf-8").splitlines():
        stripped = line.strip()
        if not stripped or stripped[0] in "@#":
            continue
        t, ex, ey, ez = (float(v) for v in stripped.split())
        rows.append((t, ex, ey, ez))
    return rows

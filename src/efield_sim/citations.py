from __future__ import annotations

import logging
from typing import TextIO

from pydantic import BaseModel, ConfigDict

logger = logging.getLogger(__name__)


class Citation(BaseModel):
    model_config = ConfigDict(frozen=True)

    key: str
    authors: str
    title: str
    journal: str
    volume: str
    pages: str
    year: int
    doi: str | None = None

    def render(self) -> str:
        text = (
            f"{self.authors}\n{self.title}\n"
            f"{self.journal} {self.volume} ({self.year}) pp. {self.pages}"
        )
        if self.doi:
            text += f"\nDOI: {self.doi}"
        return text


CITATIONS: dict[str, Citation] = {
    "Caleman2008a": Citation(
        key="Caleman2008a",
        authors="C. Caleman and D. van der Spoel",
        title="Picosecond Melting of Ice by an Infrared Laser Pulse: A Simulation Study",
        journal="Angew. Chem. Int. Ed",
        volume="47",
        pages="1417-1420",
        year=2008,
        doi="10.1002/anie.200703987",
    ),
}

_cited: set[str] = set()


def please_cite(fp: TextIO | None, key: str) -> Citation:
    """Surface a reference once per process; later calls for ``key`` are silent."""
    try:
        citation = CITATIONS[key]
    except KeyError as exc:
        raise KeyError(f"Unknown citation key {key!r}.") from exc
    if key in _cited:
        return citation
    _cited.add(key)
    logger.info("Please cite: %s", citation.render().replace("\n", " "))
    if fp is not None:
        fp.write(
            "\n++++ PLEASE READ AND CITE THE FOLLOWING REFERENCE ++++\n"
            f"{citation.render()}\n"
            "-------- -------- --- Thank You --- -------- --------\n\n"
        )
    return citation


def cited_keys() -> frozenset[str]:
    return frozenset(_cited)


def reset_citations() -> None:
    _cited.clear()

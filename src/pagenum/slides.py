"""Find the slide parts of a pptx Package and assign each a 1-based slide index."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass

from pagenum.archive import Package
from pagenum.internals.constants import SLIDE_FILENAME_PATTERN, SLIDES_DIR

log = logging.getLogger("pagenum")

_SLIDE_FILENAME_RE = re.compile(SLIDE_FILENAME_PATTERN)


# region SlidePart
@dataclass(frozen=True)
class SlidePart:
    """A slide's package path plus the index we will print on it."""

    path: str
    index: int

    @property
    def filename(self) -> str:
        return self.path.rsplit("/", 1)[-1]


# endregion


# region locate
def locate(pkg: Package) -> list[SlidePart]:
    """
    Select the slide parts in a package and number them.

    A slide part is a file directly inside ppt/slides/ named slide<N>.xml, where N is made of
    ASCII digits only. Parts are ordered by filename *as a string*, so slide10.xml comes
    before slide2.xml, and the index is the position in that order (starting at 1), not N.

    Returns:
        list of SlidePart in index order. Empty when the package has no slides.
    """
    matches: list[str] = []
    for entry in pkg:
        if entry.is_dir or not entry.path.startswith(SLIDES_DIR):
            continue
        filename = entry.path[len(SLIDES_DIR) :]
        # fullmatch also rules out anything in a subfolder, since "/" can't match the pattern
        if _SLIDE_FILENAME_RE.fullmatch(filename):
            matches.append(entry.path)

    # NOTE: Lexical sort, not numeric. Decks with 10+ slides get numbered out of order
    # (slide10.xml is printed "2"). Kept so output matches earlier releases.
    ordered = sorted(matches, key=lambda p: p[len(SLIDES_DIR) :])

    slide_parts = [SlidePart(path=p, index=i) for i, p in enumerate(ordered, start=1)]
    log.debug(f"Located {len(slide_parts)} slide part(s) under {SLIDES_DIR}")
    return slide_parts


# endregion

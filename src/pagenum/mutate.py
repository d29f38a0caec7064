"""Insert a page number text box into one slide's XML.

Works on the text, not on a parsed tree: everything
outside the inserted fragment stays byte-for-byte identical, including whitespace,
attribute order and namespace prefixes.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from xml.sax.saxutils import quoteattr

from pagenum.errors import SlideMutationError
from pagenum.internals import constants

log = logging.getLogger("pagenum")


# region Alignment
class Alignment(Enum):
    """Paragraph alignment values DrawingML accepts in <a:pPr algn=...>."""

    LEFT = "l"
    CENTER = "ctr"
    RIGHT = "r"

    @classmethod
    def from_string(cls, value: str) -> "Alignment":
        """Convert string to Alignment, with support for aliases."""
        value = value.lower().strip()

        aliases = {
            "left": cls.LEFT,
            "center": cls.CENTER,
            "centre": cls.CENTER,
            "right": cls.RIGHT,
        }

        if value in aliases:
            return aliases[value]

        for member in cls:
            if member.value == value:
                return member

        valid_values = [m.value for m in cls] + list(aliases.keys())
        raise ValueError(
            f"'{value}' is not a valid Alignment. Valid options: {', '.join(valid_values)}"
        )


# endregion


# region PageNumberStyle
@dataclass(frozen=True)
class PageNumberStyle:
    """Geometry (EMUs) and run formatting of the page number box."""

    offset_x: int = constants.DEFAULT_OFFSET_X
    offset_y: int = constants.DEFAULT_OFFSET_Y
    width: int = constants.DEFAULT_WIDTH
    height: int = constants.DEFAULT_HEIGHT
    font_size: int = constants.DEFAULT_FONT_SIZE
    typeface: str = constants.DEFAULT_TYPEFACE
    color: str = constants.DEFAULT_COLOR
    bold: bool = True
    align: Alignment = Alignment.RIGHT


DEFAULT_STYLE = PageNumberStyle()

# endregion


# region build_page_number_shape
def build_page_number_shape(
    slide_index: int, style: PageNumberStyle = DEFAULT_STYLE
) -> str:
    """
    Build the <p:sp> fragment for one slide.

    The shape id is SHAPE_ID_PREFIX followed by the index ("1001" for slide 1). We don't
    check it against ids already used on the slide.
    """
    if slide_index < 0:
        raise ValueError(f"slide_index must be non-negative, got {slide_index}")

    shape_id = f"{constants.SHAPE_ID_PREFIX}{slide_index}"
    shape_name = f"{constants.SHAPE_NAME_PREFIX}{slide_index}"
    bold = "1" if style.bold else "0"

    return f"""<p:sp>
    <p:nvSpPr>
        <p:cNvPr id="{shape_id}" name="{shape_name}"/>
        <p:cNvSpPr/>
        <p:nvPr/>
    </p:nvSpPr>
    <p:spPr>
        <a:xfrm>
            <a:off x="{style.offset_x}" y="{style.offset_y}"/>
            <a:ext cx="{style.width}" cy="{style.height}"/>
        </a:xfrm>
        <a:prstGeom prst="rect">
            <a:avLst/>
        </a:prstGeom>
    </p:spPr>
    <p:txBody>
        <a:bodyPr wrap="none" rtlCol="0"/>
        <a:lstStyle/>
        <a:p>
            <a:pPr algn="{style.align.value}"/>
            <a:r>
                <a:rPr lang="en-US" sz="{style.font_size}" b="{bold}">
                    <a:solidFill>
                        <a:srgbClr val="{style.color}"/>
                    </a:solidFill>
                    <a:latin typeface={quoteattr(style.typeface)}/>
                </a:rPr>
                <a:t>{slide_index}</a:t>
            </a:r>
        </a:p>
    </p:txBody>
</p:sp>"""


# endregion


# region mutate
def mutate(
    xml: str, slide_index: int, style: PageNumberStyle = DEFAULT_STYLE
) -> str:
    """
    Return the slide XML with a page number shape inserted.

    Insertion point, first match wins:
    1. right before the first </p:spTree>
    2. right before the first </p:cSld>

    Raises:
        SlideMutationError: If neither marker is present. The caller decides whether that's fatal
            (the pipeline treats it as "leave this slide alone").
    """
    fragment = build_page_number_shape(slide_index, style)

    for marker in (constants.SHAPE_TREE_CLOSE, constants.COMMON_SLIDE_DATA_CLOSE):
        position = xml.find(marker)
        if position != -1:
            log.debug(f"Inserting page number {slide_index} before {marker}")
            return xml[:position] + fragment + xml[position:]

    raise SlideMutationError(
        f"Slide {slide_index} has neither {constants.SHAPE_TREE_CLOSE} nor "
        f"{constants.COMMON_SLIDE_DATA_CLOSE}; cannot place a page number."
    )


# endregion

"""Shared test helper functions."""

# mypy: disable-error-code="import-untyped"

import io
import zipfile

from pptx import Presentation  # pyright: ignore[reportPrivateImportUsage]

P_NS = "http://schemas.openxmlformats.org/presentationml/2006/main"
A_NS = "http://schemas.openxmlformats.org/drawingml/2006/main"

CONTENT_TYPES_XML = (
    b'<?xml version="1.0" encoding="UTF-8" standalone="yes"?>\n'
    b'<Types xmlns="http://schemas.openxmlformats.org/package/2006/content-types">'
    b'<Default Extension="xml" ContentType="application/xml"/></Types>'
)

PRESENTATION_XML = (
    f'<?xml version="1.0" encoding="UTF-8" standalone="yes"?>\n'
    f'<p:presentation xmlns:a="{A_NS}" xmlns:p="{P_NS}"><p:sldIdLst/></p:presentation>'
).encode("utf-8")


def slide_xml(body: str = "") -> bytes:
    """A minimal slide part with a shape tree. `body` goes inside the tree."""
    return (
        f'<?xml version="1.0" encoding="UTF-8" standalone="yes"?>\n'
        f'<p:sld xmlns:a="{A_NS}" xmlns:p="{P_NS}">\n'
        f"  <p:cSld>\n"
        f"    <p:spTree>\n"
        f"      <p:nvGrpSpPr/>{body}\n"
        f"    </p:spTree>\n"
        f"  </p:cSld>\n"
        f"</p:sld>"
    ).encode("utf-8")


def make_zip(entries: list[tuple[str, bytes | None]]) -> bytes:
    """
    Build a zip in memory. An entry whose data is None is written as a directory
    (its name should end with "/").
    """
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w", zipfile.ZIP_DEFLATED) as zf:
        for name, data in entries:
            if data is None:
                zf.writestr(zipfile.ZipInfo(name), b"")
            else:
                zf.writestr(name, data)
    return buffer.getvalue()


def make_package(slide_names: list[str], extra: list[tuple[str, bytes | None]] | None = None) -> bytes:
    """A pptx-shaped zip holding the given slide filenames (each a minimal slide part)."""
    entries: list[tuple[str, bytes | None]] = [
        ("[Content_Types].xml", CONTENT_TYPES_XML),
        ("ppt/presentation.xml", PRESENTATION_XML),
    ]
    entries += [(f"ppt/slides/{name}", slide_xml()) for name in slide_names]
    entries += extra or []
    return make_zip(entries)


def read_zip(data: bytes) -> dict[str, bytes]:
    """Map every member name to its bytes, in archive order."""
    with zipfile.ZipFile(io.BytesIO(data)) as zf:
        return {info.filename: zf.read(info) for info in zf.infolist()}


def make_pptx_bytes(slide_count: int) -> bytes:
    """A real deck saved by python-pptx, with a title on each slide."""
    prs = Presentation()
    layout = prs.slide_layouts[5]  # "Title Only"
    for n in range(1, slide_count + 1):
        slide = prs.slides.add_slide(layout)
        slide.shapes.title.text = f"Slide title {n}"
    buffer = io.BytesIO()
    prs.save(buffer)
    return buffer.getvalue()


class RecordingListener:
    """ProcessingListener that stores every call, for assertions."""

    def __init__(self) -> None:
        self.progress: list[tuple[int, str]] = []
        self.completions: list[tuple[bool, str]] = []

    def on_progress(self, percent: int, message: str) -> None:
        self.progress.append((percent, message))

    def on_complete(self, success: bool, message: str) -> None:
        self.completions.append((success, message))

    @property
    def percents(self) -> list[int]:
        return [p for p, _ in self.progress]

"""Drawing surface used by the catalog layout engine.

The layout engine thinks in millimetres with the origin at the top-left of
the page, the way print layouts are usually specified. :class:`DocumentWriter`
describes the handful of primitives it needs; :class:`ReportLabDocumentWriter`
implements them on top of a ReportLab canvas, converting coordinates to
points measured from the bottom-left.

ReportLab emits a page as soon as ``showPage`` is called, which rules out
stamping "Page X of N" footers after the fact. The writer therefore keeps a
snapshot of the canvas state for every page and only emits them on
:meth:`ReportLabDocumentWriter.save`, so any page can be selected again with
:meth:`ReportLabDocumentWriter.set_page` until then.
"""

from __future__ import annotations

import io
import logging
import typing as typ

from reportlab.lib.units import mm
from reportlab.lib.utils import ImageReader, simpleSplit
from reportlab.pdfgen import canvas

from catalog_pdf._constants import PAGE_HEIGHT, PAGE_WIDTH

if typ.TYPE_CHECKING:
    from pathlib import Path

LOGGER = logging.getLogger(__name__)

Align = typ.Literal["left", "center", "right"]
RGB = tuple[int, int, int]

REGULAR_FONT = "Helvetica"
BOLD_FONT = "Helvetica-Bold"
LINE_HEIGHT_FACTOR = 1.15
_POINT_IN_MM = 25.4 / 72


class DocumentWriter(typ.Protocol):
    """Page-oriented drawing primitives, in millimetres from the top-left."""

    @property
    def page_width(self) -> float: ...

    @property
    def page_height(self) -> float: ...

    @property
    def page_count(self) -> int: ...

    def add_page(self) -> None: ...

    def set_page(self, number: int) -> None: ...

    def set_font(self, size: float, *, bold: bool = False) -> None: ...

    def set_text_color(self, rgb: RGB) -> None: ...

    def set_draw_color(self, rgb: RGB) -> None: ...

    def set_fill_color(self, rgb: RGB) -> None: ...

    def text(
        self, text: str | typ.Sequence[str], x: float, y: float, *, align: Align = "left"
    ) -> None: ...

    def line(self, x1: float, y1: float, x2: float, y2: float) -> None: ...

    def rect(
        self,
        x: float,
        y: float,
        width: float,
        height: float,
        *,
        fill: bool = False,
        stroke: bool = True,
    ) -> None: ...

    def image(
        self,
        data: bytes,
        image_format: str,
        x: float,
        y: float,
        width: float,
        height: float,
    ) -> None: ...

    def split_text(self, text: str, width: float) -> list[str]: ...

    def save(self, path: Path) -> Path: ...


class ReportLabDocumentWriter:
    """A :class:`DocumentWriter` backed by ``reportlab.pdfgen.canvas.Canvas``.

    One instance produces one document; :meth:`save` may only be called once.
    Nothing touches the filesystem before :meth:`save`.
    """

    def __init__(
        self,
        *,
        page_width: float = PAGE_WIDTH,
        page_height: float = PAGE_HEIGHT,
        title: str | None = None,
    ) -> None:
        """Create an empty single-page document.

        Parameters
        ----------
        page_width, page_height : float, optional
            Page size in millimetres; defaults to A4 portrait.
        title : str, optional
            Document title stored in the PDF metadata.
        """
        self._width = page_width
        self._height = page_height
        self._buffer = io.BytesIO()
        self._canvas = canvas.Canvas(
            self._buffer, pagesize=(page_width * mm, page_height * mm)
        )
        if title:
            self._canvas.setTitle(title)
        self._pages: list[dict[str, typ.Any] | None] = [None]
        self._active = 0
        self._font_size = 16.0
        self._bold = False
        self._text_rgb: RGB = (0, 0, 0)
        self._draw_rgb: RGB = (0, 0, 0)
        self._fill_rgb: RGB = (0, 0, 0)
        self._saved = False

    @property
    def page_width(self) -> float:
        return self._width

    @property
    def page_height(self) -> float:
        return self._height

    @property
    def page_count(self) -> int:
        return len(self._pages)

    def add_page(self) -> None:
        """Append a blank page after the last one and make it current."""
        self._park()
        last = len(self._pages) - 1
        if self._active != last:
            self._restore(last)
        self._canvas._startPage()  # noqa: SLF001 - page states are managed here
        self._pages.append(None)
        self._active = len(self._pages) - 1

    def set_page(self, number: int) -> None:
        """Make the 1-based page ``number`` current for further drawing."""
        if not 1 <= number <= len(self._pages):
            msg = f"Page {number} does not exist (document has {len(self._pages)})"
            raise ValueError(msg)
        if number - 1 == self._active:
            return
        self._park()
        self._restore(number - 1)
        self._active = number - 1

    def set_font(self, size: float, *, bold: bool = False) -> None:
        self._font_size = size
        self._bold = bold

    def set_text_color(self, rgb: RGB) -> None:
        self._text_rgb = rgb

    def set_draw_color(self, rgb: RGB) -> None:
        self._draw_rgb = rgb

    def set_fill_color(self, rgb: RGB) -> None:
        self._fill_rgb = rgb

    def text(
        self, text: str | typ.Sequence[str], x: float, y: float, *, align: Align = "left"
    ) -> None:
        """Draw one line, or several stacked lines, with the baseline at ``y``."""
        lines = [text] if isinstance(text, str) else list(text)
        self._canvas.setFont(self._font_name, self._font_size)
        self._canvas.setFillColorRGB(*_unit_rgb(self._text_rgb))
        step = self._font_size * LINE_HEIGHT_FACTOR * _POINT_IN_MM
        draw = {
            "left": self._canvas.drawString,
            "center": self._canvas.drawCentredString,
            "right": self._canvas.drawRightString,
        }[align]
        for index, line in enumerate(lines):
            draw(x * mm, self._flip(y + index * step), line)

    def line(self, x1: float, y1: float, x2: float, y2: float) -> None:
        self._canvas.setStrokeColorRGB(*_unit_rgb(self._draw_rgb))
        self._canvas.line(x1 * mm, self._flip(y1), x2 * mm, self._flip(y2))

    def rect(
        self,
        x: float,
        y: float,
        width: float,
        height: float,
        *,
        fill: bool = False,
        stroke: bool = True,
    ) -> None:
        self._canvas.setStrokeColorRGB(*_unit_rgb(self._draw_rgb))
        self._canvas.setFillColorRGB(*_unit_rgb(self._fill_rgb))
        self._canvas.rect(
            x * mm,
            self._flip(y + height),
            width * mm,
            height * mm,
            stroke=int(stroke),
            fill=int(fill),
        )

    def image(
        self,
        data: bytes,
        image_format: str,
        x: float,
        y: float,
        width: float,
        height: float,
    ) -> None:
        """Draw encoded image bytes stretched into the given box.

        Raises
        ------
        OSError
            If the bytes cannot be decoded as an image.
        """
        reader = ImageReader(io.BytesIO(data))
        LOGGER.debug("Embedding %s image (%d bytes)", image_format, len(data))
        self._canvas.drawImage(
            reader,
            x * mm,
            self._flip(y + height),
            width=width * mm,
            height=height * mm,
            mask="auto",
        )

    def split_text(self, text: str, width: float) -> list[str]:
        """Wrap ``text`` with the current font so each line fits ``width`` mm."""
        return simpleSplit(text, self._font_name, self._font_size, width * mm)

    def save(self, path: Path) -> Path:
        """Emit every page and write the finished PDF to ``path``."""
        if self._saved:
            msg = "Document has already been saved"
            raise RuntimeError(msg)
        self._park()
        for state in self._pages:
            self._canvas.__dict__.update(typ.cast(dict[str, typ.Any], state))
            canvas.Canvas.showPage(self._canvas)
        self._canvas.save()
        self._saved = True
        payload = self._buffer.getvalue()
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(payload)
        return path

    @property
    def _font_name(self) -> str:
        return BOLD_FONT if self._bold else REGULAR_FONT

    def _flip(self, y: float) -> float:
        """Convert a top-down millimetre offset to a bottom-up point offset."""
        return (self._height - y) * mm

    def _park(self) -> None:
        self._pages[self._active] = dict(self._canvas.__dict__)

    def _restore(self, index: int) -> None:
        state = self._pages[index]
        if state is not None:
            self._canvas.__dict__.update(state)


def _unit_rgb(rgb: RGB) -> tuple[float, float, float]:
    red, green, blue = rgb
    return red / 255, green / 255, blue / 255


__all__ = [
    "BOLD_FONT",
    "REGULAR_FONT",
    "DocumentWriter",
    "ReportLabDocumentWriter",
]

"""Test doubles and snapshot builders shared across the catalog_pdf tests.

* ``RecordingWriter`` stands in for the ReportLab writer and keeps every
  drawing call per page, so layout tests can assert on text and placement
  without parsing PDF output.
* ``StubResolver`` serves canned images (or failures) keyed by reference and
  records the order in which references were requested.
"""

from __future__ import annotations

import dataclasses as dc
import io
import typing as typ

from PIL import Image

from catalog_pdf._constants import PAGE_HEIGHT, PAGE_WIDTH
from catalog_pdf.assets import ResolvedAsset
from catalog_pdf.config import (
    CatalogConfiguration,
    CatalogSnapshot,
    Category,
    CategoryOrder,
    Product,
    ProductOrder,
)

if typ.TYPE_CHECKING:
    from pathlib import Path

STORAGE_URL = "https://storage.example.invalid/v0/b/shop.appspot.com/o/{path}?alt=media&token=abc"


@dc.dataclass(slots=True)
class DrawCall:
    """One recorded drawing primitive."""

    page: int
    kind: str
    args: tuple[typ.Any, ...]
    font_size: float = 0.0
    bold: bool = False


class RecordingWriter:
    """In-memory DocumentWriter that records what would have been drawn."""

    def __init__(self, *, page_width: float = PAGE_WIDTH, page_height: float = PAGE_HEIGHT) -> None:
        self.page_width = page_width
        self.page_height = page_height
        self.page_count = 1
        self.current_page = 1
        self.calls: list[DrawCall] = []
        self.saved_to: Path | None = None
        self._font_size = 16.0
        self._bold = False

    def add_page(self) -> None:
        self.page_count += 1
        self.current_page = self.page_count

    def set_page(self, number: int) -> None:
        if not 1 <= number <= self.page_count:
            msg = f"Page {number} does not exist"
            raise ValueError(msg)
        self.current_page = number

    def set_font(self, size: float, *, bold: bool = False) -> None:
        self._font_size = size
        self._bold = bold

    def set_text_color(self, rgb: tuple[int, int, int]) -> None:
        pass

    def set_draw_color(self, rgb: tuple[int, int, int]) -> None:
        pass

    def set_fill_color(self, rgb: tuple[int, int, int]) -> None:
        pass

    def text(self, text: str | typ.Sequence[str], x: float, y: float, *, align: str = "left") -> None:
        lines = [text] if isinstance(text, str) else list(text)
        for line in lines:
            self._record("text", line, x, y, align)

    def line(self, x1: float, y1: float, x2: float, y2: float) -> None:
        self._record("line", x1, y1, x2, y2)

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
        self._record("rect", x, y, width, height, fill, stroke)

    def image(
        self,
        data: bytes,
        image_format: str,
        x: float,
        y: float,
        width: float,
        height: float,
    ) -> None:
        self._record("image", image_format, x, y, width, height)

    def split_text(self, text: str, width: float) -> list[str]:
        limit = max(1, int(width // 2))
        lines: list[str] = []
        current = ""
        for word in text.split():
            candidate = f"{current} {word}".strip()
            if len(candidate) > limit and current:
                lines.append(current)
                current = word
            else:
                current = candidate
        if current:
            lines.append(current)
        return lines

    def save(self, path: Path) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(b"%PDF-recorded\n")
        self.saved_to = path
        return path

    def texts(self, page: int | None = None) -> list[str]:
        return [
            call.args[0]
            for call in self.calls
            if call.kind == "text" and (page is None or call.page == page)
        ]

    def text_call(self, value: str) -> DrawCall:
        for call in self.calls:
            if call.kind == "text" and call.args[0] == value:
                return call
        msg = f"no text call for {value!r}"
        raise AssertionError(msg)

    def _record(self, kind: str, *args: typ.Any) -> None:
        self.calls.append(
            DrawCall(
                page=self.current_page,
                kind=kind,
                args=args,
                font_size=self._font_size,
                bold=self._bold,
            )
        )


class StubResolver:
    """Image source returning canned assets; unknown references fail."""

    def __init__(self, assets: dict[str, ResolvedAsset | None] | None = None) -> None:
        self.assets = assets or {}
        self.requests: list[str] = []

    def resolve(self, reference: str) -> ResolvedAsset | None:
        self.requests.append(reference)
        return self.assets.get(reference)


def storage_url(path: str) -> str:
    """Return a stored-object download URL for an object path."""
    return STORAGE_URL.format(path=path.replace("/", "%2F"))


def png_bytes(color: str = "red") -> bytes:
    buffer = io.BytesIO()
    Image.new("RGB", (8, 8), color).save(buffer, format="PNG")
    return buffer.getvalue()


def png_asset(path: str = "products/cola.png") -> ResolvedAsset:
    data = png_bytes()
    return ResolvedAsset(
        storage_path=path,
        data_url="data:image/png;base64,",
        data=data,
        image_format="PNG",
    )


def build_snapshot(
    *,
    name: str = "Spring Menu",
    version: str = "2.1",
    category_orders: typ.Sequence[CategoryOrder] = (),
    products: typ.Sequence[Product] = (),
    categories: typ.Sequence[Category] = (),
    cover: str | None = None,
    back: str | None = None,
) -> CatalogSnapshot:
    return CatalogSnapshot(
        catalog=CatalogConfiguration(
            name=name,
            version=version,
            cover_image_ref=cover,
            back_image_ref=back,
            category_orders=tuple(category_orders),
        ),
        products=tuple(products),
        categories=tuple(categories),
    )


def spring_menu() -> CatalogSnapshot:
    """Return the Spring Menu example: one category, one excluded product."""
    return build_snapshot(
        category_orders=[
            CategoryOrder(
                category_id="c1",
                order=1,
                start_new_page=True,
                product_orders=(
                    ProductOrder(product_id="p1", order=1, included=True),
                    ProductOrder(product_id="p2", order=2, included=False),
                ),
            )
        ],
        products=[
            Product(id="p1", title="Cola", category="c1"),
            Product(id="p2", title="Lemonade", category="c1"),
        ],
        categories=[Category(id="c1", name="Drinks")],
    )

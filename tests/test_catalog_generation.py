"""End-to-end tests rendering catalogs to real PDF files with ReportLab."""

from __future__ import annotations

import datetime as dt
import typing as typ

import pytest
from pypdf import PdfReader

from catalog_pdf.assets import ResolvedAsset
from catalog_pdf.config import Category, CategoryOrder, Product, ProductOrder
from catalog_pdf.generator import (
    CatalogGenerationError,
    CatalogPdfGenerator,
    ReportLabDocumentWriter,
    catalog_filename,
)

from .helpers import StubResolver, build_snapshot, png_asset

if typ.TYPE_CHECKING:
    from pathlib import Path

    from catalog_pdf.config import CatalogSnapshot

COLA_IMAGE = "https://storage.example.invalid/o/products%2Fcola.png?alt=media"


def _page_texts(path: Path) -> list[str]:
    reader = PdfReader(path)
    return [page.extract_text() or "" for page in reader.pages]


def test_spring_menu_end_to_end(
    tmp_path: Path, spring_menu_snapshot: CatalogSnapshot
) -> None:
    """The documented example produces a three page PDF named after the catalog."""
    generator = CatalogPdfGenerator(
        spring_menu_snapshot,
        resolver=StubResolver(),
        output_dir=tmp_path,
        generated_on=dt.date(2026, 3, 5),
    )

    result = generator.run()

    assert result.path == tmp_path / "Spring_Menu_v2.1.pdf", (
        f"unexpected output path {result.path}"
    )
    pages = _page_texts(result.path)
    assert len(pages) == 3, f"expected 3 pages, got {len(pages)}"
    assert "Spring Menu" in pages[0]
    assert "Version: 2.1" in pages[0]
    assert "Generated: 3/5/2026" in pages[0]
    assert "About Us" in pages[1]
    assert "1. Drinks" in pages[2]
    assert "1.1 Cola" in pages[2]
    assert "No Image" in pages[2]
    assert "Lemonade" not in "".join(pages), "excluded product leaked into the PDF"
    for number, text in enumerate(pages, start=1):
        assert f"Page {number} of 3" in text, f"missing footer on page {number}"
    assert result.report.page_count == 3
    assert result.report.product_count == 1


def test_generated_pdf_carries_catalog_title(
    tmp_path: Path, spring_menu_snapshot: CatalogSnapshot
) -> None:
    result = CatalogPdfGenerator(
        spring_menu_snapshot, resolver=StubResolver(), output_dir=tmp_path
    ).run()

    metadata = PdfReader(result.path).metadata
    assert metadata is not None
    assert metadata.title == "Spring Menu"


def test_embedded_images_are_written(tmp_path: Path) -> None:
    snapshot = build_snapshot(
        category_orders=[
            CategoryOrder("c1", 1, product_orders=(ProductOrder("p1", 1),))
        ],
        products=[Product("p1", "Cola", image=COLA_IMAGE, price=2.5, is_best_seller=True)],
        categories=[Category("c1", "Drinks")],
    )
    resolver = StubResolver({COLA_IMAGE: png_asset()})

    result = CatalogPdfGenerator(snapshot, resolver=resolver, output_dir=tmp_path).run()

    reader = PdfReader(result.path)
    body = reader.pages[2]
    assert len(body.images) == 1, "expected the product image to be embedded"
    text = body.extract_text()
    assert "$2.5" in text
    assert "BEST SELLER" in text
    assert "No Image" not in text


def test_failed_generation_leaves_no_file(tmp_path: Path) -> None:
    """Undecodable image bytes abort the run without a partial document."""
    snapshot = build_snapshot(
        category_orders=[
            CategoryOrder("c1", 1, product_orders=(ProductOrder("p1", 1),))
        ],
        products=[Product("p1", "Cola", image=COLA_IMAGE)],
        categories=[Category("c1", "Drinks")],
    )
    broken = ResolvedAsset(
        storage_path="products/cola.png",
        data_url="data:image/png;base64,",
        data=b"definitely not an image",
        image_format="PNG",
    )
    generator = CatalogPdfGenerator(
        snapshot, resolver=StubResolver({COLA_IMAGE: broken}), output_dir=tmp_path
    )

    with pytest.raises(CatalogGenerationError, match="Spring Menu"):
        generator.run()

    assert list(tmp_path.iterdir()) == [], "expected no file after a failed run"


def test_save_failure_is_reported_as_generation_error(
    tmp_path: Path, spring_menu_snapshot: CatalogSnapshot
) -> None:
    class FailingWriter(ReportLabDocumentWriter):
        def save(self, path: Path) -> Path:
            path.write_bytes(b"%PDF-partial")
            msg = "disk full"
            raise OSError(msg)

    generator = CatalogPdfGenerator(
        spring_menu_snapshot,
        resolver=StubResolver(),
        writer_factory=lambda title: FailingWriter(title=title),
        output_dir=tmp_path,
    )

    with pytest.raises(CatalogGenerationError, match="disk full") as excinfo:
        generator.run()

    assert isinstance(excinfo.value.__cause__, OSError)
    assert list(tmp_path.iterdir()) == [], "expected the partial file to be removed"


def test_each_run_uses_a_fresh_writer(
    tmp_path: Path, spring_menu_snapshot: CatalogSnapshot
) -> None:
    titles: list[str] = []

    def factory(title: str) -> ReportLabDocumentWriter:
        titles.append(title)
        return ReportLabDocumentWriter(title=title)

    generator = CatalogPdfGenerator(
        spring_menu_snapshot,
        resolver=StubResolver(),
        writer_factory=factory,
        output_dir=tmp_path,
    )
    first = generator.run()
    second = generator.run()

    assert titles == ["Spring Menu", "Spring Menu"]
    assert first.report == second.report
    assert len(PdfReader(second.path).pages) == 3


@pytest.mark.parametrize(
    ("name", "version", "expected"),
    [
        ("Spring Menu", "2.1", "Spring_Menu_v2.1.pdf"),
        ("Café & Bar", "3", "Caf____Bar_v3.pdf"),
        ("2026/Q1", "1.0", "2026_Q1_v1.0.pdf"),
    ],
)
def test_catalog_filename_replaces_unsafe_characters(
    name: str, version: str, expected: str
) -> None:
    assert catalog_filename(name, version) == expected

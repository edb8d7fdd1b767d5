"""Lay out a catalog snapshot as a sequence of drawing calls.

:class:`CatalogLayoutEngine` walks the numbered structure produced by
:func:`catalog_pdf.ordering.plan_sections` and issues drawing instructions to
a :class:`~catalog_pdf.generator.writer.DocumentWriter`. The walk is strictly
linear: cover page, about page, category and product body, then page footers.
The only state it carries is the vertical cursor on the current page.

Images are resolved one at a time, in rendering order, at the moment they are
drawn. Any image that cannot be resolved is replaced by a placeholder box and
the walk carries on; only exceptions raised by the writer itself escape.
"""

from __future__ import annotations

import datetime as dt
import logging
import typing as typ

from catalog_pdf._constants import (
    ABOUT_FAILED_LABEL,
    BADGE_HEIGHT,
    BADGE_LABEL,
    BADGE_WIDTH,
    BOTTOM_MARGIN,
    CATEGORY_MARGIN,
    CATEGORY_RESERVE,
    COVER_FAILED_LABEL,
    DESCRIPTION_ADVANCE,
    DESCRIPTION_LIMIT,
    DESCRIPTION_LINES,
    HEADING_ADVANCE,
    IMAGE_FAILED_LABEL,
    IMAGE_GAP,
    IMAGE_SIZE,
    LEFT_MARGIN,
    MIN_ROW_HEIGHT,
    NO_IMAGE_LABEL,
    PRODUCT_RESERVE,
    RIGHT_MARGIN,
    TITLE_ADVANCE,
    TOP_MARGIN,
)
from catalog_pdf.config.settings import GeneratorSettings
from catalog_pdf.generator.models import (
    CatalogReport,
    GenerationStage,
    ImageStatus,
    RenderedCategory,
    RenderedProduct,
)
from catalog_pdf.ordering import PlannedCategory, PlannedProduct, plan_sections

if typ.TYPE_CHECKING:
    from pathlib import Path

    from catalog_pdf.assets import ResolvedAsset
    from catalog_pdf.config.models import CatalogConfiguration, CatalogSnapshot
    from catalog_pdf.generator.writer import DocumentWriter

LOGGER = logging.getLogger(__name__)

BLACK = (0, 0, 0)
PLACEHOLDER_BORDER = (200, 200, 200)
PLACEHOLDER_FILL = (248, 248, 248)
PLACEHOLDER_CROSS = (220, 220, 220)
PLACEHOLDER_TEXT = (120, 120, 120)
BADGE_FILL = (255, 215, 0)

_STAGE_SEQUENCE = tuple(GenerationStage)


class ImageSource(typ.Protocol):
    """Anything that can turn a stored-object reference into image bytes."""

    def resolve(self, reference: str) -> ResolvedAsset | None: ...


class CatalogLayoutEngine:
    """Render one catalog document onto a writer.

    An engine instance is single use: it tracks the document's progress in
    :attr:`stage` and refuses to render a second time.
    """

    def __init__(
        self,
        writer: DocumentWriter,
        resolver: ImageSource,
        settings: GeneratorSettings | None = None,
        *,
        generated_on: dt.date | None = None,
    ) -> None:
        """Bind the engine to a fresh writer and an image source.

        Parameters
        ----------
        writer : DocumentWriter
            Empty document to draw on; must contain exactly one page.
        resolver : ImageSource
            Image lookup used for cover, about page and product images.
        settings : GeneratorSettings, optional
            About-page copy and currency symbol; defaults apply when omitted.
        generated_on : datetime.date, optional
            Date printed on the synthesized cover; defaults to today.
        """
        self.writer = writer
        self.resolver = resolver
        self.settings = settings or GeneratorSettings()
        self.generated_on = generated_on or dt.date.today()
        self.stage = GenerationStage.NOT_STARTED
        self._cursor = TOP_MARGIN
        self._page = 1

    def render(self, snapshot: CatalogSnapshot) -> CatalogReport:
        """Draw the whole catalog and stamp page footers.

        Returns
        -------
        CatalogReport
            Page count plus the numbered categories and products that were
            drawn, with the page each starts on and its image outcome.
        """
        catalog = snapshot.catalog
        report = CatalogReport()

        self._advance(GenerationStage.RENDERING_COVER)
        report.cover = self._render_cover(catalog)
        self._break_page()

        self._advance(GenerationStage.RENDERING_BACK_PAGE)
        report.back_page = self._render_back_page(catalog)
        self._break_page()

        self._advance(GenerationStage.RENDERING_BODY)
        sections = plan_sections(snapshot)
        LOGGER.info("Processing %d categories", len(sections))
        for section in sections:
            report.categories.append(self._render_category(section))

        self._advance(GenerationStage.FINALIZING)
        self._stamp_footers()
        report.page_count = self.writer.page_count
        return report

    def save(self, path: Path) -> Path:
        """Hand the finished document to the writer and mark it saved."""
        if self.stage is not GenerationStage.FINALIZING:
            msg = f"Cannot save a document in stage {self.stage.value}"
            raise RuntimeError(msg)
        written = self.writer.save(path)
        self._advance(GenerationStage.SAVED)
        return written

    def _advance(self, stage: GenerationStage) -> None:
        expected = _STAGE_SEQUENCE[_STAGE_SEQUENCE.index(self.stage) + 1 :]
        if not expected or expected[0] is not stage:
            msg = f"Cannot move from {self.stage.value} to {stage.value}"
            raise RuntimeError(msg)
        LOGGER.debug("Catalog stage: %s -> %s", self.stage.value, stage.value)
        self.stage = stage

    def _render_cover(self, catalog: CatalogConfiguration) -> ImageStatus:
        writer = self.writer
        status = ImageStatus.MISSING
        if catalog.cover_image_ref:
            LOGGER.info("Processing cover page")
            if self._draw_full_page(catalog.cover_image_ref):
                return ImageStatus.EMBEDDED
            status = ImageStatus.FAILED

        center = writer.page_width / 2
        writer.set_font(24, bold=True)
        writer.text(catalog.name, center, 50, align="center")
        writer.set_font(16)
        writer.text(f"Version: {catalog.version}", center, 70, align="center")
        writer.set_font(12)
        writer.text(f"Generated: {_format_date(self.generated_on)}", center, 90, align="center")
        if status is ImageStatus.FAILED:
            self._draw_placeholder(
                LEFT_MARGIN,
                110,
                writer.page_width - LEFT_MARGIN - RIGHT_MARGIN,
                100,
                COVER_FAILED_LABEL,
            )
        return status

    def _render_back_page(self, catalog: CatalogConfiguration) -> ImageStatus:
        writer = self.writer
        status = ImageStatus.MISSING
        if catalog.back_image_ref:
            LOGGER.info("Processing about us page")
            if self._draw_full_page(catalog.back_image_ref):
                return ImageStatus.EMBEDDED
            status = ImageStatus.FAILED

        writer.set_font(18, bold=True)
        writer.text(self.settings.about_heading, LEFT_MARGIN, self._cursor)
        self._cursor += 20
        writer.set_font(12)
        for line in self.settings.about_lines:
            writer.text(line, LEFT_MARGIN, self._cursor)
            self._cursor += 10
        self._cursor += 10
        if status is ImageStatus.FAILED:
            self._draw_placeholder(
                LEFT_MARGIN,
                self._cursor,
                writer.page_width - LEFT_MARGIN - RIGHT_MARGIN,
                100,
                ABOUT_FAILED_LABEL,
            )
        return status

    def _render_category(self, section: PlannedCategory) -> RenderedCategory:
        category = section.category
        LOGGER.info("Processing category: %s", category.name)
        if section.start_new_page and self._cursor > TOP_MARGIN:
            self._break_page()
        self._ensure_space(CATEGORY_RESERVE)

        rendered = RenderedCategory(
            number=section.number, name=category.name, page=self._page
        )
        writer = self.writer
        writer.set_font(16, bold=True)
        writer.text(rendered.heading, LEFT_MARGIN, self._cursor)
        self._cursor += HEADING_ADVANCE

        if category.description:
            writer.set_font(10)
            writer.text(_truncate(category.description), LEFT_MARGIN, self._cursor)
            self._cursor += DESCRIPTION_ADVANCE

        LOGGER.debug(
            "Processing %d products in category %s", len(section.products), category.name
        )
        for entry in section.products:
            rendered.products.append(self._render_product(entry))

        self._cursor += CATEGORY_MARGIN
        return rendered

    def _render_product(self, entry: PlannedProduct) -> RenderedProduct:
        product = entry.product
        self._ensure_space(PRODUCT_RESERVE)
        LOGGER.debug("Processing product: %s", product.title)
        writer = self.writer
        page = self._page

        writer.set_font(12, bold=True)
        writer.text(f"{entry.label} {product.title}", LEFT_MARGIN, self._cursor)
        self._cursor += TITLE_ADVANCE

        top = self._cursor
        image_status = self._draw_image_box(product.image, LEFT_MARGIN, top)

        text_x = LEFT_MARGIN + IMAGE_SIZE + IMAGE_GAP
        writer.set_font(10)
        if product.description:
            lines = writer.split_text(
                product.description, writer.page_width - text_x - RIGHT_MARGIN
            )
            writer.text(lines[:DESCRIPTION_LINES], text_x, top + 5)

        if product.price:
            writer.set_font(10, bold=True)
            writer.text(_format_price(self.settings.currency_symbol, product.price), text_x, top + 20)

        if product.is_best_seller:
            badge_x = writer.page_width - RIGHT_MARGIN - BADGE_WIDTH
            writer.set_fill_color(BADGE_FILL)
            writer.rect(badge_x, top, BADGE_WIDTH, BADGE_HEIGHT, fill=True, stroke=False)
            writer.set_font(7, bold=True)
            writer.set_text_color(BLACK)
            writer.text(BADGE_LABEL, badge_x + 3, top + 5)

        self._cursor += max(IMAGE_SIZE + IMAGE_GAP, MIN_ROW_HEIGHT)
        return RenderedProduct(
            label=entry.label, title=product.title, page=page, image=image_status
        )

    def _draw_image_box(self, reference: str | None, x: float, y: float) -> ImageStatus:
        if not reference:
            self._draw_placeholder(x, y, IMAGE_SIZE, IMAGE_SIZE, NO_IMAGE_LABEL)
            return ImageStatus.MISSING
        asset = self.resolver.resolve(reference)
        if asset is None:
            self._draw_placeholder(x, y, IMAGE_SIZE, IMAGE_SIZE, IMAGE_FAILED_LABEL)
            return ImageStatus.FAILED
        self.writer.image(asset.data, asset.image_format, x, y, IMAGE_SIZE, IMAGE_SIZE)
        return ImageStatus.EMBEDDED

    def _draw_full_page(self, reference: str) -> bool:
        asset = self.resolver.resolve(reference)
        if asset is None:
            return False
        writer = self.writer
        writer.image(
            asset.data, asset.image_format, 0, 0, writer.page_width, writer.page_height
        )
        return True

    def _draw_placeholder(
        self, x: float, y: float, width: float, height: float, label: str
    ) -> None:
        """Draw a crossed-out grey box with a centred label."""
        writer = self.writer
        writer.set_draw_color(PLACEHOLDER_BORDER)
        writer.set_fill_color(PLACEHOLDER_FILL)
        writer.rect(x, y, width, height, fill=True, stroke=True)
        writer.set_draw_color(PLACEHOLDER_CROSS)
        writer.line(x, y, x + width, y + height)
        writer.line(x + width, y, x, y + height)
        writer.set_font(8)
        writer.set_text_color(PLACEHOLDER_TEXT)
        writer.text(label, x + width / 2, y + height / 2, align="center")
        writer.set_text_color(BLACK)

    def _stamp_footers(self) -> None:
        writer = self.writer
        total = writer.page_count
        for number in range(1, total + 1):
            writer.set_page(number)
            writer.set_font(9)
            writer.text(
                f"Page {number} of {total}",
                writer.page_width - 30,
                writer.page_height - 10,
                align="right",
            )

    def _ensure_space(self, required: float) -> None:
        if self._cursor + required > self.writer.page_height - BOTTOM_MARGIN:
            self._break_page()

    def _break_page(self) -> None:
        self.writer.add_page()
        self._page += 1
        self._cursor = TOP_MARGIN


def _truncate(text: str, limit: int = DESCRIPTION_LIMIT) -> str:
    """Cap ``text`` at ``limit`` characters, marking the cut with an ellipsis."""
    return text[:limit] + "..." if len(text) > limit else text


def _format_price(symbol: str, price: float) -> str:
    """Render a price the way it was entered, without a trailing ``.0``."""
    amount = str(int(price)) if float(price).is_integer() else str(price)
    return f"{symbol}{amount}"


def _format_date(value: dt.date) -> str:
    return f"{value.month}/{value.day}/{value.year}"


__all__ = ["CatalogLayoutEngine", "ImageSource"]

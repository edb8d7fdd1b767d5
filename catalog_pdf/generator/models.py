"""Shared dataclasses used by the catalog generation pipeline."""

from __future__ import annotations

import dataclasses as dc
import enum
from pathlib import Path  # noqa: TC003 - used for runtime type metadata


class CatalogGenerationError(RuntimeError):
    """Raised when a catalog PDF could not be generated."""


class GenerationStage(enum.Enum):
    """Linear progress of one document through the layout engine."""

    NOT_STARTED = "not_started"
    RENDERING_COVER = "rendering_cover"
    RENDERING_BACK_PAGE = "rendering_back_page"
    RENDERING_BODY = "rendering_body"
    FINALIZING = "finalizing"
    SAVED = "saved"


class ImageStatus(enum.Enum):
    """How an image slot ended up being filled."""

    EMBEDDED = "embedded"
    MISSING = "missing"
    FAILED = "failed"


@dc.dataclass(slots=True)
class RenderedProduct:
    """A product line as drawn in the document.

    Attributes
    ----------
    label : str
        Reader-visible number such as ``"1.2"``.
    title : str
        Product title printed after the label.
    page : int
        1-based page the product line starts on.
    image : ImageStatus
        Whether the image was embedded or replaced by a placeholder.
    """

    label: str
    title: str
    page: int
    image: ImageStatus

    @property
    def heading(self) -> str:
        return f"{self.label} {self.title}"


@dc.dataclass(slots=True)
class RenderedCategory:
    """A category section as drawn in the document."""

    number: int
    name: str
    page: int
    products: list[RenderedProduct] = dc.field(default_factory=list)

    @property
    def heading(self) -> str:
        return f"{self.number}. {self.name}"


@dc.dataclass(slots=True)
class CatalogReport:
    """Structure of a rendered catalog, independent of image bytes.

    Two renders of the same snapshot produce equal reports, which makes the
    report the natural thing to compare when checking determinism.
    """

    page_count: int = 0
    cover: ImageStatus = ImageStatus.MISSING
    back_page: ImageStatus = ImageStatus.MISSING
    categories: list[RenderedCategory] = dc.field(default_factory=list)

    @property
    def product_count(self) -> int:
        return sum(len(category.products) for category in self.categories)


@dc.dataclass(slots=True)
class GenerationResult:
    """Where the catalog was written and what it contains."""

    path: Path
    report: CatalogReport


__all__ = [
    "CatalogGenerationError",
    "CatalogReport",
    "GenerationResult",
    "GenerationStage",
    "ImageStatus",
    "RenderedCategory",
    "RenderedProduct",
]

"""Utilities for laying out, drawing, and writing catalog PDF documents."""

from .catalog_generator import CatalogPdfGenerator, catalog_filename
from .layout import CatalogLayoutEngine
from .models import (
    CatalogGenerationError,
    CatalogReport,
    GenerationResult,
    GenerationStage,
    ImageStatus,
    RenderedCategory,
    RenderedProduct,
)
from .writer import DocumentWriter, ReportLabDocumentWriter

__all__ = [
    "CatalogGenerationError",
    "CatalogLayoutEngine",
    "CatalogPdfGenerator",
    "CatalogReport",
    "DocumentWriter",
    "GenerationResult",
    "GenerationStage",
    "ImageStatus",
    "RenderedCategory",
    "RenderedProduct",
    "ReportLabDocumentWriter",
    "catalog_filename",
]

"""High-level orchestration for catalog PDF generation.

This module wires the pieces of one generation run together: a fresh
document writer, the image resolver, the layout engine, and the final file
write. It exposes :class:`CatalogPdfGenerator`, which consumes a
:class:`~catalog_pdf.config.CatalogSnapshot` and writes
``{name}_v{version}.pdf`` into the output directory.

Example
-------
>>> from pathlib import Path
>>> from catalog_pdf.config import load_snapshot
>>> from catalog_pdf.generator import CatalogPdfGenerator
>>> snapshot = load_snapshot(Path("catalog.yaml"))  # doctest: +SKIP
>>> result = CatalogPdfGenerator(snapshot, output_dir=Path("dist")).run()  # doctest: +SKIP
>>> result.path  # doctest: +SKIP
PosixPath('dist/Spring_Menu_v2.1.pdf')
"""

from __future__ import annotations

import datetime as dt
import logging
import re
import typing as typ
from pathlib import Path

from catalog_pdf._constants import FILENAME_TEMPLATE
from catalog_pdf.assets import AssetResolver
from catalog_pdf.config.settings import GeneratorSettings
from catalog_pdf.generator.layout import CatalogLayoutEngine, ImageSource
from catalog_pdf.generator.models import CatalogGenerationError, GenerationResult
from catalog_pdf.generator.writer import DocumentWriter, ReportLabDocumentWriter

if typ.TYPE_CHECKING:
    from catalog_pdf.config.models import CatalogSnapshot

LOGGER = logging.getLogger(__name__)

WriterFactory = typ.Callable[[str], DocumentWriter]

_UNSAFE_FILENAME_CHARS = re.compile(r"[^a-zA-Z0-9]")


def catalog_filename(name: str, version: str) -> str:
    """Return the download filename for a catalog.

    >>> catalog_filename("Spring Menu", "2.1")
    'Spring_Menu_v2.1.pdf'
    """
    safe_name = _UNSAFE_FILENAME_CHARS.sub("_", name)
    return FILENAME_TEMPLATE.format(name=safe_name, version=version)


def _default_writer(title: str) -> DocumentWriter:
    return ReportLabDocumentWriter(title=title)


class CatalogPdfGenerator:
    """Render a catalog snapshot into a PDF file."""

    def __init__(
        self,
        snapshot: CatalogSnapshot,
        *,
        settings: GeneratorSettings | None = None,
        resolver: ImageSource | None = None,
        writer_factory: WriterFactory | None = None,
        output_dir: Path | None = None,
        generated_on: dt.date | None = None,
    ) -> None:
        """Initialize the generator with a snapshot and its collaborators.

        Parameters
        ----------
        snapshot : CatalogSnapshot
            Catalog configuration and the products/categories it references.
        settings : GeneratorSettings, optional
            Endpoint, output folder, and about-page copy. Defaults apply when
            omitted.
        resolver : ImageSource, optional
            Image lookup; defaults to an :class:`AssetResolver` pointed at
            ``settings.asset_endpoint``.
        writer_factory : callable, optional
            Builds a fresh :class:`DocumentWriter` per run from the document
            title; defaults to a ReportLab-backed writer.
        output_dir : Path, optional
            Override for ``settings.output_dir``.
        generated_on : datetime.date, optional
            Date printed on a synthesized cover page; defaults to today.
        """
        self.snapshot = snapshot
        self.settings = settings or GeneratorSettings()
        self.resolver = resolver or AssetResolver(
            self.settings.asset_endpoint, timeout=self.settings.asset_timeout
        )
        self.writer_factory = writer_factory or _default_writer
        self.output_dir = output_dir or self.settings.output_dir
        self.generated_on = generated_on

    @property
    def filename(self) -> str:
        catalog = self.snapshot.catalog
        return catalog_filename(catalog.name, catalog.version)

    def run(self) -> GenerationResult:
        """Render the catalog and write it to the output directory.

        Returns
        -------
        GenerationResult
            Path of the written PDF and the structure that was rendered.

        Raises
        ------
        CatalogGenerationError
            If rendering or writing fails. No file is left at the target path
            in that case.

        Notes
        -----
        The document is written to a hidden ``.partial`` file first and moved
        into place once complete.
        """
        catalog = self.snapshot.catalog
        LOGGER.info("Starting PDF generation for %s v%s", catalog.name, catalog.version)
        target = self.output_dir / self.filename
        partial = target.with_name(f".{target.name}.partial")
        try:
            engine = CatalogLayoutEngine(
                self.writer_factory(catalog.name),
                self.resolver,
                self.settings,
                generated_on=self.generated_on,
            )
            report = engine.render(self.snapshot)
            engine.save(partial)
            partial.replace(target)
        except Exception as exc:
            partial.unlink(missing_ok=True)
            msg = f"Failed to generate catalog '{catalog.name}': {exc}"
            raise CatalogGenerationError(msg) from exc

        LOGGER.info(
            "PDF generated: %s (%d pages, %d products)",
            target,
            report.page_count,
            report.product_count,
        )
        return GenerationResult(path=target, report=report)


__all__ = ["CatalogPdfGenerator", "WriterFactory", "catalog_filename"]

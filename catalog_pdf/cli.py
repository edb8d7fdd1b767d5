"""Cyclopts CLI entrypoint for building PDF product catalogs.

The ``catalog-pdf`` console script defined here renders a catalog snapshot
(exported from the catalog-management database as YAML or JSON) into a
paginated PDF, previews the numbered structure without fetching any images,
seeds default ordering metadata, and records generator settings. Typical
usage is ``catalog-pdf generate --snapshot catalog.yaml`` after exporting the
latest snapshot.

Examples
--------
Generate the catalog into the configured output directory:

>>> from catalog_pdf.cli import main
>>> main()  # doctest: +SKIP

Preview the numbering of a snapshot:

>>> from catalog_pdf.cli import app
>>> app(["outline", "--snapshot", "catalog.yaml"])  # doctest: +SKIP
"""

from __future__ import annotations

import logging
import sys
import typing as typ
from pathlib import Path

import cyclopts
from cyclopts import App, Parameter

from .config import (
    DEFAULT_SETTINGS_PATH,
    load_settings,
    load_snapshot,
    save_settings,
)
from .generator import CatalogGenerationError, CatalogPdfGenerator
from .ordering import plan_sections, summarize
from .scaffold import scaffold_category_orders

DEFAULT_SNAPSHOT = Path("catalog.yaml")
GENERIC_FAILURE = "Failed to generate catalog PDF"

LOGGER = logging.getLogger(__name__)

app = App(name="catalog-pdf", config=cyclopts.config.Env("CATALOG_PDF_", command=False))  # type: ignore[unknown-argument]


def _display_path(path: Path) -> str:
    """Shorten ``path`` to a working-directory relative form when it lies inside."""
    cwd = Path.cwd()
    if path.is_absolute() and path.is_relative_to(cwd):
        return str(path.relative_to(cwd))
    return str(path)


def _configure_logging(*, verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )


@app.command(help="Render a catalog snapshot into a PDF file.")
def generate(
    *,
    snapshot: typ.Annotated[
        Path, Parameter(help="Path to the catalog snapshot (YAML or JSON)")
    ] = DEFAULT_SNAPSHOT,
    output_dir: typ.Annotated[
        Path | None, Parameter(help="Override the output folder")
    ] = None,
    endpoint: typ.Annotated[
        str | None, Parameter(help="Override the image proxy endpoint")
    ] = None,
    timeout: typ.Annotated[
        float | None, Parameter(help="Per-image request timeout in seconds")
    ] = None,
    config: typ.Annotated[
        Path,
        Parameter(help="Path to generator settings (TOML)", env_var="CATALOG_PDF_CONFIG_FILE"),
    ] = DEFAULT_SETTINGS_PATH,
    verbose: bool = False,
) -> None:
    """Generate the catalog PDF for the given snapshot.

    Parameters
    ----------
    snapshot : Path, optional
        Snapshot file with ``catalog``, ``products`` and ``categories``.
    output_dir : Path or None, optional
        Folder for the PDF; defaults to the settings file value.
    endpoint : str or None, optional
        Image proxy URL; defaults to the settings file value.
    timeout : float or None, optional
        Per-image request timeout; by default no timeout is applied.
    config : Path, optional
        Settings file; a missing file means built-in defaults.
    verbose : bool, optional
        Log every stage and image request.

    Returns
    -------
    None
        Writes the PDF and prints its path.

    Raises
    ------
    ValueError
        If the catalog has no category entries configured.
    SystemExit
        With status 1 when generation fails; the cause is logged and a single
        generic message is printed.
    """
    _configure_logging(verbose=verbose)
    settings = load_settings(config).with_overrides(
        asset_endpoint=endpoint, asset_timeout=timeout, output_dir=output_dir
    )
    catalog_snapshot = load_snapshot(snapshot)
    if not catalog_snapshot.catalog.category_orders:
        msg = "Please add some categories and products to the catalog first."
        raise ValueError(msg)

    generator = CatalogPdfGenerator(catalog_snapshot, settings=settings)
    try:
        result = generator.run()
    except CatalogGenerationError:
        LOGGER.exception("Error generating PDF")
        print(GENERIC_FAILURE, file=sys.stderr)
        raise SystemExit(1) from None
    print(f"wrote {_display_path(result.path)}")


@app.command(help="Print the numbered categories and products without rendering.")
def outline(
    *,
    snapshot: typ.Annotated[
        Path, Parameter(help="Path to the catalog snapshot (YAML or JSON)")
    ] = DEFAULT_SNAPSHOT,
) -> None:
    """Show what the generated catalog will contain.

    Parameters
    ----------
    snapshot : Path, optional
        Snapshot file to inspect. No images are fetched.

    Returns
    -------
    None
        Prints summary counts followed by one line per category and product.
    """
    catalog_snapshot = load_snapshot(snapshot)
    catalog = catalog_snapshot.catalog
    summary = summarize(catalog_snapshot)
    print(f"{catalog.name} v{catalog.version}")
    print(
        f"{summary.configured_categories} categories, "
        f"{summary.selected_products} products selected"
    )
    print(f"cover: {'image' if summary.has_cover else 'default'}")
    print(f"back page: {'image' if summary.has_back_page else 'default'}")
    for section in plan_sections(catalog_snapshot):
        marker = " [new page]" if section.start_new_page else ""
        print(f"{section.number}. {section.category.name}{marker}")
        for entry in section.products:
            print(f"  {entry.label} {entry.product.title}")


@app.command(help="Seed default category and product ordering into a snapshot.")
def scaffold(
    *,
    snapshot: typ.Annotated[
        Path, Parameter(help="Path to the catalog snapshot (YAML or JSON)")
    ] = DEFAULT_SNAPSHOT,
    force: typ.Annotated[
        bool, Parameter(help="Replace ordering that is already configured")
    ] = False,
) -> None:
    """Write default ordering metadata into the snapshot file."""
    result = scaffold_category_orders(snapshot, force=force)
    if not result.written:
        print(
            f"{_display_path(snapshot)} already has {len(result.orders)} "
            "category entries; use --force to replace them"
        )
        return
    products = sum(len(order.product_orders) for order in result.orders)
    print(
        f"wrote {_display_path(snapshot)} "
        f"({len(result.orders)} categories, {products} products)"
    )


@app.command(help="Store generator settings for later runs.")
def configure(
    *,
    endpoint: typ.Annotated[
        str | None, Parameter(help="Image proxy endpoint")
    ] = None,
    timeout: typ.Annotated[
        float | None, Parameter(help="Per-image request timeout in seconds")
    ] = None,
    output_dir: typ.Annotated[
        Path | None, Parameter(help="Default output folder")
    ] = None,
    config: typ.Annotated[
        Path,
        Parameter(help="Where to store settings (TOML)", env_var="CATALOG_PDF_CONFIG_FILE"),
    ] = DEFAULT_SETTINGS_PATH,
) -> None:
    """Merge the given values into the settings file and save it."""
    settings = load_settings(config).with_overrides(
        asset_endpoint=endpoint, asset_timeout=timeout, output_dir=output_dir
    )
    path = save_settings(settings, config)
    print(f"wrote {_display_path(path)}")


def main() -> None:
    """Invoke the Cyclopts application that powers the `catalog-pdf` command.

    Examples
    --------
    >>> main()  # doctest: +SKIP
    """
    app()


if __name__ == "__main__":  # pragma: no cover - manual invocation helper
    main()

"""Generator settings persisted in ``~/.config/catalog-pdf/config.toml``.

The settings file holds values that rarely change between runs: the image
proxy endpoint, the optional per-request timeout, the default output folder,
and the copy used for the synthesized "About Us" page. Command-line options
and ``CATALOG_PDF_*`` environment variables override whatever the file says.

Example file::

    [assets]
    endpoint = "https://images.example.invalid/getImageBase64"
    timeout = 15

    [output]
    directory = "dist"

    [about]
    heading = "About Us"
    lines = ["Welcome to our product catalog."]
"""

from __future__ import annotations

import dataclasses as dc
import os
import typing as typ
from pathlib import Path

import tomlkit

from catalog_pdf._constants import DEFAULT_ABOUT_HEADING, DEFAULT_ABOUT_LINES

DEFAULT_ASSET_ENDPOINT = "https://getimagebase64-5ocax2fewa-uc.a.run.app"
DEFAULT_SETTINGS_PATH = Path(
    os.getenv(
        "CATALOG_PDF_CONFIG_FILE",
        Path.home() / ".config" / "catalog-pdf" / "config.toml",
    )
)


@dc.dataclass(frozen=True, slots=True)
class GeneratorSettings:
    """Resolved settings shared by the resolver, layout engine and CLI."""

    asset_endpoint: str = DEFAULT_ASSET_ENDPOINT
    asset_timeout: float | None = None
    output_dir: Path = Path(".")
    about_heading: str = DEFAULT_ABOUT_HEADING
    about_lines: tuple[str, ...] = DEFAULT_ABOUT_LINES
    currency_symbol: str = "$"

    def with_overrides(
        self,
        *,
        asset_endpoint: str | None = None,
        asset_timeout: float | None = None,
        output_dir: Path | None = None,
    ) -> GeneratorSettings:
        """Return a copy where every non-None override replaces the stored value."""
        return dc.replace(
            self,
            asset_endpoint=asset_endpoint or self.asset_endpoint,
            asset_timeout=(
                asset_timeout if asset_timeout is not None else self.asset_timeout
            ),
            output_dir=output_dir or self.output_dir,
        )


def load_settings(path: Path = DEFAULT_SETTINGS_PATH) -> GeneratorSettings:
    """Read generator settings from ``path``, falling back to defaults.

    Parameters
    ----------
    path : Path, optional
        TOML file to read. A missing file is not an error; the defaults are
        returned instead.

    Returns
    -------
    GeneratorSettings
        Settings with every absent key left at its default.

    Raises
    ------
    ValueError
        If ``timeout`` is not a positive number or ``lines`` is not a list.
    """
    base = GeneratorSettings()
    if not path.exists():
        return base
    data = tomlkit.parse(path.read_text(encoding="utf-8"))

    def _as_dict(table: typ.Any) -> dict[str, typ.Any]:
        return {k: v for k, v in table.items()} if table else {}

    assets = _as_dict(data.get("assets"))
    output = _as_dict(data.get("output"))
    about = _as_dict(data.get("about"))

    timeout = assets.get("timeout", base.asset_timeout)
    if timeout is not None:
        if isinstance(timeout, bool) or not isinstance(timeout, int | float):
            msg = f"Invalid [assets] timeout in {path}: {timeout!r}"
            raise ValueError(msg)
        if timeout <= 0:
            msg = f"[assets] timeout must be positive in {path}"
            raise ValueError(msg)
        timeout = float(timeout)

    lines = about.get("lines", list(base.about_lines))
    if not isinstance(lines, list):
        msg = f"[about] lines must be a list of strings in {path}"
        raise ValueError(msg)

    return GeneratorSettings(
        asset_endpoint=str(assets.get("endpoint", base.asset_endpoint)),
        asset_timeout=timeout,
        output_dir=Path(str(output.get("directory", base.output_dir))),
        about_heading=str(about.get("heading", base.about_heading)),
        about_lines=tuple(str(line) for line in lines),
        currency_symbol=str(output.get("currency_symbol", base.currency_symbol)),
    )


def save_settings(settings: GeneratorSettings, path: Path = DEFAULT_SETTINGS_PATH) -> Path:
    """Persist ``settings`` to ``path`` with user-only permissions."""
    path.parent.mkdir(parents=True, exist_ok=True)
    doc = tomlkit.document()

    assets = tomlkit.table()
    assets.add("endpoint", settings.asset_endpoint)
    if settings.asset_timeout is not None:
        assets.add("timeout", settings.asset_timeout)
    doc.add("assets", assets)

    output = tomlkit.table()
    output.add("directory", str(settings.output_dir))
    output.add("currency_symbol", settings.currency_symbol)
    doc.add("output", output)

    about = tomlkit.table()
    about.add("heading", settings.about_heading)
    about.add("lines", list(settings.about_lines))
    doc.add("about", about)

    path.write_text(tomlkit.dumps(doc), encoding="utf-8")
    path.chmod(0o600)
    return path


__all__ = [
    "DEFAULT_ASSET_ENDPOINT",
    "DEFAULT_SETTINGS_PATH",
    "GeneratorSettings",
    "load_settings",
    "save_settings",
]

"""Tests for generator settings persisted as TOML."""

from __future__ import annotations

import stat
from pathlib import Path
from textwrap import dedent

import pytest

from catalog_pdf.config import GeneratorSettings, load_settings, save_settings
from catalog_pdf.config.settings import DEFAULT_ASSET_ENDPOINT


def test_missing_settings_file_yields_defaults(tmp_path: Path) -> None:
    settings = load_settings(tmp_path / "absent.toml")

    assert settings == GeneratorSettings(), "expected built-in defaults"
    assert settings.asset_endpoint == DEFAULT_ASSET_ENDPOINT
    assert settings.asset_timeout is None, "expected no timeout by default"


def test_load_settings_reads_every_table(tmp_path: Path) -> None:
    path = tmp_path / "config.toml"
    path.write_text(
        dedent(
            """
            [assets]
            endpoint = "https://images.example.invalid/proxy"
            timeout = 15

            [output]
            directory = "dist"
            currency_symbol = "€"

            [about]
            heading = "Who we are"
            lines = ["Family run since 1990."]
            """
        ),
        encoding="utf-8",
    )

    settings = load_settings(path)

    assert settings.asset_endpoint == "https://images.example.invalid/proxy"
    assert settings.asset_timeout == 15.0
    assert settings.output_dir == Path("dist")
    assert settings.currency_symbol == "€"
    assert settings.about_heading == "Who we are"
    assert settings.about_lines == ("Family run since 1990.",)


@pytest.mark.parametrize(
    ("content", "message"),
    [
        ("[assets]\ntimeout = 0\n", "must be positive"),
        ("[assets]\ntimeout = \"soon\"\n", "Invalid \\[assets\\] timeout"),
        ("[about]\nlines = \"one line\"\n", "must be a list"),
    ],
)
def test_load_settings_rejects_invalid_values(
    tmp_path: Path, content: str, message: str
) -> None:
    path = tmp_path / "config.toml"
    path.write_text(content, encoding="utf-8")

    with pytest.raises(ValueError, match=message):
        load_settings(path)


def test_save_settings_round_trips_with_private_permissions(tmp_path: Path) -> None:
    path = tmp_path / "nested" / "config.toml"
    settings = GeneratorSettings(
        asset_endpoint="https://images.example.invalid/proxy",
        asset_timeout=2.5,
        output_dir=Path("out"),
    )

    written = save_settings(settings, path)

    assert written == path
    assert stat.S_IMODE(path.stat().st_mode) == 0o600, (
        "expected settings to be readable by the owner only"
    )
    assert load_settings(path) == settings


def test_with_overrides_only_replaces_given_values() -> None:
    base = GeneratorSettings(asset_timeout=3.0, output_dir=Path("dist"))

    unchanged = base.with_overrides()
    changed = base.with_overrides(asset_endpoint="https://x.invalid", output_dir=Path("tmp"))

    assert unchanged == base
    assert changed.asset_endpoint == "https://x.invalid"
    assert changed.output_dir == Path("tmp")
    assert changed.asset_timeout == 3.0, "expected the stored timeout to be kept"

"""Behaviour tests for catalog PDF generation using pytest-bdd.

These scenarios render snapshots end-to-end through the real image resolver
and ReportLab writer, then read the produced PDF back with pypdf. The image
proxy is replaced by a mocked ``requests.Session`` so no network access is
needed.

Usage
-----
Run ``pytest tests/bdd/test_catalog_generation_bdd.py -v`` to execute only
these scenarios.
"""

from __future__ import annotations

import base64
import dataclasses as dc
import typing as typ
from pathlib import Path

import pytest
import requests
from pypdf import PdfReader
from pytest_bdd import given, parsers, scenarios, then, when

from catalog_pdf.assets import AssetResolver
from catalog_pdf.generator import CatalogPdfGenerator

from ..helpers import png_bytes, spring_menu, storage_url

if typ.TYPE_CHECKING:
    from pytest_mock import MockerFixture

    from catalog_pdf.generator import GenerationResult

FEATURE_FILE = (
    Path(__file__).resolve().parents[2] / "features" / "catalog_generation.feature"
)
scenarios(FEATURE_FILE)

ENDPOINT = "https://images.example.invalid/getImageBase64"

ScenarioState = dict[str, typ.Any]


@pytest.fixture
def scenario_state() -> ScenarioState:
    """Share mutable scenario data across pytest-bdd steps."""
    return {}


def _page_texts(scenario_state: ScenarioState) -> list[str]:
    if "pages" not in scenario_state:
        result = typ.cast("GenerationResult", scenario_state["result"])
        reader = PdfReader(result.path)
        scenario_state["pages"] = [page.extract_text() or "" for page in reader.pages]
    return typ.cast("list[str]", scenario_state["pages"])


@given("the Spring Menu catalog snapshot")
def given_spring_menu(scenario_state: ScenarioState) -> None:
    scenario_state["snapshot"] = spring_menu()


@given("the Spring Menu catalog snapshot with a product image")
def given_spring_menu_with_image(scenario_state: ScenarioState) -> None:
    """Attach a stored image to the only included product."""
    snapshot = spring_menu()
    cola, lemonade = snapshot.products
    scenario_state["snapshot"] = dc.replace(
        snapshot,
        products=(dc.replace(cola, image=storage_url("products/cola.png")), lemonade),
    )


@given("an image proxy that serves every image")
def given_working_proxy(scenario_state: ScenarioState, mocker: MockerFixture) -> None:
    session = mocker.Mock(spec=requests.Session)
    response = mocker.Mock()
    response.status_code = 200
    response.json.return_value = {
        "base64": "data:image/png;base64," + base64.b64encode(png_bytes()).decode()
    }
    session.get.return_value = response
    scenario_state["session"] = session


@given("an image proxy that fails every request")
def given_failing_proxy(scenario_state: ScenarioState, mocker: MockerFixture) -> None:
    session = mocker.Mock(spec=requests.Session)
    response = mocker.Mock()
    response.status_code = 503
    session.get.return_value = response
    scenario_state["session"] = session


@when("I generate the catalog PDF")
def when_generate(scenario_state: ScenarioState, tmp_path: Path) -> None:
    """Run the generator with the mocked proxy session."""
    resolver = AssetResolver(ENDPOINT, session=scenario_state["session"])
    generator = CatalogPdfGenerator(
        scenario_state["snapshot"], resolver=resolver, output_dir=tmp_path
    )
    scenario_state["output_dir"] = tmp_path
    scenario_state["result"] = generator.run()


@then(parsers.parse('the file "{filename}" is written'))
def then_file_written(scenario_state: ScenarioState, filename: str) -> None:
    output_dir = typ.cast("Path", scenario_state["output_dir"])
    result = typ.cast("GenerationResult", scenario_state["result"])
    assert result.path == output_dir / filename, (
        f"expected {filename}, got {result.path.name}"
    )
    assert result.path.read_bytes().startswith(b"%PDF"), "expected a PDF document"


@then(parsers.parse("the document has {count:d} pages"))
def then_page_count(scenario_state: ScenarioState, count: int) -> None:
    pages = _page_texts(scenario_state)
    assert len(pages) == count, f"expected {count} pages, got {len(pages)}"


@then(parsers.parse('page {number:d} shows "{first}" and "{second}"'))
def then_page_shows(
    scenario_state: ScenarioState, number: int, first: str, second: str
) -> None:
    text = _page_texts(scenario_state)[number - 1]
    assert first in text, f"expected {first!r} on page {number}"
    assert second in text, f"expected {second!r} on page {number}"


@then(parsers.parse('every page carries a "Page X of {total:d}" footer'))
def then_footers(scenario_state: ScenarioState, total: int) -> None:
    for number, text in enumerate(_page_texts(scenario_state), start=1):
        assert f"Page {number} of {total}" in text, f"missing footer on page {number}"


@then(parsers.parse('no page mentions "{text}"'))
def then_absent(scenario_state: ScenarioState, text: str) -> None:
    assert all(text not in page for page in _page_texts(scenario_state)), (
        f"did not expect {text!r} in the document"
    )


@then(parsers.parse('the image proxy was asked for "{storage_path}" once'))
def then_proxy_called(scenario_state: ScenarioState, storage_path: str) -> None:
    session = scenario_state["session"]
    session.get.assert_called_once_with(
        ENDPOINT, params={"path": storage_path}, timeout=None
    )

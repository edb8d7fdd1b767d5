r"""Client for the image proxy that serves stored catalog images as base64.

Catalog images live in an object store whose binary download API requires
credentials the generator does not hold. A small proxy endpoint reads the
object on the server side and answers ``{"base64": "data:image/...;base64,..."}``.
This module turns a stored-object download URL into that request and the
response into bytes the document writer can embed.

Example
-------
>>> from catalog_pdf.assets import extract_storage_path
>>> extract_storage_path(
...     "https://storage.example.invalid/v0/b/shop/o/products%2Fcola.png?alt=media"
... )
'products/cola.png'
>>> extract_storage_path("https://cdn.example.invalid/cola.png") is None
True
"""

from __future__ import annotations

import base64
import binascii
import dataclasses as dc
import json
import logging
import re
from http import HTTPStatus
from urllib.parse import unquote

import requests

LOGGER = logging.getLogger(__name__)

STORAGE_PATH_PATTERN = re.compile(r"/o/(.+?)\?")
DATA_URL_PATTERN = re.compile(r"^data:[^;,]+;base64,")


class AssetUnavailableError(RuntimeError):
    """Raised when an image cannot be retrieved through the proxy."""


@dc.dataclass(frozen=True, slots=True)
class ResolvedAsset:
    """Decoded image payload ready for embedding.

    Attributes
    ----------
    storage_path : str
        Object-store path the image was fetched from.
    data_url : str
        Payload exactly as returned by the proxy.
    data : bytes
        Decoded image bytes.
    image_format : str
        ``"PNG"`` when the data-URL prefix names PNG, otherwise ``"JPEG"``.
    """

    storage_path: str
    data_url: str
    data: bytes
    image_format: str


def extract_storage_path(reference: str) -> str | None:
    """Return the URL-decoded object path between ``/o/`` and ``?``, or None."""
    match = STORAGE_PATH_PATTERN.search(reference)
    if not match:
        return None
    return unquote(match.group(1))


def detect_image_format(payload: str) -> str:
    """Return the embedding format implied by a data-URL payload."""
    return "PNG" if "data:image/png" in payload else "JPEG"


def decode_data_url(payload: str) -> bytes:
    """Strip a ``data:<media type>;base64,`` prefix and decode the remainder.

    Raises
    ------
    ValueError
        If the payload is not valid base64.
    """
    body = DATA_URL_PATTERN.sub("", payload.strip(), count=1)
    try:
        return base64.b64decode(body, validate=True)
    except binascii.Error as exc:
        msg = "Image payload is not valid base64"
        raise ValueError(msg) from exc


class AssetResolver:
    """Fetch catalog images one at a time through the proxy endpoint.

    The resolver performs exactly one request per image and never retries;
    callers substitute a placeholder whenever :meth:`resolve` returns None.
    It is safe to reuse across generations when the provided session is.
    """

    def __init__(
        self,
        endpoint: str,
        *,
        session: requests.Session | None = None,
        timeout: float | None = None,
    ) -> None:
        """Initialise the resolver with the proxy URL and optional transport.

        Parameters
        ----------
        endpoint : str
            Proxy URL; the storage path is sent as the ``path`` query parameter.
        session : requests.Session, optional
            Preconfigured session to reuse connections. Defaults to a new
            session per resolver.
        timeout : float or None, optional
            Per-request timeout in seconds. ``None`` (default) leaves the
            network stack's own behaviour in place.
        """
        if not endpoint.strip():
            msg = "Asset endpoint cannot be empty"
            raise ValueError(msg)
        self._endpoint = endpoint.strip()
        self._session = session or requests.Session()
        self.timeout = timeout

    @property
    def endpoint(self) -> str:
        return self._endpoint

    def resolve(self, reference: str) -> ResolvedAsset | None:
        """Return the image behind ``reference``, or None when unavailable.

        Parameters
        ----------
        reference : str
            Stored-object download URL as saved on the product or catalog.

        Returns
        -------
        ResolvedAsset | None
            The decoded image, or ``None`` when the reference cannot be parsed
            or the proxy call fails for any reason. Failures are logged.
        """
        storage_path = extract_storage_path(reference)
        if storage_path is None:
            LOGGER.warning("Could not extract storage path from %s", reference)
            return None
        try:
            return self.fetch(storage_path)
        except AssetUnavailableError as exc:
            LOGGER.warning("Failed to load image %s: %s", storage_path, exc)
            return None

    def fetch(self, storage_path: str) -> ResolvedAsset:
        """Fetch ``storage_path`` from the proxy, raising on any failure.

        Raises
        ------
        AssetUnavailableError
            On network errors, non-2xx responses, invalid JSON, or a missing
            or undecodable ``base64`` field.
        """
        LOGGER.debug("Fetching image via proxy: %s", storage_path)
        try:
            response = self._session.get(
                self._endpoint, params={"path": storage_path}, timeout=self.timeout
            )
        except requests.RequestException as exc:
            msg = f"Failed to reach image proxy for '{storage_path}': {exc}"
            raise AssetUnavailableError(msg) from exc

        status = response.status_code
        if not HTTPStatus.OK <= status < HTTPStatus.MULTIPLE_CHOICES:
            msg = f"Image proxy returned HTTP {status} for '{storage_path}'"
            raise AssetUnavailableError(msg)

        try:
            payload = response.json()
        except (json.JSONDecodeError, ValueError) as exc:
            msg = f"Image proxy response for '{storage_path}' was not valid JSON"
            raise AssetUnavailableError(msg) from exc

        data_url = payload.get("base64") if isinstance(payload, dict) else None
        if not isinstance(data_url, str) or not data_url.strip():
            msg = f"Image proxy response for '{storage_path}' has no base64 data"
            raise AssetUnavailableError(msg)

        try:
            data = decode_data_url(data_url)
        except ValueError as exc:
            raise AssetUnavailableError(str(exc)) from exc
        if not data:
            msg = f"Image proxy returned an empty image for '{storage_path}'"
            raise AssetUnavailableError(msg)

        LOGGER.debug("Got image data for %s (%d bytes)", storage_path, len(data))
        return ResolvedAsset(
            storage_path=storage_path,
            data_url=data_url,
            data=data,
            image_format=detect_image_format(data_url),
        )


__all__ = [
    "AssetResolver",
    "AssetUnavailableError",
    "ResolvedAsset",
    "decode_data_url",
    "detect_image_format",
    "extract_storage_path",
]

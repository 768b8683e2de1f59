"""Software-update catalog parser.

Turns raw catalog bytes (a property list, optionally gzip-compressed) into
a CatalogDocument. Only the documented keys are read; anything else in a
product entry is ignored so newer catalogs keep parsing.

Usage:
    with HTTPClient() as client:
        catalog = fetch_catalog(client, settings.network.catalog_url)
    print(len(catalog), "products")
"""

from __future__ import annotations

import gzip
import logging
import plistlib
import zlib
from datetime import datetime, timezone
from typing import Any
from xml.parsers.expat import ExpatError

from ..common.errors import ParseError
from ..common.http_client import HTTPClient
from .models import CatalogDocument, Package, Product

logger = logging.getLogger(__name__)

GZIP_MAGIC = b"\x1f\x8b"


def _decompress(raw: bytes) -> bytes:
    """Gunzip the payload when the server did not undo the compression itself."""
    if not raw.startswith(GZIP_MAGIC):
        return raw
    try:
        return gzip.decompress(raw)
    except (OSError, EOFError, zlib.error) as exc:
        raise ParseError(f"Catalog is not valid gzip data: {exc}") from exc


def _parse_post_date(value: Any, key: str) -> datetime | None:
    """Normalize a PostDate to a naive UTC datetime.

    plistlib yields naive UTC datetimes for <date> nodes; string dates are
    read as ISO 8601 so hand-written catalogs work too.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str):
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError as exc:
            raise ParseError(f"Product {key}: unreadable PostDate {value!r}") from exc
    else:
        raise ParseError(f"Product {key}: unexpected PostDate type {type(value).__name__}")

    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


def _parse_package(entry: Any, key: str) -> Package:
    if not isinstance(entry, dict) or not isinstance(entry.get("URL"), str):
        raise ParseError(f"Product {key}: package entry without a URL")
    size = entry.get("Size", 0)
    if not isinstance(size, int):
        raise ParseError(f"Product {key}: package Size is not an integer")
    return Package(
        url=entry["URL"],
        size=size,
        digest=str(entry.get("Digest", "")),
    )


def _parse_product(key: str, entry: Any) -> Product:
    if not isinstance(entry, dict):
        raise ParseError(f"Product {key} is not a dictionary")

    distributions = entry.get("Distributions", {})
    if not isinstance(distributions, dict):
        raise ParseError(f"Product {key}: Distributions is not a dictionary")

    packages = entry.get("Packages", [])
    if not isinstance(packages, list):
        raise ParseError(f"Product {key}: Packages is not a list")

    metadata_url = entry.get("ServerMetadataURL")

    return Product(
        key=key,
        post_date=_parse_post_date(entry.get("PostDate"), key),
        server_metadata_url=metadata_url if isinstance(metadata_url, str) else None,
        distributions={str(loc): str(url) for loc, url in distributions.items()},
        packages=tuple(_parse_package(p, key) for p in packages),
    )


def parse_catalog(raw: bytes) -> CatalogDocument:
    """Parse raw catalog bytes.

    Args:
        raw: Property-list document, plain or gzip-compressed.

    Returns:
        CatalogDocument with products in document order.

    Raises:
        ParseError: Malformed document or no top-level Products mapping.
            Malformed individual products are logged and left out.
    """
    data = _decompress(raw)
    try:
        root = plistlib.loads(data)
    except (plistlib.InvalidFileException, ExpatError, ValueError, TypeError) as exc:
        raise ParseError(f"Catalog is not a well-formed property list: {exc}") from exc

    if not isinstance(root, dict) or "Products" not in root:
        raise ParseError("Catalog has no top-level 'Products' key")

    products = root["Products"]
    if not isinstance(products, dict):
        raise ParseError("Catalog 'Products' is not a dictionary")

    parsed: dict[str, Product] = {}
    for key, entry in products.items():
        # A malformed entry only costs that product, never the whole catalog
        try:
            parsed[str(key)] = _parse_product(str(key), entry)
        except ParseError as exc:
            logger.warning("Skipping malformed product: %s", exc)

    logger.info("Parsed catalog: %d products (%d skipped)", len(parsed), len(products) - len(parsed))
    return CatalogDocument(products=parsed)


def fetch_catalog(client: HTTPClient, url: str) -> CatalogDocument:
    """Download and parse the catalog. NetworkError and ParseError propagate."""
    logger.info("Downloading catalog from: %s", url)
    return parse_catalog(client.get_bytes(url))

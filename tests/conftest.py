"""Shared test fixtures for the Boot Camp fetcher."""

import plistlib
import sys
from datetime import datetime
from pathlib import Path

import pytest

# Ensure the package is importable without installation
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from bootcamp_dl.common.config import Settings
from bootcamp_dl.common.errors import NetworkError
from bootcamp_dl.extractor.runner import CommandResult


CATALOG_URL = "https://swscan.example/catalog.sucatalog.gz"
DIST_URL = "https://x/dist.xml"
PKG_URL = "https://x/pkg"

DIST_TEXT = """<?xml version="1.0" encoding="utf-8"?>
<installer-gui-script minSpecVersion="1">
    <script>
    var models = ['MacBookPro8,1','iMac12,2','Macmini5,1'];
    </script>
</installer-gui-script>
"""


class FakeResponse:
    """Minimal stand-in for a streamed requests.Response."""

    def __init__(self, body: bytes = b"", headers: dict | None = None, chunk_error: Exception | None = None):
        self.content = body
        self.text = body.decode("utf-8", errors="replace")
        self.headers = headers if headers is not None else {"Content-Length": str(len(body))}
        self.chunk_error = chunk_error
        self.closed = False

    def iter_content(self, chunk_size: int = 1024):
        for i in range(0, len(self.content), chunk_size):
            yield self.content[i:i + chunk_size]
            if self.chunk_error is not None:
                raise self.chunk_error

    def close(self):
        self.closed = True


class FakeHTTPClient:
    """HTTPClient double serving canned responses and recording requests."""

    def __init__(self, routes: dict | None = None):
        self.routes: dict[str, FakeResponse | Exception] = routes or {}
        self.requests: list[str] = []

    def get(self, url: str, stream: bool = False) -> FakeResponse:
        self.requests.append(url)
        route = self.routes.get(url)
        if route is None:
            raise NetworkError(f"GET {url} failed: 404", url=url)
        if isinstance(route, Exception):
            raise route
        return route

    def get_text(self, url: str) -> str:
        return self.get(url).text

    def get_bytes(self, url: str) -> bytes:
        return self.get(url).content

    def close(self):
        pass


class RecordingRunner:
    """CommandRunner double: records calls, optionally runs a side effect."""

    def __init__(self, results: dict | None = None, effects: dict | None = None):
        self.results = results or {}
        self.effects = effects or {}
        self.calls: list[tuple[str, list[str]]] = []

    def invoke(self, command: str, args: list[str]) -> CommandResult:
        self.calls.append((command, list(args)))
        if command in self.effects:
            self.effects[command](args)
        return self.results.get(command, CommandResult(success=True))

    def commands(self) -> list[str]:
        return [c for c, _ in self.calls]


def build_catalog_bytes(products: dict, fmt=plistlib.FMT_XML) -> bytes:
    # sort_keys=False keeps products in the order given, like the real catalog
    return plistlib.dumps({"CatalogVersion": 2, "Products": products}, fmt=fmt, sort_keys=False)


def bootcamp_product(
    post_date="2021-05-01",
    dist_url: str | None = DIST_URL,
    pkg_url: str = PKG_URL,
    marker: str = "BootCamp",
) -> dict:
    product = {
        "ServerMetadataURL": f"https://swcdn.example/content/{marker}ESD.smd",
        "PostDate": post_date,
        "Distributions": {},
        "Packages": [{"Digest": "abc123", "Size": 1024, "URL": pkg_url}],
    }
    if dist_url:
        product["Distributions"]["English"] = dist_url
    return product


@pytest.fixture
def settings() -> Settings:
    """Default settings with a test catalog URL and tiny chunks."""
    s = Settings()
    s.network.catalog_url = CATALOG_URL
    s.network.chunk_size = 4
    return s


@pytest.fixture
def sample_catalog_bytes() -> bytes:
    """A catalog with one Boot Camp product, one unrelated product and one without metadata."""
    return build_catalog_bytes({
        "84PKG": bootcamp_product(),
        "091-OTHER": {
            "ServerMetadataURL": "https://swcdn.example/content/iTunes.smd",
            "PostDate": datetime(2022, 1, 1),
            "Distributions": {"English": "https://x/itunes.dist"},
            "Packages": [{"Digest": "ffff", "Size": 10, "URL": "https://x/itunes.pkg"}],
            "ExtendedMetaInfo": {"ProductType": "media"},
        },
        "092-NOMETA": {
            "PostDate": datetime(2023, 1, 1),
            "Packages": [],
        },
    })


@pytest.fixture
def fake_client(sample_catalog_bytes) -> FakeHTTPClient:
    """Client serving the sample catalog, its distribution and the package."""
    return FakeHTTPClient({
        CATALOG_URL: FakeResponse(sample_catalog_bytes),
        DIST_URL: FakeResponse(DIST_TEXT.encode()),
        PKG_URL: FakeResponse(b"PKGDATA-0123456789"),
    })


@pytest.fixture
def runner() -> RecordingRunner:
    return RecordingRunner()

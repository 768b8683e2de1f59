"""Data models for the software-update catalog.

All models use @dataclass with to_dict() for JSON serialization.
Instances are built once by the parser and never mutated afterwards.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime


@dataclass(frozen=True)
class Package:
    """A downloadable package attached to a catalog product."""

    url: str
    size: int = 0
    digest: str = ""  # Kept for completeness; never verified

    def to_dict(self) -> dict:
        return {
            "url": self.url,
            "size": self.size,
            "digest": self.digest,
        }


@dataclass(frozen=True)
class Product:
    """One entry of the catalog's Products mapping."""

    key: str
    post_date: datetime | None = None
    server_metadata_url: str | None = None
    distributions: dict[str, str] = field(default_factory=dict)
    packages: tuple[Package, ...] = ()

    def is_support_software(self, marker: str) -> bool:
        """True when ServerMetadataURL is present and carries the marker."""
        return bool(self.server_metadata_url) and marker in self.server_metadata_url

    def distribution_url(self, locale: str) -> str | None:
        return self.distributions.get(locale)

    @property
    def primary_package(self) -> Package | None:
        """First package; the only one ever downloaded."""
        return self.packages[0] if self.packages else None

    def to_dict(self) -> dict:
        return {
            "key": self.key,
            "post_date": self.post_date.isoformat() if self.post_date else None,
            "server_metadata_url": self.server_metadata_url,
            "distributions": dict(self.distributions),
            "packages": [p.to_dict() for p in self.packages],
        }


@dataclass(frozen=True)
class CatalogDocument:
    """Root catalog: product key -> Product, in document order."""

    products: dict[str, Product] = field(default_factory=dict)

    def __len__(self) -> int:
        return len(self.products)

    def items(self):
        return self.products.items()

    def to_dict(self) -> dict:
        return {
            "products": {key: p.to_dict() for key, p in self.products.items()},
        }

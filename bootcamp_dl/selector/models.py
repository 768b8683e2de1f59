"""Data models for the candidate selector."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from ..catalog.models import Product


@dataclass(frozen=True)
class Candidate:
    """A catalog product that passed the marker and compatibility checks."""

    key: str
    product: Product

    @property
    def post_date(self) -> datetime | None:
        return self.product.post_date

    @property
    def download_url(self) -> str | None:
        package = self.product.primary_package
        return package.url if package else None

    def to_dict(self) -> dict:
        return {
            "key": self.key,
            "post_date": self.post_date.isoformat() if self.post_date else None,
            "download_url": self.download_url,
            "product": self.product.to_dict(),
        }

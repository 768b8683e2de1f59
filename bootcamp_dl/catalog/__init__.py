"""Catalog module — software-update catalog models and parser."""

from .models import CatalogDocument, Package, Product
from .parser import fetch_catalog, parse_catalog

__all__ = [
    "CatalogDocument",
    "Package",
    "Product",
    "fetch_catalog",
    "parse_catalog",
]

"""Candidate selector — narrows the catalog down to one support package.

Filtering (in order, catalog order preserved):
  1. ServerMetadataURL carries the support-software marker
  2. The English distribution document lists the requested model

Selection policy:
  Automatic:            latest PostDate
  Manual, valid key:    the candidate with that key
  Manual, missing/bad:  latest PostDate
"""

from __future__ import annotations

import logging
from datetime import datetime
from functools import reduce

from ..catalog.models import CatalogDocument
from ..common.errors import EmptyInputError, NetworkError
from .matcher import ModelCompatibilityMatcher
from .models import Candidate

logger = logging.getLogger(__name__)


# ------------------------------------------------------------------
# Filtering
# ------------------------------------------------------------------


def filter_support_products(catalog: CatalogDocument, marker: str = "BootCamp") -> list[Candidate]:
    """Products whose ServerMetadataURL contains the marker."""
    return [
        Candidate(key=key, product=product)
        for key, product in catalog.items()
        if product.is_support_software(marker)
    ]


def select_candidates(
    catalog: CatalogDocument,
    target_model: str,
    matcher: ModelCompatibilityMatcher,
    marker: str = "BootCamp",
    skip_unreachable: bool = True,
) -> list[Candidate]:
    """Support products compatible with target_model, in catalog order.

    Distribution documents are fetched one at a time. When one of them
    cannot be fetched the product is logged and skipped; pass
    skip_unreachable=False to propagate the NetworkError instead.

    An empty list means no support software exists for the model.
    """
    possible = filter_support_products(catalog, marker)
    logger.info("Found %d support-software products in catalog", len(possible))

    compatible: list[Candidate] = []
    for candidate in possible:
        try:
            matched = matcher.is_compatible(candidate.product, target_model)
        except NetworkError as exc:
            if not skip_unreachable:
                raise
            logger.warning("Skipping %s: distribution unavailable (%s)", candidate.key, exc)
            continue
        if matched:
            logger.info("  %s supports %s", candidate.key, target_model)
            compatible.append(candidate)

    return compatible


# ------------------------------------------------------------------
# Ranking
# ------------------------------------------------------------------


def _date_key(candidate: Candidate) -> datetime:
    return candidate.post_date or datetime.min


def _later(best: Candidate, current: Candidate) -> Candidate:
    # Strictly later replaces; ties keep the earlier candidate
    return current if _date_key(current) > _date_key(best) else best


def choose_latest(candidates: list[Candidate]) -> Candidate:
    """Candidate with the greatest PostDate; first one wins ties.

    Raises:
        EmptyInputError: candidates is empty.
    """
    if not candidates:
        raise EmptyInputError("Cannot choose the latest of zero candidates")
    return reduce(_later, candidates)


def choose_by_key(candidates: list[Candidate], key: str) -> Candidate | None:
    """Candidate whose key equals key exactly, or None."""
    return next((c for c in candidates if c.key == key), None)


def resolve_selection(
    candidates: list[Candidate],
    manual: bool = False,
    key: str | None = None,
) -> Candidate:
    """Apply the selection policy.

    A manual choice never fails the run: a missing or unknown key falls
    back to the latest candidate.

    Raises:
        EmptyInputError: candidates is empty.
    """
    if manual:
        if not key:
            logger.info("No key provided.")
        else:
            chosen = choose_by_key(candidates, key)
            if chosen is not None:
                return chosen
            logger.info("Invalid key provided: %s", key)
    return choose_latest(candidates)

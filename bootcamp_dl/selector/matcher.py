"""Model compatibility matcher.

A product's distribution document lists the Mac models it supports as
plain text. The matcher fetches that document and scans it for anything
shaped like a hardware-model identifier (e.g. "iMac12,2", "MacBookPro11,5").

The scan is a lexical heuristic: unrelated tokens of the same shape are
picked up too. Only exact equality with the requested model counts.
"""

from __future__ import annotations

import logging
import re

from ..catalog.models import Product
from ..common.http_client import HTTPClient

logger = logging.getLogger(__name__)

# <family: 4-12 letters><major: 1-2 digits>,<minor: 1-6 digits>
MODEL_PATTERN = re.compile(r"[A-Za-z]{4,12}[0-9]{1,2},[0-9]{1,6}")


def extract_model_identifiers(text: str) -> list[str]:
    """Return every non-overlapping model identifier in text, in order.

    Duplicates are kept.
    """
    if not text:
        return []
    return MODEL_PATTERN.findall(text)


class ModelCompatibilityMatcher:
    """Decides whether a catalog product supports a given Mac model."""

    def __init__(self, client: HTTPClient, locale: str = "English") -> None:
        self.client = client
        self.locale = locale

    def is_compatible(self, product: Product, target_model: str) -> bool:
        """Check the product's distribution document for target_model.

        Returns False when the product has no distribution for the
        configured locale.

        Raises:
            NetworkError: The distribution document could not be fetched.
        """
        url = product.distribution_url(self.locale)
        if not url:
            logger.debug("Product %s has no %s distribution", product.key, self.locale)
            return False

        text = self.client.get_text(url)
        models = extract_model_identifiers(text)
        logger.debug("Product %s lists %d model identifiers", product.key, len(models))
        return target_model in models

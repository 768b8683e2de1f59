"""Selector module — filters catalog products by model and picks one."""

from .candidate_selector import (
    choose_by_key,
    choose_latest,
    filter_support_products,
    resolve_selection,
    select_candidates,
)
from .matcher import MODEL_PATTERN, ModelCompatibilityMatcher, extract_model_identifiers
from .models import Candidate

__all__ = [
    "Candidate",
    "MODEL_PATTERN",
    "ModelCompatibilityMatcher",
    "choose_by_key",
    "choose_latest",
    "extract_model_identifiers",
    "filter_support_products",
    "resolve_selection",
    "select_candidates",
]

"""
Classification module.

Suggests categories and tags for problem descriptions.
"""

from ideas_central.classification.keywords import CATEGORY_KEYWORDS, CATEGORY_LABELS, CONTEXT_TAGS
from ideas_central.classification.classifier import (
    CategoryScore,
    ClassificationResult,
    Classifier,
    KeywordClassifier,
)

__all__ = [
    "CATEGORY_KEYWORDS",
    "CATEGORY_LABELS",
    "CONTEXT_TAGS",
    "CategoryScore",
    "ClassificationResult",
    "Classifier",
    "KeywordClassifier",
]

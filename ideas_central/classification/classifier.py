"""
Problem classifiers.

A classifier reads a problem's free text and suggests a category, a few
tags and a confidence (0-100). Submission forms use it to pre-fill the
category; the suggestion is never stored on its own.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from ideas_central.classification.keywords import (
    CATEGORY_KEYWORDS,
    CATEGORY_LABELS,
    CONTEXT_TAGS,
    FALLBACK_CATEGORY,
    FALLBACK_CONFIDENCE,
    MAX_CONFIDENCE,
    MAX_KEYWORD_TAGS,
    MIN_TEXT_LENGTH,
)
from ideas_central.errors import ValidationError


@dataclass
class CategoryScore:
    category: str
    label: str
    score: float
    matches: int

    def to_dict(self) -> dict:
        return {
            "category": self.category,
            "label": self.label,
            "score": self.score,
            "matches": self.matches,
        }


@dataclass
class ClassificationResult:
    """
    A suggested category for a piece of text.

    Attributes:
        category: Suggested category value ("other" when nothing matched).
        tags: Suggested tags, without duplicates.
        confidence: 0-100.
        word_count: Words in the analysed text.
        top_scores: Best scoring categories, best first.
    """
    category: str
    tags: List[str] = field(default_factory=list)
    confidence: float = 0.0
    word_count: int = 0
    top_scores: List[CategoryScore] = field(default_factory=list)

    @property
    def label(self) -> str:
        return CATEGORY_LABELS.get(self.category, self.category.title())

    def to_dict(self) -> dict:
        return {
            "category": self.category,
            "label": self.label,
            "tags": list(self.tags),
            "confidence": self.confidence,
            "word_count": self.word_count,
            "top_scores": [s.to_dict() for s in self.top_scores],
        }


class Classifier(ABC):
    """Interface for category classifiers."""

    @abstractmethod
    def classify(self, text: str) -> ClassificationResult:
        """
        Suggest a category for text.

        Raises:
            ValidationError: If the text is too short to analyse.
        """
        pass


class KeywordClassifier(Classifier):
    """
    Suggests the category whose keyword list has the largest share of
    keywords present in the text.

    confidence = min(matched / total_keywords * 100, 95), or 60 for the
    "other" fallback when no keyword matches.
    """

    def __init__(
        self,
        keywords: Optional[Dict[str, List[str]]] = None,
        context_tags: Optional[Dict[str, List[str]]] = None,
        top_n: int = 3,
    ):
        self.keywords = keywords or CATEGORY_KEYWORDS
        self.context_tags = context_tags or CONTEXT_TAGS
        self.top_n = top_n

    def score_categories(self, text: str) -> List[CategoryScore]:
        """Score every category against text, best first."""
        lower = text.lower()
        scores = []
        for category, words in self.keywords.items():
            matches = sum(1 for w in words if w.lower() in lower)
            scores.append(CategoryScore(
                category=category,
                label=CATEGORY_LABELS.get(category, category.title()),
                score=matches / max(len(words), 1),
                matches=matches,
            ))
        # sorted() is stable, so ties keep table order
        return sorted(scores, key=lambda s: s.score, reverse=True)

    def context_tags_for(self, text: str) -> List[str]:
        lower = text.lower()
        return [
            tag for tag, words in self.context_tags.items()
            if any(w in lower for w in words)
        ]

    def classify(self, text: str) -> ClassificationResult:
        if not text or len(text) < MIN_TEXT_LENGTH:
            raise ValidationError(
                f"Text too short for analysis (minimum {MIN_TEXT_LENGTH} characters)"
            )

        lower = text.lower()
        scores = self.score_categories(text)
        best = scores[0] if scores else None

        category = FALLBACK_CATEGORY
        confidence = FALLBACK_CONFIDENCE
        tags: List[str] = []

        if best is not None and best.matches > 0:
            category = best.category
            confidence = min(best.score * 100, MAX_CONFIDENCE)
            tags = [w for w in self.keywords[category] if w.lower() in lower][:MAX_KEYWORD_TAGS]

        for tag in self.context_tags_for(text):
            if tag not in tags:
                tags.append(tag)

        return ClassificationResult(
            category=category,
            tags=tags,
            confidence=confidence,
            word_count=len(text.split()),
            top_scores=scores[:self.top_n],
        )

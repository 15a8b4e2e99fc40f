"""
Problem category keywords for Ideas Central.

The keyword classifier suggests a category for a problem by counting
how many of each category's keywords appear in its text.

CUSTOMIZATION:

To add a category:
    1. Add a key to CATEGORY_KEYWORDS with the category value
    2. List its keywords in lowercase
    3. Add a display label to CATEGORY_LABELS

Keywords are matched as substrings of the lowercased text ("eco" also
matches "economic"), so keep them specific.
"""

# =============================================================================
# Categories
# =============================================================================

# Order matters: on equal scores the first category wins
CATEGORY_KEYWORDS: dict[str, list[str]] = {
    "technology": [
        "software", "app", "system", "digital", "automation",
        "ai", "computer", "internet", "database",
    ],
    "environment": [
        "waste", "pollution", "green", "sustainability", "energy",
        "recycling", "carbon", "climate", "eco",
    ],
    "education": [
        "learning", "student", "teaching", "curriculum", "classroom",
        "academic", "study", "knowledge", "training",
    ],
    "healthcare": [
        "medical", "health", "hospital", "patient", "treatment",
        "medicine", "wellness", "care", "therapy",
    ],
    "transportation": [
        "traffic", "vehicle", "transport", "parking", "road",
        "bus", "travel", "mobility", "logistics",
    ],
    "infrastructure": [
        "building", "facility", "maintenance", "construction",
        "utilities", "network", "structure", "campus",
    ],
    "security": [
        "safety", "protection", "surveillance", "access", "crime",
        "emergency", "risk", "threat", "guard",
    ],
    "social": [
        "community", "social", "cultural", "diversity", "inclusion",
        "communication", "collaboration", "engagement",
    ],
    "finance": [
        "budget", "cost", "funding", "payment", "financial",
        "money", "expense", "revenue", "economic",
    ],
}

CATEGORY_LABELS: dict[str, str] = {
    "technology": "Technology",
    "environment": "Environment",
    "education": "Education",
    "healthcare": "Healthcare",
    "transportation": "Transportation",
    "infrastructure": "Infrastructure",
    "security": "Security",
    "social": "Social Issues",
    "finance": "Finance",
    "other": "Other",
}

FALLBACK_CATEGORY = "other"
FALLBACK_CONFIDENCE = 60.0
MAX_CONFIDENCE = 95.0

# Matched keywords kept as tags
MAX_KEYWORD_TAGS = 4

MIN_TEXT_LENGTH = 20


# =============================================================================
# Context tags
# =============================================================================

# tag -> any of these words in the text adds the tag
CONTEXT_TAGS: dict[str, list[str]] = {
    "urgent": ["urgent", "immediate"],
    "budget": ["cost", "budget"],
    "student-focused": ["student"],
    "faculty-focused": ["faculty"],
}

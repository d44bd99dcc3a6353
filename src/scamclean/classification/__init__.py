"""Rule-based scam type classification."""

from scamclean.classification.scam_type import (
    CATEGORY_DESCRIPTIONS,
    CLASSIFICATION_RULES,
    ScamCategory,
    classify,
    describe,
)

__all__ = ["CATEGORY_DESCRIPTIONS", "CLASSIFICATION_RULES", "ScamCategory", "classify", "describe"]

"""Cold email copy review and rewrite service backed by an LLM."""

from .config import Settings
from .models import CombinedResult, ImproveResult, ReviewResult
from .service import CopyReviewService

__all__ = ["CopyReviewService", "Settings", "ReviewResult", "ImproveResult", "CombinedResult"]

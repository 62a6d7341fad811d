"""Static guidance corpora embedded in the system prompts."""

from .best_copies import add_best_performing_copy, get_best_copies_summary
from .best_practices import get_best_practices_context

__all__ = ["add_best_performing_copy", "get_best_copies_summary", "get_best_practices_context"]

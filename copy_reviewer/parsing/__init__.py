"""Turn raw model text into validated results."""

from .extractor import extract_json
from .validator import validate_improve, validate_review

__all__ = ["extract_json", "validate_improve", "validate_review"]

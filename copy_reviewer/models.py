from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class WireModel(BaseModel):
    """Snake-case attributes in Python, camelCase keys on the wire."""

    model_config = ConfigDict(populate_by_name=True)

    def to_wire(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


# ----------------------------------------------------------------------
# Review
# ----------------------------------------------------------------------
class Highlight(WireModel):
    title: Any = ""
    content: Any = ""


class Section(WireModel):
    """One block of review feedback.

    Only the review score and the sections list are required, so a section is
    never rejected for its shape: null text becomes "", a non-list `items`
    becomes [] and a highlight that is not an object is dropped.
    """

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    title: Any = ""
    content: Any = ""
    items: List[Any] = Field(default_factory=list)
    highlight: Optional[Highlight] = None

    @field_validator("title", "content", mode="before")
    @classmethod
    def _null_text(cls, value: Any) -> Any:
        return "" if value is None else value

    @field_validator("items", mode="before")
    @classmethod
    def _as_list(cls, value: Any) -> List[Any]:
        return value if isinstance(value, list) else []

    @field_validator("highlight", mode="before")
    @classmethod
    def _object_or_none(cls, value: Any) -> Any:
        return value if isinstance(value, (dict, Highlight)) else None


class ReviewResult(WireModel):
    overall_score: int = Field(..., alias="overallScore", ge=0, le=100)
    sections: List[Section]


# ----------------------------------------------------------------------
# Improve
# ----------------------------------------------------------------------
class ImproveResult(WireModel):
    """Rewrite returned by the improve step.

    ``changes`` entries are kept as the model sent them; they usually carry
    category, issue, reason, why, summary, detail and signal strings.
    """

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    improved_subject: str = Field(..., alias="improvedSubject", min_length=1)
    improved_body: str = Field(..., alias="improvedBody", min_length=1)
    changes: List[Any] = Field(default_factory=list)
    further_tips: List[Any] = Field(default_factory=list, alias="furtherTips")
    expected_impact: Any = Field(None, alias="expectedImpact")


# ----------------------------------------------------------------------
# Combined
# ----------------------------------------------------------------------
class OriginalCopy(WireModel):
    subject_line: str = Field(..., alias="subjectLine")
    body: str = Field(..., alias="copy")


class ReviewScore(WireModel):
    score: int
    original_score: int = Field(..., alias="originalScore")


class ImprovedCopy(WireModel):
    subject_line: str = Field(..., alias="subjectLine")
    body: str = Field(..., alias="copy")
    score: int


class CombinedResult(WireModel):
    original: OriginalCopy
    review: ReviewScore
    improved: ImprovedCopy
    changes: List[Any] = Field(default_factory=list)
    further_tips: List[Any] = Field(default_factory=list, alias="furtherTips")
    expected_impact: Any = Field(None, alias="expectedImpact")


# ----------------------------------------------------------------------
# Request bodies
# ----------------------------------------------------------------------
class CopyRequest(WireModel):
    subject_line: str = Field(..., alias="subjectLine")
    body: str = Field(..., alias="copy")
    model: Optional[str] = None

    @field_validator("subject_line", "body")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must be a non-empty string")
        return value


class ImproveRequest(CopyRequest):
    review: Dict[str, Any]


__all__ = [
    "Highlight",
    "Section",
    "ReviewResult",
    "ImproveResult",
    "OriginalCopy",
    "ReviewScore",
    "ImprovedCopy",
    "CombinedResult",
    "CopyRequest",
    "ImproveRequest",
]

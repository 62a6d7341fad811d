import logging
import threading
from typing import Any, Dict, Mapping, Optional, Union

from copy_reviewer.config import Settings
from copy_reviewer.errors import AnalysisFailedError, CopyReviewError, ResponseError
from copy_reviewer.models import (
    CombinedResult,
    ImprovedCopy,
    ImproveResult,
    OriginalCopy,
    ReviewResult,
    ReviewScore,
    Section,
)
from copy_reviewer.parsing import extract_json, validate_improve, validate_review
from copy_reviewer.prompts import (
    IMPROVE_PREFILL,
    REVIEW_PREFILL,
    PromptPair,
    build_improve_prompts,
    build_review_prompts,
)
from copy_reviewer.providers import (
    Completion,
    Operation,
    Transport,
    TransportKind,
    build_transport,
    select_transport,
)
from copy_reviewer.session import CallRecord, CopySession


logger = logging.getLogger("copy_review")

# Added to the review score to estimate the rewrite's score.
IMPROVEMENT_BONUS = 15
FALLBACK_SCORE = 50


def fallback_review(raw_text: str) -> ReviewResult:
    """Low-confidence review used when the model's answer can't be recovered."""
    return ReviewResult(
        overall_score=FALLBACK_SCORE,
        sections=[
            Section(
                title="Analysis",
                content=raw_text or "Unable to generate detailed analysis. Please try again.",
                items=[],
            )
        ],
    )


def estimate_improved_score(review_score: int) -> int:
    return min(100, review_score + IMPROVEMENT_BONUS)


class CopyReviewService:
    """Review cold email copy, rewrite it, or do both in one pass."""

    def __init__(
        self,
        settings: Settings,
        *,
        transports: Optional[Mapping[TransportKind, Transport]] = None,
    ) -> None:
        self._settings = settings
        self._transports: Dict[TransportKind, Transport] = dict(transports or {})
        self._transports_lock = threading.Lock()

    @property
    def settings(self) -> Settings:
        return self._settings

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    def new_session(self) -> CopySession:
        return CopySession(log_dir=self._settings.session_log_dir)

    def review_copy(
        self,
        subject_line: str,
        body: str,
        model: Optional[str] = None,
        *,
        session: Optional[CopySession] = None,
    ) -> ReviewResult:
        """Score the copy. Unrecoverable model text degrades to a fallback review."""
        session = session or self.new_session()
        prompts = build_review_prompts(subject_line, body)
        completion = self._call(Operation.REVIEW, prompts, REVIEW_PREFILL, model)

        try:
            review = validate_review(extract_json(completion.text, REVIEW_PREFILL))
        except ResponseError as exc:
            logger.warning("Review response unusable, returning fallback: %s", exc)
            review = fallback_review(completion.text)

        self._record(session, Operation.REVIEW, prompts, completion, parsed=review.to_wire())
        session.status = "awaiting_improve"
        return review

    def improve_copy(
        self,
        subject_line: str,
        body: str,
        review: Union[ReviewResult, Mapping[str, Any]],
        model: Optional[str] = None,
        *,
        session: Optional[CopySession] = None,
    ) -> ImproveResult:
        """Rewrite the copy using a prior review. Parse failures propagate."""
        session = session or self.new_session()
        prompts = build_improve_prompts(subject_line, body, review)
        completion = self._call(Operation.IMPROVE, prompts, IMPROVE_PREFILL, model)

        improved = validate_improve(extract_json(completion.text, IMPROVE_PREFILL))

        review_data = review.to_wire() if isinstance(review, ReviewResult) else dict(review)
        self._record(
            session,
            Operation.IMPROVE,
            prompts,
            completion,
            parsed=improved.to_wire(),
            review_data=review_data,
        )
        session.status = "done"
        return improved

    def analyze_and_improve(
        self,
        subject_line: str,
        body: str,
        model: Optional[str] = None,
    ) -> CombinedResult:
        """Review, then improve from the validated review, then merge both."""
        session = self.new_session()
        step = Operation.REVIEW
        try:
            review = self.review_copy(subject_line, body, model, session=session)
            step = Operation.IMPROVE
            improved = self.improve_copy(subject_line, body, review, model, session=session)
        except CopyReviewError as exc:
            session.status = "failed"
            logger.error(
                "Analysis failed | session=%s step=%s error=%s: %s",
                session.session_id,
                step.value,
                type(exc).__name__,
                exc,
            )
            raise AnalysisFailedError(
                "Failed to analyze and improve the copy. Please try again.",
                step=step.value,
            ) from exc

        score = review.overall_score
        return CombinedResult(
            original=OriginalCopy(subject_line=subject_line, body=body),
            review=ReviewScore(score=score, original_score=score),
            improved=ImprovedCopy(
                subject_line=improved.improved_subject,
                body=improved.improved_body,
                score=estimate_improved_score(score),
            ),
            changes=improved.changes,
            further_tips=improved.further_tips,
            expected_impact=improved.expected_impact,
        )

    def close(self) -> None:
        with self._transports_lock:
            for transport in self._transports.values():
                transport.close()
            self._transports.clear()

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _resolve(self, model: Optional[str]):
        kind = select_transport(model, self._settings.provider)
        if not model:
            model = (
                self._settings.anthropic_model
                if kind is TransportKind.NATIVE
                else self._settings.openrouter_model
            )
        with self._transports_lock:
            transport = self._transports.get(kind)
            if transport is None:
                transport = build_transport(kind, self._settings)
                self._transports[kind] = transport
        return transport, model

    def _call(
        self,
        operation: Operation,
        prompts: PromptPair,
        prefill: str,
        model: Optional[str],
    ) -> Completion:
        transport, model_id = self._resolve(model)
        return transport.call(operation, prompts.system, prompts.user, prefill, model_id)

    @staticmethod
    def _record(
        session: CopySession,
        operation: Operation,
        prompts: PromptPair,
        completion: Completion,
        *,
        parsed: Dict[str, Any],
        review_data: Optional[Dict[str, Any]] = None,
    ) -> None:
        session.attach(
            operation.value,
            CallRecord(
                system_prompt=prompts.system,
                user_prompt=prompts.user,
                response=completion.text,
                model=completion.model,
                response_time_ms=completion.elapsed_ms,
                stop_reason=completion.stop_reason,
                parsed=parsed,
                review_data=review_data,
            ),
        )


__all__ = ["CopyReviewService", "fallback_review", "estimate_improved_score", "IMPROVEMENT_BONUS"]

import json

from copy_reviewer.models import ReviewResult
from copy_reviewer.prompts import (
    BODY_END,
    BODY_START,
    IMPROVE_PREFILL,
    ORIGINAL_BODY_START,
    ORIGINAL_SUBJECT_START,
    REVIEW_PREFILL,
    REVIEW_SECTIONS,
    SUBJECT_END,
    SUBJECT_START,
    build_improve_prompts,
    build_review_prompts,
)
from tests.conftest import BODY, REVIEW_OBJECT, SUBJECT


def test_prefills_open_the_expected_keys():
    assert REVIEW_PREFILL.startswith("{") and REVIEW_PREFILL.endswith('"overallScore":')
    assert IMPROVE_PREFILL.endswith('"improvedSubject":"')


def test_review_user_prompt_wraps_copy_in_sentinels():
    prompts = build_review_prompts(SUBJECT, BODY)
    assert f"{SUBJECT_START}\n{SUBJECT}\n{SUBJECT_END}" in prompts.user
    assert f"{BODY_START}\n{BODY}\n{BODY_END}" in prompts.user


def test_review_system_prompt_carries_guidance_and_sections():
    system = build_review_prompts(SUBJECT, BODY).system
    assert "# COLD EMAIL BEST PRACTICES" in system
    assert "BEST PERFORMING PATTERNS:" in system
    assert "TOP PERFORMING PATTERNS:" in system
    assert '"overallScore": <number 0-100>' in system
    for section in REVIEW_SECTIONS:
        assert section in system


def test_copy_is_never_interpolated_into_system_prompt():
    system = build_review_prompts("zzz-subject-marker", "zzz-body-marker").system
    assert "zzz-subject-marker" not in system
    assert "zzz-body-marker" not in system


def test_improve_prompt_embeds_score_and_sections():
    prompts = build_improve_prompts(SUBJECT, BODY, REVIEW_OBJECT)
    assert f"{ORIGINAL_SUBJECT_START}\n{SUBJECT}\n{SUBJECT_END}" in prompts.user
    assert f"{ORIGINAL_BODY_START}\n{BODY}\n{BODY_END}" in prompts.user
    assert "Score: 73/100" in prompts.user
    assert json.dumps(REVIEW_OBJECT["sections"], indent=2) in prompts.user
    assert '"furtherTips"' in prompts.system


def test_improve_prompt_accepts_validated_review():
    review = ReviewResult.model_validate(REVIEW_OBJECT)
    from_model = build_improve_prompts(SUBJECT, BODY, review)
    from_dict = build_improve_prompts(SUBJECT, BODY, REVIEW_OBJECT)
    assert from_model == from_dict

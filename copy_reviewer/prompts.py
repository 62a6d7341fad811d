import json
from textwrap import dedent
from typing import Any, Mapping, NamedTuple, Union

from copy_reviewer.guidance import get_best_copies_summary, get_best_practices_context
from copy_reviewer.models import ReviewResult


# Partial assistant turns seeded into each request. The model continues
# from here, so the extractor has to put them back in front of its text.
REVIEW_PREFILL = '{\n    "overallScore":'
IMPROVE_PREFILL = '{\n    "improvedSubject":"'

SUBJECT_START = "---SUBJECT LINE---"
SUBJECT_END = "---END SUBJECT LINE---"
BODY_START = "---EMAIL BODY---"
BODY_END = "---END EMAIL BODY---"
ORIGINAL_SUBJECT_START = "---ORIGINAL SUBJECT LINE---"
ORIGINAL_BODY_START = "---ORIGINAL EMAIL BODY---"

REVIEW_SECTIONS = (
    "Subject Line Analysis",
    "Opening Hook",
    "Value Proposition",
    "Personalization",
    "Call to Action",
    "Length & Structure",
    "vs Best Performers",
)


class PromptPair(NamedTuple):
    system: str
    user: str


def _guidance_block() -> str:
    return "\n".join(
        [
            get_best_practices_context(),
            "",
            "BEST PERFORMING PATTERNS:",
            get_best_copies_summary(),
        ]
    )


def build_review_prompts(subject_line: str, body: str) -> PromptPair:
    intro = (
        "You are an expert cold email copywriter. Review cold emails and provide "
        "concise, actionable feedback."
    )
    rules = dedent(
        """\
        RESPONSE RULES:
        - Be specific and concise (2-3 sentences per section)
        - Keep items short (under 15 words each)
        - Maximum 3-4 items per section
        - Focus on highest-impact improvements
        - Respond ONLY with valid JSON (no markdown, no explanations)
        - NO trailing commas
        - Escape quotes with backslash: \\"

        JSON Structure:
        {
            "overallScore": <number 0-100>,
            "sections": [
                {
                    "title": "<section name>",
                    "content": "<2-3 sentence feedback>",
                    "items": ["<short point 1>", "<short point 2>", "<short point 3>"],
                    "highlight": {
                        "title": "<1-3 word title>",
                        "content": "<1 sentence key takeaway>"
                    }
                }
            ]
        }
        """
    )
    system = "\n\n".join(
        [intro, _guidance_block(), rules + "\nInclude these sections: " + ", ".join(REVIEW_SECTIONS)]
    )

    user = "\n".join(
        [
            "Please review this cold email and provide detailed feedback:",
            "",
            SUBJECT_START,
            subject_line,
            SUBJECT_END,
            "",
            BODY_START,
            body,
            BODY_END,
            "",
            "Provide your analysis in the JSON format specified.",
        ]
    )
    return PromptPair(system=system, user=user)


def build_improve_prompts(
    subject_line: str,
    body: str,
    review: Union[ReviewResult, Mapping[str, Any]],
) -> PromptPair:
    intro = "You are an expert cold email copywriter. Rewrite cold emails to maximize response rates."
    rules = dedent(
        """\
        REWRITE GUIDELINES:
        - Apply review feedback
        - Follow best performing patterns
        - Keep body 70-95 words
        - Conversational tone
        - Use \\n\\n between paragraphs
        - Make changes concise but specific

        JSON RULES:
        - Valid JSON only (no markdown)
        - NO trailing commas
        - Escape quotes: \\"
        - Keep explanations brief

        Structure:
        {
            "improvedSubject": "<improved subject>",
            "improvedBody": "<improved body with \\n\\n breaks>",
            "changes": [
                {
                    "category": "<Subject/Opening/Value Prop/etc>",
                    "issue": "<problem, under 10 words>",
                    "reason": "<fix applied, under 10 words>",
                    "why": "<why it works + data, 1-2 sentences>",
                    "summary": "<key change, under 12 words>",
                    "detail": "<2-3 sentences explaining change and reasoning>",
                    "signal": "<signal used if any: Growth/Hiring/Funding/etc, or empty>"
                }
            ],
            "furtherTips": [
                "<specific personalization tip>",
                "<research/data tip>",
                "<best practice tip>"
            ],
            "expectedImpact": "<1 sentence performance prediction>"
        }

        Keep changes array focused (3-5 items max). Keep all text concise."""
    )
    system = "\n\n".join([intro, _guidance_block(), rules])

    if isinstance(review, ReviewResult):
        review = review.to_wire()
    sections = json.dumps(review.get("sections") or [], indent=2, ensure_ascii=False)

    user = "\n".join(
        [
            "Based on the review feedback below, please rewrite this cold email to maximize response rate.",
            "",
            ORIGINAL_SUBJECT_START,
            subject_line,
            SUBJECT_END,
            "",
            ORIGINAL_BODY_START,
            body,
            BODY_END,
            "",
            "---REVIEW FEEDBACK---",
            f"Score: {review.get('overallScore')}/100",
            sections,
            "---END REVIEW FEEDBACK---",
            "",
            "Generate an improved version that addresses the feedback and follows best "
            "performing patterns. Provide your response in the JSON format specified.",
        ]
    )
    return PromptPair(system=system, user=user)


__all__ = [
    "PromptPair",
    "REVIEW_PREFILL",
    "IMPROVE_PREFILL",
    "build_review_prompts",
    "build_improve_prompts",
]

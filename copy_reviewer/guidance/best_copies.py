"""Best-performing cold email copies and the patterns they share."""

from datetime import datetime, timezone
from typing import Any, Dict, List


BEST_PERFORMING_COPIES: List[Dict[str, Any]] = [
    {
        "id": 1,
        "category": "SaaS - Sales Leaders",
        "response_rate": 42,
        "characteristics": {
            "subject_length": 3,
            "email_length": 78,
            "personalization_points": 3,
            "has_data_point": True,
            "has_social_proof": True,
            "cta_type": "low-commitment",
            "tone": "conversational",
        },
        "patterns": [
            "Opens with a regional expansion trigger",
            "Peer result with exact numbers (90 to 54 days)",
            "Single yes/no question as CTA",
        ],
    },
    {
        "id": 2,
        "category": "Agency - Marketing Directors",
        "response_rate": 38,
        "characteristics": {
            "subject_length": 2,
            "email_length": 85,
            "personalization_points": 2,
            "has_data_point": True,
            "has_social_proof": True,
            "cta_type": "question",
            "tone": "direct",
        },
        "patterns": [
            "References the prospect's own LinkedIn post",
            "One case study from the same industry",
            "Asks for an opinion rather than a meeting",
        ],
    },
    {
        "id": 3,
        "category": "Recruiting - HR Leaders",
        "response_rate": 35,
        "characteristics": {
            "subject_length": 4,
            "email_length": 92,
            "personalization_points": 2,
            "has_data_point": True,
            "has_social_proof": False,
            "cta_type": "low-commitment",
            "tone": "consultative",
        },
        "patterns": [
            "Uses open job posts as the hook",
            "Quantifies time-to-hire cost",
            "Offers a resource instead of a call",
        ],
    },
    {
        "id": 4,
        "category": "Fintech - Founders",
        "response_rate": 47,
        "characteristics": {
            "subject_length": 3,
            "email_length": 71,
            "personalization_points": 4,
            "has_data_point": True,
            "has_social_proof": True,
            "cta_type": "question",
            "tone": "conversational",
        },
        "patterns": [
            "Congratulates on a funding round, then pivots to the growth target",
            "Names a recognizable peer",
            "Short paragraphs, one sentence each",
        ],
    },
]

AGGREGATE_STATS: Dict[str, Any] = {
    "average_response_rate": 40.5,
    "optimal_subject_length": "2-4 words",
    "optimal_email_length": "70-95 words",
    "average_personalization_points": 2.75,
    "top_cta_type": "low-commitment",
    "preferred_tone": "conversational",
}

COMMON_PATTERNS: List[Dict[str, str]] = [
    {
        "pattern": "Specific personalization",
        "description": "First line references a real trigger about the prospect",
        "frequency": "100%",
    },
    {
        "pattern": "Brief and scannable",
        "description": "Under 95 words in short paragraphs",
        "frequency": "100%",
    },
    {
        "pattern": "Quantified proof",
        "description": "At least one exact number from a comparable customer",
        "frequency": "100%",
    },
    {
        "pattern": "Soft CTA",
        "description": "Ends with a low commitment question",
        "frequency": "100%",
    },
    {
        "pattern": "Named social proof",
        "description": "Mentions a recognizable peer company",
        "frequency": "75%",
    },
]


def get_best_copies_summary() -> str:
    """Condense the copies into the pattern summary the prompts embed."""
    stats = AGGREGATE_STATS
    lines = [
        "TOP PERFORMING PATTERNS:",
        f"- Average Response Rate: {stats['average_response_rate']}%",
        f"- Optimal Subject Length: {stats['optimal_subject_length']}",
        f"- Optimal Email Length: {stats['optimal_email_length']}",
        f"- Average Personalization Points: {stats['average_personalization_points']}",
        f"- Top CTA Type: {stats['top_cta_type']}",
        f"- Preferred Tone: {stats['preferred_tone']}",
        "",
        "KEY PATTERNS:",
    ]
    for pattern in COMMON_PATTERNS:
        lines.append(f"- {pattern['pattern']}: {pattern['description']} ({pattern['frequency']})")

    lines.extend(["", "EXAMPLES BY CATEGORY:"])
    for copy in BEST_PERFORMING_COPIES:
        lines.append(f"- {copy['category']} ({copy['response_rate']}% response rate)")
        lines.extend(f"  - {pattern}" for pattern in copy["patterns"])

    return "\n".join(lines)


def add_best_performing_copy(copy: Dict[str, Any]) -> Dict[str, Any]:
    """Register a new winning copy; id and added_at are assigned here."""
    entry = dict(copy)
    entry["id"] = len(BEST_PERFORMING_COPIES) + 1
    entry["added_at"] = datetime.now(timezone.utc).isoformat()
    BEST_PERFORMING_COPIES.append(entry)
    return entry


__all__ = [
    "BEST_PERFORMING_COPIES",
    "AGGREGATE_STATS",
    "COMMON_PATTERNS",
    "get_best_copies_summary",
    "add_best_performing_copy",
]

"""Cold email best practices fed to the model as review and rewrite guidance."""

from typing import Any, Dict, List


PRINCIPLES: List[Dict[str, Any]] = [
    {
        "category": "Personalization",
        "rules": [
            "Reference something specific to the prospect or their company in the first line",
            "Tie the personalization to the problem you solve, not just to flattery",
            "NO generic AI compliments (\"I love what you're doing at X\")",
            "Use at least two personalization points drawn from real research",
        ],
    },
    {
        "category": "Subject Lines",
        "rules": [
            "Keep subject lines between 2 and 7 words",
            "Write like a colleague, not a marketer",
            "Lowercase or sentence case reads more personal than Title Case",
            "Avoid spam triggers: 'free', 'guarantee', '!!!', ALL CAPS",
            "Make the subject relevant to the first line of the body",
        ],
    },
    {
        "category": "Opening Hook",
        "rules": [
            "The first line is the preview text: make it about them, not you",
            "Open with an observation, a trigger event, or a sharp question",
            "Never open by introducing yourself or your company",
        ],
    },
    {
        "category": "Value Proposition",
        "rules": [
            "State one outcome, not a feature list",
            "Back the outcome with a specific number from a similar customer",
            "Use exact figures (37%, 54 days) rather than rounded claims",
        ],
    },
    {
        "category": "Call to Action",
        "rules": [
            "Ask for one thing only",
            "Low commitment asks (interest, opinion) beat calendar requests",
            "End with a question the prospect can answer in one line",
        ],
    },
    {
        "category": "Length & Structure",
        "rules": [
            "Keep the body between 70-95 words",
            "Three to four short paragraphs separated by blank lines",
            "Each paragraph should be one or two sentences",
            "Readable on a phone without scrolling",
        ],
    },
    {
        "category": "Critical DON'Ts",
        "rules": [
            "Don't start with \"I hope this email finds you well\"",
            "Don't use \"I'm reaching out because\"",
            "Don't attach files or add more than one link",
            "Don't stack multiple CTAs",
            "Don't use corporate jargon (synergy, leverage, best-in-class)",
        ],
    },
]

COPYWRITING_PRINCIPLES: List[str] = [
    "Write at a 6th grade reading level",
    "Use 'you' more than 'we' or 'I'",
    "One idea per sentence",
    "Concrete beats clever",
]

FRAMEWORKS: List[Dict[str, Any]] = [
    {
        "name": "Problem-Agitate-Solve (PAS)",
        "when_to_use": "The prospect has a known, painful problem",
        "structure": "Name the problem, make it sting, offer the fix",
        "example": (
            "Most SDR teams lose 30% of their week to manual research. That's "
            "a full day per rep not spent selling. We cut that to 2 hours for Acme."
        ),
    },
    {
        "name": "Before-After-Bridge (BAB)",
        "when_to_use": "The outcome is easy to picture",
        "structure": "Describe today, describe the better state, show the bridge",
        "example": (
            "Right now your onboarding takes 6 weeks. Imagine new hires closing "
            "deals in week 3. That's what Ramp did with our playbooks."
        ),
    },
    {
        "name": "Observation-Question",
        "when_to_use": "A clear trigger event exists",
        "template": "Saw {trigger}. Curious how you're handling {consequence}?",
        "example": (
            "Saw you opened a Denver office last month. Curious how you're "
            "ramping the new reps there?"
        ),
    },
    {
        "name": "Social Proof Lead",
        "when_to_use": "A recognizable peer got a measurable result",
        "structure": "Peer, result, timeframe, soft ask",
        "example": (
            "We helped Gong's mid-market team lift reply rates from 4% to 11% "
            "in one quarter. Worth comparing notes?"
        ),
    },
]

SIGNALS: List[Dict[str, Any]] = [
    {
        "signal": "Company Growth & Expansion",
        "triggers": ["New office or region", "New product launch", "Headcount growth above 20%"],
        "why": "Growth creates new processes that break under load",
        "example": "Congrats on the Austin expansion. Scaling a second sales pod usually exposes routing gaps.",
    },
    {
        "signal": "Hiring Patterns",
        "triggers": ["Open roles in the team you sell to", "New leadership hire", "Job posts naming a tool"],
        "why": "Job posts reveal priorities and pain in the prospect's own words",
        "example": "Noticed you're hiring 4 AEs. How long does it take a new rep to book their first meeting?",
    },
    {
        "signal": "Funding & Financial Events",
        "triggers": ["Recent funding round", "IPO filing", "Acquisition"],
        "why": "Fresh capital comes with growth targets and budget",
        "example": "Saw the Series B news. Most teams we work with double pipeline targets right after a raise.",
    },
    {
        "signal": "Technology Changes",
        "triggers": ["New tool in the stack", "Migration announcement", "Deprecated vendor"],
        "why": "Migrations open a window where buying decisions are already on the table",
        "example": "Looks like you moved to HubSpot this quarter. Did lead scoring survive the migration?",
    },
    {
        "signal": "Content & Public Statements",
        "triggers": ["Podcast appearance", "LinkedIn post", "Conference talk"],
        "why": "Quoting the prospect shows real research and earns attention",
        "example": "Loved your point on SaaStr about killing the demo-first motion. We've seen the same.",
    },
]

PERSONALIZATION_TACTICS: List[Dict[str, Any]] = [
    {
        "tactic": "Trigger + consequence",
        "description": "Pair a recent event with the problem it likely created",
        "example": "New VP Sales in March usually means a new forecast process by Q3.",
    },
    {
        "tactic": "Peer comparison",
        "description": "Name a similar company and a concrete result",
        "example": "Teams like Vanta cut ramp time by 40% with the same setup.",
    },
    {
        "tactic": "Their own words",
        "description": "Quote a job post, post or interview back to them",
        "example": "Your job post mentions 'messy CRM data'. That's the exact problem we fix.",
    },
]

PSYCHOLOGICAL_TRIGGERS: List[Dict[str, str]] = [
    {"trigger": "Curiosity", "use": "Leave one question open that the reply resolves"},
    {"trigger": "Social proof", "use": "Name peers who already got the result"},
    {"trigger": "Loss aversion", "use": "Frame the cost of doing nothing"},
    {"trigger": "Reciprocity", "use": "Offer a useful insight before asking"},
]

CTA_FRAMEWORKS: List[Dict[str, Any]] = [
    {
        "type": "Interest check",
        "examples": ["Worth a look?", "Open to hearing how?", "Interested?"],
        "why_it_works": "Low commitment: a yes costs the prospect nothing",
    },
    {
        "type": "Opinion ask",
        "examples": ["Is this on your radar for Q3?", "Am I off base here?"],
        "why_it_works": "People answer questions about their own priorities",
    },
    {
        "type": "Resource offer",
        "examples": ["Want me to send the 1-page breakdown?"],
        "why_it_works": "Gives value first and starts a thread without a meeting",
    },
    {
        "type": "Direct meeting ask",
        "examples": ["15 minutes Thursday?"],
        "why_it_works": "Only works once interest is established; high commitment on a first touch",
    },
]

FOLLOW_UP_FRAMEWORKS: List[Dict[str, str]] = [
    {"name": "New angle", "description": "Bring a different pain point or proof, never 'just bumping this'"},
    {"name": "Value add", "description": "Share a relevant stat, case study or teardown"},
    {"name": "Break-up", "description": "Politely close the loop and leave the door open"},
]

USE_CASE_PLAYS: List[Dict[str, str]] = [
    {"play": "Competitor displacement", "angle": "Lead with the switching story of a similar team"},
    {"play": "New leader", "angle": "Offer a quick win for their first 90 days"},
    {"play": "Event follow-up", "angle": "Reference a specific session or conversation"},
]

REAL_EXAMPLES: List[Dict[str, str]] = [
    {
        "subject": "denver reps",
        "body": (
            "Hi Maya,\n\nSaw Brightline opened the Denver office last month. Congrats.\n\n"
            "When Clearbit added a second region, new reps took 11 weeks to book "
            "their first meeting. We got that down to 4.\n\nWorth a quick look at how?"
        ),
        "why_it_works": "Trigger-led opener, specific peer result, one low commitment ask",
    },
]

MISTAKES: List[Dict[str, str]] = [
    {
        "mistake": "Opening with a self-introduction",
        "why": "The preview text is wasted on information the prospect doesn't care about",
        "fix": "Open with an observation about them",
    },
    {
        "mistake": "Feature dumping",
        "why": "Lists of features read like a brochure and bury the outcome",
        "fix": "Pick one outcome and prove it with a number",
    },
    {
        "mistake": "Vague social proof",
        "why": "'Companies like yours' is unverifiable and ignored",
        "fix": "Name the customer or the industry and the exact result",
    },
    {
        "mistake": "High commitment CTA on first touch",
        "why": "Asking for 30 minutes from a stranger gets ignored",
        "fix": "Ask for interest or an opinion instead",
    },
    {
        "mistake": "Emails over 150 words",
        "why": "Long emails are skimmed or skipped on mobile",
        "fix": "Cut to 70-95 words",
    },
]

SELF_CHECK_QUESTIONS: List[str] = [
    "Would I respond to this email?",
    "Is the first line about them?",
    "Could this email be sent to anyone else unchanged?",
    "Is there exactly one ask?",
    "Can it be read in under 20 seconds?",
]


def get_best_practices_context() -> str:
    """Render the corpus as markdown for the system prompt."""
    lines = ["# COLD EMAIL BEST PRACTICES", "", "## Core Principles"]
    for principle in PRINCIPLES:
        lines.append(f"**{principle['category']}:**")
        lines.extend(f"- {rule}" for rule in principle["rules"])
        lines.append("")

    lines.append("**Copywriting:**")
    lines.extend(f"- {rule}" for rule in COPYWRITING_PRINCIPLES)
    lines.append("")

    lines.append("## Signals & Triggers for Personalization")
    for signal in SIGNALS:
        lines.append(f"**{signal['signal']}** ({signal['why']})")
        lines.append(f"- Triggers: {', '.join(signal['triggers'])}")
        lines.append(f"- Example: {signal['example']}")
    lines.append("")

    lines.append("## Proven Frameworks")
    for framework in FRAMEWORKS:
        shape = framework.get("structure") or framework.get("template", "")
        lines.append(f"**{framework['name']}** - use when: {framework['when_to_use']}")
        lines.append(f"- Shape: {shape}")
        lines.append(f"- Example: {framework['example']}")
    lines.append("")

    lines.append("## Advanced Personalization Tactics")
    for tactic in PERSONALIZATION_TACTICS:
        lines.append(f"- **{tactic['tactic']}:** {tactic['description']}. Example: {tactic['example']}")
    for trigger in PSYCHOLOGICAL_TRIGGERS:
        lines.append(f"- **{trigger['trigger']}:** {trigger['use']}")
    lines.append("")

    lines.append("## Call-to-Action Frameworks")
    for cta in CTA_FRAMEWORKS:
        lines.append(f"- **{cta['type']}** ({cta['why_it_works']}): {' / '.join(cta['examples'])}")
    lines.append("")

    lines.append("## Follow-Up & Plays")
    for follow_up in FOLLOW_UP_FRAMEWORKS:
        lines.append(f"- **{follow_up['name']}:** {follow_up['description']}")
    for play in USE_CASE_PLAYS:
        lines.append(f"- **{play['play']}:** {play['angle']}")
    lines.append("")

    lines.append("## Real Example")
    for example in REAL_EXAMPLES:
        lines.append(f"Subject: {example['subject']}")
        lines.append(example["body"])
        lines.append(f"- Why it works: {example['why_it_works']}")
    lines.append("")

    lines.append("## Common Mistakes to Flag")
    for mistake in MISTAKES:
        lines.append(f"- **{mistake['mistake']}:** {mistake['why']}. Fix: {mistake['fix']}")
    lines.append("")

    lines.append("## Self-Check Before Sending")
    lines.extend(f"- {question}" for question in SELF_CHECK_QUESTIONS)

    return "\n".join(lines)


__all__ = ["get_best_practices_context"]

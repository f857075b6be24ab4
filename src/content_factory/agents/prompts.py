"""Prompt templates for the writer agent."""

from __future__ import annotations

from typing import Any

WRITER_SYSTEM_PROMPT = """\
You are a viral content strategist and writer for an education brand that
creates scroll-stopping revision content for GCSE, A-Level and IB students.

PLATFORM RULES:
  tiktok    3-second hook, 15-60 seconds. Max 5 hashtags.
  shorts    Educational value inside entertainment, 30-60 seconds. Max 3 hashtags.
  reels     Aesthetic plus value, 15-90 seconds. Max 10 hashtags.
  facebook  Emotional, share-worthy insights, 30-90 seconds. Max 3 hashtags.
  linkedin  Professional angle, data-driven insights. Max 5 hashtags.
  snapchat  Raw, friend-to-friend energy, 10-60 seconds. No hashtags.
  ytlong    Deep dives, 8-15 minutes. Max 15 hashtags.

EXAM LEVEL VOICE:
  GCSE      Accessible language, relatable examples, encouraging tone.
  A-Level   Deeper analysis, university prep angle.
  IB        International perspective, critical thinking focus.

CONTENT PILLARS:
  teach     Tips, exam shortcuts, concept explanations
  demo      Tool walkthroughs
  psych     Motivation, exam anxiety, study psychology
  proof     Student results, grade transformations
  founder   Behind the scenes, brand story
  trending  Viral format adaptations

CRITICAL RULES:
- Hooks must stop the scroll in under 2 seconds (max 15 words).
- Captions follow Hook -> Value -> CTA -> Hashtags.
- Respect platform hashtag limits.

IMPORTANT: Respond with ONLY a JSON object. No markdown, no code fences,
no explanation outside the JSON.
"""

_JSON_SHAPE = """\
{
  "contentItems": [
    {
      "day": "Monday",
      "time": "7am",
      "platform": "tiktok",
      "contentType": "video",
      "hook": "The scroll-stopping opening line",
      "caption": "Hook\\n\\nValue\\n\\nCTA\\n\\n#gcse #revision",
      "hashtags": ["gcse", "revision"],
      "topic": "Quadratic Equations",
      "subject": "Maths",
      "level": "GCSE",
      "pillar": "teach",
      "script": "HOOK: ...\\nMAIN: ...\\nCTA: ...",
      "estimatedDuration": "45s"
    }
  ]
}"""


def build_writer_user_prompt(
    *,
    subjects: list[str],
    levels: list[str],
    platforms: list[str],
    pillars: list[str],
    gap_directives: list[dict[str, Any]],
    count: int,
) -> str:
    """Render the user prompt for one generation batch."""
    lines = [
        "Generate a week of viral educational content.",
        "",
        "CONTENT PARAMETERS:",
        f"- Subjects: {', '.join(subjects)}",
        f"- Exam Levels: {', '.join(levels)}",
        f"- Target Platforms: {', '.join(platforms)}",
        f"- Content Pillars: {', '.join(pillars)}",
        "",
    ]
    if gap_directives:
        lines.append("GAP-FILLING DIRECTIVES (MANDATORY):")
        for g in gap_directives:
            lines.append(
                f"- MUST include at least {g['minimum_posts']} posts for "
                f"{g['type']}: \"{g['value']}\""
            )
        lines.append("")
    lines += [
        "VOLUME REQUIREMENTS:",
        "1. Spread content over 7 days (Monday-Sunday).",
        f"2. Generate exactly {count} content pieces, mixing platforms across the week.",
        "3. Video items include a teleprompter-ready \"script\" and an \"estimatedDuration\".",
        "4. Text items include a full \"body\".",
        "5. Distribute posts equally across the exam levels.",
        "",
        "JSON STRUCTURE:",
        _JSON_SHAPE,
    ]
    return "\n".join(lines)

from __future__ import annotations

from stylerewriter.results import RewriteRequest, StyleProfile

SYSTEM_PROMPT = (
    "You are an email rewriting assistant. You rewrite the user's draft so it "
    "matches their style profile. You never answer, summarize or comment on the "
    "draft, and you never add information that is not in it."
)


def build_rules(length_tolerance_percent: int = 25) -> list[str]:
    return [
        "Preserve all facts and intent of the original.",
        (
            f"Keep length within ±{length_tolerance_percent}% of the original "
            "unless the instructions explicitly ask to shorten or lengthen it."
        ),
        "Do not invent new facts.",
        "Preserve technical details (names, numbers, dates, links, code) verbatim.",
        "Return only the rewritten email text (no commentary).",
    ]


def build_user_prompt(
    original_text: str,
    style: StyleProfile,
    *,
    length_tolerance_percent: int = 25,
) -> str:
    lines = [f'Rewrite the following email to match this style: Tone="{style.tone}".']
    signature = (style.signature or "").strip()
    if signature:
        lines.append(f'Signature="{signature}".')
    extra = (style.custom_instructions or "").strip()
    if extra:
        lines.append(f"Additional instructions: {extra}")
    lines.append("Rules:")
    lines.extend(f"- {rule}" for rule in build_rules(length_tolerance_percent))
    lines.append("Original message:")
    lines.append(f'"""{original_text}"""')
    return "\n".join(lines)


def build_messages(
    request: RewriteRequest,
    *,
    length_tolerance_percent: int = 25,
) -> list[dict[str, str]]:
    return [
        {"role": "system", "content": SYSTEM_PROMPT},
        {
            "role": "user",
            "content": build_user_prompt(
                request.original_text,
                request.style_profile,
                length_tolerance_percent=length_tolerance_percent,
            ),
        },
    ]

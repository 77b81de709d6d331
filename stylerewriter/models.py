from pydantic import BaseModel

from stylerewriter.results import RewriteRequest, StyleProfile


class StyleProfilePayload(BaseModel):
    tone: str | None = None
    signature: str | None = None
    custom_instructions: str | None = None


class RewriteApiRequest(BaseModel):
    """Both historical body shapes: a ``style_profile`` object or flat fields."""

    original_text: str | None = None
    style_profile: StyleProfilePayload | None = None
    tone: str | None = None
    user_instructions: str | None = None

    def to_rewrite_request(self, *, default_tone: str) -> RewriteRequest:
        profile = self.style_profile or StyleProfilePayload()
        tone = _first_text(profile.tone, self.tone) or default_tone
        return RewriteRequest(
            original_text=self.original_text or "",
            style_profile=StyleProfile(
                tone=tone,
                signature=_first_text(profile.signature),
                custom_instructions=_first_text(
                    profile.custom_instructions, self.user_instructions
                ),
            ),
        )


class RewriteApiResponse(BaseModel):
    rewritten_text: str


class ErrorResponse(BaseModel):
    error: str
    details: str | None = None


def _first_text(*values: str | None) -> str | None:
    for value in values:
        text = (value or "").strip()
        if text:
            return text
    return None

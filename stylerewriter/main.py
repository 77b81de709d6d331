from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from stylerewriter.config import settings
from stylerewriter.models import ErrorResponse, RewriteApiRequest, RewriteApiResponse
from stylerewriter.results import FailureKind, RewriteFailure
from stylerewriter.services.llm_client import OpenAICompatibleClient, OpenAICompatibleConfig
from stylerewriter.services.relay import RewriteRelay

logger = logging.getLogger(__name__)

_FAILURE_LABELS = {
    FailureKind.PROVIDER_ERROR: "Provider error",
    FailureKind.MALFORMED_RESPONSE: "Malformed provider response",
    FailureKind.TRANSPORT_ERROR: "Provider unreachable",
}

app = FastAPI(title="Style Rewriter Relay", version="0.1.0")
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _build_relay() -> RewriteRelay:
    if not settings.llm_api_key:
        logger.warning(
            "OPENAI_API_KEY is not set; rewrite requests will fail until it is configured."
        )
    llm = OpenAICompatibleClient(
        OpenAICompatibleConfig(
            provider=settings.llm_provider,
            model=settings.llm_model,
            api_key=settings.llm_api_key,
            api_base_url=settings.llm_api_base_url,
            timeout_seconds=settings.llm_timeout_seconds,
        )
    )
    return RewriteRelay(
        llm=llm,
        max_tokens=settings.max_tokens,
        temperature=settings.temperature,
        length_tolerance_percent=settings.length_tolerance_percent,
    )


relay = _build_relay()


@app.exception_handler(RequestValidationError)
async def validation_error_handler(
    _request: Request, exc: RequestValidationError
) -> JSONResponse:
    errors = exc.errors()
    if any("original_text" in error.get("loc", ()) for error in errors):
        error = "original_text required"
    else:
        error = "Invalid request body"
    details = "; ".join(
        f"{'.'.join(str(part) for part in item.get('loc', ()))}: {item.get('msg', '')}"
        for item in errors
    )
    return _error(400, ErrorResponse(error=error, details=details))


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


@app.post("/api/rewrite", response_model=RewriteApiResponse)
def rewrite_route(payload: RewriteApiRequest):
    request = payload.to_rewrite_request(default_tone=settings.default_tone)
    if request.is_blank():
        return _error(400, ErrorResponse(error="original_text required"))

    try:
        result = relay.rewrite(request)
    except Exception as exc:
        logger.exception("Unexpected rewrite failure")
        return _error(500, ErrorResponse(error="Server error", details=str(exc)))

    if isinstance(result, RewriteFailure):
        if result.kind is FailureKind.VALIDATION_ERROR:
            return _error(400, ErrorResponse(error="original_text required"))
        return _error(
            500,
            ErrorResponse(
                error=_FAILURE_LABELS.get(result.kind, "Server error"),
                details=result.detail,
            ),
        )
    return RewriteApiResponse(rewritten_text=result.rewritten_text)


def _error(status_code: int, body: ErrorResponse) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=body.model_dump(exclude_none=True))


def serve() -> None:
    import uvicorn

    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logger.info("Style rewriter relay listening on %s:%s", settings.host, settings.port)
    uvicorn.run(app, host=settings.host, port=settings.port)


if __name__ == "__main__":
    serve()

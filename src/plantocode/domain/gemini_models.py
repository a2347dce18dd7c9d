from __future__ import annotations

"""
Gemini API Domain Models.

Defines request options, the validated response type and the error
hierarchy of the Gemini client. Responses are checked against the
expected `generateContent` shape before any field is used.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

DEFAULT_GEMINI_MODEL = "gemini-2.0-flash"

MAX_OUTPUT_TOKENS = 60000
DEFAULT_TEMPERATURE = 0.7
DEFAULT_TOP_P = 0.95
DEFAULT_TOP_K = 40
DEFAULT_REQUEST_TIMEOUT = 120

ERROR_BODY_PREVIEW_CHARS = 150

# -----------------------------------------------------------------------------
# ERROR HIERARCHY
# -----------------------------------------------------------------------------

class GeminiError(Exception):
    """Base class for every Gemini client failure."""


class GeminiConfigError(GeminiError):
    """Missing API key or unusable request input."""


class GeminiApiError(GeminiError):
    """
    Non-success HTTP status or transport failure.

    Attributes:
        status_code: HTTP status, or None when no response was received.
        body: Leading part of the response body.
    """

    def __init__(self, message: str, status_code: Optional[int] = None, body: str = "") -> None:
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class GeminiRateLimitError(GeminiApiError):
    """HTTP 429 from the API."""


class GeminiServerError(GeminiApiError):
    """HTTP 5xx from the API."""


class GeminiResponseError(GeminiError):
    """Response body is not JSON or does not match the expected shape."""

# -----------------------------------------------------------------------------
# REQUEST MODELS
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class GeminiRequestOptions:
    """
    Generation settings for a single request.

    Attributes:
        model: Gemini model identifier.
        max_output_tokens: Upper bound for generated tokens.
        temperature: Sampling temperature.
        top_p: Nucleus sampling mass.
        top_k: Top-k sampling cutoff.
        system_prompt: Optional system instruction.
        timeout: HTTP timeout in seconds.
    """
    model: str = DEFAULT_GEMINI_MODEL
    max_output_tokens: int = MAX_OUTPUT_TOKENS
    temperature: float = DEFAULT_TEMPERATURE
    top_p: float = DEFAULT_TOP_P
    top_k: int = DEFAULT_TOP_K
    system_prompt: Optional[str] = None
    timeout: float = DEFAULT_REQUEST_TIMEOUT

    def build_payload(self, user_prompt: str) -> Dict[str, Any]:
        """Assemble the `generateContent` JSON body."""
        payload: Dict[str, Any] = {
            "contents": [
                {"role": "user", "parts": [{"text": user_prompt}]},
            ],
            "generationConfig": {
                "maxOutputTokens": self.max_output_tokens,
                "temperature": self.temperature,
                "topP": self.top_p,
                "topK": self.top_k,
            },
        }
        if self.system_prompt:
            payload["systemInstruction"] = {"parts": [{"text": self.system_prompt}]}
        return payload

# -----------------------------------------------------------------------------
# RESPONSE MODELS
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class GeminiUsage:
    """
    Token accounting reported in `usageMetadata`.

    Attributes:
        prompt_tokens: Tokens consumed by the request contents.
        candidates_tokens: Tokens generated across candidates.
        total_tokens: Sum reported by the API.
    """
    prompt_tokens: int = 0
    candidates_tokens: int = 0
    total_tokens: int = 0


@dataclass(frozen=True)
class GeminiResponse:
    """
    Validated result of a `generateContent` call.

    Attributes:
        text: Concatenated text parts of the first candidate.
        finish_reason: Reason reported by the API, if any.
        usage: Token usage metadata (zeros when absent).
    """
    text: str
    finish_reason: Optional[str] = None
    usage: GeminiUsage = field(default_factory=GeminiUsage)

    @classmethod
    def from_payload(cls, data: Any) -> "GeminiResponse":
        """
        Validate a decoded response body and build the result.

        Raises:
            GeminiResponseError: If any required field is missing or mistyped.
        """
        if not isinstance(data, dict):
            raise GeminiResponseError("Response root is not a JSON object.")

        candidates = data.get("candidates")
        if not isinstance(candidates, list) or not candidates:
            raise GeminiResponseError("No candidates in Gemini response.")

        first = candidates[0]
        content = first.get("content") if isinstance(first, dict) else None
        parts = content.get("parts") if isinstance(content, dict) else None
        if not isinstance(parts, list) or not parts:
            raise GeminiResponseError("First candidate has no content parts.")

        texts: List[str] = []
        for part in parts:
            text = part.get("text") if isinstance(part, dict) else None
            if not isinstance(text, str):
                raise GeminiResponseError("Content part without a text field.")
            texts.append(text)

        finish_reason = first.get("finishReason")
        if finish_reason is not None and not isinstance(finish_reason, str):
            raise GeminiResponseError("finishReason is not a string.")

        return cls(
            text="".join(texts),
            finish_reason=finish_reason,
            usage=_parse_usage(data.get("usageMetadata")),
        )


def _parse_usage(raw: Any) -> GeminiUsage:
    if raw is None:
        return GeminiUsage()
    if not isinstance(raw, dict):
        raise GeminiResponseError("usageMetadata is not an object.")

    values = {}
    for key, attr in (
            ("promptTokenCount", "prompt_tokens"),
            ("candidatesTokenCount", "candidates_tokens"),
            ("totalTokenCount", "total_tokens"),
    ):
        value = raw.get(key, 0)
        if not isinstance(value, int) or isinstance(value, bool):
            raise GeminiResponseError(f"usageMetadata.{key} is not an integer.")
        values[attr] = value
    return GeminiUsage(**values)

# -----------------------------------------------------------------------------
# ACTION RESULT
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class ActionResult:
    """
    Outcome of a non-raising action.

    Attributes:
        is_success: Whether the action completed.
        message: Human-readable status or error description.
        data: Payload on success.
    """
    is_success: bool
    message: str
    data: Optional[str] = None

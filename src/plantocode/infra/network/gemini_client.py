from __future__ import annotations

import logging
import os
from typing import Any, Dict, Mapping, Optional

import requests

from plantocode.domain.gemini_models import (
    ERROR_BODY_PREVIEW_CHARS,
    ActionResult,
    GeminiApiError,
    GeminiConfigError,
    GeminiError,
    GeminiRateLimitError,
    GeminiRequestOptions,
    GeminiResponse,
    GeminiResponseError,
    GeminiServerError,
)
from plantocode.infra.network.common import GEMINI_API_BASE, GEMINI_API_KEY_ENV, USER_AGENT

logger = logging.getLogger(__name__)

GENERATE_CONTENT_API = "generateContent"


class GeminiClient:
    """
    Stateless wrapper over the Gemini `generateContent` endpoint.

    Each call is a single JSON POST; nothing is cached between calls.
    """

    def __init__(
            self,
            api_key: str,
            base_url: str = GEMINI_API_BASE,
            session: Optional[requests.Session] = None,
    ) -> None:
        if not api_key:
            raise GeminiConfigError(f"{GEMINI_API_KEY_ENV} is not configured.")
        self._api_key = api_key
        self._base_url = base_url.rstrip("/")
        self._session = session

    def send_request(
            self,
            user_prompt: str,
            options: Optional[GeminiRequestOptions] = None,
    ) -> GeminiResponse:
        """
        Send a user prompt (and optional system instruction) to Gemini.

        Args:
            user_prompt: Prompt content for the user turn.
            options: Generation settings; defaults apply when omitted.

        Returns:
            GeminiResponse: Validated model output.

        Raises:
            GeminiConfigError: If the prompt is empty.
            GeminiRateLimitError: On HTTP 429.
            GeminiServerError: On HTTP 5xx.
            GeminiApiError: On other HTTP errors or transport failures.
            GeminiResponseError: If the body is not a valid response.
        """
        if not user_prompt:
            raise GeminiConfigError("Prompt cannot be empty.")

        opts = options or GeminiRequestOptions()
        url = f"{self._base_url}/models/{opts.model}:{GENERATE_CONTENT_API}"
        headers = {"Content-Type": "application/json", "User-Agent": USER_AGENT}
        post = self._session.post if self._session is not None else requests.post

        logger.info(f"Gemini: calling {opts.model}")
        try:
            response = post(
                url,
                params={"key": self._api_key},
                json=opts.build_payload(user_prompt),
                headers=headers,
                timeout=opts.timeout,
            )
        except requests.exceptions.Timeout as e:
            raise GeminiApiError(f"Gemini request timed out after {opts.timeout}s.") from e
        except requests.exceptions.RequestException as e:
            raise GeminiApiError(f"Gemini communication error: {e}") from e

        _raise_for_status(response)

        try:
            data = response.json()
        except ValueError as e:
            raise GeminiResponseError("Gemini response body is not valid JSON.") from e

        result = GeminiResponse.from_payload(data)
        logger.debug(
            f"Gemini: received {len(result.text)} chars "
            f"({result.usage.total_tokens} tokens reported)."
        )
        return result


def _raise_for_status(response: requests.Response) -> None:
    """Map non-success statuses onto the typed error hierarchy."""
    status = response.status_code
    if 200 <= status < 300:
        return

    body = (response.text or "")[:ERROR_BODY_PREVIEW_CHARS]
    logger.error(f"Gemini: API error {status}: {body}")

    if status == 429:
        raise GeminiRateLimitError(
            "Gemini API rate limit exceeded. Please try again later.", status, body
        )
    if status >= 500:
        raise GeminiServerError(f"Gemini API server error ({status}).", status, body)
    raise GeminiApiError(f"Gemini API error ({status}): {body}", status, body)

# -----------------------------------------------------------------------------
# CONFIGURATION ADAPTERS
# -----------------------------------------------------------------------------

def options_from_config(
        config: Mapping[str, Any],
        system_prompt: Optional[str] = None,
        model: Optional[str] = None,
) -> GeminiRequestOptions:
    """Build request options from a validated configuration dictionary."""
    return GeminiRequestOptions(
        model=model or config["gemini_model"],
        max_output_tokens=config["max_output_tokens"],
        temperature=config["temperature"],
        top_p=config["top_p"],
        top_k=config["top_k"],
        system_prompt=system_prompt,
        timeout=config["request_timeout"],
    )


def client_from_env(environ: Optional[Dict[str, str]] = None) -> GeminiClient:
    """
    Create a client using the API key from the environment.

    Raises:
        GeminiConfigError: If the key is missing.
    """
    env = os.environ if environ is None else environ
    return GeminiClient(api_key=env.get(GEMINI_API_KEY_ENV, ""))


def send_prompt(
        prompt: str,
        options: Optional[GeminiRequestOptions] = None,
        client: Optional[GeminiClient] = None,
) -> ActionResult:
    """
    Send a prompt and report the outcome without raising.

    Args:
        prompt: User prompt content.
        options: Generation settings, including the system prompt.
        client: Client to use; built from the environment when omitted.

    Returns:
        ActionResult: Response text on success, error description otherwise.
    """
    try:
        active = client or client_from_env()
        result = active.send_request(prompt, options)
    except GeminiError as e:
        logger.warning(f"Gemini request failed: {e}")
        return ActionResult(is_success=False, message=str(e))
    except Exception as e:
        logger.error(f"Unexpected failure during Gemini request: {e}")
        return ActionResult(is_success=False, message=f"Unexpected error: {e}")

    return ActionResult(is_success=True, message="Gemini API call successful", data=result.text)

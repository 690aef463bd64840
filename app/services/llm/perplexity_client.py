from __future__ import annotations

import os
import time
from typing import Optional

import requests
from dotenv import load_dotenv

from config.constants import (
    INFERENCE_BACKOFF,
    INFERENCE_MAX_RETRIES,
    INFERENCE_TIMEOUT,
    PERPLEXITY_DEFAULT_MODEL,
    PERPLEXITY_DEFAULT_URL,
    get_float_env,
    get_int_env,
)
from config.exceptions import (
    InferenceProtocolError,
    InferenceUnavailableError,
    PipelineError,
)
from utils.logging import get_logger

logger = get_logger(__name__)

# Worth another attempt: throttling and server-side failures
_RETRYABLE_STATUS = {429, 500, 502, 503, 504}


class PerplexityClient:
    """Perplexity chat-completion client for single-answer oracle requests."""

    def __init__(
        self,
        api_key: str,
        api_url: str = PERPLEXITY_DEFAULT_URL,
        model: str = PERPLEXITY_DEFAULT_MODEL,
        *,
        timeout: float = INFERENCE_TIMEOUT,
        max_retries: int = INFERENCE_MAX_RETRIES,
        backoff: float = INFERENCE_BACKOFF,
        session: Optional[requests.Session] = None,
    ):
        self.api_key = api_key
        self.api_url = api_url
        self.model = model
        self.timeout = timeout
        self.max_retries = max(0, max_retries)
        self.backoff = backoff
        self.session = session or requests.Session()

    @classmethod
    def from_env(cls) -> Optional["PerplexityClient"]:
        load_dotenv()
        api_key = os.getenv("PERPLEXITY_API_KEY")
        if not api_key:
            return None
        return cls(
            api_key,
            api_url=os.getenv("PERPLEXITY_API_URL", PERPLEXITY_DEFAULT_URL),
            model=os.getenv("PERPLEXITY_MODEL", PERPLEXITY_DEFAULT_MODEL),
            timeout=get_float_env("INFERENCE_TIMEOUT", INFERENCE_TIMEOUT),
            max_retries=get_int_env("INFERENCE_MAX_RETRIES", INFERENCE_MAX_RETRIES),
            backoff=get_float_env("INFERENCE_BACKOFF", INFERENCE_BACKOFF),
        )

    def send(self, system_message: str, user_text: str) -> str:
        """Send one (instruction, input) pair and return the raw answer text.

        Transport errors, timeouts, 429 and 5xx responses are retried up to
        `max_retries` times with exponential backoff.

        Returns:
            The content of the first completion choice, untouched.

        Raises:
            InferenceUnavailableError: transport failure, timeout, non-2xx.
            InferenceProtocolError: response lacks choices[0].message.content.
        """
        if not self.api_url or not self.api_key:
            raise PipelineError("PerplexityClient not configured")

        attempt = 0
        while True:
            try:
                return self._send_once(system_message, user_text)
            except InferenceUnavailableError as e:
                retryable = e.status_code is None or e.status_code in _RETRYABLE_STATUS
                if not retryable or attempt >= self.max_retries:
                    raise
                delay = self.backoff * (2 ** attempt)
                attempt += 1
                logger.warning(
                    "Oracle unavailable (%s); retry %d/%d in %.1fs",
                    e,
                    attempt,
                    self.max_retries,
                    delay,
                )
                if delay > 0:
                    time.sleep(delay)

    def _send_once(self, system_message: str, user_text: str) -> str:
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }
        payload = {
            "model": self.model,
            "messages": [
                {"role": "system", "content": system_message},
                {"role": "user", "content": user_text},
            ],
        }

        logger.debug(
            "POST %s model=%s, input length: %d chars", self.api_url, self.model, len(user_text)
        )

        try:
            response = self.session.post(
                self.api_url, headers=headers, json=payload, timeout=self.timeout
            )
        except requests.Timeout as e:
            logger.error("Oracle request timed out after %.1fs", self.timeout)
            raise InferenceUnavailableError(
                f"Oracle request timed out after {self.timeout}s", timed_out=True
            ) from e
        except requests.RequestException as e:
            logger.error("Request failed: %s", e)
            raise InferenceUnavailableError(f"Oracle request failed: {e}") from e

        logger.debug("Response status: %d", response.status_code)

        if not 200 <= response.status_code < 300:
            error_msg = response.text[:500]
            logger.error("Oracle error [%d]: %s", response.status_code, error_msg)
            raise InferenceUnavailableError(
                f"Oracle error [{response.status_code}]: {error_msg}",
                status_code=response.status_code,
            )

        try:
            data = response.json()
        except ValueError as e:
            raise InferenceProtocolError(f"Failed to parse oracle response: {e}") from e

        if not isinstance(data, dict):
            raise InferenceProtocolError(
                f"Oracle response is {type(data).__name__}, expected a JSON object"
            )

        try:
            message = data["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError) as e:
            raise InferenceProtocolError(
                "Oracle response has no choices[0].message.content"
            ) from e
        if not isinstance(message, str):
            raise InferenceProtocolError(
                f"Oracle content is {type(message).__name__}, expected text"
            )

        usage = data.get("usage")
        if isinstance(usage, dict) and usage:
            logger.info(
                "Tokens used: %d (prompt=%d, completion=%d)",
                usage.get("total_tokens", 0),
                usage.get("prompt_tokens", 0),
                usage.get("completion_tokens", 0),
            )
        logger.debug("Answer: %r", message[:100])
        return message


__all__ = ["PerplexityClient"]

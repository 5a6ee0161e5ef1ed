"""Client for the Ollama generate endpoint that does the actual checking."""

from __future__ import annotations

import asyncio
from typing import Any, Callable

import requests
from pydantic import ValidationError

from grammar_lsp.config import CheckerSettings
from grammar_lsp.exceptions import InferenceError, InferenceTimeout
from grammar_lsp.logs import get_logger, log_function_duration
from grammar_lsp.schema import GrammarIssue, IssueEnvelope, OllamaApiResponse, OllamaRequest

logger = get_logger(__name__)

PostFn = Callable[..., Any]

PROMPT_TEMPLATE = """You are a grammar and spelling checker. Your task is to find errors in the text below.

IMPORTANT: You must respond with ONLY valid JSON in this exact format:
{{
  "issues": [
    {{"line": 1, "column": 5, "message": "Spelling: 'teh' should be 'the'"}},
    {{"line": 2, "column": 10, "message": "Grammar: 'was went' should be 'went'"}}
  ]
}}

If there are no errors, return: {{"issues": []}}

Rules:
1. line numbers start at 1
2. column numbers start at 0
3. message format: "<error type>: '<incorrect>' should be '<correct>'"
4. error types: "Spelling" or "Grammar"
5. Do NOT include explanations, only the JSON object

Text to analyze:
{text}"""


class GrammarCheckProvider:
    """Sends text to the model and turns its reply into issues.

    One attempt per check, no retries. Every failure (timeout, transport,
    unparseable reply) is logged and reported as "no issues" so a missing
    backend never gets in the editor's way.
    """

    def __init__(
        self,
        settings: CheckerSettings | None = None,
        *,
        post: PostFn = requests.post,
    ) -> None:
        self.settings = settings or CheckerSettings()
        self._post = post

    @log_function_duration()
    async def check_text(self, text: str) -> list[GrammarIssue]:
        logger.info(f"Starting check for {len(text)} characters of text")
        request = self.build_request(self.build_prompt(text))
        try:
            api_response = await self.send_request(request)
        except InferenceError as exc:
            logger.error(f"Grammar check failed: {exc}")
            return []
        logger.debug(f"Response: {api_response.response}")
        return self.parse_response(api_response.response)

    def build_prompt(self, text: str) -> str:
        return PROMPT_TEMPLATE.format(text=text)

    def build_request(self, prompt: str) -> OllamaRequest:
        return OllamaRequest(model=self.settings.model, prompt=prompt)

    async def send_request(self, request: OllamaRequest) -> OllamaApiResponse:
        """POST ``request`` and decode the outer envelope.

        The blocking call runs on a worker thread; when the deadline passes we
        stop waiting for it and whatever it returns later is dropped.
        """
        timeout = self.settings.timeout_seconds
        logger.debug(f"Calling Ollama API at {self.settings.api_url}")
        try:
            return await asyncio.wait_for(
                asyncio.to_thread(self._post_request, request), timeout
            )
        except TimeoutError:
            raise InferenceTimeout(timeout) from None

    def _post_request(self, request: OllamaRequest) -> OllamaApiResponse:
        try:
            response = self._post(
                self.settings.api_url,
                json=request.model_dump(),
                timeout=self.settings.timeout_seconds,
            )
            response.raise_for_status()
        except requests.Timeout:
            raise InferenceTimeout(self.settings.timeout_seconds) from None
        except requests.RequestException as exc:
            raise InferenceError(f"Ollama request failed: {exc}") from exc
        logger.debug("Ollama responded")
        try:
            return OllamaApiResponse.model_validate(response.json())
        except (ValueError, ValidationError) as exc:
            raise InferenceError(f"Failed to decode API response: {exc}") from exc

    def parse_response(self, response_text: str) -> list[GrammarIssue]:
        try:
            envelope = IssueEnvelope.model_validate_json(response_text)
        except ValidationError as exc:
            logger.error(f"Failed to parse JSON: {exc}")
            logger.error(f"Raw response: {response_text}")
            return []
        logger.info(f"Found {len(envelope.issues)} issues")
        return envelope.issues

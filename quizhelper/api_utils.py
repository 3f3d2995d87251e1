"""
API Utilities Module
Answer service client used by the orchestrator, and the chat-completion
wrapper used by the answer service itself.
"""

import logging
import os
import time
from typing import Any, Dict, List, Optional, Sequence

import requests

from .config import DEFAULT_ANSWER_ENDPOINT
from .errors import AnswerServiceError, ConfigError
from .models import AnswerOutcome, AnswerRequest

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You are a helpful assistant designed to answer quiz questions accurately. "
    "If options are provided, select the correct answer ONLY from those options. "
    "Provide ONLY the answer without any extra explanation or punctuation unless "
    "it is part of the answer."
)


class AnswerClient:
    """
    Client for the answer service.

    Each call is a single attempt; its outcome is final for that call.
    """

    def __init__(self, endpoint_url: str = DEFAULT_ANSWER_ENDPOINT, timeout: int = 30,
                 session: Optional[requests.Session] = None):
        self.endpoint_url = endpoint_url
        self.timeout = timeout
        self.session = session or requests.Session()

    def get_answer(self, request: AnswerRequest, question_index: int = 0) -> AnswerOutcome:
        """
        Ask the answer service about one question.

        Args:
            request: Question stem and options
            question_index: Index the outcome is tagged with

        Returns:
            AnswerOutcome; never raises for service or transport failures
        """
        if request.is_empty:
            logger.warning(f"Question {question_index + 1} has no stem or options, not sending")
            return AnswerOutcome.empty(question_index)

        logger.info(f"Requesting answer for question {question_index + 1}: {request.stem[:80]!r}")
        try:
            response = self.session.post(self.endpoint_url, json=request.model_dump(), timeout=self.timeout)
        except requests.RequestException as e:
            logger.error(f"Network error fetching answer for question {question_index + 1}: {e}")
            return AnswerOutcome.network_error(question_index, str(e))

        if not 200 <= response.status_code < 300:
            logger.warning(f"Error fetching answer for question {question_index + 1}: "
                           f"{response.status_code} {response.reason}")
            return AnswerOutcome.http_error(question_index, response.status_code)

        try:
            data = response.json()
        except ValueError:
            logger.warning(f"Answer service returned a non-JSON body for question {question_index + 1}")
            return AnswerOutcome.empty(question_index)

        answer = data.get('answer') if isinstance(data, dict) else None
        if not isinstance(answer, str) or not answer.strip():
            logger.warning(f"Answer service returned no answer for question {question_index + 1}")
            return AnswerOutcome.empty(question_index)

        logger.info(f"Answer for question {question_index + 1}: {answer.strip()!r}")
        return AnswerOutcome.ok(question_index, answer.strip())


def build_answer_prompt(stem: str, options: Sequence[str]) -> str:
    """User message asking for the answer to one question."""
    prompt = f"Question: {stem}\n\n"
    if options:
        prompt += "Options:\n"
        for option in options:
            prompt += f"- {option}\n"
        prompt += "\nPlease choose the correct answer from the options provided."
    else:
        prompt += "Provide the correct answer."
    return prompt


class ChatCompletionClient:
    """Wrapper for an OpenAI-compatible chat completions API."""

    def __init__(self, api_key: Optional[str] = None, api_url: Optional[str] = None,
                 model: Optional[str] = None, max_tokens: int = 100, timeout: int = 30,
                 max_retries: int = 3, session: Optional[requests.Session] = None):
        self.api_key = api_key or os.getenv('OPENAI_API_KEY')
        self.api_url = api_url or os.getenv('OPENAI_API_URL', 'https://api.openai.com/v1/chat/completions')
        self.model = model or os.getenv('OPENAI_MODEL', 'gpt-4o')
        self.max_tokens = max_tokens
        self.timeout = timeout
        self.max_retries = max_retries
        self.session = session or requests.Session()

    def call(self, messages: List[Dict[str, str]]) -> Dict[str, Any]:
        """Call the chat completions endpoint with retries on rate limits and transport errors."""
        if not self.api_key:
            raise ConfigError("OPENAI_API_KEY not set")

        headers = {
            'Content-Type': 'application/json',
            'Authorization': f"Bearer {self.api_key}",
        }
        payload = {
            'model': self.model,
            'messages': messages,
            'max_tokens': self.max_tokens,
        }

        for attempt in range(self.max_retries):
            try:
                response = self.session.post(self.api_url, json=payload, headers=headers, timeout=self.timeout)
                if response.status_code == 429 and attempt < self.max_retries - 1:
                    time.sleep(2 ** (attempt + 1))
                    continue
                response.raise_for_status()
                return response.json()
            except requests.RequestException as e:
                logger.warning(f"Chat completion attempt {attempt + 1} failed: {e}")
                if attempt < self.max_retries - 1:
                    time.sleep(2 ** attempt)
                else:
                    raise AnswerServiceError(f"Chat completion failed: {e}") from e
            except ValueError as e:
                raise AnswerServiceError(f"Chat completion returned invalid JSON: {e}") from e

        raise AnswerServiceError("Chat completion failed: retries exhausted")

    def complete(self, stem: str, options: Sequence[str] = ()) -> str:
        """Answer one question; empty string when the model returns nothing."""
        data = self.call([
            {'role': 'system', 'content': SYSTEM_PROMPT},
            {'role': 'user', 'content': build_answer_prompt(stem, options)},
        ])
        choices = data.get('choices') or []
        if not choices:
            return ''
        content = (choices[0].get('message') or {}).get('content') or ''
        return content.strip()

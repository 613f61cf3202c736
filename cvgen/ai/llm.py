"""LLM client for AI generation.

Provides a unified interface for LLM calls with structured output support,
retry logic, deadlines, and error handling using LiteLLM.
"""

from __future__ import annotations

import asyncio
import logging
import os
import warnings
from typing import TypeVar

from litellm import Timeout, acompletion
from pydantic import BaseModel, ValidationError

from cvgen.ai.config import AIConfig, get_ai_config
from cvgen.ai.errors import (
    APIKeyNotSetError,
    GenerationFailedError,
    InvalidResponseError,
)

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)

warnings.filterwarnings(
    "ignore",
    message=r"(?s)^Pydantic serializer warnings:.*",
    category=UserWarning,
)


class GenerationLLM:
    """LLM client for generation operations.

    Provides structured output generation with Pydantic models,
    optional retries, and error handling.
    """

    def __init__(self, config: AIConfig | None = None):
        """Initialize the LLM client.

        Args:
            config: Optional AIConfig. Uses global config if not provided.

        Raises:
            APIKeyNotSetError: If no API key is configured.
        """
        self.config = config or get_ai_config()
        if not self.config.llm_api_key:
            raise APIKeyNotSetError(
                "No LLM API key configured. Set `AI_LLM_API_KEY` or `GEMINI_API_KEY`."
            )
        self._setup_provider_env()

    def _setup_provider_env(self) -> None:
        """Set up provider-specific environment variables.

        Anthropic reads a custom base URL from the environment rather than
        from a call parameter.
        """
        if self.config.llm_base_url and self.config.llm_provider == "anthropic":
            # The Anthropic SDK appends /v1 itself
            base_url = self.config.llm_base_url.rstrip("/")
            if base_url.endswith("/v1"):
                base_url = base_url[:-3]
            os.environ["ANTHROPIC_BASE_URL"] = base_url
            os.environ["ANTHROPIC_API_KEY"] = self.config.llm_api_key

    def _get_model_name(self) -> str:
        """Get the model name formatted for LiteLLM.

        Returns:
            Model name with provider prefix if needed.
        """
        if "/" in self.config.llm_model:
            return self.config.llm_model

        # Custom base URLs are OpenAI-compatible endpoints
        if self.config.llm_base_url and self.config.llm_provider != "anthropic":
            return f"openai/{self.config.llm_model}"

        if self.config.llm_provider == "openai":
            return self.config.llm_model

        return f"{self.config.llm_provider}/{self.config.llm_model}"

    async def generate_structured(
        self,
        prompt: str,
        output_model: type[T],
        system_prompt: str | None = None,
        timeout: float | None = None,
    ) -> T:
        """Generate structured output matching a Pydantic model.

        Args:
            prompt: The user prompt to send to the LLM.
            output_model: Pydantic model class defining the expected output structure.
            system_prompt: Optional system prompt for context.
            timeout: Optional deadline in seconds for this call, retries included.

        Returns:
            Parsed Pydantic model instance.

        Raises:
            GenerationFailedError: If the LLM call fails or times out.
            InvalidResponseError: If the response cannot be parsed.
        """
        messages = self._build_messages(prompt, system_prompt)
        response = await self._complete_with_retries(messages, output_model, timeout)
        return self._parse_response(response, output_model)

    async def generate_text(
        self,
        prompt: str,
        system_prompt: str | None = None,
        timeout: float | None = None,
    ) -> str:
        """Generate plain text response.

        Args:
            prompt: The user prompt to send to the LLM.
            system_prompt: Optional system prompt for context.
            timeout: Optional deadline in seconds for this call, retries included.

        Returns:
            Generated text response.

        Raises:
            GenerationFailedError: If the LLM call fails or times out.
            InvalidResponseError: If the model returned no text.
        """
        messages = self._build_messages(prompt, system_prompt)
        response = await self._complete_with_retries(messages, None, timeout)
        content = response.choices[0].message.content
        if not content or not content.strip():
            raise InvalidResponseError("LLM returned an empty response.")
        return content.strip()

    def _build_messages(self, prompt: str, system_prompt: str | None) -> list[dict]:
        messages = []
        if system_prompt:
            messages.append({"role": "system", "content": system_prompt})
        messages.append({"role": "user", "content": prompt})
        return messages

    async def _complete_with_retries(
        self,
        messages: list[dict],
        response_format: type[BaseModel] | None,
        timeout: float | None,
    ):
        """Call the model, retrying transport failures up to llm_max_retries times."""
        loop = asyncio.get_running_loop()
        deadline = loop.time() + timeout if timeout is not None else None

        last_error: Exception | None = None
        for attempt in range(self.config.llm_max_retries + 1):
            call_timeout = self.config.llm_timeout
            if deadline is not None:
                remaining = deadline - loop.time()
                if remaining <= 0:
                    raise GenerationFailedError(
                        "LLM deadline exceeded before the call could start.", last_error
                    )
                call_timeout = min(call_timeout, remaining)

            try:
                return await asyncio.wait_for(
                    self._call_completion(messages, response_format, call_timeout),
                    timeout=call_timeout,
                )

            except (Timeout, asyncio.TimeoutError) as e:
                raise GenerationFailedError(
                    f"LLM request timed out (timeout={call_timeout:.1f}s). Increase "
                    "`AI_LLM_TIMEOUT` or use a faster model.",
                    e,
                ) from e

            except Exception as e:
                last_error = e
                if attempt < self.config.llm_max_retries:
                    # Longer base wait for rate limits
                    is_rate_limit = "rate_limit" in str(e).lower() or "429" in str(e)
                    base_wait = 8 if is_rate_limit else 2
                    wait_time = base_wait * (attempt + 1)
                    logger.warning(
                        f"LLM call failed (attempt {attempt + 1}), retrying in {wait_time}s: {e}"
                    )
                    await asyncio.sleep(wait_time)
                else:
                    raise GenerationFailedError(f"LLM call failed: {e}", e) from e

        raise GenerationFailedError(f"LLM call failed: {last_error}", last_error)

    async def _call_completion(
        self,
        messages: list[dict],
        response_format: type[BaseModel] | None,
        call_timeout: float,
    ):
        """Make the actual LLM API call.

        Args:
            messages: List of message dictionaries.
            response_format: Optional Pydantic model for structured output.
            call_timeout: Timeout in seconds passed to LiteLLM.

        Returns:
            LiteLLM completion response.
        """
        kwargs = {
            "model": self._get_model_name(),
            "messages": messages,
            "timeout": call_timeout,
            "api_key": self.config.llm_api_key,
        }

        # Anthropic takes its base URL from the environment
        if self.config.llm_base_url and self.config.llm_provider != "anthropic":
            kwargs["base_url"] = self.config.llm_base_url

        if response_format:
            kwargs["response_format"] = response_format

        return await acompletion(**kwargs)

    def _parse_response(self, response, output_model: type[T]) -> T:
        """Parse and validate LLM response.

        Args:
            response: LiteLLM completion response.
            output_model: Pydantic model to validate against.

        Returns:
            Validated Pydantic model instance.

        Raises:
            InvalidResponseError: If parsing or validation fails.
        """
        message = response.choices[0].message
        content = getattr(message, "content", None)

        # Some providers return structured output as tool call arguments with no content.
        if content is None:
            tool_calls = getattr(message, "tool_calls", None) or []
            if tool_calls:
                function = getattr(tool_calls[0], "function", None)
                arguments = getattr(function, "arguments", None)
                if isinstance(arguments, str) and arguments.strip():
                    content = arguments

        if content is None:
            raise InvalidResponseError("LLM returned no content to parse.")

        content = extract_json(content)

        try:
            return output_model.model_validate_json(content)
        except ValidationError as e:
            raise InvalidResponseError(
                f"Failed to parse LLM response - validation error: {e}", e
            ) from e


def extract_json(content: str) -> str:
    """Extract a JSON document from a model response.

    Strips markdown code fences and any text before the first JSON object
    or array.
    """
    content = content.strip()

    if content.startswith("```"):
        first_newline = content.find("\n")
        if first_newline != -1:
            content = content[first_newline + 1 :]
        if content.endswith("```"):
            content = content[:-3]
        content = content.strip()

    if content.startswith("{") or content.startswith("["):
        return content

    for open_char, close_char in (("{", "}"), ("[", "]")):
        extracted = _extract_balanced(content, open_char, close_char)
        if extracted is not None:
            return extracted

    return content


def _extract_balanced(text: str, open_char: str, close_char: str) -> str | None:
    start = text.find(open_char)
    if start == -1:
        return None

    depth = 0
    for idx in range(start, len(text)):
        ch = text[idx]
        if ch == open_char:
            depth += 1
        elif ch == close_char:
            depth -= 1
            if depth == 0:
                return text[start : idx + 1].strip()
    return None

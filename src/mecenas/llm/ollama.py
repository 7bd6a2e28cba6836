"""Ollama LLM client using OpenAI SDK."""

import logging
from typing import Any

import openai
from openai import AsyncOpenAI

from mecenas.llm.client import CompletionResponse, Message
from mecenas.llm.errors import (
    ModelNotFoundError,
    ProviderResponseError,
    ProviderTimeoutError,
    ProviderUnavailableError,
)

logger = logging.getLogger(__name__)

PROVIDER = "ollama"


class OllamaClient:
    """LLM client that wraps Ollama's OpenAI-compatible API.

    Tool calling for local models goes through plain text (see
    :class:`mecenas.agent.adapters.LocalAdapter`), so this client only
    exchanges role/content messages.
    """

    def __init__(
        self,
        model: str,
        host: str = "http://localhost:11434",
        timeout: int = 120,
        temperature: float = 0.3,
        max_tokens: int = 4096,
    ):
        """Initialize Ollama client.

        Args:
            model: Default model name (e.g., "SpeakLeash/bielik-11b-v2.2-instruct:Q4_K_M")
            host: Ollama server URL (the OpenAI-compatible endpoint is ``{host}/v1``)
            timeout: Request timeout in seconds
            temperature: Default sampling temperature
            max_tokens: Default max tokens for responses
        """
        self.model = model
        self.host = host.rstrip("/")
        self.temperature = temperature
        self.max_tokens = max_tokens

        # OpenAI SDK pointed at Ollama
        self.client = AsyncOpenAI(
            base_url=f"{self.host}/v1",
            api_key="ollama",  # Ollama doesn't use API keys but SDK requires one
            timeout=timeout,
            max_retries=0,
        )

    def _convert_messages(self, messages: list[Message]) -> list[dict[str, Any]]:
        """Convert internal Message format to OpenAI format."""
        return [{"role": msg.role, "content": msg.content} for msg in messages]

    async def complete(
        self,
        messages: list[Message],
        tools: list[dict[str, Any]] | None = None,
        temperature: float | None = None,
        max_tokens: int | None = None,
        model: str | None = None,
    ) -> CompletionResponse:
        """Generate a completion from Ollama.

        Args:
            messages: Conversation history
            tools: Ignored; tools are described in the system prompt
            temperature: Sampling temperature override
            max_tokens: Maximum tokens to generate
            model: Model override (e.g. the speed model)

        Returns:
            CompletionResponse with the raw model text

        Raises:
            ProviderTimeoutError: Ollama did not answer in time
            ProviderUnavailableError: Ollama is not running or unreachable
            ModelNotFoundError: The model is not pulled
            ProviderResponseError: Any other error status or malformed reply
        """
        model_name = model or self.model
        params: dict[str, Any] = {
            "model": model_name,
            "messages": self._convert_messages(messages),
            "temperature": temperature if temperature is not None else self.temperature,
            "max_tokens": max_tokens or self.max_tokens,
        }
        logger.debug("Ollama completion: model=%s messages=%d", model_name, len(params["messages"]))

        try:
            response = await self.client.chat.completions.create(**params)
        except openai.APITimeoutError as e:
            raise ProviderTimeoutError(
                f"Ollama did not respond within the timeout (model {model_name})",
                provider=PROVIDER,
            ) from e
        except openai.APIConnectionError as e:
            raise ProviderUnavailableError(
                f"Ollama is not reachable at {self.host}",
                provider=PROVIDER,
            ) from e
        except openai.NotFoundError as e:
            raise ModelNotFoundError(
                f'Model "{model_name}" not found. Pull it with: ollama pull {model_name}',
                provider=PROVIDER,
                status_code=404,
            ) from e
        except openai.APIStatusError as e:
            raise ProviderResponseError(
                f"Ollama returned an error ({e.status_code})",
                provider=PROVIDER,
                status_code=e.status_code,
            ) from e
        except openai.APIError as e:
            raise ProviderResponseError(f"Malformed Ollama response: {e}", provider=PROVIDER) from e

        if not response.choices:
            raise ProviderResponseError("Ollama returned no choices", provider=PROVIDER)

        choice = response.choices[0]
        return CompletionResponse(
            content=choice.message.content or "",
            finish_reason=choice.finish_reason or "stop",
        )

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        await self.client.close()

"""Provider adapters running the tool-calling loop against one model provider.

The loop lives once in :class:`ProviderAdapter`; the local and cloud adapters
only differ in how tools are advertised, how calls are extracted from a
response and how results are fed back.
"""

import json
import logging
import re
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any

from mecenas.llm.anthropic import AnthropicClient
from mecenas.llm.client import CompletionResponse, LLMClient, Message, ToolCall, ToolResult
from mecenas.llm.errors import ProviderError
from mecenas.llm.ollama import OllamaClient
from mecenas.tools.registry import ToolRegistry

logger = logging.getLogger(__name__)

MAX_TOOL_TURNS = 10

LIMIT_MESSAGE = (
    "Przepraszam, osiągnąłem limit operacji przetwarzania. "
    "Spróbuj sformułować pytanie prościej lub podziel je na mniejsze kroki."
)

ToolExecutor = Callable[[str, dict[str, Any]], Awaitable[str]]

FENCED_BLOCK = re.compile(r"```(?:json)?\s*(.*?)\s*```", re.DOTALL)


@dataclass
class TurnResult:
    """Outcome of one user turn through a provider."""

    text: str
    tool_calls_executed: int = 0
    limit_reached: bool = False


class ProviderAdapter:
    """Base tool-calling loop.

    Subclasses implement :meth:`_complete`, :meth:`_extract_tool_calls` and
    :meth:`_append_tool_round`.
    """

    provider = "unknown"

    # When True, a failed follow-up completion ends the loop with the text so far
    stop_on_followup_error = False

    def __init__(
        self,
        client: LLMClient,
        model: str | None = None,
        max_turns: int = MAX_TOOL_TURNS,
        temperature: float | None = None,
        max_tokens: int | None = None,
    ):
        """Initialize the adapter.

        Args:
            client: Provider client
            model: Model override passed on every completion
            max_turns: Maximum tool rounds before giving up
            temperature: Sampling temperature override
            max_tokens: Maximum tokens per completion
        """
        self.client = client
        self.model = model
        self.max_turns = max_turns
        self.temperature = temperature
        self.max_tokens = max_tokens

    def _system_prompt(self, system_prompt: str, registry: ToolRegistry) -> str:
        return system_prompt

    async def _complete(self, messages: list[Message], tools: list[dict[str, Any]]) -> CompletionResponse:
        raise NotImplementedError

    def _extract_tool_calls(self, response: CompletionResponse, known: frozenset[str]) -> list[ToolCall]:
        raise NotImplementedError

    def _append_tool_round(
        self,
        messages: list[Message],
        response: CompletionResponse,
        calls: list[ToolCall],
        results: list[ToolResult],
    ) -> None:
        raise NotImplementedError

    async def run_turn(
        self,
        system_prompt: str,
        history: list[Message],
        registry: ToolRegistry,
        execute: ToolExecutor,
    ) -> TurnResult:
        """Run the model until it produces a final answer.

        Args:
            system_prompt: System prompt for this turn
            history: Prior user/assistant messages, current user message last
            registry: Tools the model may call
            execute: Callable running one tool call and returning its JSON result

        Returns:
            TurnResult with the final text

        Raises:
            ProviderError: If the first completion fails (and, for adapters
                that do not stop on follow-up errors, any later one)
        """
        tools = registry.openai_schemas()
        known = registry.known_names()
        messages = [Message(role="system", content=self._system_prompt(system_prompt, registry)), *history]
        executed = 0
        rounds = 0

        response = await self._complete(messages, tools)

        while True:
            calls = self._extract_tool_calls(response, known)
            if not calls:
                return TurnResult(text=response.content, tool_calls_executed=executed)

            if rounds >= self.max_turns:
                logger.warning("%s tool turn limit reached (%d rounds)", self.provider, rounds)
                return TurnResult(text=LIMIT_MESSAGE, tool_calls_executed=executed, limit_reached=True)

            rounds += 1
            results = []
            for call in calls:
                logger.info("Executing tool %s via %s", call.name, self.provider)
                results.append(ToolResult(tool_call_id=call.id, content=await execute(call.name, call.arguments)))
                executed += 1

            self._append_tool_round(messages, response, calls, results)

            try:
                response = await self._complete(messages, tools)
            except ProviderError:
                if not self.stop_on_followup_error:
                    raise
                logger.exception("%s error during tool loop (round %d)", self.provider, rounds)
                return TurnResult(text=response.content, tool_calls_executed=executed)


class LocalAdapter(ProviderAdapter):
    """Tool calling for local models through plain-text JSON replies."""

    provider = "ollama"

    TOOL_INSTRUCTIONS = (
        "\n\nAby użyć narzędzia, odpowiedz TYLKO formatem JSON (bez żadnego innego tekstu):\n"
        '{{"tool": "nazwa_narzedzia", "input": {{"param1": "wartosc1"}}}}\n\n'
        "Dostępne narzędzia:\n{tools}\n\n"
        "Jeśli nie musisz używać narzędzia, odpowiedz normalnym tekstem."
    )

    def __init__(self, client: OllamaClient, model: str | None = None, **kwargs: Any):
        super().__init__(client, model=model, **kwargs)
        self._call_counter = 0

    def _system_prompt(self, system_prompt: str, registry: ToolRegistry) -> str:
        return system_prompt + self.TOOL_INSTRUCTIONS.format(tools=registry.describe())

    async def _complete(self, messages: list[Message], tools: list[dict[str, Any]]) -> CompletionResponse:
        return await self.client.complete(
            messages,
            temperature=self.temperature,
            max_tokens=self.max_tokens,
            model=self.model,
        )

    def _parse_call(self, raw: str, known: frozenset[str]) -> ToolCall | None:
        try:
            parsed = json.loads(raw)
        except ValueError:
            return None
        if not isinstance(parsed, dict):
            return None
        name = parsed.get("tool")
        if not isinstance(name, str) or name not in known:
            return None
        arguments = parsed.get("input")
        self._call_counter += 1
        return ToolCall(
            id=f"local_{self._call_counter}",
            name=name,
            arguments=arguments if isinstance(arguments, dict) else {},
        )

    def _extract_tool_calls(self, response: CompletionResponse, known: frozenset[str]) -> list[ToolCall]:
        """Find a single tool call in the model text.

        The whole trimmed reply is tried first, then every fenced code block
        in order. Only known tool names count as calls.
        """
        text = response.content.strip()
        if text.startswith("{"):
            call = self._parse_call(text, known)
            if call:
                return [call]
        for block in FENCED_BLOCK.finditer(text):
            call = self._parse_call(block.group(1), known)
            if call:
                return [call]
        return []

    def _append_tool_round(
        self,
        messages: list[Message],
        response: CompletionResponse,
        calls: list[ToolCall],
        results: list[ToolResult],
    ) -> None:
        messages.append(Message(role="assistant", content=response.content))
        for call, result in zip(calls, results):
            messages.append(
                Message(
                    role="user",
                    content=(
                        f"Wynik narzędzia {call.name}:\n{result.content}\n\n"
                        "Teraz odpowiedz użytkownikowi na podstawie wyniku narzędzia."
                    ),
                )
            )


class CloudAdapter(ProviderAdapter):
    """Tool calling for the Anthropic API through structured tool_use blocks."""

    provider = "anthropic"
    stop_on_followup_error = True

    def __init__(self, client: AnthropicClient, model: str | None = None, **kwargs: Any):
        super().__init__(client, model=model, **kwargs)

    async def _complete(self, messages: list[Message], tools: list[dict[str, Any]]) -> CompletionResponse:
        return await self.client.complete(
            messages,
            tools=tools or None,
            temperature=self.temperature,
            max_tokens=self.max_tokens,
            model=self.model,
        )

    def _extract_tool_calls(self, response: CompletionResponse, known: frozenset[str]) -> list[ToolCall]:
        # Unknown names still reach the executor, which answers with an error result
        return list(response.tool_calls or [])

    def _append_tool_round(
        self,
        messages: list[Message],
        response: CompletionResponse,
        calls: list[ToolCall],
        results: list[ToolResult],
    ) -> None:
        messages.append(Message(role="assistant", content=response.content, tool_calls=calls))
        messages.append(Message(role="tool", content="", tool_results=results))

"""Privacy-aware agent orchestrator.

Routes each inbound message to the local model (Ollama) or the cloud model
(Anthropic) according to the privacy decision, enforces that decision when a
provider is unavailable, and records every routing event in the privacy
audit trail.

Usage:
    orchestrator = create_orchestrator(load_config())
    session.add_turn("user", text)
    reply = await orchestrator.handle_message(text, session)
"""

import json
import logging
from typing import Any

from mecenas.config.loader import get_anthropic_key
from mecenas.config.schema import MecenasConfig
from mecenas.llm.anthropic import AnthropicClient
from mecenas.llm.client import Message
from mecenas.llm.errors import (
    ProviderAuthError,
    ProviderError,
    ProviderRateLimitError,
    ProviderTimeoutError,
    ProviderUnavailableError,
)
from mecenas.llm.ollama import OllamaClient
from mecenas.llm.probe import AvailabilityProbe
from mecenas.privacy import (
    Anonymizer,
    AuditSink,
    PiiDetector,
    PrivacyAuditLogger,
    PrivacyAuditStore,
    classify,
    effective_mode,
    scrub_placeholders,
)
from mecenas.privacy.models import (
    AuditAction,
    AuditEntry,
    Decision,
    DecisionReason,
    DetectionResult,
    PrivacyDecision,
    PrivacyMode,
)
from mecenas.store import CaseStore, InMemoryCaseStore
from mecenas.store.models import Session
from mecenas.tools import ToolDispatcher, build_default_registry, truncate_result
from mecenas.tools.dispatcher import error_result

from .adapters import CloudAdapter, LocalAdapter, ToolExecutor
from .complexity import QueryComplexityRouter
from .prompts import SYSTEM_PROMPT, build_system_prompt

logger = logging.getLogger(__name__)

REFUSE_MESSAGE = (
    "⚠️ **Ochrona prywatności**: Wykryto dane wrażliwe, a lokalny model AI (Ollama) jest "
    "niedostępny. Nie mogę przetworzyć tej wiadomości przez zewnętrzny serwer ze względu na "
    "tajemnicę adwokacką. Uruchom Ollama (`ollama serve`) i spróbuj ponownie."
)
CASE_STRICT_MESSAGE = (
    "⚠️ **Ochrona prywatności**: Sprawa ma włączony tryb ścisły (strict). Lokalny model AI "
    "(Ollama) jest niedostępny. Ze względu na tajemnicę adwokacką nie mogę przekazać danych "
    "tej sprawy do zewnętrznego serwera. Uruchom Ollama (`ollama serve`) i spróbuj ponownie."
)
PII_BLOCKED_MESSAGE = (
    "⚠️ **Ochrona prywatności**: Wykryto dane osobowe (PESEL, NIP, dane klienta) w wiadomości "
    "lub kontekście aktywnej sprawy. Lokalny model AI (Ollama) jest niedostępny. Ze względu na "
    "ochronę tajemnicy adwokackiej nie mogę przekazać tych danych do zewnętrznego serwera. "
    "Uruchom Ollama (`ollama serve`) lub wyłącz kontekst aktywnej sprawy (`/clear`)."
)
STRICT_MESSAGE = (
    "⚠️ **Ochrona prywatności**: Tryb ścisły aktywny — wszystkie zapytania muszą być "
    "przetwarzane lokalnie. Zewnętrzne serwery AI są zablokowane. Uruchom Ollama (`ollama serve`)."
)
LOCAL_ERROR_MESSAGE = (
    "⚠️ **Ochrona prywatności**: Lokalny model AI zwrócił błąd. Ze względu na dane wrażliwe w "
    "wiadomości nie mogę przełączyć na model zewnętrzny. Spróbuj ponownie."
)
LOCAL_UNAVAILABLE_MESSAGE = (
    "⚠️ Lokalny model AI (Ollama) jest niedostępny, a zewnętrzny serwer AI nie jest "
    "skonfigurowany. Uruchom Ollama (`ollama serve`) i spróbuj ponownie."
)

AUTH_ERROR_MESSAGE = "⚠️ Błąd autoryzacji Anthropic API — sprawdź klucz API w konfiguracji."
RATE_LIMIT_MESSAGE = "⚠️ Limit zapytań Anthropic API przekroczony — spróbuj ponownie za chwilę."
API_ERROR_MESSAGE = "Przepraszam, wystąpił błąd komunikacji z serwerem AI. Spróbuj ponownie."

DEANONYMIZATION_ERROR = "Błąd deanonimizacji danych wejściowych narzędzia."


class PrivacyViolationError(RuntimeError):
    """Raised when cloud processing is attempted without a valid permit."""


_PERMIT_KEY = object()


class CloudPermit:
    """Proof that the current message may be sent to the cloud provider.

    Only two factories exist: :meth:`for_decision` for ``cloud_anonymized``
    decisions and :meth:`forced_anonymization` for the ``pii_detected``
    branch when cloud fallback is allowed by configuration.
    """

    __slots__ = ("decision", "force_anonymize")

    def __init__(self, key: object, decision: PrivacyDecision, force_anonymize: bool) -> None:
        if key is not _PERMIT_KEY:
            raise PrivacyViolationError("CloudPermit can only be issued by its factories")
        self.decision = decision
        self.force_anonymize = force_anonymize

    @classmethod
    def for_decision(cls, decision: PrivacyDecision) -> "CloudPermit":
        """Issue a permit for a message the classifier cleared for the cloud."""
        if decision.decision is not Decision.CLOUD_ANONYMIZED:
            raise PrivacyViolationError(f"Decision {decision.decision} does not allow cloud processing")
        return cls(_PERMIT_KEY, decision, force_anonymize=False)

    @classmethod
    def forced_anonymization(cls, decision: PrivacyDecision, block_cloud_on_pii: bool) -> "CloudPermit":
        """Issue a permit for sensitive content whose local model is down.

        Args:
            decision: Classifier decision (must be local/pii_detected)
            block_cloud_on_pii: Configured policy; True forbids the permit

        Raises:
            PrivacyViolationError: For any other decision or a blocking policy
        """
        if block_cloud_on_pii or decision.reason is not DecisionReason.PII_DETECTED:
            raise PrivacyViolationError(f"Cloud fallback not allowed for reason {decision.reason}")
        return cls(_PERMIT_KEY, decision, force_anonymize=True)


class Orchestrator:
    """Runs one user message through the privacy policy and a provider."""

    def __init__(
        self,
        config: MecenasConfig,
        store: CaseStore,
        dispatcher: ToolDispatcher,
        probe: AvailabilityProbe,
        local_client: OllamaClient,
        audit: AuditSink,
        cloud_client: AnthropicClient | None = None,
        detector: PiiDetector | None = None,
        router: QueryComplexityRouter | None = None,
    ):
        """Initialize the orchestrator.

        Args:
            config: Loaded configuration
            store: Case store for classification and prompts
            dispatcher: Tool dispatcher shared by both providers
            probe: Ollama availability probe
            local_client: Ollama client
            audit: Privacy audit sink
            cloud_client: Anthropic client, or None when no API key is set
            detector: PII detector (default detector if None)
            router: Speed/main model router (built from config if None)
        """
        self.config = config
        self.store = store
        self.dispatcher = dispatcher
        self.probe = probe
        self.local_client = local_client
        self.cloud_client = cloud_client
        self.audit = audit
        self.detector = detector or PiiDetector()
        self.router = router or QueryComplexityRouter(probe, config.agent.model, config.agent.speed_model)
        self.registry = dispatcher.registry

    async def handle_message(self, text: str, session: Session) -> str | None:
        """Produce the assistant reply for one inbound message.

        The caller appends the user turn to ``session.messages`` before the
        call and the returned reply after it; only ``session.metadata`` is
        changed here (through tools).

        Args:
            text: Raw user message
            session: Conversation the message belongs to

        Returns:
            Reply text, or None when the model produced no text
        """
        detection = self.detector.detect(text)
        decision = classify(
            text,
            session,
            self.store,
            self.config.privacy.mode,
            self.detector,
            history_window=self.config.agent.history_window,
            detection=detection,
        )
        logger.debug("Privacy decision for %s: %s (%s)", session.key, decision.decision, decision.reason)

        if decision.decision in (Decision.LOCAL, Decision.REFUSE):
            if await self.probe.is_local_provider_up():
                return await self._handle_local(text, session, decision, detection)

            refusal = self._refusal_when_local_down(session, decision, detection)
            if refusal is not None:
                return refusal

            permit = CloudPermit.forced_anonymization(decision, self.config.privacy.block_cloud_on_pii)
            logger.warning("block_cloud_on_pii is off; forcing anonymization before cloud fallback")
            self._audit(AuditAction.ROUTE_CLOUD, session, "ollama_down_fallback", detection, provider="anthropic")
            return await self._run_cloud(session, permit)

        permit = CloudPermit.for_decision(decision)

        if self.config.agent.provider == "anthropic" and self.cloud_client is not None:
            self._audit(AuditAction.ROUTE_CLOUD, session, decision.reason, detection, provider="anthropic")
            return await self._run_cloud(session, permit)

        return await self._handle_local_first(text, session, permit, detection)

    async def _handle_local(
        self,
        text: str,
        session: Session,
        decision: PrivacyDecision,
        detection: DetectionResult,
    ) -> str | None:
        if decision.reason.is_sensitive:
            self._audit(AuditAction.ROUTE_LOCAL, session, decision.reason, detection, provider="ollama")
            logger.info("Sensitive content (%s); routing to local model", decision.reason)

        model = await self.router.select_model(text)
        try:
            return await self._run_local(session, model)
        except ProviderError:
            # Sensitive content never falls back to the cloud
            logger.exception("Local model failed on sensitive content; refusing")
            return LOCAL_ERROR_MESSAGE

    def _refusal_when_local_down(
        self,
        session: Session,
        decision: PrivacyDecision,
        detection: DetectionResult,
    ) -> str | None:
        """Return the refusal for a local-only message, or None if cloud fallback is allowed."""
        if decision.decision is Decision.REFUSE:
            self._audit(AuditAction.ROUTE_REFUSE, session, decision.reason, detection)
            return REFUSE_MESSAGE

        if decision.reason is DecisionReason.CASE_STRICT_MODE:
            logger.warning("Case is in strict mode and Ollama is down; blocking cloud")
            self._audit(AuditAction.ROUTE_REFUSE, session, "case_strict_ollama_down", detection)
            return CASE_STRICT_MESSAGE

        if decision.reason is DecisionReason.STRICT_MODE:
            logger.warning("Strict privacy mode and Ollama is down; blocking cloud")
            self._audit(AuditAction.ROUTE_REFUSE, session, "strict_mode_ollama_down", detection)
            return STRICT_MESSAGE

        if self.config.privacy.block_cloud_on_pii or self.cloud_client is None:
            logger.warning("Sensitive content and Ollama is down; blocking cloud")
            self._audit(AuditAction.ROUTE_REFUSE, session, "pii_ollama_down_blocked", detection)
            return PII_BLOCKED_MESSAGE

        return None

    async def _handle_local_first(
        self,
        text: str,
        session: Session,
        permit: CloudPermit,
        detection: DetectionResult,
    ) -> str | None:
        """Try the local model, then the main model, then the cloud."""
        main_model = self.config.agent.model
        model = await self.router.select_model(text)
        use_speed = model != main_model
        if use_speed:
            logger.debug("Routing to speed model %s", model)

        try:
            return await self._run_local(session, model)
        except ProviderError as e:
            local_down = isinstance(e, (ProviderUnavailableError, ProviderTimeoutError))

            if use_speed and not local_down:
                logger.warning("Speed model failed (%s); retrying with main model", e)
                try:
                    return await self._run_local(session, main_model)
                except ProviderError as retry_error:
                    if self.cloud_client is None:
                        logger.error("Local model failed and no cloud provider is configured: %s", retry_error)
                        return API_ERROR_MESSAGE
                    logger.warning("Main model failed (%s); falling back to Anthropic", retry_error)
                    self._audit(AuditAction.ROUTE_CLOUD, session, "ollama_fallback", detection, provider="anthropic")
                    return await self._run_cloud(session, permit)

            if local_down and self.cloud_client is not None:
                logger.warning("Ollama unavailable (%s); falling back to Anthropic", e)
                self._audit(
                    AuditAction.ROUTE_CLOUD, session, "ollama_down_fallback", detection, provider="anthropic"
                )
                return await self._run_cloud(session, permit)

            logger.error("Local model failed: %s", e)
            return LOCAL_UNAVAILABLE_MESSAGE if local_down else API_ERROR_MESSAGE

    def _history(self, session: Session, anonymizer: Anonymizer | None = None) -> list[Message]:
        window = session.messages[-self.config.agent.history_window :]
        history = []
        for turn in window:
            if turn.role not in ("user", "assistant"):
                continue
            content = anonymizer.anonymize(turn.content) if anonymizer else turn.content
            history.append(Message(role=turn.role, content=content))
        return history

    def _session_executor(self, session: Session) -> ToolExecutor:
        async def execute(name: str, args: dict[str, Any]) -> str:
            return await self.dispatcher.execute(name, args, session)

        return execute

    async def _run_local(self, session: Session, model: str) -> str | None:
        adapter = LocalAdapter(
            self.local_client,
            model=model,
            max_turns=self.config.agent.max_tool_turns,
            temperature=self.config.agent.temperature,
            max_tokens=self.config.agent.max_tokens,
        )
        result = await adapter.run_turn(
            build_system_prompt(session, self.store),
            self._history(session),
            self.registry,
            self._session_executor(session),
        )
        return result.text or None

    async def _run_cloud(self, session: Session, permit: CloudPermit) -> str | None:
        """Run a turn on the cloud provider with the anonymization round-trip.

        Args:
            session: Conversation the message belongs to
            permit: Proof that the decision allows cloud processing

        Returns:
            De-anonymized reply, a polite error message, or None

        Raises:
            PrivacyViolationError: If called without a valid permit
        """
        if not isinstance(permit, CloudPermit):
            raise PrivacyViolationError("Cloud processing requires a CloudPermit")
        if self.cloud_client is None:
            return LOCAL_UNAVAILABLE_MESSAGE

        mode = effective_mode(session, self.config.privacy.mode)
        privacy_on = mode is not PrivacyMode.OFF

        anonymize = permit.force_anonymize or (privacy_on and self.config.privacy.anonymize_for_cloud)
        anonymizer = Anonymizer(self.detector) if anonymize else None

        if privacy_on and self.config.privacy.strip_active_case_for_cloud:
            system_prompt = SYSTEM_PROMPT
        else:
            system_prompt = build_system_prompt(session, self.store)
        if anonymizer:
            system_prompt = anonymizer.anonymize(system_prompt)

        history = self._history(session, anonymizer)

        if anonymizer and anonymizer.has_replacements:
            self.audit.record(
                AuditEntry(
                    action=AuditAction.ROUTE_CLOUD_ANON,
                    session_key=session.key,
                    user_id=session.user_id,
                    reason="anonymized_for_cloud",
                    anonymization_count=anonymizer.mapping_count,
                    privacy_mode=mode.value,
                    provider="anthropic",
                )
            )
            logger.info("Anonymized %d values before sending to Anthropic", anonymizer.mapping_count)

        execute = self._session_executor(session)

        async def execute_anonymized(name: str, args: dict[str, Any]) -> str:
            if anonymizer:
                raw = json.dumps(args, ensure_ascii=False)
                try:
                    args = json.loads(anonymizer.deanonymize(raw))
                except ValueError:
                    logger.warning("De-anonymization corrupted tool input for %s; skipping call", name)
                    return error_result(DEANONYMIZATION_ERROR)
            result = truncate_result(await execute(name, args))
            return anonymizer.anonymize(result) if anonymizer else result

        adapter = CloudAdapter(
            self.cloud_client,
            max_turns=self.config.agent.max_tool_turns,
            temperature=self.config.agent.temperature,
            max_tokens=self.config.agent.max_tokens,
        )
        try:
            result = await adapter.run_turn(system_prompt, history, self.registry, execute_anonymized)
        except ProviderAuthError:
            logger.error("Anthropic rejected the API key")
            return AUTH_ERROR_MESSAGE
        except ProviderRateLimitError:
            logger.error("Anthropic rate limit exceeded")
            return RATE_LIMIT_MESSAGE
        except ProviderError:
            logger.exception("Anthropic API error")
            return API_ERROR_MESSAGE

        text = result.text
        if text and anonymizer:
            restored = anonymizer.deanonymize(text)
            text = scrub_placeholders(restored)
            if text != restored:
                logger.warning("Residual placeholders after de-anonymization; scrubbed")
        return text or None

    def _audit(
        self,
        action: AuditAction,
        session: Session,
        reason: str,
        detection: DetectionResult,
        provider: str | None = None,
    ) -> None:
        self.audit.record(
            AuditEntry(
                action=action,
                session_key=session.key,
                user_id=session.user_id,
                case_id=session.active_case_id,
                reason=str(reason),
                pii_match_count=len(detection.matches),
                pii_types=detection.pii_types,
                privacy_mode=effective_mode(session, self.config.privacy.mode).value,
                provider=provider,
            )
        )

    async def close(self) -> None:
        """Release provider clients."""
        await self.local_client.close()
        if self.cloud_client is not None:
            await self.cloud_client.close()


def create_orchestrator(
    config: MecenasConfig,
    store: CaseStore | None = None,
    audit: AuditSink | None = None,
) -> Orchestrator:
    """Wire an orchestrator from configuration.

    Args:
        config: Loaded configuration
        store: Case store (a fresh in-memory store if None)
        audit: Audit sink (SQLite-backed logger per config if None)

    Returns:
        Ready-to-use Orchestrator
    """
    store = store if store is not None else InMemoryCaseStore()
    if audit is None:
        audit_store = PrivacyAuditStore(config.audit.database_path) if config.audit.enabled else None
        audit = PrivacyAuditLogger(audit_store)

    registry = build_default_registry()
    dispatcher = ToolDispatcher(registry, store, audit, config.saos)

    probe = AvailabilityProbe(
        host=config.ollama.host,
        probe_timeout=config.ollama.probe_timeout,
        model_probe_timeout=config.ollama.model_probe_timeout,
        recheck_seconds=config.ollama.model_recheck_seconds,
    )
    local_client = OllamaClient(
        model=config.agent.model,
        host=config.ollama.host,
        timeout=config.ollama.timeout,
        temperature=config.agent.temperature,
        max_tokens=config.agent.max_tokens,
    )

    cloud_client = None
    api_key = get_anthropic_key(config)
    if api_key:
        cloud_client = AnthropicClient(
            api_key=api_key,
            model=config.cloud.model,
            max_tokens=config.agent.max_tokens,
            timeout=config.cloud.timeout,
            temperature=config.agent.temperature,
        )
    else:
        logger.info("No Anthropic API key in %s; cloud provider disabled", config.cloud.api_key_env)

    return Orchestrator(
        config=config,
        store=store,
        dispatcher=dispatcher,
        probe=probe,
        local_client=local_client,
        audit=audit,
        cloud_client=cloud_client,
    )

"""Privacy and AI-consent tools.

Each state change emits a privacy audit event through the context's
audit sink.
"""

from typing import Any

from mecenas.privacy.models import AuditAction, PrivacyMode
from mecenas.store.models import to_json_dict
from mecenas.tools.base import ToolError, ToolParameter
from mecenas.tools.context import ToolContext
from mecenas.tools.registry import ToolRegistry
from mecenas.tools.validation import opt_string, require_string, resolve_case_id

CONSENT_SCOPES = ["local_only", "cloud_anonymized", "full"]
PRIVACY_MODES = [m.value for m in PrivacyMode]


def register(registry: ToolRegistry) -> None:
    """Register privacy tools on a registry."""

    @registry.tool(
        name="set_case_privacy",
        description=(
            "Ustaw tryb prywatności dla konkretnej sprawy (np. strict dla spraw karnych/rodzinnych). "
            "Nadpisuje globalne ustawienie dla tej sprawy."
        ),
        parameters=[
            ToolParameter("caseId", "string", "ID sprawy", required=True),
            ToolParameter(
                "privacyMode",
                "string",
                "Tryb prywatności (strict = tylko lokalny model)",
                required=True,
                enum=PRIVACY_MODES,
            ),
        ],
    )
    async def set_case_privacy(ctx: ToolContext, args: dict[str, Any]) -> Any:
        case_id = require_string(args, "caseId")
        if not case_id:
            raise ToolError("ID sprawy jest wymagane.")
        mode = require_string(args, "privacyMode")
        if mode not in PRIVACY_MODES:
            raise ToolError("Tryb musi być: auto, strict lub off.")
        if ctx.store.update_case(case_id, privacy_mode=mode) is None:
            raise ToolError("Sprawa nie znaleziona.")

        ctx.audit_event(
            AuditAction.MODE_CHANGE,
            case_id=case_id,
            reason=f"case_privacy_set_{mode}",
            privacy_mode=mode,
        )
        return {"success": True, "message": f"Tryb prywatności sprawy ustawiony na: {mode}."}

    @registry.tool(
        name="record_ai_consent",
        description=(
            "Zarejestruj zgodę na przetwarzanie AI dla sprawy. Wymagane przed użyciem AI do "
            "analizy danych klienta (RODO, tajemnica adwokacka)."
        ),
        parameters=[
            ToolParameter("caseId", "string", "ID sprawy", required=True),
            ToolParameter(
                "scope",
                "string",
                "Zakres zgody (domyślnie: local_only)",
                enum=CONSENT_SCOPES,
            ),
            ToolParameter("notes", "string", "Dodatkowe uwagi"),
        ],
    )
    async def record_ai_consent(ctx: ToolContext, args: dict[str, Any]) -> Any:
        case_id = resolve_case_id(args, ctx.session)
        if not case_id:
            raise ToolError("ID sprawy jest wymagane.")
        if ctx.store.get_case(case_id) is None:
            raise ToolError("Sprawa nie znaleziona.")
        scope = opt_string(args, "scope") or "local_only"
        if scope not in CONSENT_SCOPES:
            raise ToolError(f"Zakres zgody musi być: {', '.join(CONSENT_SCOPES)}")

        consent = ctx.store.record_ai_consent(
            case_id, ctx.session.user_id, scope, opt_string(args, "notes")
        )
        ctx.audit_event(AuditAction.CONSENT_RECORD, case_id=case_id, reason=f"scope={scope}")
        return {
            "success": True,
            "consent": to_json_dict(consent),
            "message": f"Zgoda na AI zarejestrowana (zakres: {scope}).",
        }

    @registry.tool(
        name="check_ai_consent",
        description="Sprawdź czy sprawa ma zarejestrowaną zgodę na AI",
        parameters=[ToolParameter("caseId", "string", "ID sprawy", required=True)],
    )
    async def check_ai_consent(ctx: ToolContext, args: dict[str, Any]) -> Any:
        case_id = resolve_case_id(args, ctx.session)
        if not case_id:
            raise ToolError("ID sprawy jest wymagane.")
        consent = ctx.store.get_ai_consent(case_id)
        ctx.audit_event(AuditAction.CONSENT_CHECK, case_id=case_id, reason="consent_checked")
        if consent is None:
            return {"hasConsent": False, "message": "Brak zgody na AI dla tej sprawy."}
        return {"hasConsent": True, "consent": to_json_dict(consent)}

    @registry.tool(
        name="revoke_ai_consent",
        description="Cofnij zgodę na AI dla sprawy",
        parameters=[ToolParameter("caseId", "string", "ID sprawy", required=True)],
    )
    async def revoke_ai_consent(ctx: ToolContext, args: dict[str, Any]) -> Any:
        case_id = resolve_case_id(args, ctx.session)
        if not case_id:
            raise ToolError("ID sprawy jest wymagane.")
        if not ctx.store.revoke_ai_consent(case_id):
            raise ToolError("Brak aktywnej zgody do cofnięcia.")
        ctx.audit_event(AuditAction.CONSENT_REVOKE, case_id=case_id, reason="consent_revoked")
        return {"success": True, "message": "Zgoda na AI cofnięta."}

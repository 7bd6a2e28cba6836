"""Privacy classifier deciding where a message may be processed.

The decision is made once per inbound message, before any model is called,
from the raw text, the session history, the active case and the effective
privacy mode.
"""

import logging

from mecenas.store.base import CaseStore
from mecenas.store.models import Session

from .detector import PiiDetector
from .models import Decision, DecisionReason, DetectionResult, PrivacyDecision, PrivacyMode

logger = logging.getLogger(__name__)

# Default number of trailing session turns scanned for earlier sensitive content
HISTORY_SCAN_WINDOW = 20


def effective_mode(session: Session, global_mode: PrivacyMode | str) -> PrivacyMode:
    """Resolve the privacy mode for a session.

    A recognized ``privacyMode`` in session metadata wins; anything else
    (missing, empty, misspelled) falls back to the global mode.
    """
    session_mode = PrivacyMode.parse(session.metadata.get("privacyMode"))
    if session_mode is not None:
        return session_mode
    return PrivacyMode.parse(global_mode) or PrivacyMode.AUTO


def classify(
    text: str,
    session: Session,
    store: CaseStore,
    global_mode: PrivacyMode | str,
    detector: PiiDetector,
    history_window: int = HISTORY_SCAN_WINDOW,
    detection: DetectionResult | None = None,
) -> PrivacyDecision:
    """Classify one inbound message.

    Rules are applied in strict precedence order; the first that matches
    decides. The function never raises for unknown modes or missing cases.

    Args:
        text: Raw user message
        session: Conversation the message belongs to
        store: Case store used to read the active case
        global_mode: Configured privacy mode
        detector: PII detector
        history_window: Trailing turns to scan; must match the window sent to the model
        detection: Result of an earlier ``detector.detect(text)``, reused if given

    Returns:
        PrivacyDecision with the routing decision and its reason
    """
    mode = effective_mode(session, global_mode)

    if mode is PrivacyMode.OFF:
        return PrivacyDecision(Decision.CLOUD_ANONYMIZED, DecisionReason.PRIVACY_OFF)

    if detection is None:
        detection = detector.detect(text)
    sensitive = detection.is_sensitive

    case_id = session.active_case_id
    if case_id:
        # Any active case carries client context into the prompt
        sensitive = True
        legal_case = store.get_case(case_id)
        if legal_case is None:
            logger.debug("Active case %s not found in store", case_id)
        elif legal_case.privacy_mode == PrivacyMode.STRICT:
            return PrivacyDecision(Decision.LOCAL, DecisionReason.CASE_STRICT_MODE)

    if not sensitive:
        recent = session.messages[-history_window:]
        sensitive = any(detector.contains_sensitive(turn.content) for turn in recent)

    if mode is PrivacyMode.STRICT:
        return PrivacyDecision(Decision.LOCAL, DecisionReason.STRICT_MODE)

    if sensitive:
        return PrivacyDecision(Decision.LOCAL, DecisionReason.PII_DETECTED)

    return PrivacyDecision(Decision.CLOUD_ANONYMIZED, DecisionReason.NO_PII)

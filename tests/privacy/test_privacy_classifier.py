"""Tests for the privacy classifier."""

import pytest

from mecenas.privacy import classify, effective_mode
from mecenas.privacy.models import Decision, DecisionReason, PrivacyMode
from mecenas.store.models import Session

CLEAN_TEXT = "Jaka jest opłata od pozwu o zapłatę 10000 zł?"
PII_TEXT = "Mój numer to 44051401359"


def _classify(text, session, store, detector, mode="auto"):
    return classify(text, session, store, mode, detector)


class TestEffectiveMode:
    def test_session_mode_wins(self, session):
        session.metadata["privacyMode"] = "strict"
        assert effective_mode(session, "off") is PrivacyMode.STRICT

    def test_invalid_session_mode_falls_back_to_global(self, session):
        session.metadata["privacyMode"] = "paranoid"
        assert effective_mode(session, "off") is PrivacyMode.OFF

    def test_invalid_global_mode_falls_back_to_auto(self, session):
        assert effective_mode(session, "bogus") is PrivacyMode.AUTO


class TestClassify:
    def test_no_pii_goes_to_cloud(self, session, store, detector):
        decision = _classify(CLEAN_TEXT, session, store, detector)
        assert decision.decision is Decision.CLOUD_ANONYMIZED
        assert decision.reason is DecisionReason.NO_PII

    @pytest.mark.parametrize(
        "text",
        [
            PII_TEXT,
            "Napisz do jan@example.com",
            "Zadzwoń pod 600 123 456",
            "Sprawa I C 123/26",
            "Mój klient pyta o termin",
        ],
    )
    def test_pii_forces_local(self, text, session, store, detector):
        decision = _classify(text, session, store, detector)
        assert decision.decision is Decision.LOCAL
        assert decision.reason is DecisionReason.PII_DETECTED

    def test_privacy_off_allows_cloud_even_with_pii(self, session, store, detector):
        decision = _classify(PII_TEXT, session, store, detector, mode="off")
        assert decision.decision is Decision.CLOUD_ANONYMIZED
        assert decision.reason is DecisionReason.PRIVACY_OFF

    def test_global_strict_mode(self, session, store, detector):
        decision = _classify(CLEAN_TEXT, session, store, detector, mode="strict")
        assert decision.decision is Decision.LOCAL
        assert decision.reason is DecisionReason.STRICT_MODE

    def test_session_strict_overrides_global_auto(self, session, store, detector):
        session.metadata["privacyMode"] = "strict"
        decision = _classify(CLEAN_TEXT, session, store, detector)
        assert decision.reason is DecisionReason.STRICT_MODE

    def test_session_off_overrides_global_strict(self, session, store, detector):
        session.metadata["privacyMode"] = "off"
        decision = _classify(CLEAN_TEXT, session, store, detector, mode="strict")
        assert decision.reason is DecisionReason.PRIVACY_OFF

    def test_active_case_is_sensitive(self, session, store, detector, client_and_case):
        _, legal_case = client_and_case
        session.metadata["activeCaseId"] = legal_case.id
        decision = _classify(CLEAN_TEXT, session, store, detector)
        assert decision.decision is Decision.LOCAL
        assert decision.reason is DecisionReason.PII_DETECTED

    def test_case_strict_mode(self, session, store, detector, client_and_case):
        _, legal_case = client_and_case
        store.update_case(legal_case.id, privacy_mode="strict")
        session.metadata["activeCaseId"] = legal_case.id
        decision = _classify(CLEAN_TEXT, session, store, detector)
        assert decision.decision is Decision.LOCAL
        assert decision.reason is DecisionReason.CASE_STRICT_MODE

    def test_case_strict_beats_session_auto_but_not_off(self, session, store, detector, client_and_case):
        _, legal_case = client_and_case
        store.update_case(legal_case.id, privacy_mode="strict")
        session.metadata["activeCaseId"] = legal_case.id
        session.metadata["privacyMode"] = "off"
        decision = _classify(CLEAN_TEXT, session, store, detector)
        assert decision.reason is DecisionReason.PRIVACY_OFF

    def test_missing_active_case_still_sensitive(self, session, store, detector):
        session.metadata["activeCaseId"] = "does-not-exist"
        decision = _classify(CLEAN_TEXT, session, store, detector)
        assert decision.reason is DecisionReason.PII_DETECTED

    def test_pii_in_recent_history(self, session, store, detector):
        session.add_turn("user", "PESEL klienta to 44051401359")
        session.add_turn("assistant", "Zapisałem.")
        decision = _classify(CLEAN_TEXT, session, store, detector)
        assert decision.reason is DecisionReason.PII_DETECTED

    def test_pii_outside_history_window_is_ignored(self, store, detector):
        session = Session(key="s", user_id="u")
        session.add_turn("user", "PESEL 44051401359")
        for i in range(20):
            session.add_turn("assistant", f"Odpowiedź {i}")
        decision = _classify(CLEAN_TEXT, session, store, detector)
        assert decision.reason is DecisionReason.NO_PII

    @pytest.mark.parametrize("text", [CLEAN_TEXT, PII_TEXT, ""])
    def test_strict_never_returns_cloud(self, text, session, store, detector):
        session.metadata["privacyMode"] = "strict"
        decision = _classify(text, session, store, detector, mode="auto")
        assert decision.decision is not Decision.CLOUD_ANONYMIZED


class TestHistoryWindow:
    def _session_with_old_pesel(self, turns_after):
        session = Session(key="s", user_id="u")
        session.add_turn("user", "PESEL 44051401359")
        for i in range(turns_after):
            session.add_turn("assistant", f"Odpowiedź {i}")
        return session

    def test_wider_window_reaches_older_turns(self, store, detector):
        session = self._session_with_old_pesel(23)
        decision = classify(CLEAN_TEXT, session, store, "auto", detector, history_window=30)
        assert decision.reason is DecisionReason.PII_DETECTED

    def test_narrower_window_skips_older_turns(self, store, detector):
        session = self._session_with_old_pesel(5)
        decision = classify(CLEAN_TEXT, session, store, "auto", detector, history_window=5)
        assert decision.reason is DecisionReason.NO_PII

    def test_reuses_given_detection(self, session, store, detector):
        detection = detector.detect(PII_TEXT)
        decision = classify(CLEAN_TEXT, session, store, "auto", detector, detection=detection)
        assert decision.reason is DecisionReason.PII_DETECTED

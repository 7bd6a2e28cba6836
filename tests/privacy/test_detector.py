"""Tests for the Polish PII detector."""

import pytest

from mecenas.privacy import PiiDetector, is_valid_pesel
from mecenas.privacy.models import PiiType
from mecenas.privacy.names import find_polish_names


@pytest.fixture
def detector():
    return PiiDetector()


class TestPeselValidation:
    def test_valid_checksum(self):
        assert is_valid_pesel("44051401359")

    def test_invalid_checksum(self):
        assert not is_valid_pesel("44051401358")

    def test_wrong_length(self):
        assert not is_valid_pesel("4405140135")

    def test_non_digits(self):
        assert not is_valid_pesel("4405140135a")


class TestPiiDetector:
    def test_detects_pesel(self, detector):
        result = detector.detect("PESEL: 44051401359")
        assert result.has_pii
        assert [m.type for m in result.matches] == [PiiType.PESEL]
        assert result.matches[0].value == "44051401359"

    def test_invalid_pesel_is_not_pesel(self, detector):
        result = detector.detect("numer 44051401358")
        assert PiiType.PESEL not in [m.type for m in result.matches]

    def test_detects_nip_with_dashes(self, detector):
        result = detector.detect("Firma ma numer 123-456-32-18")
        assert [m.type for m in result.matches] == [PiiType.NIP]

    def test_detects_email_and_phone(self, detector):
        result = detector.detect("Kontakt: jan@example.com, tel. 600 123 456")
        types = [m.type for m in result.matches]
        assert PiiType.EMAIL in types
        assert PiiType.PHONE in types

    def test_detects_case_signature(self, detector):
        result = detector.detect("Sprawa o sygnaturze I C 123/26 toczy się dalej")
        assert [m.value for m in result.matches] == ["I C 123/26"]

    def test_detects_name_after_role_keyword(self, detector):
        result = detector.detect("Pozwany: Zenobiusz Brzęczyszczykiewicz")
        names = [m.value for m in result.matches if m.type is PiiType.PERSON_NAME]
        assert names == ["Zenobiusz Brzęczyszczykiewicz"]

    def test_detects_dictionary_name(self, detector):
        result = detector.detect("Spotkanie z Janem? Nie, z Jan Kowalski jutro.")
        assert "Jan Kowalski" in [m.value for m in result.matches]

    def test_detects_address(self, detector):
        result = detector.detect("Mieszka przy ul. Marszałkowska 10/5 w Warszawie")
        assert PiiType.ADDRESS in [m.type for m in result.matches]

    def test_sensitive_keyword_without_pii(self, detector):
        result = detector.detect("Mój klient pyta o przedawnienie")
        assert not result.has_pii
        assert result.has_sensitive_keywords
        assert result.is_sensitive

    def test_clean_text(self, detector):
        result = detector.detect("Jaka jest opłata od pozwu o zapłatę 10000 zł?")
        assert not result.is_sensitive
        assert result.pii_types == []

    def test_matches_do_not_overlap(self, detector):
        result = detector.detect("PESEL 44051401359, email jan@example.com, kod 00-950")
        spans = [(m.index, m.end) for m in result.matches]
        for (_, end), (start, _) in zip(spans, spans[1:]):
            assert end <= start

    def test_pii_types_are_distinct(self, detector):
        result = detector.detect("a@example.com oraz b@example.com")
        assert result.pii_types == ["email"]

    def test_extra_keywords(self):
        detector = PiiDetector(extra_keywords=["Sprawa Rodzinna"])
        assert detector.contains_sensitive("to jest sprawa rodzinna")

    def test_contains_sensitive(self, detector):
        assert detector.contains_sensitive("PESEL 44051401359")
        assert not detector.contains_sensitive("Dzień dobry")


class TestDictionaryNames:
    @pytest.mark.parametrize(
        "text",
        [
            "Sprawa Jan Kowalski",
            "Pan Jan Kowalski prosi o opinię",
            "Mecenas Jan Kowalski prosi o opinię",
            "Wczoraj Dzwonił Jan Kowalski",
        ],
    )
    def test_capitalized_word_before_name(self, detector, text):
        names = [m.value for m in detector.detect(text).matches if m.type is PiiType.PERSON_NAME]
        assert names == ["Jan Kowalski"]

    def test_three_part_name_is_one_match(self, detector):
        result = detector.detect("Pani Anna Maria Nowak złożyła wniosek")
        names = [m.value for m in result.matches if m.type is PiiType.PERSON_NAME]
        assert names == ["Anna Maria Nowak"]

    def test_two_names_in_one_sentence(self, detector):
        result = detector.detect("Strony: Jan Kowalski oraz Anna Nowak")
        names = [m.value for m in result.matches if m.type is PiiType.PERSON_NAME]
        assert names == ["Jan Kowalski", "Anna Nowak"]

    def test_find_polish_names_reports_positions(self):
        assert find_polish_names("Sprawa Jan Kowalski") == [("Jan Kowalski", 7)]

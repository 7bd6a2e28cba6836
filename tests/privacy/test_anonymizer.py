"""Tests for the reversible anonymizer."""

from mecenas.privacy import Anonymizer, scrub_placeholders


class TestAnonymizer:
    def test_replaces_pesel_and_name(self):
        anonymizer = Anonymizer()
        text = "Jan Kowalski, PESEL 44051401359"

        anonymized = anonymizer.anonymize(text)

        assert "Jan Kowalski" not in anonymized
        assert "44051401359" not in anonymized
        assert "<<MECENAS_OSOBA_1>>" in anonymized
        assert "<<MECENAS_PESEL_1>>" in anonymized
        assert anonymizer.has_replacements
        assert anonymizer.mapping_count == 2

    def test_round_trip(self):
        anonymizer = Anonymizer()
        text = "Klient: Anna Nowak, email anna@example.com, tel. 600 123 456, sygn. I C 123/26"
        assert anonymizer.deanonymize(anonymizer.anonymize(text)) == text

    def test_same_value_same_placeholder(self):
        anonymizer = Anonymizer()
        first = anonymizer.anonymize("PESEL 44051401359")
        second = anonymizer.anonymize("Ponownie 44051401359")
        assert first.split()[-1] == second.split()[-1]
        assert anonymizer.mapping_count == 1

    def test_counters_per_type(self):
        anonymizer = Anonymizer()
        out = anonymizer.anonymize("a@example.com i b@example.com")
        assert "<<MECENAS_EMAIL_1>>" in out
        assert "<<MECENAS_EMAIL_2>>" in out

    def test_text_without_pii_untouched(self):
        anonymizer = Anonymizer()
        text = "Jaka jest opłata od pozwu?"
        assert anonymizer.anonymize(text) == text
        assert not anonymizer.has_replacements

    def test_unknown_placeholder_left_in_place(self):
        anonymizer = Anonymizer()
        assert anonymizer.deanonymize("<<MECENAS_PESEL_9>>") == "<<MECENAS_PESEL_9>>"

    def test_instances_are_independent(self):
        first = Anonymizer()
        second = Anonymizer()
        placeholder = first.anonymize("44051401359")
        assert second.deanonymize(placeholder) == placeholder


def test_scrub_placeholders():
    assert scrub_placeholders("Dane: <<MECENAS_OSOBA_3>>.") == "Dane: [dane osobowe]."
    assert scrub_placeholders("bez zmian") == "bez zmian"


def test_scrub_mangled_placeholders():
    text = "Pan <<MECENAS_OSOBA_1> oraz <<mecenas_osoba_1>> i << MECENAS_PESEL_2 >> (MECENAS_TEL_3)"
    assert scrub_placeholders(text) == (
        "Pan [dane osobowe] oraz [dane osobowe] i [dane osobowe] ([dane osobowe])"
    )


def test_scrub_leaves_plain_word_mecenas():
    assert scrub_placeholders("Mecenas Nowak odpowie") == "Mecenas Nowak odpowie"


def test_scrub_keeps_surrounding_spaces():
    assert scrub_placeholders("Pan MECENAS_OSOBA_1 oraz") == "Pan [dane osobowe] oraz"

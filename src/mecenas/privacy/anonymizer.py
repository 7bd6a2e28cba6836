"""Reversible anonymizer for cloud-bound text.

Replaces detected personal data with typed placeholders before text
leaves the machine and restores the original values in the answer.
"""

import re
from typing import ClassVar

from .detector import PiiDetector
from .models import PiiMatch, PiiType

PLACEHOLDER_PATTERN = re.compile(r"<<MECENAS_[A-Z]+_\d+>>")
# Placeholders as a model may echo them back, with brackets or case mangled
MANGLED_PLACEHOLDER_PATTERN = re.compile(
    r"(?:<\s*){0,2}\bMECENAS_[A-Z]+_\d+\b(?:\s*>){0,2}",
    re.IGNORECASE,
)
REDACTION_MARKER = "[dane osobowe]"


class Anonymizer:
    """Per-request bidirectional PII <-> placeholder mapping.

    Create a new instance for every cloud request; an instance must never be
    shared between sessions. Within one request the same value always maps
    to the same placeholder across the system prompt, history, tool inputs,
    tool results and the final answer.
    """

    # Placeholder format: <<MECENAS_{LABEL}_{N}>> e.g. <<MECENAS_PESEL_1>>
    TYPE_LABELS: ClassVar[dict[PiiType, str]] = {
        PiiType.PESEL: "PESEL",
        PiiType.NIP: "NIP",
        PiiType.REGON: "REGON",
        PiiType.PHONE: "TEL",
        PiiType.EMAIL: "EMAIL",
        PiiType.POSTAL_CODE: "KOD",
        PiiType.CASE_SIGNATURE: "SYGN",
        PiiType.PERSON_NAME: "OSOBA",
        PiiType.ADDRESS: "ADRES",
    }

    def __init__(self, detector: PiiDetector | None = None) -> None:
        self._detector = detector or PiiDetector()
        self._forward: dict[str, str] = {}  # original -> placeholder
        self._reverse: dict[str, str] = {}  # placeholder -> original
        self._type_counters: dict[PiiType, int] = {}

    @property
    def has_replacements(self) -> bool:
        """True once at least one value has been replaced."""
        return bool(self._forward)

    @property
    def mapping_count(self) -> int:
        """Number of distinct values replaced so far."""
        return len(self._forward)

    def _get_placeholder(self, match: PiiMatch) -> str:
        """Get or create the placeholder for a detected value."""
        existing = self._forward.get(match.value)
        if existing is not None:
            return existing

        count = self._type_counters.get(match.type, 0) + 1
        self._type_counters[match.type] = count
        placeholder = f"<<MECENAS_{self.TYPE_LABELS[match.type]}_{count}>>"

        self._forward[match.value] = placeholder
        self._reverse[placeholder] = match.value
        return placeholder

    def anonymize(self, text: str) -> str:
        """Replace all detected personal data in text with placeholders."""
        result = self._detector.detect(text)
        if not result.has_pii:
            return text

        out = text
        # Replace from the end so earlier indices stay valid
        for match in sorted(result.matches, key=lambda m: m.index, reverse=True):
            placeholder = self._get_placeholder(match)
            out = out[: match.index] + placeholder + out[match.end :]
        return out

    def deanonymize(self, text: str) -> str:
        """Restore original values for every known placeholder in text."""
        if "<<MECENAS_" not in text:
            return text
        return PLACEHOLDER_PATTERN.sub(lambda m: self._reverse.get(m.group(0), m.group(0)), text)


def scrub_placeholders(text: str) -> str:
    """Replace any surviving placeholder, exact or mangled, with a generic marker."""
    return MANGLED_PLACEHOLDER_PATTERN.sub(REDACTION_MARKER, text)

"""PII detector for Polish legal data.

Detects PESEL (with checksum), NIP, REGON, phone numbers, e-mail addresses,
postal codes, street addresses, court case signatures, person names (after
legal role keywords or from the name dictionary) and sensitive keywords.
"""

import re
from typing import ClassVar

from .models import DetectionResult, PiiMatch, PiiType
from .names import find_polish_names

PESEL_WEIGHTS = (1, 3, 7, 9, 1, 3, 7, 9, 1, 3)

_UPPER = "A-ZŁŚŹŻĆŃĘĄÓ"
_LOWER = "a-złóśćźżęąń"


def is_valid_pesel(digits: str) -> bool:
    """Validate an 11-digit PESEL number against its check digit."""
    if len(digits) != 11 or not digits.isdigit():
        return False
    total = sum(int(d) * w for d, w in zip(digits, PESEL_WEIGHTS))
    return (10 - total % 10) % 10 == int(digits[10])


class PiiDetector:
    """Scans text for Polish personal data and sensitive legal terms."""

    PATTERNS: ClassVar[dict[PiiType, re.Pattern[str]]] = {
        PiiType.PESEL: re.compile(r"\b(\d{11})\b"),
        PiiType.NIP: re.compile(r"\b(\d{3}[-\s]?\d{3}[-\s]?\d{2}[-\s]?\d{2})\b"),
        PiiType.REGON: re.compile(r"\b(\d{9}|\d{14})\b"),
        PiiType.PHONE: re.compile(
            r"(?:\+48[\s-]?|\b48[\s-]?)\d{3}[\s-]?\d{3}[\s-]?\d{3}\b"
            r"|\b[5-8]\d{2}[\s-]?\d{3}[\s-]?\d{3}\b"
        ),
        PiiType.EMAIL: re.compile(r"\b[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}\b"),
        PiiType.POSTAL_CODE: re.compile(r"\b(\d{2}-\d{3})\b"),
        PiiType.ADDRESS: re.compile(
            rf"\b(?:ul\.|al\.|pl\.|os\.)\s*[{_UPPER}0-9][{_LOWER}A-Za-z0-9.-]*"
            rf"(?:\s+[{_UPPER}][{_LOWER}A-Za-z.-]*){{0,3}}\s+\d+[A-Za-z]?(?:/\d+[A-Za-z]?)?"
        ),
        PiiType.CASE_SIGNATURE: re.compile(
            r"\b((?=[IVX])X{0,3}(?:IX|IV|V?I{0,3})\s+[A-Z][A-Za-z]{0,4}\s+\d{1,6}/\d{2,4})\b"
        ),
    }

    NAME_AFTER_KEYWORD: ClassVar[re.Pattern[str]] = re.compile(
        r"(?:Klient|Powód|Pozwany|Pełnomocnik|Wnioskodawca|Uczestnik|Dłużnik|Wierzyciel"
        r"|Spadkodawca|Spadkobierca|Obwiniony|Oskarżony|Pokrzywdzony)\s*:\s*"
        rf"([{_UPPER}][{_LOWER}]+(?:\s+[{_UPPER}][{_LOWER}]+){{1,3}})"
    )

    SENSITIVE_KEYWORDS: ClassVar[list[str]] = [
        "klient",
        "pesel",
        "nip",
        "regon",
        "dane osobowe",
        "pozwany",
        "powód",
        "adres zamieszkania",
        "adres korespondencyjny",
        "numer dowodu",
        "dowód osobisty",
        "numer paszportu",
        "data urodzenia",
        "miejsce urodzenia",
        "imię i nazwisko",
        "stan cywilny",
        "numer konta",
        "rachunek bankowy",
        "akt notarialny",
        "tajemnica adwokacka",
        "tajemnica radcowska",
        "poufne",
        "dane wrażliwe",
        "krs",
    ]

    # Tie-break order when two detections cover the same span
    PRIORITY: ClassVar[list[PiiType]] = [
        PiiType.PESEL,
        PiiType.EMAIL,
        PiiType.PERSON_NAME,
        PiiType.ADDRESS,
        PiiType.CASE_SIGNATURE,
        PiiType.NIP,
        PiiType.PHONE,
        PiiType.REGON,
        PiiType.POSTAL_CODE,
    ]

    def __init__(self, extra_keywords: list[str] | None = None) -> None:
        """Initialize the detector.

        Args:
            extra_keywords: Additional sensitive keywords (matched case-insensitively)
        """
        self._keywords = list(self.SENSITIVE_KEYWORDS)
        if extra_keywords:
            self._keywords.extend(kw.lower() for kw in extra_keywords)

    def detect(self, text: str) -> DetectionResult:
        """Scan text for personal data and sensitive keywords.

        Overlapping detections are resolved so that every character belongs
        to at most one match (earliest start wins, then the longer span,
        then :attr:`PRIORITY`).

        Args:
            text: Text to scan

        Returns:
            DetectionResult with matches ordered by position
        """
        candidates: list[PiiMatch] = []

        for m in self.PATTERNS[PiiType.PESEL].finditer(text):
            if is_valid_pesel(m.group(1)):
                candidates.append(PiiMatch(PiiType.PESEL, m.group(1), m.start(1)))

        for m in self.PATTERNS[PiiType.NIP].finditer(text):
            if len(re.sub(r"[-\s]", "", m.group(1))) == 10:
                candidates.append(PiiMatch(PiiType.NIP, m.group(1), m.start(1)))

        pesel_positions = {c.index for c in candidates if c.type is PiiType.PESEL}
        for m in self.PATTERNS[PiiType.REGON].finditer(text):
            if m.start(1) not in pesel_positions:
                candidates.append(PiiMatch(PiiType.REGON, m.group(1), m.start(1)))

        for pii_type in (
            PiiType.PHONE,
            PiiType.EMAIL,
            PiiType.POSTAL_CODE,
            PiiType.ADDRESS,
            PiiType.CASE_SIGNATURE,
        ):
            for m in self.PATTERNS[pii_type].finditer(text):
                candidates.append(PiiMatch(pii_type, m.group(0), m.start()))

        for m in self.NAME_AFTER_KEYWORD.finditer(text):
            candidates.append(PiiMatch(PiiType.PERSON_NAME, m.group(1).strip(), m.start(1)))

        for name, index in find_polish_names(text):
            candidates.append(PiiMatch(PiiType.PERSON_NAME, name, index))

        lower = text.lower()
        keywords = [kw for kw in self._keywords if kw in lower]

        return DetectionResult(matches=self._resolve_overlaps(candidates), keywords=keywords)

    def contains_sensitive(self, text: str) -> bool:
        """Quick check: does text contain any PII or sensitive keywords?"""
        lower = text.lower()
        if any(kw in lower for kw in self._keywords):
            return True
        return self.detect(text).has_pii

    def _resolve_overlaps(self, candidates: list[PiiMatch]) -> list[PiiMatch]:
        rank = {t: i for i, t in enumerate(self.PRIORITY)}
        ordered = sorted(candidates, key=lambda c: (c.index, -len(c.value), rank[c.type]))

        kept: list[PiiMatch] = []
        last_end = -1
        for candidate in ordered:
            if candidate.index < last_end:
                continue
            kept.append(candidate)
            last_end = candidate.end
        return kept

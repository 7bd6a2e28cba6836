"""Query-complexity routing between the main and the speed local model."""

import logging
import re
from typing import ClassVar

from mecenas.llm.probe import AvailabilityProbe

logger = logging.getLogger(__name__)


class QueryComplexityRouter:
    """Picks the smaller local model for simple queries.

    Drafting and analysis requests always use the main model, whatever
    their length. The speed model is only chosen once the probe confirms
    it is installed.
    """

    COMPLEX_PATTERNS: ClassVar[list[re.Pattern[str]]] = [
        re.compile(r"napisz (pozew|apelacj|odpowiedź|pismo|umow|wezwanie|wniosek|opini)"),
        re.compile(r"przygotuj (projekt|dokument|pismo)"),
        re.compile(r"przeanalizuj|analiz[auy]"),
        re.compile(r"sporządź|zredaguj"),
        re.compile(r"wyjaśnij.{20,}"),
        re.compile(r"porównaj|zestawienie"),
    ]

    SIMPLE_PATTERNS: ClassVar[list[re.Pattern[str]]] = [
        re.compile(r"^(cześć|hej|dzień dobry|witam|siema|hi|hello)"),
        re.compile(r"^(tak|nie|ok|dobrze|dzięki|dziękuję)"),
        re.compile(r"ile wynos|oblicz|policz|kalkul"),
        re.compile(r"opłat[aey]\s+sądow"),
        re.compile(r"odsetek|odsetki"),
        re.compile(r"przedawnien"),
        re.compile(r"wyszukaj.*(firm|krs|ceidg|nip)"),
        re.compile(r"szukaj.*(orzecz|wyrok)"),
        re.compile(r"art(ykuł)?\s*\.?\s*\d"),
        re.compile(r"jaki (jest|są) (termin|status)"),
        re.compile(r"pokaż (sprawy|klient|termin|faktur|dokument)"),
        re.compile(r"lista (spraw|klient|termin|faktur|dokument)"),
    ]

    SHORT_MESSAGE_CHARS = 60
    MEDIUM_MESSAGE_CHARS = 200

    def __init__(self, probe: AvailabilityProbe, main_model: str, speed_model: str | None = None) -> None:
        """Initialize the router.

        Args:
            probe: Availability probe used to confirm the speed model is installed
            main_model: Full local model
            speed_model: Smaller local model (None disables routing)
        """
        self.probe = probe
        self.main_model = main_model
        self.speed_model = speed_model

    @classmethod
    def is_simple_query(cls, text: str) -> bool:
        """Whether a message can be answered by the speed model."""
        lower = text.lower().strip()

        if any(p.search(lower) for p in cls.COMPLEX_PATTERNS):
            return False
        if len(lower) < cls.SHORT_MESSAGE_CHARS:
            return True
        if any(p.search(lower) for p in cls.SIMPLE_PATTERNS):
            return True
        return len(lower) < cls.MEDIUM_MESSAGE_CHARS

    async def select_model(self, text: str) -> str:
        """Choose the local model for a message.

        Args:
            text: Raw user message

        Returns:
            Speed model name if the query is simple and the model is present,
            otherwise the main model
        """
        if not self.speed_model or self.speed_model == self.main_model:
            return self.main_model
        if not self.is_simple_query(text):
            return self.main_model
        if await self.probe.is_model_present(self.speed_model):
            logger.debug("Routing simple query to speed model %s", self.speed_model)
            return self.speed_model
        return self.main_model

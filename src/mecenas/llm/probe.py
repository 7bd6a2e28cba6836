"""Availability probe for the local Ollama server.

Every probe degrades to "unavailable" on failure; nothing here raises.
"""

import asyncio
import logging
import time
from collections.abc import Callable

import httpx

logger = logging.getLogger(__name__)


def model_matches(installed: str, wanted: str) -> bool:
    """Check whether an installed model name satisfies a configured one.

    ``bielik:latest`` satisfies ``bielik`` and ``bielik`` satisfies
    ``bielik:Q4_K_M``; the comparison is on the base name before ``:``.
    """
    base = wanted.split(":", 1)[0]
    return installed == wanted or installed == base or installed.startswith(f"{base}:")


class AvailabilityProbe:
    """Checks whether Ollama is reachable and which models it has.

    Model presence is cached per model name and re-checked after
    ``recheck_seconds``. One probe instance is shared by all concurrent
    orchestrator calls; the cache is guarded by an asyncio lock.
    """

    def __init__(
        self,
        host: str = "http://localhost:11434",
        probe_timeout: float = 3.0,
        model_probe_timeout: float = 5.0,
        recheck_seconds: float = 300.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.host = host.rstrip("/")
        self.probe_timeout = probe_timeout
        self.model_probe_timeout = model_probe_timeout
        self.recheck_seconds = recheck_seconds
        self._clock = clock
        self._model_cache: dict[str, tuple[bool, float]] = {}
        self._lock = asyncio.Lock()

    async def is_local_provider_up(self, timeout: float | None = None) -> bool:
        """Return True if ``GET /api/tags`` answers with a 2xx status.

        Args:
            timeout: Override for the probe timeout in seconds

        Returns:
            True if Ollama is accessible, False otherwise
        """
        try:
            async with httpx.AsyncClient(timeout=timeout or self.probe_timeout) as client:
                response = await client.get(f"{self.host}/api/tags")
                return response.is_success
        except Exception as e:
            logger.debug("Ollama probe failed: %s", e)
            return False

    async def list_models(self, timeout: float | None = None) -> list[str]:
        """List installed model names, or an empty list on any failure."""
        try:
            async with httpx.AsyncClient(timeout=timeout or self.model_probe_timeout) as client:
                response = await client.get(f"{self.host}/api/tags")
                if not response.is_success:
                    return []
                data = response.json()
                return [m["name"] for m in data.get("models", []) if isinstance(m, dict) and "name" in m]
        except Exception as e:
            logger.debug("Ollama model listing failed: %s", e)
            return []

    async def is_model_present(self, model: str, timeout: float | None = None) -> bool:
        """Return True if ``model`` is installed, using the per-model cache.

        Args:
            model: Configured model name (tag optional)
            timeout: Override for the model probe timeout in seconds

        Returns:
            Cached or freshly probed presence of the model
        """
        async with self._lock:
            cached = self._model_cache.get(model)
            now = self._clock()
            if cached is not None and now - cached[1] < self.recheck_seconds:
                return cached[0]

            models = await self.list_models(timeout)
            present = any(model_matches(name, model) for name in models)
            self._model_cache[model] = (present, self._clock())

        if present:
            logger.info("Model %s available on Ollama", model)
        else:
            logger.info("Model %s not available; pull it with: ollama pull %s", model, model)
        return present

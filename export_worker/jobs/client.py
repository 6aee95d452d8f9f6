"""Hatchet client wrapper.

Builds the Hatchet SDK client the worker registers its workflow with,
returning None when Hatchet is disabled or the client cannot be built.
"""

from typing import Any

from export_worker.config.models.jobs import HatchetConfig
from export_worker.observability.logging import get_logger

logger = get_logger(__name__)


class HatchetClient:
    """Lazily created Hatchet SDK client."""

    def __init__(self, config: HatchetConfig) -> None:
        self._config = config
        self._client: Any | None = None

    def get_client(self) -> Any | None:
        """Get the Hatchet client, creating it on first call; None if unavailable."""
        if self._client is not None:
            return self._client

        if not self._config.enabled:
            logger.info("hatchet_disabled", reason="config")
            return None

        try:
            from hatchet_sdk import ClientConfig, Hatchet

            client_options: dict[str, Any] = {"server_url": self._config.server_url}
            if self._config.api_key:
                client_options["token"] = self._config.api_key.get_secret_value()
            self._client = Hatchet(config=ClientConfig(**client_options))
        except ImportError:
            logger.warning("hatchet_sdk_not_installed")
            return None
        except Exception as e:
            logger.error("hatchet_client_init_failed", error=str(e))
            return None

        logger.info("hatchet_client_initialized", server_url=self._config.server_url)
        return self._client

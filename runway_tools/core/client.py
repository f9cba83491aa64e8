"""Scoped access to the Runway client.

One client is created lazily per provider and reused by every invocation. The
client is safe to share between concurrent invocations; the tools keep no other
state between calls.
"""

from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Callable, Optional

from runwayml import AsyncRunwayML

from runway_tools.core.config import API_KEY_ENV, RunwayConfig
from runway_tools.core.errors import MissingCredentialError
from runway_tools.core.logger import Logger

ClientFactory = Callable[..., Any]


class RunwayClientProvider:
    def __init__(self, config: Optional[RunwayConfig] = None, client_factory: ClientFactory = AsyncRunwayML):
        self._logger = Logger(__name__)
        self.config = config or RunwayConfig()
        self._client_factory = client_factory
        self._client = None

    def require_credential(self) -> str:
        """Return the API key or raise the configuration error every tool reports."""
        if not self.config.api_key:
            raise MissingCredentialError(API_KEY_ENV)
        return self.config.api_key

    def get_client(self) -> Any:
        self.require_credential()
        if self._client is None:
            self._logger.debug("Creating the Runway client.")
            self._client = self._client_factory(**self.config.client_kwargs())
        return self._client

    @asynccontextmanager
    async def acquire(self) -> AsyncIterator[Any]:
        """Acquire the shared client for the duration of one vendor call."""
        yield self.get_client()


_default_provider: Optional[RunwayClientProvider] = None


def get_client_provider() -> RunwayClientProvider:
    """Return the process-wide provider, creating it on first use."""
    global _default_provider
    if _default_provider is None:
        _default_provider = RunwayClientProvider()
    return _default_provider


def set_client_provider(provider: Optional[RunwayClientProvider]) -> None:
    """Replace the process-wide provider. Passing None resets it."""
    global _default_provider
    _default_provider = provider

"""Session manager for coordinating iTunes Connect authentication."""

import logging

import httpx

from itc.auth import Authenticator
from itc.client import ITunesConnectClient
from itc.exceptions import ConfigError, ITCError
from itc.models import Config

logger = logging.getLogger(__name__)

USER_AGENT = "itc (Python httpx)"


class SessionManager:
    """Coordinates authentication and provides authenticated iTunes Connect clients."""

    def __init__(
        self,
        config: Config,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._config = config
        self._transport = transport

    def _build_http(self) -> httpx.Client:
        transport = self._transport or httpx.HTTPTransport(retries=self._config.retries)
        return httpx.Client(
            transport=transport,
            timeout=self._config.timeout,
            headers={"User-Agent": USER_AGENT},
        )

    def get_client(self) -> ITunesConnectClient:
        """Sign in with the configured Apple ID and return an authenticated client."""
        if not self._config.apple_id or not self._config.apple_id_password:
            raise ConfigError()

        http = self._build_http()
        try:
            state = Authenticator(http).authenticate(
                self._config.apple_id, self._config.apple_id_password
            )
        except ITCError:
            http.close()
            raise

        logger.debug("Authenticated as %s", self._config.apple_id)
        return ITunesConnectClient(state, http)

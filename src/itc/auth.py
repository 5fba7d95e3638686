"""Apple ID sign-in and iTunes Connect session bootstrapping."""

import logging

import httpx

from itc.cookies import (
    ACN01_COOKIE,
    ITCTX_COOKIE,
    MYACINFO_COOKIE,
    SessionState,
    get_response_cookie,
)
from itc.exceptions import ConfigFetchError, SessionError, SignInError
from itc.models import Session
from itc.urls import SERVICE_CONFIG_URL, SESSION_URL, SIGNIN_URL

logger = logging.getLogger(__name__)


class Authenticator:
    """Runs the three-step iTunes Connect login.

    1. fetch the auth service key from the olympus config endpoint
    2. sign in to idmsa with the Apple ID to obtain ``acn01`` and ``myacinfo``
    3. exchange those for the ``itctx`` context cookie and the session body

    Each step feeds the next; nothing is retried.
    """

    def __init__(self, http: httpx.Client) -> None:
        self._http = http

    def authenticate(self, apple_id: str, password: str) -> SessionState:
        """Sign in and return a fully populated session state."""
        state = SessionState()
        state.service_key = self._fetch_service_key()
        self._sign_in(state, apple_id, password)
        return self.refresh_session(state)

    def refresh_session(self, state: SessionState) -> SessionState:
        """Re-run the session exchange, refreshing ``itctx`` and the session body."""
        logger.debug("Fetching session from %s", SESSION_URL)
        try:
            response = self._http.get(
                SESSION_URL,
                headers={"Cookie": state.sign_in_cookie_header()},
            )
        except httpx.HTTPError as e:
            raise SessionError(f"Failed to fetch session: {e}") from e

        if response.status_code != 200:
            raise SessionError(
                f"Session request failed: HTTP {response.status_code} {response.reason_phrase}"
            )

        itctx = get_response_cookie(response, ITCTX_COOKIE)
        if not itctx:
            raise SessionError(f"Session response did not set the {ITCTX_COOKIE} cookie")

        try:
            session = Session.from_dict(response.json())
        except (ValueError, TypeError, AttributeError) as e:
            raise SessionError(f"Failed to decode session: {e}") from e

        state.itctx = itctx
        state.session = session
        logger.debug(
            "Session established for %s with %d provider(s)",
            session.user.email or session.user.full_name,
            len(session.providers),
        )
        return state

    def _fetch_service_key(self) -> str:
        logger.debug("Fetching service config from %s", SERVICE_CONFIG_URL)
        try:
            response = self._http.get(SERVICE_CONFIG_URL)
            payload = response.json()
        except httpx.HTTPError as e:
            raise ConfigFetchError(f"Failed to fetch service config: {e}") from e
        except ValueError as e:
            raise ConfigFetchError(f"Malformed service config response: {e}") from e

        key = payload.get("authServiceKey") if isinstance(payload, dict) else None
        if not key:
            raise ConfigFetchError("Service config response is missing authServiceKey")
        return key

    def _sign_in(self, state: SessionState, apple_id: str, password: str) -> None:
        payload = {
            "accountName": apple_id,
            "password": password,
            "rememberMe": True,
        }
        headers = {
            "Content-Type": "application/json",
            "Accept": "application/json, text/javascript",
            "X-Requested-With": "XMLHttpRequest",
            "X-Apple-Widget-Key": state.service_key,
        }

        logger.debug("Signing in to %s as %s", SIGNIN_URL, apple_id)
        try:
            response = self._http.post(SIGNIN_URL, json=payload, headers=headers)
        except httpx.HTTPError as e:
            raise SignInError(f"Sign-in request failed: {e}") from e

        state.acn01 = get_response_cookie(response, ACN01_COOKIE)
        state.myacinfo = get_response_cookie(response, MYACINFO_COOKIE)

        missing = [
            name
            for name, value in ((ACN01_COOKIE, state.acn01), (MYACINFO_COOKIE, state.myacinfo))
            if not value
        ]
        if missing:
            raise SignInError(
                f"Sign-in failed (HTTP {response.status_code}): "
                f"response did not set {', '.join(missing)}. Check your Apple ID and password."
            )

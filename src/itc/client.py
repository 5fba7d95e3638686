"""iTunes Connect API client for TestFlight testers, groups and account details."""

import json
import logging
from typing import Any, Optional

import httpx

from itc.auth import Authenticator
from itc.cookies import SessionState
from itc.exceptions import (
    ITCError,
    NotAuthenticatedError,
    ServiceError,
    TransportError,
    UnexpectedStatusError,
)
from itc.models import (
    AppSummary,
    CreateTester,
    Paging,
    Provider,
    ServiceErrorDetail,
    Session,
    Tester,
    TesterGroup,
    User,
)
from itc.urls import (
    ACCOUNT_DETAILS_URL,
    encode_paging,
    group_testers_url,
    groups_url,
    tester_url,
    testers_url,
)

logger = logging.getLogger(__name__)


def decode_service_errors(body: bytes | str, status_code: int | None = None) -> ServiceError:
    """Decode a ``{"serviceErrors": [{"code", "message"}]}`` body.

    Raises ValueError when the body is not JSON or does not have that shape.
    """
    payload = json.loads(body)
    if not isinstance(payload, dict) or not isinstance(payload.get("serviceErrors"), list):
        raise ValueError("response body has no serviceErrors list")

    errors = []
    for item in payload["serviceErrors"]:
        if not isinstance(item, dict):
            raise ValueError(f"malformed service error entry: {item!r}")
        errors.append(
            ServiceErrorDetail(
                code=str(item.get("code", "")),
                message=str(item.get("message", "")),
            )
        )
    return ServiceError(errors, status_code=status_code)


class ITunesConnectClient:
    """Client for interacting with the iTunes Connect web API."""

    def __init__(self, state: SessionState, http: httpx.Client) -> None:
        self._state = state
        self._http = http

    @property
    def state(self) -> SessionState:
        return self._state

    def close(self) -> None:
        self._http.close()

    def __enter__(self) -> "ITunesConnectClient":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def build_request(
        self,
        method: str,
        url: str,
        body: Any = None,
        params: Optional[str] = None,
    ) -> httpx.Request:
        """Build a request carrying the JSON content type and all three session cookies."""
        if params is not None:
            url = str(httpx.URL(url).copy_with(query=params.encode("ascii")))
        return self._http.build_request(
            method,
            url,
            content=json.dumps(body).encode("utf-8") if body is not None else None,
            headers={
                "Content-Type": "application/json",
                "Cookie": self._state.cookie_header(),
            },
        )

    def _send(self, request: httpx.Request) -> httpx.Response:
        if not self._state.is_authenticated:
            raise NotAuthenticatedError()

        logger.debug("%s %s", request.method, request.url)
        try:
            response = self._http.send(request)
        except httpx.HTTPError as e:
            raise TransportError(f"{request.method} {request.url} failed: {e}") from e

        logger.debug("%s %s -> %d", request.method, request.url, response.status_code)
        self._check_response(response)
        return response

    def _check_response(self, response: httpx.Response) -> None:
        if response.status_code == 200:
            return
        try:
            error = decode_service_errors(response.content, response.status_code)
        except ValueError:
            logger.debug("Response body is not a service error payload: %r", response.text[:200])
            raise UnexpectedStatusError(response.status_code, response.reason_phrase) from None
        raise error

    def _json(self, response: httpx.Response) -> Any:
        try:
            return response.json()
        except ValueError as e:
            raise ITCError(f"Malformed response from {response.request.url}: {e}") from e

    def _data_list(self, response: httpx.Response) -> list[dict[str, Any]]:
        payload = self._json(response)
        data = payload.get("data") if isinstance(payload, dict) else None
        if data is None:
            return []
        if not isinstance(data, list):
            raise ITCError(f"Unexpected data in response from {response.request.url}")
        return data

    def session(self) -> Session:
        """Fetch the current session, refreshing the itctx cookie."""
        if not self._state.is_authenticated:
            raise NotAuthenticatedError()
        state = Authenticator(self._http).refresh_session(self._state)
        return state.session or Session(user=User())

    def providers(self) -> list[Provider]:
        """Return the providers available to the signed-in user."""
        return self.session().providers

    def account_details(self) -> list[AppSummary]:
        """Fetch the app summaries for the account."""
        request = self.build_request("GET", ACCOUNT_DETAILS_URL)
        response = self._send(request)

        payload = self._json(response)
        data = payload.get("data") if isinstance(payload, dict) else None
        if data is None:
            return []
        if not isinstance(data, dict):
            raise ITCError(f"Unexpected data in response from {response.request.url}")
        summaries = data.get("summaries") or []
        try:
            return [AppSummary.from_dict(s) for s in summaries]
        except (AttributeError, TypeError) as e:
            raise ITCError(f"Failed to decode account details: {e}") from e

    def testers_list(
        self, provider_id: int, app_id: int, paging: Optional[Paging] = None
    ) -> list[Tester]:
        """List the testers of an app."""
        url = testers_url(provider_id, app_id)
        request = self.build_request("GET", url, params=encode_paging(paging, url))
        response = self._send(request)

        try:
            return [Tester.from_dict(t) for t in self._data_list(response)]
        except (KeyError, AttributeError, TypeError, ValueError) as e:
            raise ITCError(f"Failed to decode testers: {e}") from e

    def tester_groups(
        self, provider_id: int, app_id: int, paging: Optional[Paging] = None
    ) -> list[TesterGroup]:
        """List the tester groups of an app."""
        url = groups_url(provider_id, app_id)
        request = self.build_request("GET", url, params=encode_paging(paging, url))
        response = self._send(request)

        try:
            return [TesterGroup.from_dict(g) for g in self._data_list(response)]
        except (KeyError, AttributeError, TypeError, ValueError) as e:
            raise ITCError(f"Failed to decode tester groups: {e}") from e

    def tester_create(
        self,
        testers: list[CreateTester],
        provider_id: int,
        app_id: int,
        group_id: str,
    ) -> None:
        """Add testers to a group of an app."""
        url = group_testers_url(provider_id, app_id, group_id)
        body = [t.to_dict() for t in testers]
        self._send(self.build_request("POST", url, body))
        logger.debug("Created %d tester(s) in group %s", len(testers), group_id)

    def tester_delete(self, provider_id: int, app_id: int, tester_id: str) -> None:
        """Remove a tester from an app."""
        url = tester_url(provider_id, app_id, tester_id)
        self._send(self.build_request("DELETE", url))
        logger.debug("Deleted tester %s", tester_id)

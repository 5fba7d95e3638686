"""iTunes Connect endpoints and URL building."""

from typing import Optional
from urllib.parse import quote

import httpx

from itc.models import Paging

OLYMPUS_URL = "https://olympus.itunes.apple.com/v1"
SERVICE_CONFIG_URL = f"{OLYMPUS_URL}/app/config?hostname=itunesconnect.apple.com"
SESSION_URL = f"{OLYMPUS_URL}/session"
SIGNIN_URL = "https://idmsa.apple.com/appleauth/auth/signin"

ITUNES_CONNECT_URL = "https://itunesconnect.apple.com"
ACCOUNT_DETAILS_URL = (
    f"{ITUNES_CONNECT_URL}/WebObjects/iTunesConnect.woa/ra/apps/manageyourapps/summary/v2"
)
TESTFLIGHT_URL = f"{ITUNES_CONNECT_URL}/testflight/v2"

DEFAULT_PAGING = Paging(limit=50, sort="email", order="asc")


def _numeric_id(name: str, value: int) -> str:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"{name} must be an integer, got {value!r}")
    if value < 0:
        raise ValueError(f"{name} must be non-negative, got {value}")
    return str(value)


def _path_id(name: str, value: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValueError(f"{name} must be a non-empty string")
    if "/" in value:
        raise ValueError(f"{name} must not contain '/': {value!r}")
    return quote(value, safe="")


def app_url(provider_id: int, app_id: int) -> str:
    """Base TestFlight URL for one app of a provider."""
    return (
        f"{TESTFLIGHT_URL}/providers/{_numeric_id('provider_id', provider_id)}"
        f"/apps/{_numeric_id('app_id', app_id)}"
    )


def testers_url(provider_id: int, app_id: int) -> str:
    return f"{app_url(provider_id, app_id)}/testers"


def tester_url(provider_id: int, app_id: int, tester_id: str) -> str:
    return f"{testers_url(provider_id, app_id)}/{_path_id('tester_id', tester_id)}"


def groups_url(provider_id: int, app_id: int) -> str:
    return f"{app_url(provider_id, app_id)}/groups"


def group_testers_url(provider_id: int, app_id: int, group_id: str) -> str:
    return f"{groups_url(provider_id, app_id)}/{_path_id('group_id', group_id)}/testers"


def encode_paging(paging: Optional[Paging] = None, url: str = "") -> str:
    """Return the URL's query with limit, sort and order appended, in that order.

    A missing ``paging`` falls back to 50 results sorted by email ascending.
    Limits are passed through unchecked.
    """
    if paging is None:
        paging = DEFAULT_PAGING

    params = httpx.URL(url).params
    params = params.add("limit", str(paging.limit))
    params = params.add("sort", paging.sort)
    params = params.add("order", paging.order)
    return str(params)

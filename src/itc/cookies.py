"""Session cookie state shared by every authenticated iTunes Connect request."""

from dataclasses import dataclass
from typing import Optional

import httpx

from itc.models import Session

ACN01_COOKIE = "acn01"
MYACINFO_COOKIE = "myacinfo"
ITCTX_COOKIE = "itctx"


@dataclass
class SessionState:
    """Service key, session cookies and the decoded session for one login."""

    service_key: str = ""
    acn01: str = ""
    myacinfo: str = ""
    itctx: str = ""
    session: Optional[Session] = None

    @property
    def is_authenticated(self) -> bool:
        """True once all three session cookies are present."""
        return bool(self.acn01 and self.myacinfo and self.itctx)

    def sign_in_cookie_header(self) -> str:
        """Cookie header carrying only the sign-in cookies."""
        return _format_cookies(
            {ACN01_COOKIE: self.acn01, MYACINFO_COOKIE: self.myacinfo}
        )

    def cookie_header(self) -> str:
        """Cookie header carrying all three session cookies."""
        return _format_cookies(
            {
                ACN01_COOKIE: self.acn01,
                MYACINFO_COOKIE: self.myacinfo,
                ITCTX_COOKIE: self.itctx,
            }
        )

    def __repr__(self) -> str:
        # Cookie values are credentials
        return (
            f"SessionState(service_key={'set' if self.service_key else 'unset'}, "
            f"authenticated={self.is_authenticated})"
        )


def _format_cookies(cookies: dict[str, str]) -> str:
    return "; ".join(f"{name}={value}" for name, value in cookies.items())


def get_response_cookie(response: httpx.Response, name: str) -> str:
    """Return a cookie set by the response, or an empty string when absent."""
    for cookie in response.cookies.jar:
        if cookie.name == name and cookie.value:
            return cookie.value
    return ""

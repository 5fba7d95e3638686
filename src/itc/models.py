"""Data models for the iTunes Connect CLI."""

from dataclasses import dataclass, field
from typing import Any, Optional


@dataclass
class ServiceErrorDetail:
    """A single code/message pair from a serviceErrors payload."""

    code: str
    message: str


@dataclass
class Provider:
    """An organizational account the signed-in user can act as."""

    provider_id: int
    name: str
    content_types: list[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Provider":
        return cls(
            provider_id=int(data.get("providerId") or 0),
            name=data.get("name") or "",
            content_types=list(data.get("contentTypes") or []),
        )


@dataclass
class User:
    """The Apple ID behind the current session."""

    full_name: str = ""
    first_name: str = ""
    last_name: str = ""
    email: str = ""
    prs_id: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "User":
        return cls(
            full_name=data.get("fullName") or "",
            first_name=data.get("firstName") or "",
            last_name=data.get("lastName") or "",
            email=data.get("emailAddress") or "",
            prs_id=str(data.get("prsId") or ""),
        )


@dataclass
class Session:
    """Represents the body of the iTunes Connect session endpoint."""

    user: User
    provider: Optional[Provider] = None
    available_providers: list[Provider] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Session":
        provider = data.get("provider")
        return cls(
            user=User.from_dict(data.get("user") or {}),
            provider=Provider.from_dict(provider) if provider else None,
            available_providers=[
                Provider.from_dict(p) for p in data.get("availableProviders") or []
            ],
        )

    @property
    def providers(self) -> list[Provider]:
        """Providers available to the user, falling back to the current one."""
        if self.available_providers:
            return self.available_providers
        return [self.provider] if self.provider else []


@dataclass
class LatestInstallInfo:
    """The most recent build a tester installed."""

    app_adam_id: str = ""
    build_id: str = ""
    date: str = ""
    short_version: str = ""
    version: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "LatestInstallInfo":
        return cls(
            app_adam_id=str(data.get("latestInstalledAppAdamId") or ""),
            build_id=str(data.get("latestInstalledBuildId") or ""),
            date=str(data.get("latestInstalledDate") or ""),
            short_version=data.get("latestInstalledShortVersion") or "",
            version=data.get("latestInstalledVersion") or "",
        )


@dataclass
class Tester:
    """Represents a TestFlight tester."""

    id: str
    email: str
    first_name: str = ""
    last_name: str = ""
    provider_id: int = 0
    app_adam_id: int = 0
    account_id: str = ""
    invite_token: str = ""
    status: str = ""
    status_mod_time: str = ""
    latest_installed_train: str = ""
    latest_installed_version: str = ""
    latest_install_info: LatestInstallInfo = field(default_factory=LatestInstallInfo)
    groups: list[str] = field(default_factory=list)
    install_count: int = 0
    session_count: int = 0
    crash_count: int = 0

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Tester":
        return cls(
            id=str(data["id"]),
            email=data.get("email") or "",
            first_name=data.get("firstName") or "",
            last_name=data.get("lastName") or "",
            provider_id=int(data.get("providerId") or 0),
            app_adam_id=int(data.get("appAdamId") or 0),
            account_id=str(data.get("accountId") or ""),
            invite_token=data.get("inviteToken") or "",
            status=data.get("status") or "",
            status_mod_time=str(data.get("statusModTime") or ""),
            latest_installed_train=data.get("latestInstalledTrain") or "",
            latest_installed_version=data.get("latestInstalledVersion") or "",
            latest_install_info=LatestInstallInfo.from_dict(data.get("latestInstallInfo") or {}),
            groups=[str(g) for g in data.get("groups") or []],
            install_count=int(data.get("installCount") or 0),
            session_count=int(data.get("sessionCount") or 0),
            crash_count=int(data.get("crashCount") or 0),
        )


@dataclass
class CreateTester:
    """Properties for adding a tester to a group."""

    email: str
    first_name: str
    last_name: str

    def to_dict(self) -> dict[str, str]:
        return {
            "email": self.email,
            "firstName": self.first_name,
            "lastName": self.last_name,
        }


@dataclass
class TesterGroup:
    """Represents a TestFlight tester group."""

    id: str
    name: str
    provider_id: int = 0
    app_adam_id: int = 0
    is_active: bool = False
    is_internal_group: bool = False
    is_default_external_group: bool = False

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "TesterGroup":
        return cls(
            id=str(data["id"]),
            name=data.get("name") or "",
            provider_id=int(data.get("providerId") or 0),
            app_adam_id=int(data.get("appAdamId") or 0),
            is_active=bool(data.get("isActive", False)),
            is_internal_group=bool(data.get("isInternalGroup", False)),
            is_default_external_group=bool(data.get("isDefaultExternalGroup", False)),
        )


@dataclass
class AppSummary:
    """One app from the account's manage-your-apps summary."""

    adam_id: str
    name: str
    vendor_id: str = ""
    bundle_id: str = ""
    app_type: str = ""
    icon_url: str = ""
    last_modified_date: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "AppSummary":
        return cls(
            adam_id=str(data.get("adamId") or ""),
            name=data.get("name") or "",
            vendor_id=data.get("vendorId") or "",
            bundle_id=data.get("bundleId") or "",
            app_type=data.get("appType") or "",
            icon_url=data.get("iconUrl") or "",
            last_modified_date=str(data.get("lastModifiedDate") or ""),
        )


@dataclass
class Paging:
    """Paging parameters for list endpoints."""

    limit: int = 50
    sort: str = "email"
    order: str = "asc"


@dataclass
class Config:
    """User configuration for the CLI."""

    apple_id: str = ""
    apple_id_password: str = ""
    timeout: float = 30.0
    retries: int = 0

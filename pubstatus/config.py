"""Settings for status publication and the HTTP runtime."""

from __future__ import annotations

import dataclasses
import os

from pubstatus.errors import SettingsError
from pubstatus.tags import DEFAULT_BUILD_PLATFORM

# Default configuration values - single source of truth
DEFAULT_GITHUB_API_BASE = "https://api.github.com/"
DEFAULT_REGISTRY_BASE = "https://atomist.jfrog.io/atomist/npm-dev"
DEFAULT_STATUS_CONTEXT = "npm/module/prerelease"
DEFAULT_STATUS_DESCRIPTION = "Prerelease NPM module publication"
DEFAULT_USER_AGENT = "pubstatus/0.1"
_DEFAULT_TIMEOUT_S = 20.0


def _url_from_env(variable: str, default: str) -> str:
    value = os.environ.get(variable, "").strip()
    if not value:
        return default
    if not value.startswith(("http://", "https://")):
        raise SettingsError.invalid_url(variable, value)
    return value


@dataclasses.dataclass(frozen=True, slots=True)
class PublisherSettings:
    """Constants that shape the statuses posted for prerelease builds.

    Attributes
    ----------
    registry_base
        Root URL of the package registry that prerelease builds publish to.
    build_platform
        CI provider name recorded in prerelease tag build metadata.
    status_context
        Context label of posted commit statuses.
    status_description
        Description of posted commit statuses.
    default_api_base
        Source host API root used when a repository's organisation does not
        name its own.
    user_agent
        ``User-Agent`` header sent with every API request.

    """

    registry_base: str = DEFAULT_REGISTRY_BASE
    build_platform: str = DEFAULT_BUILD_PLATFORM
    status_context: str = DEFAULT_STATUS_CONTEXT
    status_description: str = DEFAULT_STATUS_DESCRIPTION
    default_api_base: str = DEFAULT_GITHUB_API_BASE
    user_agent: str = DEFAULT_USER_AGENT

    @classmethod
    def from_env(cls) -> PublisherSettings:
        """Build settings from the optional registry and API URL overrides."""
        return cls(
            registry_base=_url_from_env(
                "PUBSTATUS_REGISTRY_BASE", DEFAULT_REGISTRY_BASE
            ).rstrip("/"),
            default_api_base=_url_from_env(
                "PUBSTATUS_GITHUB_API_URL", DEFAULT_GITHUB_API_BASE
            ),
        )


@dataclasses.dataclass(frozen=True, slots=True)
class RuntimeSettings:
    """Credentials and transport policy for the HTTP runtime."""

    github_token: str
    timeout_s: float = _DEFAULT_TIMEOUT_S
    publisher: PublisherSettings = dataclasses.field(default_factory=PublisherSettings)

    @staticmethod
    def _parse_timeout_from_env() -> float:
        raw_timeout = os.environ.get("PUBSTATUS_HTTP_TIMEOUT")
        if raw_timeout is None:
            return _DEFAULT_TIMEOUT_S

        try:
            timeout = float(raw_timeout)
        except ValueError as exc:
            raise SettingsError.invalid_timeout(raw_timeout) from exc

        if timeout <= 0:
            raise SettingsError.invalid_timeout(raw_timeout)

        return timeout

    @classmethod
    def from_env(cls) -> RuntimeSettings:
        """Build runtime settings from environment variables.

        Reads the following environment variables:

        - ``PUBSTATUS_GITHUB_TOKEN``: Required token used to post statuses
        - ``PUBSTATUS_HTTP_TIMEOUT``: Optional request timeout in seconds
        - ``PUBSTATUS_REGISTRY_BASE``: Optional package registry root
        - ``PUBSTATUS_GITHUB_API_URL``: Optional default API root

        Raises
        ------
        SettingsError
            If the token is missing or any value is invalid.

        """
        raw_token = os.environ.get("PUBSTATUS_GITHUB_TOKEN")
        if raw_token is None:
            raise SettingsError.missing_token()
        token = raw_token.strip()
        if not token:
            raise SettingsError.empty_token()

        return cls(
            github_token=token,
            timeout_s=cls._parse_timeout_from_env(),
            publisher=PublisherSettings.from_env(),
        )


__all__ = [
    "DEFAULT_GITHUB_API_BASE",
    "DEFAULT_REGISTRY_BASE",
    "DEFAULT_STATUS_CONTEXT",
    "DEFAULT_STATUS_DESCRIPTION",
    "PublisherSettings",
    "RuntimeSettings",
]

"""Configuration errors raised while building pubstatus settings."""

from __future__ import annotations


class SettingsError(RuntimeError):
    """Raised when pubstatus configuration is missing or invalid."""

    @classmethod
    def missing_token(cls) -> SettingsError:
        """Return an error when no GitHub token is configured."""
        return cls("PUBSTATUS_GITHUB_TOKEN is required to post commit statuses")

    @classmethod
    def empty_token(cls) -> SettingsError:
        """Return an error when the provided token is blank."""
        return cls("GitHub token must be non-empty")

    @classmethod
    def invalid_timeout(cls, value: str) -> SettingsError:
        """Return an error for a timeout that is not a positive number."""
        return cls(
            f"Invalid PUBSTATUS_HTTP_TIMEOUT {value!r}. Must be a positive number"
        )

    @classmethod
    def invalid_url(cls, variable: str, value: str) -> SettingsError:
        """Return an error for a URL setting that is not absolute HTTP(S)."""
        return cls(f"Invalid {variable} {value!r}. Must be an http(s) URL")

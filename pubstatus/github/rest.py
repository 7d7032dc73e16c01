"""GitHub REST endpoints used to publish prerelease commit statuses.

The publisher talks to two endpoints per build: the repository contents API,
to read ``package.json`` at the built commit, and the commit statuses API.
Each repository's organisation may name its own API root (GitHub Enterprise),
so URLs are built per request rather than from a client-wide base URL.
"""

from __future__ import annotations

import base64
import binascii
import typing as typ

import msgspec

from pubstatus.models import CommitStatusPayload, PackageMetadata

from .errors import PackageMetadataError

if typ.TYPE_CHECKING:
    import httpx

GITHUB_V3_MEDIA_TYPE = "application/vnd.github.v3+json"

_HTTP_SUCCESS_MIN = 200
_HTTP_SUCCESS_MAX = 299


def _api_root(api_base: str) -> str:
    return api_base if api_base.endswith("/") else f"{api_base}/"


def package_json_url(api_base: str, slug: str, sha: str) -> str:
    """Return the contents API URL for ``package.json`` at commit ``sha``."""
    return f"{_api_root(api_base)}repos/{slug}/contents/package.json?ref={sha}"


def commit_status_url(api_base: str, slug: str, sha: str) -> str:
    """Return the statuses API URL for commit ``sha``."""
    return f"{_api_root(api_base)}repos/{slug}/statuses/{sha}"


def artifact_url(registry_base: str, package_name: str, version: str) -> str:
    """Return the registry tarball URL of ``package_name`` at ``version``.

    Examples
    --------
    >>> artifact_url("https://npm.example", "@scope/pkg", "1.0.0-20171006123456")
    'https://npm.example/@scope/pkg/-/@scope/pkg-1.0.0-20171006123456.tgz'

    """
    return f"{registry_base}/{package_name}/-/{package_name}-{version}.tgz"


def github_headers(token: str, *, user_agent: str) -> dict[str, str]:
    """Return request headers authenticating with ``token``."""
    return {
        "Accept": GITHUB_V3_MEDIA_TYPE,
        "Authorization": f"Bearer {token}",
        "Content-Type": "application/json",
        "User-Agent": user_agent,
    }


def is_success(response: httpx.Response) -> bool:
    """Return ``True`` for 2xx responses."""
    return _HTTP_SUCCESS_MIN <= response.status_code <= _HTTP_SUCCESS_MAX


def http_error_message(response: httpx.Response) -> str:
    """Describe a failed response by its reason phrase and headers."""
    headers = msgspec.json.encode(dict(response.headers)).decode("utf-8")
    return f"{response.reason_phrase}: {headers}"


def success_status(
    target_url: str,
    *,
    description: str,
    context: str,
) -> CommitStatusPayload:
    """Build a ``success`` commit status linking to ``target_url``."""
    return CommitStatusPayload(
        state="success",
        target_url=target_url,
        description=description,
        context=context,
    )


def decode_package_metadata(response: httpx.Response) -> PackageMetadata:
    """Decode the package name and version from a contents API response.

    The contents API returns the file base64 encoded, wrapped at 60
    characters, in the ``content`` field of a JSON object.

    Raises
    ------
    PackageMetadataError
        If the response body, its encoding, or the manifest is unusable.

    """
    try:
        payload = msgspec.json.decode(response.content)
    except msgspec.DecodeError as exc:
        raise PackageMetadataError.invalid_json(response.text) from exc

    content = payload.get("content") if isinstance(payload, dict) else None
    if not isinstance(content, str):
        raise PackageMetadataError.missing_content()

    try:
        manifest = base64.b64decode(content)
    except (binascii.Error, ValueError) as exc:
        raise PackageMetadataError.invalid_encoding(str(exc)) from exc

    try:
        parsed = msgspec.json.decode(manifest.decode("utf-8"))
    except (UnicodeDecodeError, msgspec.DecodeError) as exc:
        raise PackageMetadataError.malformed_manifest(str(exc)) from exc

    try:
        return msgspec.convert(parsed, type=PackageMetadata)
    except msgspec.ValidationError as exc:
        raise PackageMetadataError.invalid_manifest(str(exc)) from exc


__all__ = [
    "GITHUB_V3_MEDIA_TYPE",
    "artifact_url",
    "commit_status_url",
    "decode_package_metadata",
    "github_headers",
    "http_error_message",
    "is_success",
    "package_json_url",
    "success_status",
]

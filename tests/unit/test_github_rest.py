"""Unit tests for the GitHub REST helpers."""

from __future__ import annotations

import base64
import secrets

import httpx
import pytest

from pubstatus.github import (
    PackageMetadataError,
    artifact_url,
    commit_status_url,
    decode_package_metadata,
    github_headers,
    http_error_message,
    is_success,
    package_json_url,
    success_status,
)
from pubstatus.models import PackageMetadata
from tests.helpers.build_events import SHA, SLUG, package_json_contents

_TOKEN = secrets.token_hex(8)


class TestUrls:
    """Tests for endpoint and artifact URL construction."""

    def test_package_json_url(self) -> None:
        """The contents URL names the file and pins the commit."""
        url = package_json_url("https://api.github.com/", SLUG, SHA)

        assert url == (
            "https://api.github.com/repos/atomist/slack-messages"
            f"/contents/package.json?ref={SHA}"
        )

    def test_commit_status_url(self) -> None:
        """The statuses URL is keyed by slug and commit."""
        url = commit_status_url("https://api.github.com/", SLUG, SHA)

        assert url == f"https://api.github.com/repos/atomist/slack-messages/statuses/{SHA}"

    def test_api_base_without_trailing_slash(self) -> None:
        """Enterprise API roots without a trailing slash still join cleanly."""
        url = commit_status_url("https://ghe.example/api/v3", SLUG, SHA)

        assert url == f"https://ghe.example/api/v3/repos/{SLUG}/statuses/{SHA}"

    def test_artifact_url(self) -> None:
        """Tarball URLs follow the npm registry layout."""
        url = artifact_url(
            "https://atomist.jfrog.io/atomist/npm-dev",
            "@atomist/slack-messages",
            "0.12.0-20171006123456",
        )

        assert url == (
            "https://atomist.jfrog.io/atomist/npm-dev/@atomist/slack-messages"
            "/-/@atomist/slack-messages-0.12.0-20171006123456.tgz"
        )


def test_github_headers() -> None:
    """Requests authenticate with a bearer token and ask for the v3 API."""
    headers = github_headers(_TOKEN, user_agent="pubstatus/test")

    assert headers["Authorization"] == f"Bearer {_TOKEN}"
    assert headers["Accept"] == "application/vnd.github.v3+json"
    assert headers["User-Agent"] == "pubstatus/test"


@pytest.mark.parametrize(
    ("status_code", "expected"),
    [(199, False), (200, True), (201, True), (299, True), (300, False), (404, False)],
)
def test_is_success(status_code: int, expected: bool) -> None:  # noqa: FBT001
    """Only 2xx responses count as success."""
    assert is_success(httpx.Response(status_code)) is expected


def test_http_error_message_includes_reason_and_headers() -> None:
    """Error messages carry the reason phrase and the JSON headers."""
    response = httpx.Response(500, headers={"X-GitHub-Request-Id": "C0DE"})

    message = http_error_message(response)

    assert message.startswith("Internal Server Error: {")
    assert '"x-github-request-id":"C0DE"' in message


def test_success_status() -> None:
    """Status payloads are ``success`` and link to the artifact."""
    status = success_status("https://x/y.tgz", description="desc", context="ctx")

    assert status.state == "success"
    assert status.target_url == "https://x/y.tgz"
    assert status.description == "desc"
    assert status.context == "ctx"


class TestDecodePackageMetadata:
    """Tests for decoding package.json from a contents response."""

    def test_decodes_name_and_version(self) -> None:
        """Wrapped base64 content decodes to the package name and version."""
        body = package_json_contents(
            "@atomist/slack-messages", "0.12.0", description="x" * 200
        )

        metadata = decode_package_metadata(httpx.Response(200, json=body))

        assert metadata == PackageMetadata(name="@atomist/slack-messages", version="0.12.0")

    def test_missing_content(self) -> None:
        """Responses without content raise PackageMetadataError."""
        with pytest.raises(PackageMetadataError, match="content"):
            decode_package_metadata(httpx.Response(200, json={"type": "dir"}))

    def test_non_object_body(self) -> None:
        """Directory listings (JSON arrays) are rejected."""
        with pytest.raises(PackageMetadataError, match="content"):
            decode_package_metadata(httpx.Response(200, json=[{"name": "a"}]))

    def test_body_not_json(self) -> None:
        """Non-JSON bodies are rejected with a preview of the text."""
        with pytest.raises(PackageMetadataError, match="Failed to parse JSON"):
            decode_package_metadata(httpx.Response(200, content=b"<html>"))

    def test_invalid_base64(self) -> None:
        """Content that is not base64 is rejected."""
        with pytest.raises(PackageMetadataError, match="base64"):
            decode_package_metadata(httpx.Response(200, json={"content": "abc"}))

    @pytest.mark.parametrize(
        "manifest",
        [b'{"name": "pkg"}', b'{"name": "pkg", "version": 12}', b'["pkg", "1.0.0"]'],
        ids=["no-version", "numeric-version", "array"],
    )
    def test_manifest_without_usable_fields(self, manifest: bytes) -> None:
        """Well-formed manifests lacking a string name and version are rejected."""
        content = base64.b64encode(manifest).decode("ascii")

        with pytest.raises(PackageMetadataError, match="name and version"):
            decode_package_metadata(httpx.Response(200, json={"content": content}))

    @pytest.mark.parametrize(
        "manifest",
        [b'{"name": "pkg", "version": ', b'\xff\xfe{"name": "pkg"}'],
        ids=["truncated-json", "not-utf8"],
    )
    def test_malformed_manifest(self, manifest: bytes) -> None:
        """Manifests that are not UTF-8 JSON are reported as malformed."""
        content = base64.b64encode(manifest).decode("ascii")

        with pytest.raises(PackageMetadataError, match="not valid UTF-8 JSON"):
            decode_package_metadata(httpx.Response(200, json={"content": content}))

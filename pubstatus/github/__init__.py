"""GitHub REST helpers for reading package metadata and posting statuses."""

from __future__ import annotations

from .errors import PackageMetadataError
from .rest import (
    GITHUB_V3_MEDIA_TYPE,
    artifact_url,
    commit_status_url,
    decode_package_metadata,
    github_headers,
    http_error_message,
    is_success,
    package_json_url,
    success_status,
)

__all__ = [
    "GITHUB_V3_MEDIA_TYPE",
    "PackageMetadataError",
    "artifact_url",
    "commit_status_url",
    "decode_package_metadata",
    "github_headers",
    "http_error_message",
    "is_success",
    "package_json_url",
    "success_status",
]

"""Errors raised while reading repository metadata from GitHub."""

from __future__ import annotations

# Content preview length for error messages
_CONTENT_PREVIEW_LIMIT = 100


class PackageMetadataError(RuntimeError):
    """Raised when a ``package.json`` contents response cannot be used."""

    @classmethod
    def missing_content(cls) -> PackageMetadataError:
        """Return an error for a contents response without file content."""
        return cls("contents response missing base64 'content' field")

    @classmethod
    def invalid_encoding(cls, detail: str) -> PackageMetadataError:
        """Return an error for file content that is not valid base64."""
        return cls(f"content is not valid base64: {detail}")

    @classmethod
    def malformed_manifest(cls, detail: str) -> PackageMetadataError:
        """Return an error for a manifest that is not UTF-8 encoded JSON."""
        return cls(f"package.json is not valid UTF-8 JSON: {detail}")

    @classmethod
    def invalid_manifest(cls, detail: str) -> PackageMetadataError:
        """Return an error for a manifest lacking a usable name and version."""
        return cls(f"package.json has no usable name and version: {detail}")

    @classmethod
    def invalid_json(cls, content: str) -> PackageMetadataError:
        """Return an error for a response body that is not JSON."""
        if len(content) > _CONTENT_PREVIEW_LIMIT:
            preview = content[:_CONTENT_PREVIEW_LIMIT] + "..."
        else:
            preview = content
        return cls(f"Failed to parse JSON from response: {preview}")

"""Typed models for build-completion events and package metadata.

Events arrive as the JSON envelope ``{"data": {"Build": [...]}}``. Every field
of a build record is optional at decode time: incomplete records must reach
the eligibility rules in :mod:`pubstatus.publisher`, which skip them with an
explanatory outcome instead of rejecting the whole event.
"""

from __future__ import annotations

import typing as typ

import msgspec

PUSH_TRIGGER = "push"
PULL_REQUEST_TRIGGER = "pull_request"


class Tag(msgspec.Struct, frozen=True):
    """A version-control tag; the name may be unresolvable."""

    name: str | None = None


class CommitInfo(msgspec.Struct, frozen=True):
    """Commit a build ran against."""

    sha: str | None = None
    tags: tuple[Tag, ...] | None = None


class PushInfo(msgspec.Struct, frozen=True):
    """Push that triggered a build."""

    branch: str | None = None


class PullRequestInfo(msgspec.Struct, frozen=True, rename="camel"):
    """Pull request that triggered a build."""

    branch_name: str | None = None


class ProviderInfo(msgspec.Struct, frozen=True, rename="camel"):
    """Source host provider of an organisation."""

    api_url: str | None = None


class OrgInfo(msgspec.Struct, frozen=True):
    """Organisation owning a repository."""

    provider: ProviderInfo | None = None


class RepoInfo(msgspec.Struct, frozen=True, rename="camel"):
    """Repository a build belongs to."""

    owner: str | None = None
    name: str | None = None
    default_branch: str | None = None
    org: OrgInfo | None = None

    @property
    def slug(self) -> str:
        """Return the repository slug in ``owner/name`` format."""
        return f"{self.owner}/{self.name}"


class BuildRecord(msgspec.Struct, frozen=True, rename="camel"):
    """One completed CI run."""

    name: str | None = None
    status: str | None = None
    trigger: str | None = None
    commit: CommitInfo | None = None
    repo: RepoInfo | None = None
    push: PushInfo | None = None
    pull_request: PullRequestInfo | None = None


class BuildEventData(msgspec.Struct, frozen=True):
    """Payload of a build event."""

    builds: tuple[BuildRecord, ...] | None = msgspec.field(default=None, name="Build")


class BuildEvent(msgspec.Struct, frozen=True):
    """Envelope delivered for each build-completion event."""

    data: BuildEventData | None = None

    @property
    def builds(self) -> tuple[BuildRecord, ...]:
        """Return the build records carried by the event, possibly none."""
        if self.data is None or self.data.builds is None:
            return ()
        return self.data.builds


class PackageMetadata(msgspec.Struct, frozen=True):
    """The fields of ``package.json`` needed to locate published artifacts."""

    name: str
    version: str


class CommitStatusPayload(msgspec.Struct, kw_only=True, frozen=True, omit_defaults=True):
    """Commit status record posted to the source host."""

    state: typ.Literal["error", "failure", "pending", "success"]
    target_url: str | None = None
    description: str | None = None
    context: str | None = None


def decode_build_event(raw: bytes | str) -> BuildEvent:
    """Decode a JSON build event.

    Raises
    ------
    msgspec.DecodeError
        If ``raw`` is not valid JSON or does not match the event schema.

    """
    return msgspec.json.decode(raw, type=BuildEvent)


def convert_build_event(payload: object) -> BuildEvent:
    """Convert an already-parsed JSON object into a :class:`BuildEvent`.

    Raises
    ------
    msgspec.ValidationError
        If ``payload`` does not match the event schema.

    """
    return msgspec.convert(payload, type=BuildEvent)


__all__ = [
    "PULL_REQUEST_TRIGGER",
    "PUSH_TRIGGER",
    "BuildEvent",
    "BuildEventData",
    "BuildRecord",
    "CommitInfo",
    "CommitStatusPayload",
    "OrgInfo",
    "PackageMetadata",
    "ProviderInfo",
    "PullRequestInfo",
    "PushInfo",
    "RepoInfo",
    "Tag",
    "convert_build_event",
    "decode_build_event",
]

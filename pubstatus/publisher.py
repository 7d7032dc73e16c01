"""Post prerelease artifact statuses for completed CI builds.

For every passed build that was either a push to the repository's default
branch or a pull request build, the publisher reads ``package.json`` at the
built commit, finds the prerelease versions the build tagged, and posts one
``success`` commit status per version linking to the published tarball.

Nothing here raises for upstream trouble. Every build, and every status post
within a build, yields an :class:`~pubstatus.results.Outcome`; sibling
requests run concurrently and all of them complete before their outcomes are
folded with :func:`~pubstatus.results.reduce_outcomes`.

Requests follow redirects, which GitHub issues for renamed repositories.
"""

from __future__ import annotations

import asyncio
import dataclasses
import typing as typ
from http import HTTPStatus

import httpx
import msgspec

from pubstatus.config import PublisherSettings
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
from pubstatus.logging import (
    get_logger,
    log_debug,
    log_error,
    log_exception,
    log_info,
    log_warning,
)
from pubstatus.models import PULL_REQUEST_TRIGGER, PUSH_TRIGGER
from pubstatus.results import Outcome, error_outcome, reduce_outcomes, success_outcome
from pubstatus.tags import find_build_tags

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from pubstatus.models import BuildEvent, BuildRecord, PackageMetadata, Tag

logger = get_logger(__name__)

DEFAULT_BRANCH = "master"
NO_BUILD_MESSAGE = "BuildPublishStatus: build event fired but event had no build"
NOT_PASSED_MESSAGE = "build did not pass"
MISSING_PROPERTIES_MESSAGE = "build event does not have needed properties to post status"
NOT_A_PACKAGE_MESSAGE = "not an NPM package repository"
POSTED_MESSAGE = "posted status to GitHub"


@dataclasses.dataclass(frozen=True, slots=True)
class _PublishContext:
    """Per-event collaborators shared by every request."""

    http_client: httpx.AsyncClient
    headers: dict[str, str]
    settings: PublisherSettings


@dataclasses.dataclass(frozen=True, slots=True)
class _EligibleBuild:
    """The parts of an eligible build record needed to post statuses."""

    name: str
    slug: str
    sha: str
    trigger: str
    tags: tuple[Tag, ...]
    branch: str | None
    api_base: str


async def post_status_to_github(
    event: BuildEvent,
    token: str,
    http_client: httpx.AsyncClient,
    *,
    settings: PublisherSettings | None = None,
) -> Outcome:
    """Post prerelease artifact statuses for every build in ``event``.

    Parameters
    ----------
    event
        Decoded build-completion event.
    token
        GitHub token used as the bearer credential.
    http_client
        Transport for all API requests. The caller owns it and its timeout
        policy.
    settings
        Registry and status constants; defaults apply when omitted.

    Returns
    -------
    Outcome
        The folded outcome of every build. An event without any build record
        is a failure.

    """
    builds = event.builds
    if not builds:
        log_warning(logger, NO_BUILD_MESSAGE)
        return error_outcome(NO_BUILD_MESSAGE)

    log_debug(logger, "incoming build event carries %d build(s)", len(builds))
    resolved = settings or PublisherSettings()
    context = _PublishContext(
        http_client=http_client,
        headers=github_headers(token, user_agent=resolved.user_agent),
        settings=resolved,
    )
    return await _gather_outcomes(_publish_build(build, context) for build in builds)


async def _gather_outcomes(coroutines: cabc.Iterable[cabc.Awaitable[Outcome]]) -> Outcome:
    """Await every coroutine, then fold their outcomes into one."""
    gathered = await asyncio.gather(*coroutines, return_exceptions=True)
    outcomes: list[Outcome] = []
    for result in gathered:
        if isinstance(result, Exception):
            log_exception(logger, "status publication failed unexpectedly", result)
            outcomes.append(error_outcome(str(result) or type(result).__name__))
        elif isinstance(result, BaseException):
            raise result
        else:
            outcomes.append(result)
    return reduce_outcomes(outcomes)


def _api_base(build: BuildRecord, settings: PublisherSettings) -> str:
    repo = build.repo
    if repo and repo.org and repo.org.provider and repo.org.provider.api_url:
        return repo.org.provider.api_url
    return settings.default_api_base


def _check_eligibility(
    build: BuildRecord, settings: PublisherSettings
) -> _EligibleBuild | Outcome:
    """Return the eligible build, or the outcome explaining why it is skipped."""
    if build.status != "passed":
        return success_outcome(NOT_PASSED_MESSAGE)

    commit = build.commit
    repo = build.repo
    if (
        not build.name
        or repo is None
        or not build.trigger
        or commit is None
        or not commit.sha
        or commit.tags is None
    ):
        return success_outcome(MISSING_PROPERTIES_MESSAGE)

    default_branch = repo.default_branch or DEFAULT_BRANCH
    is_default_branch_push = (
        build.trigger == PUSH_TRIGGER
        and build.push is not None
        and build.push.branch == default_branch
    )
    pr_branch = build.pull_request.branch_name if build.pull_request else None
    is_pull_request = build.trigger == PULL_REQUEST_TRIGGER and bool(pr_branch)
    if not is_default_branch_push and not is_pull_request:
        message = f"build {repo.slug}#{build.name} is neither on default branch nor a PR"
        log_info(logger, message)
        return success_outcome(message)

    return _EligibleBuild(
        name=build.name,
        slug=repo.slug,
        sha=commit.sha,
        trigger=build.trigger,
        tags=commit.tags,
        branch=pr_branch or None,
        api_base=_api_base(build, settings),
    )


async def _publish_build(build: BuildRecord, context: _PublishContext) -> Outcome:
    eligible = _check_eligibility(build, context.settings)
    if isinstance(eligible, Outcome):
        return eligible

    metadata = await _fetch_package_metadata(eligible, context)
    if isinstance(metadata, Outcome):
        return metadata

    versions = find_build_tags(
        eligible.tags,
        eligible.trigger,
        metadata.version,
        eligible.name,
        context.settings.build_platform,
        eligible.branch,
    )
    if not versions:
        log_info(
            logger,
            "no prerelease tags for %s#%s at %s",
            eligible.slug,
            eligible.name,
            eligible.sha,
        )
    return await _gather_outcomes(
        _post_status(eligible, metadata, version, context) for version in versions
    )


async def _fetch_package_metadata(
    build: _EligibleBuild, context: _PublishContext
) -> PackageMetadata | Outcome:
    """Read the package name and base version at the built commit."""
    url = package_json_url(build.api_base, build.slug, build.sha)
    try:
        response = await context.http_client.get(
            url, headers=context.headers, follow_redirects=True
        )
    except httpx.RequestError as exc:
        message = f"get {build.slug}/package.json failed: {exc}"
        log_error(logger, message)
        return error_outcome(message)

    if response.status_code == HTTPStatus.NOT_FOUND:
        log_info(
            logger,
            "failed to find %s/package.json: %s",
            build.slug,
            http_error_message(response),
        )
        return success_outcome(NOT_A_PACKAGE_MESSAGE)

    if not is_success(response):
        message = f"get {build.slug}/package.json failed: {http_error_message(response)}"
        log_error(logger, message)
        return error_outcome(message)

    try:
        return decode_package_metadata(response)
    except PackageMetadataError as exc:
        message = f"invalid {build.slug}/package.json: {exc}"
        log_error(logger, message)
        return error_outcome(message)


async def _post_status(
    build: _EligibleBuild,
    metadata: PackageMetadata,
    version: str,
    context: _PublishContext,
) -> Outcome:
    """Post one ``success`` status linking the commit to a prerelease tarball."""
    settings = context.settings
    url = commit_status_url(build.api_base, build.slug, build.sha)
    status = success_status(
        artifact_url(settings.registry_base, metadata.name, version),
        description=settings.status_description,
        context=settings.status_context,
    )
    try:
        response = await context.http_client.post(
            url,
            content=msgspec.json.encode(status),
            headers=context.headers,
            follow_redirects=True,
        )
    except httpx.RequestError as exc:
        message = f"failed to post to {url}: {exc}"
        log_error(logger, message)
        return error_outcome(message)

    if not is_success(response):
        message = f"failed to post to {url}: {http_error_message(response)}"
        log_error(logger, message)
        return error_outcome(message)

    log_info(logger, "posted %s status for %s@%s", status.target_url, build.slug, build.sha)
    return success_outcome(POSTED_MESSAGE)


__all__ = [
    "DEFAULT_BRANCH",
    "MISSING_PROPERTIES_MESSAGE",
    "NOT_A_PACKAGE_MESSAGE",
    "NOT_PASSED_MESSAGE",
    "NO_BUILD_MESSAGE",
    "POSTED_MESSAGE",
    "post_status_to_github",
]

"""Recover prerelease versions from the tags a CI build pushed.

Prerelease publication tags the built commit with the version that was
published, a 14-digit timestamp, and build metadata naming the CI run:

* push builds: ``1.2.0-20171006123456+travis.1190``
* pull request builds: ``1.2.0-my-branch.20171006123456+travis.1191``

The published version is everything before the ``+``.
"""

from __future__ import annotations

import re
import typing as typ

from pubstatus.models import PUSH_TRIGGER

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from pubstatus.models import Tag

DEFAULT_BUILD_PLATFORM = "travis"

_UNSAFE_BRANCH_CHARS = re.compile(r"[^A-Za-z0-9-]+")
_TIMESTAMP = r"\d{14}"


def safe_branch_name(branch: str) -> str:
    """Collapse each run of characters outside ``[A-Za-z0-9-]`` to ``.``.

    Examples
    --------
    >>> safe_branch_name("feature/tag_matching")
    'feature.tag.matching'
    >>> safe_branch_name("pr1me_.mov3rs-+1")
    'pr1me.mov3rs-.1'

    """
    return _UNSAFE_BRANCH_CHARS.sub(".", branch)


def _tag_pattern(
    trigger: str,
    version: str,
    build_meta: str,
    branch: str | None,
) -> re.Pattern[str] | None:
    if trigger == PUSH_TRIGGER:
        prerelease = f"{re.escape(version)}-{_TIMESTAMP}"
    elif branch:
        safe_branch = re.escape(safe_branch_name(branch))
        prerelease = f"{re.escape(version)}-{safe_branch}\\.{_TIMESTAMP}"
    else:
        return None
    return re.compile(f"^{prerelease}\\+{build_meta}$")


def find_build_tags(
    tags: cabc.Iterable[Tag],
    trigger: str,
    version: str,
    build_name: str,
    build_platform: str = DEFAULT_BUILD_PLATFORM,
    branch: str | None = None,
) -> list[str]:
    """Find the timestamped prerelease versions a build tagged.

    Parameters
    ----------
    tags
        Tags on the built commit, in the order the source host reports them.
    trigger
        What triggered the build, ``"push"`` or ``"pull_request"``.
    version
        Base version of the package, as found in ``package.json``.
    build_name
        Name (number) of the CI build.
    build_platform
        CI provider recorded in the tag build metadata.
    branch
        Source branch, only consulted for pull request builds.

    Returns
    -------
    list[str]
        Prerelease versions without build metadata, in tag order. Empty when
        nothing matches or when a pull request build has no branch.

    """
    build_meta = f"{re.escape(build_platform)}\\.{re.escape(build_name)}"
    pattern = _tag_pattern(trigger, version, build_meta, branch)
    if pattern is None:
        return []

    return [
        tag.name.split("+", 1)[0]
        for tag in tags
        if tag.name and pattern.fullmatch(tag.name)
    ]


__all__ = ["DEFAULT_BUILD_PLATFORM", "find_build_tags", "safe_branch_name"]

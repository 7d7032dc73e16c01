"""Shared build event builders for tests.

The defaults describe a passed push build of ``atomist/slack-messages`` on its
default branch whose commit carries one prerelease tag for version 0.12.0.
"""

from __future__ import annotations

import base64
import copy
import json
import typing as typ

from pubstatus.models import BuildEvent, convert_build_event

OWNER = "atomist"
REPO = "slack-messages"
SLUG = f"{OWNER}/{REPO}"
SHA = "ad31a1182a194c09b960d75b0f4002be1bbca288"
BUILD_NAME = "1190"
PACKAGE_NAME = "@atomist/slack-messages"
BASE_VERSION = "0.12.0"
PRERELEASE = f"{BASE_VERSION}-20171006123456"
PUSH_TAG = f"{PRERELEASE}+travis.{BUILD_NAME}"

_BASE64_LINE_LENGTH = 60


def build_record(**overrides: typ.Any) -> dict[str, typ.Any]:
    """Return a raw build record, shallow-merging ``overrides`` on top."""
    record: dict[str, typ.Any] = {
        "name": BUILD_NAME,
        "status": "passed",
        "trigger": "push",
        "push": {"branch": "master"},
        "pullRequest": None,
        "commit": {
            "sha": SHA,
            "tags": [{"name": PUSH_TAG}],
        },
        "repo": {
            "owner": OWNER,
            "name": REPO,
            "defaultBranch": "master",
            "org": {"provider": None},
        },
        "buildUrl": "https://travis-ci.org/atomist/slack-messages/builds/280762398",
        "provider": "travis",
    }
    record.update(copy.deepcopy(overrides))
    return record


def pull_request_record(branch: str, *tags: str, **overrides: typ.Any) -> dict[str, typ.Any]:
    """Return a raw pull request build record tagged with ``tags``."""
    return build_record(
        trigger="pull_request",
        push=None,
        pullRequest={"branchName": branch},
        commit={"sha": SHA, "tags": [{"name": tag} for tag in tags]},
        **overrides,
    )


def build_event(*records: dict[str, typ.Any]) -> BuildEvent:
    """Wrap raw build records in an event envelope and decode it."""
    return convert_build_event({"data": {"Build": list(records)}})


def package_json_contents(
    name: str = PACKAGE_NAME,
    version: str = BASE_VERSION,
    **extra: typ.Any,
) -> dict[str, typ.Any]:
    """Return a contents API body for a ``package.json`` file.

    The content is base64 wrapped at 60 characters like the real API.
    """
    manifest = json.dumps({"name": name, "version": version, **extra}, indent=2)
    encoded = base64.b64encode(manifest.encode("utf-8")).decode("ascii")
    lines = [
        encoded[i : i + _BASE64_LINE_LENGTH]
        for i in range(0, len(encoded), _BASE64_LINE_LENGTH)
    ]
    return {
        "name": "package.json",
        "path": "package.json",
        "type": "file",
        "encoding": "base64",
        "content": "\n".join(lines) + "\n",
    }

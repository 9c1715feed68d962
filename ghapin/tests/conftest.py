"""
conftest.py - Pytest fixtures for ghapin tests
"""

import os
import tempfile
from types import SimpleNamespace
from typing import Dict, List, Optional, Tuple

import pytest

from ghapin.core.cache import ReleaseCache
from ghapin.core.github import GitHubAPIError, Release
from ghapin.core.resolver import ReleaseResolver

CHECKOUT_SHA = "11bd71901bbe5b1630ceea73d27597364c9af683"
CHECKOUT_OLD_SHA = "b4ffde65f46336ab88eb53be808477a3936bae11"
SETUP_NODE_SHA = "49933ea5288caeca8642d1e84afbd3f7d6820020"
CACHE_SHA = "5a3ec84eff668545956fd18022155c47e93e2684"


class FakeReleaseClient:
    """In-memory stand-in for GitHubClient that records its calls"""

    def __init__(
        self,
        releases: Optional[Dict[str, Release]] = None,
        tags: Optional[Dict[str, str]] = None,
        release_errors: Optional[Dict[str, GitHubAPIError]] = None,
        tag_errors: Optional[Dict[str, GitHubAPIError]] = None,
    ) -> None:
        self.releases = releases or {}
        self.tags = tags or {}
        self.release_errors = release_errors or {}
        self.tag_errors = tag_errors or {}
        self.release_calls: List[str] = []
        self.tag_calls: List[Tuple[str, str]] = []

    def get_latest_release(self, owner: str, repo: str) -> Optional[Release]:
        key = f"{owner}/{repo}"
        self.release_calls.append(key)
        if key in self.release_errors:
            raise self.release_errors[key]
        return self.releases.get(key)

    def get_tag_sha(self, owner: str, repo: str, tag: str) -> Optional[str]:
        key = f"{owner}/{repo}@{tag}"
        self.tag_calls.append((f"{owner}/{repo}", tag))
        if key in self.tag_errors:
            raise self.tag_errors[key]
        return self.tags.get(key)

    @property
    def call_count(self) -> int:
        return len(self.release_calls) + len(self.tag_calls)


@pytest.fixture
def shas():
    """Commit SHAs the fake release client resolves tags to."""
    return SimpleNamespace(
        checkout=CHECKOUT_SHA,
        checkout_old=CHECKOUT_OLD_SHA,
        setup_node=SETUP_NODE_SHA,
        cache=CACHE_SHA,
    )


@pytest.fixture
def make_client():
    """Factory for release clients with custom releases, tags and errors."""
    return FakeReleaseClient


@pytest.fixture
def temp_dir():
    """Create a temporary directory that is removed after the test."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield tmpdir


@pytest.fixture
def fake_client():
    """Release client knowing a few popular actions."""
    return FakeReleaseClient(
        releases={
            "actions/checkout": Release(tag="v4.2.2", target_commitish="main"),
            "actions/setup-node": Release(tag="v4.4.0", target_commitish="main"),
            "actions/cache": Release(tag="v4.2.3", target_commitish="main"),
        },
        tags={
            "actions/checkout@v4.2.2": CHECKOUT_SHA,
            "actions/checkout@v4.1.1": CHECKOUT_OLD_SHA,
            "actions/setup-node@v4.4.0": SETUP_NODE_SHA,
            "actions/cache@v4.2.3": CACHE_SHA,
        },
    )


@pytest.fixture
def resolver(fake_client):
    """Resolver backed by the fake release client and a fresh cache."""
    return ReleaseResolver(fake_client, ReleaseCache())


@pytest.fixture
def sample_workflow_content():
    """Sample GitHub Actions workflow content."""
    return """name: CI

on:
  push:
    branches: [ main ]

jobs:
  build:
    runs-on: ubuntu-latest
    steps:
      - uses: actions/checkout@v4.1.1
      - name: Set up Node
        uses: actions/setup-node@v4.3.0 # v4.3.0
        with:
          node-version: 20
      - uses: actions/cache@v3 # pin@v3.2.0 cache deps
      - uses: actions/upload-artifact@main
      - uses: ./.github/actions/local
      - run: npm test
"""


@pytest.fixture
def composite_action_content():
    """Composite action using other actions."""
    return """name: Setup
description: Shared setup steps
runs:
  using: composite
  steps:
    - uses: actions/checkout@v4.1.1
    - uses: actions/setup-node@v4
      with:
        node-version: 20
"""


@pytest.fixture
def workflow_file(temp_dir, sample_workflow_content):
    """Workflow file inside a .github/workflows tree."""
    workflows_dir = os.path.join(temp_dir, ".github", "workflows")
    os.makedirs(workflows_dir)

    file_path = os.path.join(workflows_dir, "ci.yml")
    with open(file_path, "w", encoding="utf-8") as f:
        f.write(sample_workflow_content)

    return file_path


@pytest.fixture
def workflow_dir(workflow_file, composite_action_content):
    """Directory holding a workflow and a composite action file."""
    workflows_dir = os.path.dirname(workflow_file)

    with open(os.path.join(workflows_dir, "setup.yaml"), "w", encoding="utf-8") as f:
        f.write(composite_action_content)

    with open(os.path.join(workflows_dir, "README.md"), "w", encoding="utf-8") as f:
        f.write("not a workflow\n")

    return workflows_dir

from __future__ import annotations

from pathlib import Path
from typing import Iterator

import pytest

from gitext.core.policy import Policy, policy_from_mapping
from tests.utils import GitRemoteSetup, ScriptedExecutor, scripted_repo


@pytest.fixture()
def policy() -> Policy:
    return policy_from_mapping({}, Path("/work/repo"))


@pytest.fixture()
def scripted() -> ScriptedExecutor:
    """Executor double for a clean feature branch with origin reachable."""
    return scripted_repo()


@pytest.fixture()
def remote_setup(tmp_path: Path) -> Iterator[GitRemoteSetup]:
    yield GitRemoteSetup(tmp_path)

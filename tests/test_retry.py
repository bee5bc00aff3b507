import time
from collections.abc import Generator
from unittest.mock import MagicMock

import pytest
import stamina
from azdo_git.azure_devops_api import GitCommitRef, GitPush, GitRefUpdate
from azdo_git.exceptions import PushConflictError, ResourceNotFoundError
from azdo_git.resources.retry import push_with_retry

from tests.helpers import REPO_ID, api_error, stale_ref


def _build_push(old_object_id: str) -> GitPush:
    return GitPush(
        ref_updates=[GitRefUpdate(name="refs/heads/dev", old_object_id=old_object_id)]
    )


def test_push_on_first_attempt(api: MagicMock) -> None:
    api.get_commits.return_value = [GitCommitRef(commit_id="head")]
    api.create_push.return_value = GitPush(push_id=7)

    result = push_with_retry(api, REPO_ID, "refs/heads/dev", _build_push)

    assert result.push_id == 7
    api.get_commits.assert_called_once_with(REPO_ID, "dev", top=1)
    api.create_push.assert_called_once_with(REPO_ID, _build_push("head"))


def test_conflict_without_retries_raises(api: MagicMock) -> None:
    api.get_commits.return_value = [GitCommitRef(commit_id="head")]
    api.create_push.side_effect = stale_ref()

    with pytest.raises(PushConflictError, match="has already been updated") as e:
        push_with_retry(api, REPO_ID, "refs/heads/dev", _build_push)
    assert e.value.__cause__ is api.create_push.side_effect


@pytest.mark.usefixtures("enable_retry")
def test_conflict_resolves_head_again(api: MagicMock) -> None:
    api.get_commits.side_effect = [
        [GitCommitRef(commit_id="head1")],
        [GitCommitRef(commit_id="head2")],
    ]
    api.create_push.side_effect = [stale_ref(), GitPush(push_id=8)]

    result = push_with_retry(api, REPO_ID, "refs/heads/dev", _build_push, timeout=5)

    assert result.push_id == 8
    assert [c.args[1] for c in api.create_push.call_args_list] == [
        _build_push("head1"),
        _build_push("head2"),
    ]


@pytest.mark.usefixtures("enable_retry")
def test_other_errors_abort(api: MagicMock) -> None:
    api.get_commits.return_value = [GitCommitRef(commit_id="head")]
    error = api_error("TF401027: forbidden")
    api.create_push.side_effect = error

    with pytest.raises(type(error), match="forbidden"):
        push_with_retry(api, REPO_ID, "refs/heads/dev", _build_push)
    assert api.create_push.call_count == 1


@pytest.mark.usefixtures("enable_retry")
def test_empty_branch_aborts(api: MagicMock) -> None:
    api.get_commits.return_value = []

    with pytest.raises(ResourceNotFoundError):
        push_with_retry(api, REPO_ID, "refs/heads/dev", _build_push)
    api.create_push.assert_not_called()


@pytest.fixture
def real_retries() -> Generator[None, None, None]:
    """Retry with stamina's real waits, bounded by the push timeout only."""
    stamina.set_active(True)
    stamina.set_testing(False)
    yield
    stamina.set_active(False)


@pytest.mark.usefixtures("real_retries")
def test_persistent_conflict_gives_up_at_timeout(api: MagicMock) -> None:
    api.get_commits.return_value = [GitCommitRef(commit_id="head")]
    api.create_push.side_effect = stale_ref()
    timeout = 1.0

    start = time.monotonic()
    with pytest.raises(PushConflictError):
        push_with_retry(api, REPO_ID, "refs/heads/dev", _build_push, timeout=timeout)
    elapsed = time.monotonic() - start

    assert api.create_push.call_count >= 2
    assert api.get_commits.call_count == api.create_push.call_count
    assert elapsed < timeout + 3

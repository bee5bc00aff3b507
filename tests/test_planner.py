from unittest.mock import MagicMock

import pytest
from azdo_git.resources.branch import GitRepositoryBranch
from azdo_git.resources.file import GitRepositoryFile
from azdo_git.resources.models import BranchConfig, BranchState, FileConfig, FileState
from azdo_git.resources.planner import (
    PlanAction,
    apply_branch,
    apply_file,
    plan_branch,
    plan_file,
)

from tests.helpers import REPO_ID

OTHER_REPO_ID = "0c6e2f8a-1d3b-4e8f-a5c7-9b2d4f6e8a10"


def _branch_state(**kwargs: object) -> BranchState:
    values: dict[str, object] = {
        "id": f"{REPO_ID}:a-branch",
        "name": "a-branch",
        "repository_id": REPO_ID,
    }
    values.update(kwargs)
    return BranchState.model_validate(values)


def _file_state(**kwargs: object) -> FileState:
    values: dict[str, object] = {
        "id": f"{REPO_ID}/a.txt",
        "repository_id": REPO_ID,
        "file": "a.txt",
        "content": "hello",
        "commit_message": "Add a.txt",
    }
    values.update(kwargs)
    return FileState.model_validate(values)


@pytest.fixture
def branch_resource() -> MagicMock:
    return MagicMock(spec=GitRepositoryBranch)


@pytest.fixture
def file_resource() -> MagicMock:
    return MagicMock(spec=GitRepositoryFile)


@pytest.mark.parametrize(
    ("desired", "current", "expected"),
    [
        pytest.param(
            BranchConfig(name="a-branch", repository_id=REPO_ID),
            None,
            PlanAction.CREATE,
            id="missing",
        ),
        pytest.param(
            BranchConfig(name="a-branch", repository_id=REPO_ID),
            _branch_state(),
            PlanAction.NOOP,
            id="unchanged",
        ),
        pytest.param(
            BranchConfig(name="b-branch", repository_id=REPO_ID),
            _branch_state(),
            PlanAction.REPLACE,
            id="renamed",
        ),
        pytest.param(
            BranchConfig(name="a-branch", repository_id=OTHER_REPO_ID),
            _branch_state(),
            PlanAction.REPLACE,
            id="moved",
        ),
        pytest.param(
            BranchConfig(name="a-branch", repository_id=REPO_ID, ref="refs/heads/x"),
            _branch_state(),
            PlanAction.REPLACE,
            id="new-ref",
        ),
    ],
)
def test_plan_branch(
    desired: BranchConfig, current: BranchState | None, expected: PlanAction
) -> None:
    assert plan_branch(desired, current) == expected


@pytest.mark.parametrize(
    ("desired", "expected"),
    [
        pytest.param(
            FileConfig(repository_id=REPO_ID, file="a.txt", content="hello"),
            PlanAction.NOOP,
            id="unchanged",
        ),
        pytest.param(
            FileConfig(repository_id=REPO_ID, file="a.txt", content="bye"),
            PlanAction.UPDATE,
            id="content",
        ),
        pytest.param(
            FileConfig(
                repository_id=REPO_ID,
                file="a.txt",
                content="hello",
                commit_message="Reword",
            ),
            PlanAction.UPDATE,
            id="commit-message",
        ),
        pytest.param(
            FileConfig(repository_id=REPO_ID, file="b.txt", content="hello"),
            PlanAction.REPLACE,
            id="path",
        ),
        pytest.param(
            FileConfig(
                repository_id=REPO_ID, file="a.txt", content="hello", branch="dev"
            ),
            PlanAction.REPLACE,
            id="branch",
        ),
    ],
)
def test_plan_file(desired: FileConfig, expected: PlanAction) -> None:
    assert plan_file(desired, _file_state()) == expected


@pytest.mark.parametrize(
    ("commit_message", "current_message", "expected"),
    [
        pytest.param("Add a.txt", "Add a.txt", PlanAction.NOOP, id="as-created"),
        pytest.param("Add a.txt", "Update a.txt", PlanAction.NOOP, id="as-updated"),
        pytest.param("Reword", "Reword", PlanAction.NOOP, id="custom"),
        pytest.param("Reword", "Update a.txt", PlanAction.UPDATE, id="drifted"),
        pytest.param(None, "Some other commit", PlanAction.NOOP, id="computed"),
    ],
)
def test_plan_file_commit_message(
    commit_message: str | None, current_message: str, expected: PlanAction
) -> None:
    desired = FileConfig(
        repository_id=REPO_ID,
        file="a.txt",
        content="hello",
        commit_message=commit_message,
    )

    assert plan_file(desired, _file_state(commit_message=current_message)) == expected


def test_apply_file_settles_after_update_rewords_add_message(
    file_resource: MagicMock,
) -> None:
    desired = FileConfig(
        repository_id=REPO_ID, file="a.txt", content="v2", commit_message="Add a.txt"
    )
    current = _file_state(content="v2", commit_message="Update a.txt")
    file_resource.read.return_value = current

    result = apply_file(file_resource, desired, current)

    assert result.action == PlanAction.NOOP
    file_resource.update.assert_not_called()


def test_plan_file_missing() -> None:
    desired = FileConfig(repository_id=REPO_ID, file="a.txt", content="hello")

    assert plan_file(desired, None) == PlanAction.CREATE


def test_apply_branch_create(branch_resource: MagicMock) -> None:
    desired = BranchConfig(name="a-branch", repository_id=REPO_ID)
    branch_resource.create.return_value = _branch_state()

    result = apply_branch(branch_resource, desired, None)

    assert result.action == PlanAction.CREATE
    assert result.state == _branch_state()
    branch_resource.read.assert_not_called()
    branch_resource.create.assert_called_once_with(desired)


def test_apply_branch_recreates_vanished_branch(branch_resource: MagicMock) -> None:
    desired = BranchConfig(name="a-branch", repository_id=REPO_ID)
    branch_resource.read.return_value = None
    branch_resource.create.return_value = _branch_state()

    result = apply_branch(branch_resource, desired, _branch_state())

    assert result.action == PlanAction.CREATE
    branch_resource.delete.assert_not_called()


def test_apply_branch_keeps_prior_ref(branch_resource: MagicMock) -> None:
    desired = BranchConfig(name="a-branch", repository_id=REPO_ID, ref="refs/heads/x")
    branch_resource.read.return_value = _branch_state()

    result = apply_branch(branch_resource, desired, _branch_state(ref="refs/heads/x"))

    assert result.action == PlanAction.NOOP
    assert result.state is not None
    assert result.state.ref == "refs/heads/x"
    branch_resource.create.assert_not_called()


def test_apply_branch_replace(branch_resource: MagicMock) -> None:
    desired = BranchConfig(name="b-branch", repository_id=REPO_ID)
    branch_resource.read.return_value = _branch_state()
    branch_resource.create.return_value = _branch_state(
        id=f"{REPO_ID}:b-branch", name="b-branch"
    )

    result = apply_branch(branch_resource, desired, _branch_state())

    assert result.action == PlanAction.REPLACE
    branch_resource.delete.assert_called_once_with(f"{REPO_ID}:a-branch")
    branch_resource.create.assert_called_once_with(desired)


def test_apply_branch_dry_run(branch_resource: MagicMock) -> None:
    desired = BranchConfig(name="b-branch", repository_id=REPO_ID)
    branch_resource.read.return_value = _branch_state()

    result = apply_branch(branch_resource, desired, _branch_state(), dry_run=True)

    assert result.action == PlanAction.REPLACE
    assert result.state == _branch_state()
    branch_resource.delete.assert_not_called()
    branch_resource.create.assert_not_called()


def test_apply_file_create(file_resource: MagicMock) -> None:
    desired = FileConfig(repository_id=REPO_ID, file="a.txt", content="hello")
    file_resource.create.return_value = _file_state()

    result = apply_file(file_resource, desired, None)

    assert result.action == PlanAction.CREATE
    file_resource.create.assert_called_once_with(desired)


def test_apply_file_update(file_resource: MagicMock) -> None:
    desired = FileConfig(repository_id=REPO_ID, file="a.txt", content="bye")
    file_resource.read.return_value = _file_state()
    file_resource.update.return_value = _file_state(content="bye")

    result = apply_file(file_resource, desired, _file_state())

    assert result.action == PlanAction.UPDATE
    assert result.state == _file_state(content="bye")
    file_resource.read.assert_called_once_with(f"{REPO_ID}/a.txt", "refs/heads/master")
    file_resource.update.assert_called_once_with(desired)


def test_apply_file_replace(file_resource: MagicMock) -> None:
    desired = FileConfig(
        repository_id=REPO_ID, file="a.txt", content="hello", branch="dev"
    )
    file_resource.read.return_value = _file_state()
    file_resource.create.return_value = _file_state(branch="dev")

    result = apply_file(file_resource, desired, _file_state())

    assert result.action == PlanAction.REPLACE
    file_resource.delete.assert_called_once_with(
        f"{REPO_ID}/a.txt", "refs/heads/master"
    )
    file_resource.create.assert_called_once_with(desired)


def test_apply_file_noop(file_resource: MagicMock) -> None:
    desired = FileConfig(repository_id=REPO_ID, file="a.txt", content="hello")
    file_resource.read.return_value = _file_state()

    result = apply_file(file_resource, desired, _file_state())

    assert result.action == PlanAction.NOOP
    file_resource.create.assert_not_called()
    file_resource.update.assert_not_called()


def test_apply_file_dry_run(file_resource: MagicMock) -> None:
    desired = FileConfig(repository_id=REPO_ID, file="a.txt", content="bye")
    file_resource.read.return_value = _file_state()

    result = apply_file(file_resource, desired, _file_state(), dry_run=True)

    assert result.action == PlanAction.UPDATE
    file_resource.update.assert_not_called()

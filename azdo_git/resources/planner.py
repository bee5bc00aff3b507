"""Plan and apply desired resource configuration against the observed state.

The prior state is refreshed first (a resource that vanished upstream is
planned for creation again). Changes of immutable attributes replace the
resource (delete, then create); changes of mutable attributes update it.
"""

from dataclasses import dataclass
from enum import StrEnum

import structlog

from azdo_git.resources.branch import GitRepositoryBranch
from azdo_git.resources.file import GitRepositoryFile, update_commit_message
from azdo_git.resources.models import BranchConfig, BranchState, FileConfig, FileState

logger = structlog.get_logger(__name__)


class PlanAction(StrEnum):
    CREATE = "create"
    REPLACE = "replace"
    UPDATE = "update"
    NOOP = "noop"


@dataclass(frozen=True)
class ApplyResult[S]:
    action: PlanAction
    state: S | None


def plan_branch(desired: BranchConfig, current: BranchState | None) -> PlanAction:
    if current is None:
        return PlanAction.CREATE
    if (desired.repository_id, desired.name, desired.ref) != (
        current.repository_id,
        current.name,
        current.ref,
    ):
        return PlanAction.REPLACE
    return PlanAction.NOOP


def plan_file(desired: FileConfig, current: FileState | None) -> PlanAction:
    if current is None:
        return PlanAction.CREATE
    if (desired.repository_id, desired.file, desired.branch) != (
        current.repository_id,
        current.file,
        current.branch,
    ):
        return PlanAction.REPLACE
    if desired.content != current.content:
        return PlanAction.UPDATE
    # commit_message is computed, only an explicit value counts as a change.
    # Either the message itself or the one update writes for it converges.
    if desired.commit_message and current.commit_message not in (
        desired.commit_message,
        update_commit_message(desired),
    ):
        return PlanAction.UPDATE
    return PlanAction.NOOP


def apply_branch(
    resource: GitRepositoryBranch,
    desired: BranchConfig,
    prior: BranchState | None,
    *,
    dry_run: bool = False,
) -> ApplyResult[BranchState]:
    current = None
    if prior is not None:
        current = resource.read(prior.id)
        if current is not None:
            # the source ref is not observable remotely
            current = current.model_copy(update={"ref": prior.ref})

    action = plan_branch(desired, current)
    logger.info(
        "Planned branch",
        action=str(action),
        repository_id=desired.repository_id,
        branch=desired.name,
        dry_run=dry_run,
    )
    if dry_run or action == PlanAction.NOOP:
        return ApplyResult(action, current)

    if action == PlanAction.REPLACE and current is not None:
        resource.delete(current.id)
    return ApplyResult(action, resource.create(desired))


def apply_file(
    resource: GitRepositoryFile,
    desired: FileConfig,
    prior: FileState | None,
    *,
    dry_run: bool = False,
) -> ApplyResult[FileState]:
    current = None
    if prior is not None:
        current = resource.read(prior.id, prior.branch)
        if current is not None:
            current = current.model_copy(
                update={"overwrite_on_create": prior.overwrite_on_create}
            )

    action = plan_file(desired, current)
    logger.info(
        "Planned file",
        action=str(action),
        repository_id=desired.repository_id,
        branch=desired.branch,
        file=desired.file,
        dry_run=dry_run,
    )
    if dry_run or action == PlanAction.NOOP:
        return ApplyResult(action, current)

    match action:
        case PlanAction.CREATE:
            state = resource.create(desired)
        case PlanAction.REPLACE:
            if current is not None:
                resource.delete(current.id, current.branch)
            state = resource.create(desired)
        case PlanAction.UPDATE:
            state = resource.update(desired)
    return ApplyResult(action, state)

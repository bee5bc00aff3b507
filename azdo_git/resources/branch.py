"""Lifecycle of a git repository branch.

A branch is created either as an orphan (a fresh initial commit pushed with
oldObjectId = zero) or at the commit a source ref resolves to. It is
immutable: any change forces a replacement. Deletion is a conditional ref
update from the current head to the zero object id.
"""

import structlog

from azdo_git.azure_devops_api.client import AzureDevOpsApiError
from azdo_git.azure_devops_api.models import (
    GitBranchStats,
    GitChange,
    GitCommitRef,
    GitItem,
    GitPush,
    GitRefUpdate,
    ItemContent,
    ItemContentType,
    VersionControlChangeType,
)
from azdo_git.exceptions import (
    RefUpdateError,
    ResourceNotFoundError,
    ResourceOperationError,
)
from azdo_git.resources.identifiers import (
    format_branch_id,
    parse_branch_id,
    short_branch_name,
    with_refs_heads_prefix,
)
from azdo_git.resources.models import BranchConfig, BranchState
from azdo_git.resources.protocol import GitApiProtocol
from azdo_git.resources.refs import ZERO_OBJECT_ID, resolve_source_commit, update_refs

logger = structlog.get_logger(__name__)

INITIAL_COMMIT_MESSAGE = "Initial commit."
INITIAL_FILE_PATH = "/readme.md"
INITIAL_FILE_CONTENT = "Branch initialized with azdo-git"


def branch_create_push(name: str) -> GitPush:
    """Push that creates ``name`` pointing to a new root commit."""
    return GitPush(
        ref_updates=[GitRefUpdate(name=name, old_object_id=ZERO_OBJECT_ID)],
        commits=[
            GitCommitRef(
                comment=INITIAL_COMMIT_MESSAGE,
                changes=[
                    GitChange(
                        change_type=VersionControlChangeType.ADD,
                        item=GitItem(path=INITIAL_FILE_PATH),
                        new_content=ItemContent(
                            content=INITIAL_FILE_CONTENT,
                            content_type=ItemContentType.RAW_TEXT,
                        ),
                    )
                ],
            )
        ],
    )


def _to_state(repository_id: str, name: str, stats: GitBranchStats) -> BranchState:
    return BranchState(
        id=format_branch_id(repository_id, name),
        name=name,
        repository_id=repository_id,
        default=bool(stats.is_base_version),
    )


class GitRepositoryBranch:
    """Create, read, delete and import git repository branches.

    Args:
        api: Remote Git operations (``AzureDevOpsGitApi`` or a test double)
    """

    def __init__(self, api: GitApiProtocol) -> None:
        self.api = api

    def create(self, config: BranchConfig) -> BranchState:
        ref_name = with_refs_heads_prefix(config.name)
        log = logger.bind(repository_id=config.repository_id, branch=config.name)

        if config.ref is None:
            try:
                self.api.create_push(config.repository_id, branch_create_push(ref_name))
            except AzureDevOpsApiError as e:
                raise ResourceOperationError(
                    f"Error initialising new branch: {e}"
                ) from e
            log.info("Initialised orphan branch")
        else:
            try:
                commit_id = resolve_source_commit(
                    self.api, config.repository_id, config.ref
                )
            except AzureDevOpsApiError as e:
                raise ResourceOperationError(
                    f"Error getting refs matching {config.ref!r}: {e}"
                ) from e
            try:
                update_refs(
                    self.api,
                    config.repository_id,
                    [
                        GitRefUpdate(
                            name=ref_name,
                            old_object_id=ZERO_OBJECT_ID,
                            new_object_id=commit_id,
                        )
                    ],
                )
            except (AzureDevOpsApiError, RefUpdateError) as e:
                raise ResourceOperationError(
                    f"Error creating branch {config.name!r} against ref {config.ref!r}: {e}"
                ) from e
            log.info("Created branch", ref=config.ref, commit_id=commit_id)

        state = self.read(format_branch_id(config.repository_id, config.name))
        if state is None:
            raise ResourceNotFoundError(
                f"Branch {config.name!r} not found right after creating it"
            )
        return state.model_copy(update={"ref": config.ref})

    def read(self, resource_id: str) -> BranchState | None:
        """Return the observed state, or None if the branch no longer exists."""
        repository_id, name = parse_branch_id(resource_id)
        try:
            stats = self.api.get_branch(repository_id, short_branch_name(name))
        except AzureDevOpsApiError as e:
            if e.is_not_found:
                logger.info(
                    "Branch not found, removing from state",
                    repository_id=repository_id,
                    branch=name,
                )
                return None
            raise ResourceOperationError(f"Error reading branch {name!r}: {e}") from e
        return _to_state(repository_id, name, stats)

    def delete(self, resource_id: str) -> None:
        repository_id, name = parse_branch_id(resource_id)
        try:
            stats = self.api.get_branch(repository_id, short_branch_name(name))
        except AzureDevOpsApiError as e:
            raise ResourceOperationError(
                f"Error getting latest commit of {name!r}: {e}"
            ) from e
        if stats.commit is None or not stats.commit.commit_id:
            raise ResourceOperationError(
                f"Error getting latest commit of {name!r}: no commit returned"
            )

        try:
            update_refs(
                self.api,
                repository_id,
                [
                    GitRefUpdate(
                        name=with_refs_heads_prefix(name),
                        old_object_id=stats.commit.commit_id,
                        new_object_id=ZERO_OBJECT_ID,
                    )
                ],
            )
        except (AzureDevOpsApiError, RefUpdateError) as e:
            raise ResourceOperationError(f"Error deleting branch {name!r}: {e}") from e
        logger.info("Deleted branch", repository_id=repository_id, branch=name)

    def import_state(self, resource_id: str) -> BranchState:
        """Import an existing branch by ``<repository_id>:<branch name>``."""
        repository_id, name = parse_branch_id(resource_id)
        try:
            stats = self.api.get_branch(repository_id, short_branch_name(name))
        except AzureDevOpsApiError as e:
            if e.is_not_found:
                raise ResourceNotFoundError(
                    f"Branch {name!r} not found in repository {repository_id}"
                ) from e
            raise ResourceOperationError(
                f"Error checking if branch {name!r} exists: {e}"
            ) from e
        return _to_state(repository_id, name, stats)

"""Lifecycle of a file in a git repository branch.

Every mutation is a push of a single commit on top of the branch head,
retried while other clients keep moving the head (see ``push_with_retry``).
"""

import structlog

from azdo_git.azure_devops_api.client import AzureDevOpsApiError
from azdo_git.azure_devops_api.models import (
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
    FileOverwriteRefusedError,
    InvalidResourceIdError,
    PushConflictError,
    ResourceNotFoundError,
    ResourceOperationError,
)
from azdo_git.resources.identifiers import (
    DEFAULT_BRANCH,
    format_file_id,
    parse_file_id,
    short_branch_name,
    split_repo_file_path,
    with_refs_heads_prefix,
)
from azdo_git.resources.models import FileConfig, FileState
from azdo_git.resources.protocol import GitApiProtocol
from azdo_git.resources.retry import DEFAULT_PUSH_TIMEOUT, push_with_retry

logger = structlog.get_logger(__name__)

# errors a push attempt may end with
_PUSH_ERRORS = (AzureDevOpsApiError, PushConflictError, ResourceNotFoundError)


def add_message(path: str) -> str:
    return f"Add {path}"


def update_message(path: str) -> str:
    return f"Update {path}"


def delete_message(path: str) -> str:
    return f"Delete {path}"


def update_commit_message(config: FileConfig) -> str:
    """Message of the commit ``update`` pushes for ``config``.

    The default add message is reworded, it would misdescribe an edit.
    """
    if not config.commit_message or config.commit_message == add_message(config.file):
        return update_message(config.file)
    return config.commit_message


def file_push(
    branch: str,
    old_object_id: str,
    change: GitChange,
    message: str,
) -> GitPush:
    return GitPush(
        ref_updates=[
            GitRefUpdate(
                name=with_refs_heads_prefix(branch), old_object_id=old_object_id
            )
        ],
        commits=[GitCommitRef(comment=message, changes=[change])],
    )


def _content_change(
    config: FileConfig, change_type: VersionControlChangeType
) -> GitChange:
    return GitChange(
        change_type=change_type,
        item=GitItem(path=config.file),
        new_content=ItemContent(
            content=config.content, content_type=ItemContentType.RAW_TEXT
        ),
    )


class GitRepositoryFile:
    """Create, read, update, delete and import files of a repository branch.

    Args:
        api: Remote Git operations (``AzureDevOpsGitApi`` or a test double)
        push_timeout: Deadline in seconds for retrying conflicting pushes
    """

    def __init__(
        self, api: GitApiProtocol, push_timeout: float = DEFAULT_PUSH_TIMEOUT
    ) -> None:
        self.api = api
        self.push_timeout = push_timeout

    def _check_branch_exists(self, repository_id: str, branch: str) -> None:
        try:
            self.api.get_branch(repository_id, short_branch_name(branch))
        except AzureDevOpsApiError as e:
            if e.is_not_found:
                raise ResourceNotFoundError(
                    f"Repository branch not found, repository ID: {repository_id}, "
                    f"branch: {branch}"
                ) from e
            raise ResourceOperationError(
                f"Error checking branch {branch!r} of repository {repository_id}: {e}"
            ) from e

    def _get_item(
        self,
        repository_id: str,
        path: str,
        branch: str,
        *,
        include_content: bool = False,
    ) -> GitItem | None:
        try:
            return self.api.get_item(
                repository_id,
                path,
                version=short_branch_name(branch),
                include_content=include_content,
            )
        except AzureDevOpsApiError as e:
            if e.is_not_found:
                return None
            raise ResourceOperationError(
                f"Query repository item failed, repository ID: {repository_id}, "
                f"branch: {branch}, file: {path}: {e}"
            ) from e

    def _push(
        self, repository_id: str, branch: str, change: GitChange, message: str
    ) -> None:
        push_with_retry(
            self.api,
            repository_id,
            branch,
            lambda old_object_id: file_push(branch, old_object_id, change, message),
            timeout=self.push_timeout,
        )

    def _read_after_write(self, config: FileConfig) -> FileState:
        state = self.read(
            format_file_id(config.repository_id, config.file), config.branch
        )
        if state is None:
            raise ResourceNotFoundError(
                f"File {config.file!r} not found on branch {config.branch} "
                "after pushing it"
            )
        return state.model_copy(
            update={"overwrite_on_create": config.overwrite_on_create}
        )

    def create(self, config: FileConfig) -> FileState:
        """Add the file, or edit it if it exists and overwriting is allowed.

        Raises:
            ResourceNotFoundError: If the branch does not exist
            FileOverwriteRefusedError: If the file exists and
                ``overwrite_on_create`` is not set; nothing is pushed
        """
        self._check_branch_exists(config.repository_id, config.branch)

        change_type = VersionControlChangeType.ADD
        if self._get_item(config.repository_id, config.file, config.branch) is not None:
            if not config.overwrite_on_create:
                raise FileOverwriteRefusedError(config.file)
            change_type = VersionControlChangeType.EDIT

        message = config.commit_message or add_message(config.file)
        try:
            self._push(
                config.repository_id,
                config.branch,
                _content_change(config, change_type),
                message,
            )
        except _PUSH_ERRORS as e:
            raise ResourceOperationError(
                f"Create repository file failed, repository ID: {config.repository_id}, "
                f"branch: {config.branch}, file: {config.file}: {e}"
            ) from e
        logger.info(
            "Pushed file",
            repository_id=config.repository_id,
            branch=config.branch,
            file=config.file,
            change_type=str(change_type),
        )
        return self._read_after_write(config)

    def read(self, resource_id: str, branch: str = DEFAULT_BRANCH) -> FileState | None:
        """Return the observed state, or None if the file no longer exists."""
        repository_id, path = split_repo_file_path(resource_id)
        if not repository_id or not path:
            raise InvalidResourceIdError(
                f"{resource_id!r}, expected <repository>/<file path>"
            )
        self._check_branch_exists(repository_id, branch)

        item = self._get_item(repository_id, path, branch, include_content=True)
        if item is None:
            logger.info(
                "File not found, removing from state",
                repository_id=repository_id,
                branch=branch,
                file=path,
            )
            return None

        commit_message = None
        if item.commit_id:
            try:
                commit = self.api.get_commit(repository_id, item.commit_id)
            except AzureDevOpsApiError as e:
                raise ResourceOperationError(
                    f"Get repository file commit failed, repository ID: {repository_id}, "
                    f"branch: {branch}, file: {path}: {e}"
                ) from e
            commit_message = commit.comment

        return FileState(
            id=format_file_id(repository_id, path),
            repository_id=repository_id,
            file=path,
            content=item.content or "",
            branch=branch,
            commit_message=commit_message,
        )

    def update(self, config: FileConfig) -> FileState:
        self._check_branch_exists(config.repository_id, config.branch)

        try:
            self._push(
                config.repository_id,
                config.branch,
                _content_change(config, VersionControlChangeType.EDIT),
                update_commit_message(config),
            )
        except _PUSH_ERRORS as e:
            raise ResourceOperationError(
                f"Update repository file failed, repository ID: {config.repository_id}, "
                f"branch: {config.branch}, file: {config.file}: {e}"
            ) from e
        logger.info(
            "Updated file",
            repository_id=config.repository_id,
            branch=config.branch,
            file=config.file,
        )
        return self._read_after_write(config)

    def delete(self, resource_id: str, branch: str = DEFAULT_BRANCH) -> None:
        repository_id, path = split_repo_file_path(resource_id)
        if not repository_id or not path:
            raise InvalidResourceIdError(
                f"{resource_id!r}, expected <repository>/<file path>"
            )
        change = GitChange(
            change_type=VersionControlChangeType.DELETE, item=GitItem(path=path)
        )
        try:
            self._push(repository_id, branch, change, delete_message(path))
        except _PUSH_ERRORS as e:
            raise ResourceOperationError(
                f"Failed to destroy the repository file, repository ID: {repository_id}, "
                f"branch: {branch}, file: {path}: {e}"
            ) from e
        logger.info(
            "Deleted file", repository_id=repository_id, branch=branch, file=path
        )

    def import_state(self, resource_id: str) -> FileState:
        """Import ``<repository_id>/<file path>[:<branch>]``."""
        repository_id, path, branch = parse_file_id(resource_id)
        try:
            self.api.get_item(repository_id, path, version=short_branch_name(branch))
        except AzureDevOpsApiError as e:
            if e.is_not_found:
                raise ResourceNotFoundError(
                    f"Repository file not found, repository ID: {repository_id}, "
                    f"branch: {branch}, file: {path}: {e}"
                ) from e
            raise ResourceOperationError(
                f"Query repository item failed, repository ID: {repository_id}, "
                f"branch: {branch}, file: {path}: {e}"
            ) from e

        state = self.read(format_file_id(repository_id, path), branch)
        if state is None:
            raise ResourceNotFoundError(
                f"Repository file not found, repository ID: {repository_id}, "
                f"branch: {branch}, file: {path}"
            )
        return state

"""Protocol of the remote Git operations the resource orchestrators consume."""

from typing import Protocol

from azdo_git.azure_devops_api.models import (
    GitBranchStats,
    GitCommit,
    GitCommitRef,
    GitItem,
    GitPush,
    GitRef,
    GitRefUpdate,
    GitRefUpdateResult,
    GitVersionType,
)


class GitApiProtocol(Protocol):
    """Remote surface injected into GitRepositoryBranch and GitRepositoryFile.

    ``AzureDevOpsGitApi`` implements it; tests pass a mock.
    """

    def get_branch(self, repository_id: str, name: str) -> GitBranchStats: ...

    def get_refs(
        self,
        repository_id: str,
        filter: str | None = None,  # noqa: A002
        top: int | None = None,
        *,
        peel_tags: bool = False,
    ) -> list[GitRef]: ...

    def update_refs(
        self, repository_id: str, ref_updates: list[GitRefUpdate]
    ) -> list[GitRefUpdateResult]: ...

    def get_item(
        self,
        repository_id: str,
        path: str,
        version: str | None = None,
        version_type: GitVersionType = GitVersionType.BRANCH,
        *,
        include_content: bool = False,
    ) -> GitItem: ...

    def get_commits(
        self, repository_id: str, item_version: str, top: int | None = None
    ) -> list[GitCommitRef]: ...

    def get_commit(self, repository_id: str, commit_id: str) -> GitCommit: ...

    def create_push(self, repository_id: str, push: GitPush) -> GitPush: ...

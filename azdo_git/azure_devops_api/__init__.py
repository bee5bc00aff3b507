"""Azure DevOps Git API client and models.

Layer 1 (Pure Communication):
- AzureDevOpsGitApi: Stateless wrapper of the SDK GitClient with hooks for
  metrics and logging
- Models: the SDK models for refs, branches, items, commits and pushes

Example:
    >>> from azdo_git.azure_devops_api import AzureDevOpsGitApi
    >>> api = AzureDevOpsGitApi(org_service_url="https://dev.azure.com/org", token="...")
    >>> refs = api.get_refs("b9e7...", filter="heads/main", top=1, peel_tags=True)
"""

from azdo_git.azure_devops_api.client import (
    TIMEOUT,
    AzureDevOpsApiCallContext,
    AzureDevOpsApiError,
    AzureDevOpsGitApi,
)
from azdo_git.azure_devops_api.models import (
    GitBranchStats,
    GitChange,
    GitCommit,
    GitCommitRef,
    GitItem,
    GitPush,
    GitRef,
    GitRefUpdate,
    GitRefUpdateResult,
    GitRefUpdateStatus,
    GitVersionType,
    ItemContent,
    ItemContentType,
    VersionControlChangeType,
)

__all__ = [
    "TIMEOUT",
    "AzureDevOpsApiCallContext",
    "AzureDevOpsApiError",
    "AzureDevOpsGitApi",
    "GitBranchStats",
    "GitChange",
    "GitCommit",
    "GitCommitRef",
    "GitItem",
    "GitPush",
    "GitRef",
    "GitRefUpdate",
    "GitRefUpdateResult",
    "GitRefUpdateStatus",
    "GitVersionType",
    "ItemContent",
    "ItemContentType",
    "VersionControlChangeType",
]

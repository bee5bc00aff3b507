"""Models of the Azure DevOps Git API.

The wire models are the msrest models of the azure-devops SDK. Enumerations
the SDK types as plain strings are spelled out here.
"""

from enum import StrEnum

from azure.devops.v7_0.git.models import (
    GitBranchStats,
    GitCommit,
    GitCommitRef,
    GitItem,
    GitPush,
    GitQueryCommitsCriteria,
    GitRef,
    GitRefUpdate,
    GitRefUpdateResult,
    GitVersionDescriptor,
    ItemContent,
)
# The SDK names its Git change model `Change`; `GitChange` is this package's name for it.
from azure.devops.v7_0.git.models import Change as GitChange


class GitRefUpdateStatus(StrEnum):
    """Result status of a single ref update, as reported by the service."""

    SUCCEEDED = "succeeded"
    FORCE_PUSH_REQUIRED = "forcePushRequired"
    STALE_OLD_OBJECT_ID = "staleOldObjectId"
    INVALID_REF_NAME = "invalidRefName"
    UNPROCESSED = "unprocessed"
    UNRESOLVABLE_TO_COMMIT = "unresolvableToCommit"
    WRITE_PERMISSION_REQUIRED = "writePermissionRequired"
    MANAGE_NOTE_PERMISSION_REQUIRED = "manageNotePermissionRequired"
    CREATE_BRANCH_PERMISSION_REQUIRED = "createBranchPermissionRequired"
    CREATE_TAG_PERMISSION_REQUIRED = "createTagPermissionRequired"
    REJECTED_BY_PLUGIN = "rejectedByPlugin"
    LOCKED = "locked"
    REF_NAME_CONFLICT = "refNameConflict"
    REJECTED_BY_POLICY = "rejectedByPolicy"
    SUCCEEDED_NON_EXISTENT_REF = "succeededNonExistentRef"
    SUCCEEDED_CORRUPT_REF = "succeededCorruptRef"


class VersionControlChangeType(StrEnum):
    ADD = "add"
    EDIT = "edit"
    DELETE = "delete"


class ItemContentType(StrEnum):
    RAW_TEXT = "rawtext"
    BASE64_ENCODED = "base64encoded"


class GitVersionType(StrEnum):
    BRANCH = "branch"
    TAG = "tag"
    COMMIT = "commit"


__all__ = [
    "GitBranchStats",
    "GitChange",
    "GitCommit",
    "GitCommitRef",
    "GitItem",
    "GitPush",
    "GitQueryCommitsCriteria",
    "GitRef",
    "GitRefUpdate",
    "GitRefUpdateResult",
    "GitRefUpdateStatus",
    "GitVersionDescriptor",
    "GitVersionType",
    "ItemContent",
    "ItemContentType",
    "VersionControlChangeType",
]

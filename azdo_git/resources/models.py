"""Desired configuration and observed state of the managed resources."""

import uuid
from typing import Annotated

from pydantic import AfterValidator, BaseModel, Field

from azdo_git.resources.identifiers import DEFAULT_BRANCH


def _validate_uuid(value: str) -> str:
    try:
        uuid.UUID(value)
    except ValueError as e:
        raise ValueError(f"expected repository_id to be a UUID, got {value!r}") from e
    return value


RepositoryId = Annotated[str, AfterValidator(_validate_uuid)]


class BranchConfig(BaseModel, frozen=True):
    """Desired git repository branch.

    All attributes force a replacement when changed.
    """

    name: str = Field(..., min_length=1, description="The name of this branch")
    repository_id: RepositoryId = Field(
        ..., description="The uuid of the repository where the branch lives"
    )
    ref: str | None = Field(
        default=None,
        min_length=1,
        description="The ref which the branch is created from. "
        "If not given an orphan branch is initialised.",
    )


class BranchState(BaseModel, frozen=True):
    id: str
    name: str
    repository_id: str
    ref: str | None = None
    default: bool = Field(
        default=False,
        description="True if the branch is the default branch of the repository",
    )


class FileConfig(BaseModel, frozen=True):
    """Desired file in a git repository branch.

    ``repository_id``, ``file`` and ``branch`` force a replacement when changed.
    """

    repository_id: RepositoryId = Field(..., description="The repository id")
    file: str = Field(..., min_length=1, description="The file path to manage")
    content: str = Field(..., description="The file's content")
    branch: str = Field(default=DEFAULT_BRANCH, min_length=1)
    commit_message: str | None = Field(
        default=None,
        description="The commit message when creating or updating the file",
    )
    overwrite_on_create: bool = Field(
        default=False, description="Enable overwriting existing files on create"
    )


class FileState(BaseModel, frozen=True):
    id: str
    repository_id: str
    file: str
    content: str
    branch: str = DEFAULT_BRANCH
    commit_message: str | None = None
    overwrite_on_create: bool = False

"""Composite resource identifiers and branch name normalization.

Branch ids look like ``<repository_id>:<branch name>``, file ids like
``<repository_id>/<file path>`` with an optional ``:<branch>`` suffix on
import.
"""

from azdo_git.exceptions import InvalidResourceIdError

REFS_HEADS_PREFIX = "refs/heads/"
DEFAULT_BRANCH = "refs/heads/master"


def with_refs_heads_prefix(branch_name: str) -> str:
    if branch_name.startswith(REFS_HEADS_PREFIX):
        return branch_name
    return REFS_HEADS_PREFIX + branch_name


def short_branch_name(branch: str) -> str:
    """Strip ``refs/heads/``, some endpoints only accept the plain name."""
    return branch.removeprefix(REFS_HEADS_PREFIX)


def format_branch_id(repository_id: str, name: str) -> str:
    return f"{repository_id}:{name}"


def parse_branch_id(resource_id: str) -> tuple[str, str]:
    """Split ``<repository_id>:<branch name>``.

    Examples:
        >>> parse_branch_id("a-repo:a-branch")
        ('a-repo', 'a-branch')

    Raises:
        InvalidResourceIdError: If either part is missing
    """
    repository_id, sep, name = resource_id.partition(":")
    if not sep or not repository_id or not name:
        raise InvalidResourceIdError(
            f"{resource_id!r}, expected <repository id>:<branch name>"
        )
    return repository_id, name


def format_file_id(repository_id: str, path: str) -> str:
    return f"{repository_id}/{path}"


def split_repo_file_path(value: str) -> tuple[str, str]:
    repository_id, _, path = value.partition("/")
    return repository_id, path


def parse_file_id(resource_id: str) -> tuple[str, str, str]:
    """Split ``<repository_id>/<file path>[:<branch>]``.

    The branch defaults to ``refs/heads/master``.

    Examples:
        >>> parse_file_id("a-repo/dir/file.txt:refs/heads/dev")
        ('a-repo', 'dir/file.txt', 'refs/heads/dev')

    Raises:
        InvalidResourceIdError: On more than one ``:<branch>`` suffix or a
            missing repository id or path
    """
    parts = resource_id.split(":")
    if len(parts) > 2:  # noqa: PLR2004
        raise InvalidResourceIdError(
            f"{resource_id!r}, supplied id must be written as <repository>/<file path> "
            '(when branch is "master") or <repository>/<file path>:<branch>'
        )
    branch = parts[1] if len(parts) == 2 else DEFAULT_BRANCH  # noqa: PLR2004
    repository_id, path = split_repo_file_path(parts[0])
    if not repository_id or not path or not branch:
        raise InvalidResourceIdError(
            f"{resource_id!r}, expected <repository>/<file path>[:<branch>]"
        )
    return repository_id, path, branch

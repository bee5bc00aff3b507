"""Source ref resolution and conditional (compare-and-swap) ref updates."""

import structlog

from azdo_git.azure_devops_api.models import GitRefUpdate, GitRefUpdateResult
from azdo_git.exceptions import RefNotFoundError, RefUpdateError, ResourceNotFoundError
from azdo_git.resources.identifiers import short_branch_name
from azdo_git.resources.protocol import GitApiProtocol

logger = structlog.get_logger(__name__)

# objectId of a ref that does not exist
ZERO_OBJECT_ID = "0" * 40


def resolve_source_commit(api: GitApiProtocol, repository_id: str, ref: str) -> str:
    """Resolve a full ref name (``refs/heads/x``, ``refs/tags/y``) to a commit id.

    The service returns refs matching the filter as a prefix, shortest name
    first. Only an exact match of the first result is accepted, otherwise
    ``refs/heads/foo`` would silently resolve to ``refs/heads/foobar``.
    Annotated tags resolve to their peeled commit.

    Raises:
        RefNotFoundError: If no ref matches exactly
    """
    refs = api.get_refs(
        repository_id, filter=ref.removeprefix("refs/"), top=1, peel_tags=True
    )
    if not refs:
        raise RefNotFoundError(f"No refs found that match {ref!r}.")

    found = refs[0]
    if found.name is None:
        raise RefNotFoundError(
            "Got unexpected GetRefs response, a ref without a name was returned."
        )
    if found.name != ref:
        raise RefNotFoundError(f"Ref {ref!r} not found, closest match is {found.name!r}.")

    commit_id = found.peeled_object_id or found.object_id
    if not commit_id:
        raise RefNotFoundError("GetRefs response doesn't have a valid commit id.")
    logger.debug("Resolved source ref", ref=ref, commit_id=commit_id)
    return commit_id


def update_refs(
    api: GitApiProtocol, repository_id: str, ref_updates: list[GitRefUpdate]
) -> list[GitRefUpdateResult]:
    """Apply ref updates and fail on the first unsuccessful result.

    Raises:
        RefUpdateError: Carrying the remote update status, e.g. ``invalidRefName``
    """
    results = api.update_refs(repository_id, ref_updates)
    for result in results:
        if not result.success:
            raise RefUpdateError(str(result.update_status), name=result.name)
    return results


def get_last_commit_id(api: GitApiProtocol, repository_id: str, branch: str) -> str:
    """Return the current head commit of ``branch``."""
    commits = api.get_commits(repository_id, short_branch_name(branch), top=1)
    if not commits or not commits[0].commit_id:
        raise ResourceNotFoundError(
            f"No commits found on branch {branch!r} of repository {repository_id}"
        )
    return commits[0].commit_id

"""Push retry protocol for concurrent writers on the same branch."""

from collections.abc import Callable

import structlog

from azdo_git.azure_devops_api.client import AzureDevOpsApiError
from azdo_git.azure_devops_api.models import GitPush
from azdo_git.exceptions import PushConflictError
from azdo_git.hooks import Hooks, RetryConfig, invoke_with_hooks
from azdo_git.resources.protocol import GitApiProtocol
from azdo_git.resources.refs import get_last_commit_id

logger = structlog.get_logger(__name__)

DEFAULT_PUSH_TIMEOUT = 60.0


def push_with_retry(
    api: GitApiProtocol,
    repository_id: str,
    branch: str,
    build_push: Callable[[str], GitPush],
    timeout: float = DEFAULT_PUSH_TIMEOUT,
) -> GitPush:
    """Push on top of the current branch head, retrying lost races until ``timeout``.

    Every attempt re-resolves the head commit and passes it to ``build_push``
    as the expected oldObjectId. Only conflicts (the head moved in between)
    are retried; any other error aborts at once. After the deadline the last
    PushConflictError is raised.
    """

    def _log_retry(attempt: int) -> None:
        logger.info(
            "Branch was updated by another client, retrying push",
            repository_id=repository_id,
            branch=branch,
            attempt=attempt,
        )

    @invoke_with_hooks(
        hooks=Hooks(
            retry_hooks=[_log_retry],
            retry_config=RetryConfig(
                on=PushConflictError, attempts=None, timeout=timeout
            ),
        )
    )
    def _push() -> GitPush:
        old_object_id = get_last_commit_id(api, repository_id, branch)
        try:
            return api.create_push(repository_id, build_push(old_object_id))
        except AzureDevOpsApiError as e:
            if e.is_stale_ref:
                raise PushConflictError(str(e)) from e
            raise

    return _push()

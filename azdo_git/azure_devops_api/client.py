"""Azure DevOps Git API client with hook system.

Layer 1 (Pure Communication): a stateless wrapper around the azure-devops
SDK ``GitClient`` exposing exactly the Git operations the resource
orchestrators need. Metrics, request logs and latency tracking are attached
via hooks. SDK errors are translated into ``AzureDevOpsApiError``.
"""

import contextvars
import re
import time
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from http import HTTPStatus

import structlog
from azure.devops.exceptions import (
    AzureDevOpsAuthenticationError,
    AzureDevOpsClientError,
    AzureDevOpsServiceError,
)
from azure.devops.v7_0.git.git_client import GitClient
from msrest.authentication import BasicAuthentication
from prometheus_client import Counter, Histogram

from azdo_git.azure_devops_api.models import (
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
    GitVersionType,
)
from azdo_git.hooks import Hooks, invoke_with_hooks, with_hooks
from azdo_git.metrics import DEFAULT_BUCKETS_EXTERNAL_API

logger = structlog.get_logger(__name__)

azure_devops_request = Counter(
    "azdo_git_external_api_azure_devops_requests_total",
    "Total number of Azure DevOps API requests",
    ["method", "verb"],
)

azure_devops_request_duration = Histogram(
    "azdo_git_external_api_azure_devops_request_duration_seconds",
    "Azure DevOps API request duration in seconds",
    ["method", "verb"],
    buckets=DEFAULT_BUCKETS_EXTERNAL_API,
)

# Local storage for latency tracking (tuple stack to support nested calls)
_latency_tracker: contextvars.ContextVar[tuple[float, ...]] = contextvars.ContextVar(
    f"{__name__}.latency_tracker", default=()
)

TIMEOUT = 30

# Marker of a lost compare-and-swap race in the service's error message
STALE_REF_MESSAGE = "has already been updated by another client"
STALE_REF_TYPE_KEY = "GitReferenceStaleException"

# typeKeys the service answers 404 with for repositories, branches and items
NOT_FOUND_TYPE_KEYS = frozenset(
    {
        "GitRepositoryNotFoundException",
        "GitItemNotFoundException",
        "GitUnresolvableToCommitException",
        "GitCommitDoesNotExistException",
    }
)

# Non wrapped SDK errors only carry the status code in their message
_STATUS_CODE_RE = re.compile(r"Operation returned a (\d{3}) status code")


class AzureDevOpsApiError(Exception):
    """Failed Azure DevOps API call.

    Attributes:
        message: ``message`` of the service's error, or the SDK error text
        type_key: ``typeKey`` of the service's error, e.g. GitReferenceStaleException
        status_code: HTTP status code, if the SDK error exposes one
    """

    def __init__(
        self,
        message: str,
        type_key: str | None = None,
        status_code: int | None = None,
    ) -> None:
        self.message = message
        self.type_key = type_key
        self.status_code = status_code
        super().__init__(message)

    @property
    def is_not_found(self) -> bool:
        return (
            self.status_code == HTTPStatus.NOT_FOUND
            or self.type_key in NOT_FOUND_TYPE_KEYS
        )

    @property
    def is_stale_ref(self) -> bool:
        """True if a ref update lost a race against another client."""
        return self.type_key == STALE_REF_TYPE_KEY or STALE_REF_MESSAGE in self.message

    @classmethod
    def from_sdk_error(cls, error: AzureDevOpsClientError) -> "AzureDevOpsApiError":
        if isinstance(error, AzureDevOpsServiceError):
            return cls(str(error.message), type_key=error.type_key)
        if isinstance(error, AzureDevOpsAuthenticationError):
            return cls(str(error), status_code=HTTPStatus.UNAUTHORIZED)
        match = _STATUS_CODE_RE.search(str(error))
        return cls(str(error), status_code=int(match.group(1)) if match else None)


@contextmanager
def _sdk_errors() -> Iterator[None]:
    try:
        yield
    except AzureDevOpsClientError as e:
        raise AzureDevOpsApiError.from_sdk_error(e) from e


@dataclass(frozen=True)
class AzureDevOpsApiCallContext:
    """Context information passed to API call hooks.

    Attributes:
        method: API method name (e.g., "refs.list")
        verb: HTTP verb (e.g., "GET")
        id: Azure DevOps organization URL
    """

    method: str
    verb: str
    id: str


def _metrics_hook(context: AzureDevOpsApiCallContext) -> None:
    """Built-in Prometheus metrics hook."""
    azure_devops_request.labels(context.method, context.verb).inc()


def _latency_start_hook(_context: AzureDevOpsApiCallContext) -> None:
    """Built-in hook to start latency measurement."""
    _latency_tracker.set((*_latency_tracker.get(), time.perf_counter()))


def _latency_end_hook(context: AzureDevOpsApiCallContext) -> None:
    """Built-in hook to record latency measurement."""
    stack = _latency_tracker.get()
    start_time = stack[-1]
    _latency_tracker.set(stack[:-1])
    duration = time.perf_counter() - start_time
    azure_devops_request_duration.labels(context.method, context.verb).observe(
        duration
    )


def _request_log_hook(context: AzureDevOpsApiCallContext) -> None:
    """Built-in hook for logging API requests."""
    logger.debug("API request", method=context.method, verb=context.verb, id=context.id)


@with_hooks(
    hooks=Hooks(
        pre_hooks=[
            _metrics_hook,
            _request_log_hook,
            _latency_start_hook,
        ],
        post_hooks=[_latency_end_hook],
    )
)
class AzureDevOpsGitApi:
    """Stateless Azure DevOps Git API client with hook system.

    All repository scoped calls address the repository by its id, so no
    project is needed.

    Example:
        >>> api = AzureDevOpsGitApi(
        ...     org_service_url="https://dev.azure.com/my-org", token="..."
        ... )
        >>> api.get_branch("b9e7...", "main").is_base_version
        True
    """

    # Set by @with_hooks decorator
    _hooks: Hooks

    def __init__(
        self,
        org_service_url: str,
        token: str,
        timeout: int = TIMEOUT,
        max_retries: int = 3,
        hooks: Hooks | None = None,  # noqa: ARG002 - Handled by @with_hooks decorator
    ) -> None:
        """Initialize Azure DevOps Git API client.

        Args:
            org_service_url: Organization URL (e.g., "https://dev.azure.com/my-org")
            token: Personal access token
            timeout: API request timeout in seconds (default: 30)
            max_retries: Number of transport retries of the SDK's retry policy
            hooks: Optional custom hooks to merge with built-in hooks.
        """
        self.org_service_url = org_service_url.rstrip("/")
        self._client = GitClient(
            base_url=self.org_service_url, creds=BasicAuthentication("", token)
        )
        self._client.config.connection.timeout = timeout
        self._client.config.retry_policy.retries = max_retries

    @invoke_with_hooks(
        lambda self: AzureDevOpsApiCallContext(
            method="branches.get", verb="GET", id=self.org_service_url
        )
    )
    def get_branch(self, repository_id: str, name: str) -> GitBranchStats:
        """Get statistics of a single branch.

        Args:
            repository_id: Repository id
            name: Branch name without the ``refs/heads/`` prefix

        Returns:
            GitBranchStats incl. the head commit and the is-default flag
        """
        with _sdk_errors():
            return self._client.get_branch(repository_id, name)

    @invoke_with_hooks(
        lambda self: AzureDevOpsApiCallContext(
            method="refs.list", verb="GET", id=self.org_service_url
        )
    )
    def get_refs(
        self,
        repository_id: str,
        filter: str | None = None,  # noqa: A002
        top: int | None = None,
        *,
        peel_tags: bool = False,
    ) -> list[GitRef]:
        """List refs whose name starts with ``refs/<filter>``.

        The service orders matches from the shortest to the longest name.

        Args:
            repository_id: Repository id
            filter: Ref name prefix without the leading ``refs/``
            top: Maximum number of refs to return
            peel_tags: Resolve annotated tags to their commit (peeled_object_id)
        """
        with _sdk_errors():
            response = self._client.get_refs(
                repository_id, filter=filter, peel_tags=peel_tags, top=top
            )
        # a page of refs plus the continuation token
        return list(response.value or [])

    @invoke_with_hooks(
        lambda self: AzureDevOpsApiCallContext(
            method="refs.update", verb="POST", id=self.org_service_url
        )
    )
    def update_refs(
        self, repository_id: str, ref_updates: list[GitRefUpdate]
    ) -> list[GitRefUpdateResult]:
        """Create, update or delete refs (compare-and-swap on old_object_id).

        A transport level success does not mean every update succeeded,
        check ``success`` of each result.
        """
        with _sdk_errors():
            return self._client.update_refs(ref_updates, repository_id)

    @invoke_with_hooks(
        lambda self: AzureDevOpsApiCallContext(
            method="items.get", verb="GET", id=self.org_service_url
        )
    )
    def get_item(
        self,
        repository_id: str,
        path: str,
        version: str | None = None,
        version_type: GitVersionType = GitVersionType.BRANCH,
        *,
        include_content: bool = False,
    ) -> GitItem:
        """Get a single item (file) of the repository.

        Args:
            repository_id: Repository id
            path: Item path
            version: Branch name (without prefix), tag or commit id
            version_type: How ``version`` is interpreted
            include_content: Return the item's content as well
        """
        version_descriptor = None
        if version is not None:
            version_descriptor = GitVersionDescriptor(
                version=version, version_type=str(version_type)
            )
        with _sdk_errors():
            return self._client.get_item(
                repository_id,
                path,
                version_descriptor=version_descriptor,
                include_content=include_content,
            )

    @invoke_with_hooks(
        lambda self: AzureDevOpsApiCallContext(
            method="commits.list", verb="GET", id=self.org_service_url
        )
    )
    def get_commits(
        self, repository_id: str, item_version: str, top: int | None = None
    ) -> list[GitCommitRef]:
        """List commits reachable from branch ``item_version``, newest first."""
        search_criteria = GitQueryCommitsCriteria(
            item_version=GitVersionDescriptor(
                version=item_version, version_type=str(GitVersionType.BRANCH)
            ),
            top=top,
        )
        with _sdk_errors():
            return self._client.get_commits(repository_id, search_criteria)

    @invoke_with_hooks(
        lambda self: AzureDevOpsApiCallContext(
            method="commits.get", verb="GET", id=self.org_service_url
        )
    )
    def get_commit(self, repository_id: str, commit_id: str) -> GitCommit:
        with _sdk_errors():
            return self._client.get_commit(commit_id, repository_id)

    @invoke_with_hooks(
        lambda self: AzureDevOpsApiCallContext(
            method="pushes.create", verb="POST", id=self.org_service_url
        )
    )
    def create_push(self, repository_id: str, push: GitPush) -> GitPush:
        """Push commits and update refs atomically.

        Raises:
            AzureDevOpsApiError: ``is_stale_ref`` is set if the ref moved since
                the given old_object_id
        """
        with _sdk_errors():
            return self._client.create_push(push, repository_id)

"""Resource lifecycle orchestration for git repository branches and files.

Layer 2: composes the Layer 1 API client (injected via ``GitApiProtocol``)
into Create / Read / Update / Delete / Import operations.
"""

from azdo_git.resources.branch import GitRepositoryBranch
from azdo_git.resources.file import GitRepositoryFile
from azdo_git.resources.identifiers import (
    DEFAULT_BRANCH,
    format_branch_id,
    format_file_id,
    parse_branch_id,
    parse_file_id,
    short_branch_name,
    with_refs_heads_prefix,
)
from azdo_git.resources.models import BranchConfig, BranchState, FileConfig, FileState
from azdo_git.resources.planner import (
    ApplyResult,
    PlanAction,
    apply_branch,
    apply_file,
    plan_branch,
    plan_file,
)
from azdo_git.resources.protocol import GitApiProtocol
from azdo_git.resources.refs import ZERO_OBJECT_ID, resolve_source_commit, update_refs
from azdo_git.resources.retry import push_with_retry

__all__ = [
    "DEFAULT_BRANCH",
    "ZERO_OBJECT_ID",
    "ApplyResult",
    "BranchConfig",
    "BranchState",
    "FileConfig",
    "FileState",
    "GitApiProtocol",
    "GitRepositoryBranch",
    "GitRepositoryFile",
    "PlanAction",
    "apply_branch",
    "apply_file",
    "format_branch_id",
    "format_file_id",
    "parse_branch_id",
    "parse_file_id",
    "plan_branch",
    "plan_file",
    "push_with_retry",
    "resolve_source_commit",
    "short_branch_name",
    "update_refs",
    "with_refs_heads_prefix",
]

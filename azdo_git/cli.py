import functools
from collections.abc import Callable
from pathlib import Path
from typing import Any

import click
from pydantic import BaseModel, ValidationError

from azdo_git.azure_devops_api import AzureDevOpsApiError, AzureDevOpsGitApi
from azdo_git.config import settings
from azdo_git.exceptions import AzureDevOpsGitError
from azdo_git.logger import setup_logging
from azdo_git.resources import (
    DEFAULT_BRANCH,
    BranchConfig,
    BranchState,
    FileConfig,
    FileState,
    GitRepositoryBranch,
    GitRepositoryFile,
    apply_branch,
    apply_file,
)


def log_level(function: Callable) -> Callable:
    function = click.option(
        "--log-level",
        help="log-level of the command. Defaults to AZDO_LOG_LEVEL or INFO.",
        type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]),
    )(function)
    return function


def dry_run(function: Callable) -> Callable:
    help_msg = (
        "If `true`, it will only print the planned action "
        "that would be performed, without executing it."
    )

    function = click.option("--dry-run/--no-dry-run", default=False, help=help_msg)(
        function
    )
    return function


def repository_id(function: Callable) -> Callable:
    function = click.option(
        "--repository-id", required=True, help="The uuid of the repository."
    )(function)
    return function


def state_file(function: Callable) -> Callable:
    help_msg = "JSON file holding the resource state. Read before and written after apply."
    function = click.option(
        "--state",
        "state_path",
        required=True,
        type=click.Path(dir_okay=False, path_type=Path),
        help=help_msg,
    )(function)
    return function


def file_options(*, with_overwrite: bool = True) -> Callable:
    def f(function: Callable) -> Callable:
        if with_overwrite:
            function = click.option(
                "--overwrite-on-create",
                is_flag=True,
                default=False,
                help="Overwrite the file if it already exists.",
            )(function)
        function = click.option(
            "--commit-message", default=None, help="Commit message of the push."
        )(function)
        function = click.option(
            "--branch",
            default=DEFAULT_BRANCH,
            show_default=True,
            help="Branch holding the file.",
        )(function)
        function = click.option(
            "--content-file",
            type=click.File("r"),
            default=None,
            help="Read the file content from this file ('-' for stdin).",
        )(function)
        function = click.option(
            "--content", default=None, help="The file's content."
        )(function)
        function = click.option(
            "--file", "path", required=True, help="The file path to manage."
        )(function)
        return repository_id(function)

    return f


def handle_errors(function: Callable) -> Callable:
    @functools.wraps(function)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return function(*args, **kwargs)
        except (AzureDevOpsGitError, AzureDevOpsApiError, ValidationError) as e:
            raise click.ClickException(str(e)) from e

    return wrapper


def _echo_state(state: BaseModel | None) -> None:
    click.echo("null" if state is None else state.model_dump_json(indent=2))


def _read_content(content: str | None, content_file: Any) -> str:
    if content_file is not None:
        return content_file.read()
    if content is None:
        raise click.UsageError("Either --content or --content-file is required.")
    return content


def _load_state[S: BaseModel](path: Path, model: type[S]) -> S | None:
    if not path.exists() or not path.read_text().strip():
        return None
    return model.model_validate_json(path.read_text())


def _write_state(path: Path, state: BaseModel | None) -> None:
    path.write_text("" if state is None else state.model_dump_json(indent=2) + "\n")


def _file_config(
    repository_id: str,
    path: str,
    content: str | None,
    content_file: Any,
    branch: str,
    commit_message: str | None,
    overwrite_on_create: bool = False,  # noqa: FBT001, FBT002
) -> FileConfig:
    return FileConfig(
        repository_id=repository_id,
        file=path,
        content=_read_content(content, content_file),
        branch=branch,
        commit_message=commit_message,
        overwrite_on_create=overwrite_on_create,
    )


@click.group()
@click.option(
    "--org-service-url",
    default=lambda: settings.org_service_url,
    help="Azure DevOps organization URL. Defaults to AZDO_ORG_SERVICE_URL.",
)
@log_level
@click.pass_context
def root(ctx: click.Context, org_service_url: str, log_level: str | None) -> None:
    """Manage Azure DevOps git repository branches and files."""
    setup_logging(log_level)
    ctx.ensure_object(dict)
    ctx.obj["org_service_url"] = org_service_url


def _api(ctx: click.Context) -> AzureDevOpsGitApi:
    org_service_url = ctx.obj["org_service_url"]
    if not org_service_url:
        raise click.UsageError(
            "An organization URL is required, set --org-service-url or AZDO_ORG_SERVICE_URL."
        )
    return AzureDevOpsGitApi(
        org_service_url=org_service_url,
        token=settings.personal_access_token.get_secret_value(),
        timeout=settings.api_timeout,
        max_retries=settings.api_max_retries,
    )


def _branch_resource(ctx: click.Context) -> GitRepositoryBranch:
    return GitRepositoryBranch(_api(ctx))


def _file_resource(ctx: click.Context) -> GitRepositoryFile:
    return GitRepositoryFile(_api(ctx), push_timeout=settings.file_push_timeout)


@root.group()
def branch() -> None:
    """Git repository branches (id: <repository id>:<branch name>)."""


@branch.command("create")
@repository_id
@click.option("--name", required=True, help="The name of the branch.")
@click.option(
    "--ref",
    default=None,
    help="Full ref the branch is created from. Creates an orphan branch if omitted.",
)
@click.pass_context
@handle_errors
def branch_create(
    ctx: click.Context, repository_id: str, name: str, ref: str | None
) -> None:
    config = BranchConfig(repository_id=repository_id, name=name, ref=ref)
    _echo_state(_branch_resource(ctx).create(config))


@branch.command("read")
@click.argument("resource_id")
@click.pass_context
@handle_errors
def branch_read(ctx: click.Context, resource_id: str) -> None:
    _echo_state(_branch_resource(ctx).read(resource_id))


@branch.command("delete")
@click.argument("resource_id")
@click.pass_context
@handle_errors
def branch_delete(ctx: click.Context, resource_id: str) -> None:
    _branch_resource(ctx).delete(resource_id)


@branch.command("import")
@click.argument("resource_id")
@click.pass_context
@handle_errors
def branch_import(ctx: click.Context, resource_id: str) -> None:
    _echo_state(_branch_resource(ctx).import_state(resource_id))


@root.group()
def file() -> None:
    """Files of a git repository branch (id: <repository id>/<file path>)."""


@file.command("create")
@file_options()
@click.pass_context
@handle_errors
def file_create(
    ctx: click.Context,
    repository_id: str,
    path: str,
    content: str | None,
    content_file: Any,
    branch: str,
    commit_message: str | None,
    overwrite_on_create: bool,  # noqa: FBT001
) -> None:
    config = _file_config(
        repository_id,
        path,
        content,
        content_file,
        branch,
        commit_message,
        overwrite_on_create,
    )
    _echo_state(_file_resource(ctx).create(config))


@file.command("read")
@click.argument("resource_id")
@click.option("--branch", default=DEFAULT_BRANCH, show_default=True)
@click.pass_context
@handle_errors
def file_read(ctx: click.Context, resource_id: str, branch: str) -> None:
    _echo_state(_file_resource(ctx).read(resource_id, branch))


@file.command("update")
@file_options(with_overwrite=False)
@click.pass_context
@handle_errors
def file_update(
    ctx: click.Context,
    repository_id: str,
    path: str,
    content: str | None,
    content_file: Any,
    branch: str,
    commit_message: str | None,
) -> None:
    config = _file_config(
        repository_id, path, content, content_file, branch, commit_message
    )
    _echo_state(_file_resource(ctx).update(config))


@file.command("delete")
@click.argument("resource_id")
@click.option("--branch", default=DEFAULT_BRANCH, show_default=True)
@click.pass_context
@handle_errors
def file_delete(ctx: click.Context, resource_id: str, branch: str) -> None:
    _file_resource(ctx).delete(resource_id, branch)


@file.command("import")
@click.argument("resource_id")
@click.pass_context
@handle_errors
def file_import(ctx: click.Context, resource_id: str) -> None:
    """Import <repository id>/<file path>[:<branch>]."""
    _echo_state(_file_resource(ctx).import_state(resource_id))


@root.command("apply-branch")
@state_file
@repository_id
@click.option("--name", required=True, help="The name of the branch.")
@click.option("--ref", default=None, help="Full ref the branch is created from.")
@dry_run
@click.pass_context
@handle_errors
def apply_branch_command(
    ctx: click.Context,
    state_path: Path,
    repository_id: str,
    name: str,
    ref: str | None,
    dry_run: bool,  # noqa: FBT001
) -> None:
    """Reconcile a branch against the state stored in --state."""
    desired = BranchConfig(repository_id=repository_id, name=name, ref=ref)
    result = apply_branch(
        _branch_resource(ctx),
        desired,
        _load_state(state_path, BranchState),
        dry_run=dry_run,
    )
    click.echo(f"action: {result.action}", err=True)
    if not dry_run:
        _write_state(state_path, result.state)
    _echo_state(result.state)


@root.command("apply-file")
@state_file
@file_options()
@dry_run
@click.pass_context
@handle_errors
def apply_file_command(
    ctx: click.Context,
    state_path: Path,
    repository_id: str,
    path: str,
    content: str | None,
    content_file: Any,
    branch: str,
    commit_message: str | None,
    overwrite_on_create: bool,  # noqa: FBT001
    dry_run: bool,  # noqa: FBT001
) -> None:
    """Reconcile a file against the state stored in --state."""
    desired = _file_config(
        repository_id,
        path,
        content,
        content_file,
        branch,
        commit_message,
        overwrite_on_create,
    )
    result = apply_file(
        _file_resource(ctx),
        desired,
        _load_state(state_path, FileState),
        dry_run=dry_run,
    )
    click.echo(f"action: {result.action}", err=True)
    if not dry_run:
        _write_state(state_path, result.state)
    _echo_state(result.state)

from typing import Any


class AzureDevOpsGitError(Exception):
    pass


class InvalidResourceIdError(AzureDevOpsGitError):
    def __init__(self, msg: Any) -> None:
        super().__init__("invalid resource id: " + str(msg))


class ResourceNotFoundError(AzureDevOpsGitError):
    pass


class RefNotFoundError(AzureDevOpsGitError):
    pass


class RefUpdateError(AzureDevOpsGitError):
    """A ref update was rejected by the remote service.

    Carries the remote reported status, e.g. ``invalidRefName``.
    """

    def __init__(self, update_status: str, name: str | None = None) -> None:
        self.update_status = update_status
        self.name = name
        super().__init__(f"Error got invalid GitRefUpdate.UpdateStatus: {update_status}")


class PushConflictError(AzureDevOpsGitError):
    """The branch head moved between resolving it and pushing on top of it."""


class FileOverwriteRefusedError(AzureDevOpsGitError):
    def __init__(self, path: str) -> None:
        self.path = path
        super().__init__(
            f"Refusing to overwrite existing file {path!r}. "
            "Configure `overwrite_on_create` to `true` to override."
        )


class ResourceOperationError(AzureDevOpsGitError):
    pass

from azdo_git.azure_devops_api import AzureDevOpsApiError

REPO_ID = "5f1c2bde-8b5a-4a52-9d0f-6d7f1c4a9e21"


def api_error(
    message: str = "an-error",
    type_key: str | None = None,
    status_code: int | None = None,
) -> AzureDevOpsApiError:
    return AzureDevOpsApiError(message, type_key, status_code)


def not_found() -> AzureDevOpsApiError:
    return api_error(
        "TF401174: The item 'a.txt' could not be found in the repository.",
        "GitItemNotFoundException",
    )


def stale_ref() -> AzureDevOpsApiError:
    return api_error(
        "TF401028: The reference 'refs/heads/master' has already been updated by "
        "another client, so you cannot update it. Please try again.",
        "GitReferenceStaleException",
    )

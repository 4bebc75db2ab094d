"""Sets up the authenticated httpx client for the Azure DevOps REST API."""

import httpx

from github_ado_sync.utils.constants import ADO_API_VERSION


async def get_ado_client(org_url: str, token: str) -> httpx.AsyncClient:
    """Returns an httpx client authenticated with an Azure DevOps personal access token.

    Azure DevOps accepts a PAT as the password of HTTP basic auth with an empty user name.
    """
    if not token:
        raise RuntimeError("Azure DevOps authentication requires a personal access token in config.")
    return httpx.AsyncClient(
        base_url=f"{org_url.rstrip('/')}/",
        auth=httpx.BasicAuth("", token),
        headers={"Accept": f"application/json; api-version={ADO_API_VERSION}"},
        params={"api-version": ADO_API_VERSION},
    )

"""Bitbucket Cloud REST API provider."""

from __future__ import annotations

import logging

import requests

from bitbucket_backup import __version__
from bitbucket_backup.__util__ import AbortError
from bitbucket_backup.repository import (
    RepositoryRecord,
    sort_by_recent_update,
)

logger = logging.getLogger(__name__)


class BitbucketError(AbortError):
    """Raised for Bitbucket API errors."""


class BitbucketClient:
    """List the repositories of an account using the 2.0 REST API."""

    API_BASE = "https://api.bitbucket.org/2.0"

    def __init__(
        self,
        username: str = "",
        password: str = "",
        session: requests.Session | None = None,
    ):
        self.session = session or requests.Session()
        self.session.headers["Accept"] = "application/json"
        self.session.headers["User-Agent"] = f"bitbucket-backup/{__version__}"
        if username and password:
            self.session.auth = (username, password)

    def _api_get(self, url: str) -> dict:
        try:
            resp = self.session.get(url, timeout=30)
        except requests.RequestException as exc:
            raise BitbucketError(f"Request to {url} failed: {exc}") from exc

        if resp.status_code == 401:
            raise BitbucketError(
                "Authentication failed. Check your username and app password."
            )
        if resp.status_code == 403:
            raise BitbucketError(
                "Access denied. The app password may lack repository read permission."
            )
        if resp.status_code == 404:
            raise BitbucketError("Workspace not found. Check the account name.")
        if resp.status_code != 200:
            raise BitbucketError(
                f"Unexpected HTTP status code: {resp.status_code}"
            )

        try:
            return resp.json()
        except ValueError as exc:
            raise BitbucketError(f"Invalid JSON from {url}: {exc}") from exc

    def iter_repository_pages(self, workspace: str):
        """Yield the raw repository objects, following pagination."""
        url: str | None = f"{self.API_BASE}/repositories/{workspace}/"
        page = 0
        while url:
            data = self._api_get(url)
            page += 1
            values = data.get("values", [])
            logger.debug("Page %d: %d repositories", page, len(values))
            yield from values
            url = data.get("next") or None

    def list_repositories(self, workspace: str) -> list[RepositoryRecord]:
        """Return every repository of workspace, most recently updated first.

        Raises:
            BitbucketError: If the API can't be queried
            AbortError: If a repository has unexpected data
        """
        if not workspace:
            raise BitbucketError("No account to list repositories for")

        records = [
            RepositoryRecord.from_api(item)
            for item in self.iter_repository_pages(workspace)
        ]
        logger.info("Found %d repositories of %s", len(records), workspace)
        return sort_by_recent_update(records)

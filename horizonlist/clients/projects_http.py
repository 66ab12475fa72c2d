from __future__ import annotations

import logging
from typing import Any, Optional
from urllib.parse import quote, urlencode

import requests

from ..config import DEFAULT_PROJECTS_PATH, ServiceConfig
from ..types import ProjectQuery
from .base import BaseProjectsClient


class ProjectsHttp(BaseProjectsClient):
    """Client for the Horizon data service project endpoints.

    Bodies are returned exactly as decoded from JSON. A non-success status is
    logged and otherwise treated like success; transport errors and bodies that
    are not JSON propagate to the caller.
    """

    def __init__(
        self,
        base_url: str,
        projects_path: str = DEFAULT_PROJECTS_PATH,
        timeout_sec: Optional[float] = None,
        use_session: bool = True,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.projects_path = "/" + projects_path.strip("/")
        self.timeout_sec = timeout_sec
        self.session = requests.Session() if use_session else requests
        self.logger = logger or logging.getLogger("horizonlist")

    @classmethod
    def from_config(cls, config: ServiceConfig, logger: Optional[logging.Logger] = None) -> "ProjectsHttp":
        return cls(
            base_url=config.base_url,
            projects_path=config.projects_path,
            timeout_sec=config.timeout_sec,
            use_session=config.use_session,
            logger=logger,
        )

    @property
    def projects_url(self) -> str:
        return f"{self.base_url}{self.projects_path}"

    def build_url(self, query: ProjectQuery) -> str:
        # quote (not quote_plus) so a space goes out as %20
        return f"{self.projects_url}?{urlencode(query.to_params(), quote_via=quote)}"

    def list_projects(self, query: ProjectQuery) -> Any:
        return self._get_json(self.build_url(query))

    def similar_projects(self, account_id: str) -> Any:
        return self._get_json(f"{self.projects_url}/{quote(account_id, safe='')}/similar")

    def completion(self) -> Any:
        return self._get_json(f"{self.projects_url}/completion")

    def _get_json(self, url: str) -> Any:
        self.logger.debug("GET %s", url)
        response = self.session.get(url, timeout=self.timeout_sec)
        if not response.ok:
            self.logger.warning("Data service answered %s for %s", response.status_code, url)
        return response.json()

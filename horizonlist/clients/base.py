from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from ..types import ProjectQuery


class BaseProjectsClient(ABC):
    @abstractmethod
    def build_url(self, query: ProjectQuery) -> str:
        raise NotImplementedError

    @abstractmethod
    def list_projects(self, query: ProjectQuery) -> Any:
        raise NotImplementedError

    @abstractmethod
    def similar_projects(self, account_id: str) -> Any:
        raise NotImplementedError

    @abstractmethod
    def completion(self) -> Any:
        raise NotImplementedError

    @staticmethod
    def is_account_list(payload: object) -> bool:
        return isinstance(payload, list)

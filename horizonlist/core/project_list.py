from __future__ import annotations

import logging
import threading
from dataclasses import replace
from typing import Any, Callable, Optional, Tuple

import requests

from ..clients.base import BaseProjectsClient
from ..config import WidgetConfig
from ..types import FetchOutcome, LoadingPlaceholder, ProjectQuery, WidgetKind
from .registry import WidgetRegistry, default_registry, widget_path
from .store import ProjectListState, StateStore

Task = Callable[[], None]
Dispatch = Callable[[Task], None]


def spawn_thread(task: Task) -> None:
    threading.Thread(target=task, daemon=True).start()


def call_inline(task: Task) -> None:
    task()


class ProjectList:
    """Fetches project account ids and renders them as a list of cards.

    The request for a given query is issued once, on the first render that
    sees it. Later renders with the same query reuse the stored state; a new
    search (or sort, or filter set) issues a fresh request. Only the response
    to the most recent request may update the state.

    ``dispatch`` runs the blocking request (a daemon thread by default) and
    ``deliver`` hands the outcome back to the owner's thread (inline by
    default, the GUI posts it to the Qt event loop).
    """

    def __init__(
        self,
        client: BaseProjectsClient,
        config: Optional[WidgetConfig] = None,
        *,
        registry: Optional[WidgetRegistry] = None,
        dispatch: Dispatch = spawn_thread,
        deliver: Dispatch = call_inline,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self.client = client
        self.config = config or WidgetConfig()
        self.registry = registry or default_registry()
        self.logger = logger or logging.getLogger("horizonlist")
        self.store = StateStore()
        self._dispatch = dispatch
        self._deliver = deliver
        self._query = ProjectQuery(search=self.config.search, sort=self.config.sort)
        self._lock = threading.Lock()
        self._epoch = 0
        self._issued_key: Optional[Tuple[Tuple[str, str], ...]] = None
        self.requests_issued = 0

    @property
    def owner_id(self) -> str:
        return self.config.owner_id

    @property
    def state(self) -> ProjectListState:
        return self.store.state

    def query(self) -> ProjectQuery:
        return self._query

    def set_search(self, search: Optional[str]) -> None:
        self._query = replace(self._query, search="" if search is None else str(search))

    def set_sort(self, sort: str) -> None:
        self._query = replace(self._query, sort=sort)

    def set_query(self, query: ProjectQuery) -> None:
        self._query = query

    def subscribe(self, callback: Callable[[ProjectListState], None]) -> Callable[[], None]:
        return self.store.subscribe(callback)

    def ensure_fetched(self) -> bool:
        query = self._query
        key = query.key()
        with self._lock:
            if key == self._issued_key:
                return False
            self._issued_key = key
            self._epoch += 1
            epoch = self._epoch
            self.requests_issued += 1
        self._issue(query, epoch)
        return True

    def refresh(self) -> bool:
        with self._lock:
            self._issued_key = None
        return self.ensure_fetched()

    def dispose(self) -> None:
        # Responses still in flight belong to an older epoch and get dropped.
        with self._lock:
            self._epoch += 1

    def _issue(self, query: ProjectQuery, epoch: int) -> None:
        url = self.client.build_url(query)
        self.logger.info("Fetching projects: %s", url)

        def _worker() -> None:
            try:
                payload = self.client.list_projects(query)
            except (requests.RequestException, ValueError) as exc:
                outcome = FetchOutcome(epoch=epoch, url=url, error=str(exc))
            else:
                outcome = FetchOutcome(epoch=epoch, url=url, payload=payload)
            self._deliver(lambda: self.handle_response(outcome))

        self._dispatch(_worker)

    def handle_response(self, outcome: FetchOutcome) -> bool:
        with self._lock:
            current = self._epoch
        if outcome.epoch != current:
            self.logger.debug("Dropping stale response for %s", outcome.url)
            return False
        if outcome.error is not None:
            self.logger.warning("Project fetch failed for %s: %s", outcome.url, outcome.error)
            return False
        if not BaseProjectsClient.is_account_list(outcome.payload):
            self.logger.warning(
                "Unexpected project payload from %s: %s",
                outcome.url,
                type(outcome.payload).__name__,
            )
            return False
        items = list(outcome.payload)
        self.store.update(items=items, is_fetched=True)
        self.logger.info("Loaded %d projects", len(items))
        return True

    def render(self) -> Any:
        self.ensure_fetched()
        state = self.store.state
        if not state.is_fetched:
            return LoadingPlaceholder(self.config.loading_text)

        items = state.items
        return self.registry.create(
            WidgetKind.LIST,
            filter=lambda account_id: account_id in items,
            items=items,
            create_item=self.create_card,
        )

    def create_card(self, account_id: str) -> Any:
        return self.registry.create(WidgetKind.PROJECT_CARD, account_id=account_id)

    def describe(self) -> str:
        return widget_path(self.owner_id, WidgetKind.LIST)

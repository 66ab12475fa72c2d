import logging

import pytest
import requests

from horizonlist.clients.base import BaseProjectsClient
from horizonlist.clients.projects_http import ProjectsHttp
from horizonlist.config import WidgetConfig
from horizonlist.core.project_list import ProjectList, call_inline
from horizonlist.core.registry import WidgetRegistry
from horizonlist.types import ListView, LoadingPlaceholder, ProjectCard, ProjectQuery, WidgetKind


class _FakeClient(BaseProjectsClient):
    def __init__(self, payload=None, error=None) -> None:
        self.payload = [] if payload is None else payload
        self.error = error
        self.queries = []
        self._urls = ProjectsHttp("https://data.example.org")

    def build_url(self, query: ProjectQuery) -> str:
        return self._urls.build_url(query)

    def list_projects(self, query: ProjectQuery):
        self.queries.append(query)
        if self.error is not None:
            raise self.error
        return self.payload

    def similar_projects(self, account_id: str):
        return []

    def completion(self):
        return {"avg": 0.0, "list": []}


class _Deferred:
    """Collects tasks so a test decides when the request completes."""

    def __init__(self) -> None:
        self.tasks = []

    def __call__(self, task) -> None:
        self.tasks.append(task)

    def run_all(self) -> None:
        tasks, self.tasks = self.tasks, []
        for task in tasks:
            task()


def _component(client, search=None, dispatch=None):
    config = WidgetConfig() if search is None else WidgetConfig(search=search)
    return ProjectList(
        client,
        config,
        dispatch=dispatch or _Deferred(),
        deliver=call_inline,
        logger=logging.getLogger("test"),
    )


@pytest.mark.parametrize("search", ["", "foo bar", "near"])
def test_initial_render_is_loading_placeholder(search):
    component = _component(_FakeClient(["alice.near"]), search=search)
    output = component.render()
    assert output == LoadingPlaceholder("Loading...")
    assert component.state.is_fetched is False
    assert component.state.items == []


def test_first_render_issues_request_with_search():
    client = _FakeClient(["alice.near"])
    dispatch = _Deferred()
    component = _component(client, search="foo bar", dispatch=dispatch)
    component.render()
    assert len(dispatch.tasks) == 1
    dispatch.run_all()
    assert client.queries[0].search == "foo bar"
    assert client.queries[0].sort == "timedesc"


def test_render_after_response_shows_list():
    dispatch = _Deferred()
    component = _component(_FakeClient(["alice.near", "bob.near"]), dispatch=dispatch)
    component.render()
    dispatch.run_all()

    output = component.render()
    assert isinstance(output, ListView)
    assert output.items == ["alice.near", "bob.near"]
    assert output.filter("alice.near") is True
    assert output.filter("bob.near") is True
    assert output.filter("carol.near") is False
    assert output.create_item("alice.near") == ProjectCard("alice.near")


def test_empty_response_still_renders_list():
    dispatch = _Deferred()
    component = _component(_FakeClient([]), dispatch=dispatch)
    component.render()
    dispatch.run_all()

    assert component.state.is_fetched is True
    assert component.state.items == []
    output = component.render()
    assert isinstance(output, ListView)
    assert output.items == []
    assert output.visible_items() == []


@pytest.mark.parametrize(
    "items",
    [
        [],
        ["alice.near"],
        ["alice.near", "bob.near", "carol.near"],
        ["x.near", "x.near", "y.near"],
    ],
)
@pytest.mark.parametrize("candidate", ["alice.near", "x.near", "zed.near", ""])
def test_filter_matches_membership(items, candidate):
    dispatch = _Deferred()
    component = _component(_FakeClient(items), dispatch=dispatch)
    component.render()
    dispatch.run_all()
    output = component.render()
    assert output.filter(candidate) == (candidate in items)
    assert output.visible_items() == items


def test_missing_search_sends_empty_q():
    client = _FakeClient()
    component = _component(client, dispatch=call_inline)
    component.set_search(None)
    component.render()
    assert client.queries[0].search == ""
    assert component.client.build_url(client.queries[0]).endswith("&q=")


def test_repeated_renders_do_not_refetch():
    dispatch = _Deferred()
    component = _component(_FakeClient(["alice.near"]), dispatch=dispatch)
    for _ in range(5):
        component.render()
    assert len(dispatch.tasks) == 1
    assert component.requests_issued == 1

    dispatch.run_all()
    component.render()
    component.render()
    assert dispatch.tasks == []


def test_changed_search_refetches_and_replaces_items():
    client = _FakeClient(["alice.near", "bob.near"])
    component = _component(client, dispatch=call_inline)
    component.render()
    assert component.state.items == ["alice.near", "bob.near"]

    client.payload = ["carol.near"]
    component.set_search("carol")
    output = component.render()
    assert [query.search for query in client.queries] == ["", "carol"]
    assert output.items == ["carol.near"]
    assert output.filter("alice.near") is False


def test_changed_sort_refetches():
    client = _FakeClient(["alice.near"])
    component = _component(client, dispatch=call_inline)
    component.render()
    component.set_sort("nameasc")
    component.render()
    assert [query.sort for query in client.queries] == ["timedesc", "nameasc"]


def test_stale_response_is_dropped():
    client = _FakeClient(["old.near"])
    dispatch = _Deferred()
    component = _component(client, dispatch=dispatch)
    component.render()
    first = dispatch.tasks.pop()

    component.set_search("new")
    component.render()
    second = dispatch.tasks.pop()

    client.payload = ["new.near"]
    second()
    client.payload = ["old.near"]
    first()
    assert component.state.items == ["new.near"]


def test_fetched_flag_stays_true_while_new_search_loads():
    client = _FakeClient(["alice.near"])
    dispatch = _Deferred()
    component = _component(client, dispatch=dispatch)
    component.render()
    dispatch.run_all()

    component.set_search("other")
    output = component.render()
    assert isinstance(output, ListView)
    assert output.items == ["alice.near"]


def test_transport_failure_stays_loading(caplog):
    client = _FakeClient(error=requests.ConnectionError("unreachable"))
    component = _component(client, dispatch=call_inline)
    with caplog.at_level("WARNING", logger="test"):
        output = component.render()
    assert output == LoadingPlaceholder("Loading...")
    assert component.state.is_fetched is False
    assert "unreachable" in caplog.text

    component.render()
    assert len(client.queries) == 1


def test_non_list_payload_stays_loading():
    component = _component(_FakeClient({"error": "boom"}), dispatch=call_inline)
    assert isinstance(component.render(), LoadingPlaceholder)
    assert component.state.items == []


def test_refresh_reissues_same_query():
    client = _FakeClient(["alice.near"])
    component = _component(client, dispatch=call_inline)
    component.render()
    client.payload = ["alice.near", "bob.near"]
    assert component.refresh() is True
    assert component.state.items == ["alice.near", "bob.near"]
    assert len(client.queries) == 2


def test_dispose_drops_in_flight_response():
    dispatch = _Deferred()
    component = _component(_FakeClient(["alice.near"]), dispatch=dispatch)
    component.render()
    component.dispose()
    dispatch.run_all()
    assert component.state.is_fetched is False


def test_render_after_dispose_does_not_refetch():
    client = _FakeClient(["alice.near"])
    dispatch = _Deferred()
    component = _component(client, dispatch=dispatch)
    component.render()
    component.dispose()
    component.render()
    assert len(dispatch.tasks) == 1
    assert component.requests_issued == 1


def test_subscribers_see_each_update():
    seen = []
    component = _component(_FakeClient(["alice.near"]), dispatch=call_inline)
    component.subscribe(lambda state: seen.append((state.is_fetched, list(state.items))))
    component.render()
    assert seen == [(True, ["alice.near"])]


def test_custom_registry_builds_list_and_cards():
    built = []

    def _list(filter, items, create_item):
        built.append("list")
        return [create_item(item) for item in items if filter(item)]

    def _card(account_id):
        built.append(account_id)
        return f"card:{account_id}"

    registry = WidgetRegistry({WidgetKind.LIST: _list, WidgetKind.PROJECT_CARD: _card})
    component = ProjectList(
        _FakeClient(["alice.near", "bob.near"]),
        registry=registry,
        dispatch=call_inline,
    )
    assert component.render() == ["card:alice.near", "card:bob.near"]
    assert built == ["list", "alice.near", "bob.near"]


def test_describe_uses_owner_namespace():
    component = _component(_FakeClient())
    assert component.describe() == "nearhorizon.near/widget/List"


def test_set_query_with_filters_refetches():
    client = _FakeClient(["alice.near"])
    component = _component(client, dispatch=call_inline)
    component.render()
    component.set_query(ProjectQuery(search="", vertical=["defi"]))
    component.render()
    assert len(client.queries) == 2
    assert client.queries[1].vertical == ["defi"]

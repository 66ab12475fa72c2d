from __future__ import annotations

from typing import Any, Callable, Dict, Optional

from ..types import ListView, ProjectCard, WidgetKind

WidgetFactory = Callable[..., Any]


class WidgetRegistry:
    """Maps each WidgetKind to the factory that builds it."""

    def __init__(self, factories: Optional[Dict[WidgetKind, WidgetFactory]] = None) -> None:
        self._factories: Dict[WidgetKind, WidgetFactory] = dict(factories or {})

    def register(self, kind: WidgetKind, factory: WidgetFactory) -> None:
        self._factories[kind] = factory

    def create(self, kind: WidgetKind, **props: Any) -> Any:
        try:
            factory = self._factories[kind]
        except KeyError:
            raise KeyError(f"No widget registered for {kind.name}") from None
        return factory(**props)

    def __contains__(self, kind: WidgetKind) -> bool:
        return kind in self._factories


def default_registry() -> WidgetRegistry:
    return WidgetRegistry(
        {
            WidgetKind.LIST: ListView,
            WidgetKind.PROJECT_CARD: ProjectCard,
        }
    )


def widget_path(owner_id: str, kind: WidgetKind) -> str:
    return f"{owner_id}/widget/{kind.value}"

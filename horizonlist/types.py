from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, List, Optional, Sequence, Tuple


@dataclass
class ProjectQuery:
    search: str = ""
    sort: str = "timedesc"
    vertical: List[str] = field(default_factory=list)
    integration: List[str] = field(default_factory=list)
    dev: List[str] = field(default_factory=list)
    stage: List[str] = field(default_factory=list)
    distribution: List[str] = field(default_factory=list)
    size: List[Tuple[int, int]] = field(default_factory=list)

    def to_params(self) -> List[Tuple[str, str]]:
        """Query parameters in wire order.

        ``sort`` and ``q`` are always present (``q`` may be empty). Filter sets
        are comma-joined and left out when empty; size ranges go out as
        ``from-to`` pairs.
        """
        params: List[Tuple[str, str]] = [("sort", self.sort), ("q", self.search or "")]
        for name in ("vertical", "integration", "dev", "stage", "distribution"):
            values: Sequence[str] = getattr(self, name)
            if values:
                params.append((name, ",".join(values)))
        if self.size:
            params.append(("size", ",".join(f"{low}-{high}" for low, high in self.size)))
        return params

    def key(self) -> Tuple[Tuple[str, str], ...]:
        return tuple(self.to_params())


class WidgetKind(Enum):
    LIST = "List"
    PROJECT_CARD = "Project.Card"


@dataclass(frozen=True)
class LoadingPlaceholder:
    text: str = "Loading..."


@dataclass
class ListView:
    filter: Callable[[str], bool]
    items: List[str]
    create_item: Callable[[str], Any]

    def visible_items(self) -> List[str]:
        return [item for item in self.items if self.filter(item)]


@dataclass(frozen=True)
class ProjectCard:
    account_id: str


@dataclass
class FetchOutcome:
    epoch: int
    url: str
    payload: Optional[Any] = None
    error: Optional[str] = None

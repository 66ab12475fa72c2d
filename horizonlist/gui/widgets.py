from __future__ import annotations

import logging
from typing import Callable, List, Sequence
from urllib.parse import quote

from PySide6 import QtCore, QtWidgets

from ..core.registry import WidgetRegistry
from ..types import WidgetKind

PROFILE_URL = "https://near.social/mob.near/widget/ProfilePage?accountId={account_id}"


class LogEmitter(QtCore.QObject):
    message = QtCore.Signal(str)


class QtLogHandler(logging.Handler):
    def __init__(self, emitter: LogEmitter) -> None:
        super().__init__()
        self.emitter = emitter

    def emit(self, record: logging.LogRecord) -> None:
        msg = self.format(record)
        self.emitter.message.emit(msg)


class ProjectCardWidget(QtWidgets.QFrame):
    """Self-contained card for one project account."""

    def __init__(self, account_id: str, parent=None) -> None:
        super().__init__(parent)
        self.account_id = account_id
        self.setFrameShape(QtWidgets.QFrame.StyledPanel)
        self.setObjectName("projectCard")

        layout = QtWidgets.QVBoxLayout(self)
        layout.setContentsMargins(10, 8, 10, 8)
        layout.setSpacing(2)

        self.title_label = QtWidgets.QLabel(account_id)
        font = self.title_label.font()
        font.setBold(True)
        self.title_label.setFont(font)
        self.title_label.setTextInteractionFlags(QtCore.Qt.TextSelectableByMouse)
        layout.addWidget(self.title_label)

        url = PROFILE_URL.format(account_id=quote(account_id, safe=""))
        self.link_label = QtWidgets.QLabel(f'<a href="{url}">Open profile</a>')
        self.link_label.setOpenExternalLinks(True)
        layout.addWidget(self.link_label)


class ListWidget(QtWidgets.QScrollArea):
    """Generic vertical list: one widget per item accepted by ``filter``."""

    def __init__(
        self,
        filter: Callable[[str], bool],
        items: Sequence[str],
        create_item: Callable[[str], QtWidgets.QWidget],
        parent=None,
    ) -> None:
        super().__init__(parent)
        self.filter = filter
        self.items = list(items)
        self.item_widgets: List[QtWidgets.QWidget] = []

        self.setWidgetResizable(True)
        self.setFrameShape(QtWidgets.QFrame.NoFrame)

        content = QtWidgets.QWidget()
        self.items_layout = QtWidgets.QVBoxLayout(content)
        self.items_layout.setContentsMargins(0, 0, 0, 0)
        self.items_layout.setSpacing(6)
        for item in self.items:
            if not filter(item):
                continue
            widget = create_item(item)
            self.item_widgets.append(widget)
            self.items_layout.addWidget(widget)
        self.items_layout.addStretch(1)
        self.setWidget(content)

    def count(self) -> int:
        return len(self.item_widgets)


def qt_registry() -> WidgetRegistry:
    return WidgetRegistry(
        {
            WidgetKind.LIST: ListWidget,
            WidgetKind.PROJECT_CARD: ProjectCardWidget,
        }
    )

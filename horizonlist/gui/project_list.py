from __future__ import annotations

import logging
from typing import Optional

from PySide6 import QtCore, QtWidgets

from ..clients.base import BaseProjectsClient
from ..config import WidgetConfig
from ..core.project_list import Dispatch, ProjectList, spawn_thread
from ..types import LoadingPlaceholder
from .widgets import qt_registry


class ProjectListView(QtWidgets.QWidget):
    """Hosts a ProjectList and re-renders it whenever its state changes."""

    ui_callback_signal = QtCore.Signal(object)

    def __init__(
        self,
        client: BaseProjectsClient,
        config: Optional[WidgetConfig] = None,
        logger: Optional[logging.Logger] = None,
        dispatch: Dispatch = spawn_thread,
        parent=None,
    ) -> None:
        super().__init__(parent)
        self.ui_callback_signal.connect(lambda callback: callback())
        self.component = ProjectList(
            client,
            config,
            registry=qt_registry(),
            dispatch=dispatch,
            deliver=self._post_to_ui,
            logger=logger,
        )
        self.setToolTip(self.component.describe())

        self._layout = QtWidgets.QVBoxLayout(self)
        self._layout.setContentsMargins(0, 0, 0, 0)
        self._layout.setSpacing(0)
        self.current_widget: Optional[QtWidgets.QWidget] = None
        self.render_count = 0

        self._unsubscribe = self.component.subscribe(lambda _state: self.rerender())
        self.rerender()

    def _post_to_ui(self, callback) -> None:
        self.ui_callback_signal.emit(callback)

    def is_loading(self) -> bool:
        return not self.component.state.is_fetched

    def set_search(self, search: Optional[str]) -> None:
        self.component.set_search(search)
        self.rerender()

    def set_sort(self, sort: str) -> None:
        self.component.set_sort(sort)
        self.rerender()

    def refresh(self) -> None:
        self.component.refresh()

    def rerender(self) -> None:
        self.render_count += 1
        output = self.component.render()
        if isinstance(output, LoadingPlaceholder):
            widget: QtWidgets.QWidget = QtWidgets.QLabel(output.text)
            widget.setAlignment(QtCore.Qt.AlignCenter)
        else:
            widget = output
        if self.current_widget is not None:
            self._layout.removeWidget(self.current_widget)
            self.current_widget.deleteLater()
        self.current_widget = widget
        self._layout.addWidget(widget)

    def dispose(self) -> None:
        self._unsubscribe()
        self.component.dispose()

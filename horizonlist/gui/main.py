from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import yaml
from PySide6 import QtGui, QtWidgets

from ..clients.base import BaseProjectsClient
from ..clients.projects_http import ProjectsHttp
from ..config import AppConfig, load_config
from ..logging_setup import LOG_FORMAT, get_logger, setup_logging
from .project_list import ProjectListView
from .state import GuiState
from .widgets import LogEmitter, QtLogHandler

SORT_CHOICES = [
    ("Newest first", "timedesc"),
    ("Oldest first", "timeasc"),
    ("Name A-Z", "nameasc"),
    ("Name Z-A", "namedesc"),
    ("Recently active", "recentdesc"),
    ("Least recently active", "recentasc"),
]


class MainWindow(QtWidgets.QMainWindow):
    """Project browser: search box, sort selector, project list and log."""

    def __init__(
        self,
        config: Optional[AppConfig] = None,
        client: Optional[BaseProjectsClient] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        super().__init__()
        self.setWindowTitle("NEAR Horizon Projects")
        self.resize(720, 640)

        cfg = config or AppConfig()
        self.logger = logger or get_logger()
        self.client = client or ProjectsHttp.from_config(cfg.service, logger=self.logger)
        self.state = GuiState(config=cfg)

        self.tabs = QtWidgets.QTabWidget()
        self.setCentralWidget(self.tabs)
        self.projects_tab = QtWidgets.QWidget()
        self.log_tab = QtWidgets.QWidget()
        self.tabs.addTab(self.projects_tab, "Projects")
        self.tabs.addTab(self.log_tab, "Log")

        self._build_log_tab()
        self.emitter = LogEmitter()
        self.emitter.message.connect(self._append_log)
        self.qt_handler = QtLogHandler(self.emitter)
        self.qt_handler.setFormatter(logging.Formatter(LOG_FORMAT))
        self.logger.addHandler(self.qt_handler)

        self._load_gui_settings()
        self._build_projects_tab()

    def _build_projects_tab(self) -> None:
        cfg = self.state.config
        layout = QtWidgets.QVBoxLayout(self.projects_tab)
        layout.setContentsMargins(8, 6, 8, 6)
        layout.setSpacing(6)

        controls = QtWidgets.QHBoxLayout()
        controls.setSpacing(6)
        self.search_edit = QtWidgets.QLineEdit(cfg.widget.search)
        self.search_edit.setPlaceholderText("Search projects")
        self.search_edit.returnPressed.connect(self._apply_search)
        self.sort_combo = QtWidgets.QComboBox()
        for label, value in SORT_CHOICES:
            self.sort_combo.addItem(label, value)
        self._set_combo_data(self.sort_combo, cfg.widget.sort)
        self.sort_combo.currentIndexChanged.connect(self._apply_sort)
        self.search_btn = QtWidgets.QPushButton("Search")
        self.search_btn.clicked.connect(self._apply_search)
        self.refresh_btn = QtWidgets.QPushButton("Refresh")
        self.refresh_btn.clicked.connect(self._refresh)
        controls.addWidget(self.search_edit, 1)
        controls.addWidget(self.sort_combo)
        controls.addWidget(self.search_btn)
        controls.addWidget(self.refresh_btn)
        layout.addLayout(controls)

        self.project_view = ProjectListView(self.client, cfg.widget, logger=self.logger)
        layout.addWidget(self.project_view, 1)

    def _build_log_tab(self) -> None:
        layout = QtWidgets.QVBoxLayout(self.log_tab)
        layout.setContentsMargins(8, 6, 8, 6)
        layout.setSpacing(6)
        self.log_view = QtWidgets.QTextEdit()
        self.log_view.setReadOnly(True)
        layout.addWidget(self.log_view)

    @staticmethod
    def _set_combo_data(combo: QtWidgets.QComboBox, value: object, fallback_index: int = 0) -> None:
        for idx in range(combo.count()):
            if combo.itemData(idx) == value:
                combo.setCurrentIndex(idx)
                return
        combo.setCurrentIndex(max(0, fallback_index))

    def _apply_search(self) -> None:
        search = self.search_edit.text().strip()
        self.state.config.widget.search = search
        self.project_view.set_search(search)

    def _apply_sort(self, *_args) -> None:
        sort = str(self.sort_combo.currentData() or "timedesc")
        self.state.config.widget.sort = sort
        self.project_view.set_sort(sort)

    def _refresh(self) -> None:
        self.project_view.refresh()

    def _append_log(self, message: str) -> None:
        self.log_view.append(message)

    def _gui_config_path(self) -> Path:
        return Path.home() / ".horizonlist_gui.yaml"

    def _load_gui_settings(self) -> None:
        path = self._gui_config_path()
        if not path.exists():
            return
        try:
            data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
        except (OSError, yaml.YAMLError) as exc:
            self.logger.warning("Ignoring unreadable GUI settings %s: %s", path, exc)
            return

        widget = self.state.config.widget
        widget.search = str(data.get("search", widget.search) or "")
        sort = str(data.get("sort", widget.sort))
        if sort in {value for _, value in SORT_CHOICES}:
            widget.sort = sort

    def _save_gui_settings(self) -> None:
        payload = {
            "search": self.search_edit.text().strip(),
            "sort": str(self.sort_combo.currentData() or "timedesc"),
        }
        path = self._gui_config_path()
        path.write_text(yaml.safe_dump(payload, sort_keys=False), encoding="utf-8")

    def closeEvent(self, event: QtGui.QCloseEvent) -> None:  # type: ignore[name-defined]
        try:
            self._save_gui_settings()
        except OSError as exc:
            self.logger.warning("Could not save GUI settings: %s", exc)
        self.project_view.dispose()
        self.logger.removeHandler(self.qt_handler)
        super().closeEvent(event)


def main(config_path: Optional[Path] = None) -> None:
    config = load_config(config_path) if config_path is not None else AppConfig()
    logger = setup_logging(config.logging)
    app = QtWidgets.QApplication.instance() or QtWidgets.QApplication([])
    window = MainWindow(config, logger=logger)
    window.show()
    app.exec()


if __name__ == "__main__":
    main()

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..config import AppConfig


@dataclass
class GuiState:
    config: Optional[AppConfig] = None

# src/taskmaster/preferences/options.py

from __future__ import annotations

import time
from datetime import datetime
from enum import StrEnum


class ThemeBackground(StrEnum):
    """Lighting theme: follow the system setting, or force light/dark."""

    SYSTEM = "system"
    LIGHT = "light"
    DARK = "dark"


class ThemeAccent(StrEnum):
    PURPLE = "purple"
    BLUE = "blue"


class IndicatorFrame(StrEnum):
    """Shape drawn behind the completion indicator."""

    APP = "app"
    CIRCLE = "circle"
    DIAMOND = "diamond"
    ROUNDSQUARE = "roundsquare"
    SQUARE = "square"

    @property
    def symbol_name(self) -> str:
        return _FRAME_SYMBOLS[self]


_FRAME_SYMBOLS = {
    IndicatorFrame.APP: "app",
    IndicatorFrame.CIRCLE: "circle",
    IndicatorFrame.DIAMOND: "diamond",
    IndicatorFrame.ROUNDSQUARE: "square",
    IndicatorFrame.SQUARE: "squareshape",
}


class IndicatorSymbol(StrEnum):
    """Mark drawn inside the frame once a task is complete."""

    ASTERISK = "asterisk"
    CHECKMARK = "checkmark"
    SCRIBBLE = "scribble"
    XMARK = "xmark"

    @property
    def symbol_name(self) -> str:
        if self is IndicatorSymbol.SCRIBBLE:
            return "scribble.variable"
        return self.value


class QuickAddButtonStyle(StrEnum):
    LARGE = "large"
    SMALL = "small"
    MATERIAL = "material"


class DateFormat(StrEnum):
    AMERICAN = "american"
    INTERNATIONAL = "international"

    @property
    def pattern(self) -> str:
        if self is DateFormat.AMERICAN:
            return "%m/%d/%Y"
        return "%Y-%m-%d"

    def render(self, ts: float | None = None) -> str:
        """Render an epoch timestamp (local time)."""
        if ts is None:
            ts = time.time()
        return datetime.fromtimestamp(ts).strftime(self.pattern)

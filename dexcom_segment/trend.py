"""Map Dexcom trend codes to display glyphs."""

from enum import Enum


class TrendCode(str, Enum):
    """Trend codes reported by the Dexcom API that have a glyph."""

    DOUBLE_UP = "doubleUp"
    SINGLE_UP = "singleUp"
    FORTY_FIVE_UP = "fortyFiveUp"
    FLAT = "flat"
    FORTY_FIVE_DOWN = "fortyFiveDown"
    SINGLE_DOWN = "singleDown"
    DOUBLE_DOWN = "doubleDown"


TREND_GLYPHS = {
    TrendCode.DOUBLE_UP.value: "↑↑",
    TrendCode.SINGLE_UP.value: "↑",
    TrendCode.FORTY_FIVE_UP.value: "↗",
    TrendCode.FLAT.value: "→",
    TrendCode.FORTY_FIVE_DOWN.value: "↘",
    TrendCode.SINGLE_DOWN.value: "↓",
    TrendCode.DOUBLE_DOWN.value: "↓↓",
}


def glyph(trend_code: str) -> str:
    """Return the glyph for *trend_code*, or an empty string for unknown codes."""
    return TREND_GLYPHS.get(trend_code, "")

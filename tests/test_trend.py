import pytest

from dexcom_segment.trend import TREND_GLYPHS, TrendCode, glyph


@pytest.mark.parametrize("code, expected", [
    ("doubleUp", "↑↑"),
    ("singleUp", "↑"),
    ("fortyFiveUp", "↗"),
    ("flat", "→"),
    ("fortyFiveDown", "↘"),
    ("singleDown", "↓"),
    ("doubleDown", "↓↓"),
])
def test_known_trend_codes(code, expected):
    assert glyph(code) == expected


@pytest.mark.parametrize("code", ["", "none", "notComputable", "rateOutOfRange", "Flat", "DOUBLEUP", "sideways"])
def test_unknown_trend_codes_render_empty(code):
    assert glyph(code) == ""


def test_every_trend_code_has_a_glyph():
    assert set(TREND_GLYPHS) == {code.value for code in TrendCode}

import pytest

from date_watermark.core.colors import BLACK, PALETTE, parse_color


@pytest.mark.parametrize("text, expected", [
    ("rgb(10,20,30)", (10, 20, 30)),
    ("10, 20, 30", (10, 20, 30)),
    ("RGB( 1 , 2 , 3 )", (1, 2, 3)),
    ("RED", (255, 0, 0)),
    ("  white ", (255, 255, 255)),
    ("DarkGray", (64, 64, 64)),
])
def test_parse(text, expected):
    assert parse_color(text) == expected


@pytest.mark.parametrize("text", ["notacolor", "", "1,2", "1,2,3,4", "a,b,c", "300,0,0", "-1,0,0", "rgb(1,2,3"])
def test_invalid_is_black(text):
    assert parse_color(text) == BLACK


def test_palette_names():
    assert set(PALETTE) == {
        "black", "white", "red", "green", "blue", "yellow",
        "cyan", "magenta", "gray", "darkgray", "lightgray",
    }
    assert PALETTE["green"] == (0, 255, 0)

import numpy as np
import pytest

from palette_recolour.colour_space import OKLAB_SPACE, RGB_SPACE
from palette_recolour.errors import ColorParseError, PaletteFormatError
from palette_recolour.palette_data import Palette, load_palette, parse_palette_text


def test_duplicates_collapse_case_insensitively(write_palette):
    path = write_palette("#FF0000 ff0000 FF0000")
    palette = load_palette(path)
    assert len(palette) == 1
    assert palette.hex_codes == ("#ff0000",)


def test_short_form_expands_and_dedups():
    assert parse_palette_text("#f00 ff0000 #FfF") == ["#ff0000", "#ffffff"]


def test_file_order_preserved_across_whitespace():
    text = "  00f\n#0f0\t\tf00\r\n#00F  \n"
    assert parse_palette_text(text) == ["#0000ff", "#00ff00", "#ff0000"]


@pytest.mark.parametrize("bad", ["#12", "zzzzzz", "#1234", "##fff", "#ff00000", "red"])
def test_malformed_token_raises(bad):
    with pytest.raises(PaletteFormatError) as info:
        parse_palette_text(f"#000000 {bad} #ffffff")
    assert info.value.token == bad
    assert info.value.position == 2
    assert isinstance(info.value, ValueError)


def test_parse_error_alias_and_path_in_message(write_palette):
    path = write_palette("#000 nope")
    with pytest.raises(ColorParseError, match="nope") as info:
        load_palette(path)
    assert info.value.path == str(path)
    assert str(path) in str(info.value)


def test_empty_file_gives_empty_palette(write_palette):
    palette = load_palette(write_palette("   \n\n"))
    assert len(palette) == 0
    assert palette.colours.shape == (0, 3)
    assert palette.rgb_linear.shape == (0, 3)


def test_missing_file_raises_oserror(tmp_path):
    with pytest.raises(OSError):
        load_palette(tmp_path / "missing.txt")


def test_linear_values_and_working_space():
    palette = Palette.from_hex(["#000000", "#ffffff", "#808080"], RGB_SPACE)
    np.testing.assert_allclose(palette.rgb_linear[0], [0.0, 0.0, 0.0])
    np.testing.assert_allclose(palette.rgb_linear[1], [1.0, 1.0, 1.0], atol=1e-6)
    np.testing.assert_allclose(palette.rgb_linear[2], [0.2158605] * 3, atol=1e-6)
    np.testing.assert_array_equal(palette.colours, palette.rgb_linear)
    assert palette.space is RGB_SPACE


def test_oklab_palette_stores_oklab():
    palette = Palette.from_hex(["#ffffff"], OKLAB_SPACE)
    np.testing.assert_allclose(palette.colours[0], [1.0, 0.0, 0.0], atol=1e-4)
    assert palette.space is OKLAB_SPACE


def test_palette_arrays_are_read_only():
    palette = Palette.from_hex(["#123456", "#abcdef"])
    with pytest.raises(ValueError):
        palette.colours[0, 0] = 0.0
    with pytest.raises(ValueError):
        palette.rgb_linear[0, 0] = 0.0


def test_from_hex_validates_tokens():
    with pytest.raises(PaletteFormatError) as info:
        Palette.from_hex(["#fff", "#ggg"])
    assert info.value.position == 2


@pytest.mark.parametrize(
    "raw, token, position",
    [
        (b"#fff \xff\xfe", "\\xff\\xfe", 2),
        (b"#000\n#fff\xff 00f", "#fff\\xff", 2),
        (b"\xc3(", "\\xc3(", 1),
    ],
)
def test_non_utf8_palette_raises_format_error(tmp_path, raw, token, position):
    path = tmp_path / "palette.txt"
    path.write_bytes(raw)
    with pytest.raises(PaletteFormatError) as info:
        load_palette(path)
    assert info.value.token == token
    assert info.value.position == position
    assert info.value.path == str(path)

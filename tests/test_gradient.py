from __future__ import annotations

import numpy as np
import pytest

from mandelbrot_explorer import (
    PRESETS,
    GradientCodec,
    RenderGradient,
    build_color_table,
    decode_color_token,
    decode_list,
    encode_color,
    encode_list,
    gradient_from_colormap,
    gradient_swatch,
    normalize_for_render,
    preset_gradient,
)


@pytest.mark.parametrize(
    "token, expected",
    [
        ("Red", 0xFF0000),
        ("  red ", 0xFF0000),
        ("LIME", 0x00FF00),
        ("Purple", 0x800080),
        ("Orange", 0xFFA500),
        ("1F", 0x00001F),
        ("00ff00", 0x00FF00),
        ("FFFFFF", 0xFFFFFF),
        ("bogus!!", 0),
        ("", 0),
        ("   ", 0),
        ("0x1F", 0),
        ("-1F", 0),
        ("1_F", 0),
        ("1000000", 0),
    ],
)
def test_decode_color_token(token: str, expected: int) -> None:
    assert decode_color_token(token) == expected


def test_encode_color_prefers_names_then_unpadded_hex() -> None:
    assert encode_color(0xFF0000) == "Red"
    assert encode_color(0x000000) == "Black"
    assert encode_color(0x00001F) == "1f"
    assert encode_color(0x0ABCDE) == "abcde"


def test_name_table_round_trips() -> None:
    codec = GradientCodec()
    for name, rgb in codec.table.rgb_by_name.items():
        assert codec.decode_color_token(codec.encode_color(rgb)) == rgb
        assert codec.decode_color_token(name.upper()) == rgb


def test_hex_values_round_trip() -> None:
    rng = np.random.default_rng(1234)
    samples = [0, 1, 0x00001F, 0xFFFFFE, 0xFFFFFF, *(int(v) for v in rng.integers(0, 0xFFFFFF + 1, 500))]
    for rgb in samples:
        assert decode_color_token(encode_color(rgb)) == rgb


def test_theme_dependent_entries_are_skipped() -> None:
    table = build_color_table({"Red": "#ff0000", "C0": "#1f77b4", "Accent": "C1"})

    assert dict(table.rgb_by_name) == {"red": 0xFF0000}
    assert dict(table.name_by_rgb) == {0xFF0000: "Red"}


def test_duplicate_values_encode_with_last_name() -> None:
    table = build_color_table({"Aqua": "#00ffff", "Cyan": "#00ffff"})
    codec = GradientCodec(table)

    assert codec.encode_color(0x00FFFF) == "Cyan"
    assert codec.decode_color_token("aqua") == 0x00FFFF


def test_names_are_shown_capitalized() -> None:
    codec = GradientCodec(build_color_table({"darkred": "#8b0000", "gray": "#808080", "grey": "#808080"}))

    assert codec.encode_color(0x8B0000) == "Darkred"
    assert codec.encode_color(0x808080) == "Gray"
    assert codec.decode_color_token("GREY") == 0x808080


@pytest.mark.parametrize("name", ["Fire", "Ice", "Plasma", "Psychedelic"])
def test_named_presets_encode_as_written(name: str) -> None:
    assert encode_list(preset_gradient(name)) == PRESETS[name]


def test_default_table_prefers_gray_spelling() -> None:
    assert encode_color(0x808080) == "Gray"
    assert encode_color(0xA9A9A9) == "Darkgray"


def test_table_is_read_only() -> None:
    table = build_color_table()
    with pytest.raises(TypeError):
        table.rgb_by_name["red"] = 1  # type: ignore[index]


def test_decode_list_scenario() -> None:
    assert decode_list("Red, 1F, bogus!!") == (0xFF0000, 0x00001F, 0x000000)


def test_decode_list_empty_tokens() -> None:
    assert decode_list("") == (0,)
    assert decode_list("white,,  ,blue") == (0xFFFFFF, 0, 0, 0x0000FF)


def test_encode_list_joins_with_comma_space() -> None:
    assert encode_list([0xFFFF00, 0x00001F, 0x000000]) == "Yellow, 1f, Black"
    assert encode_list([]) == ""
    assert decode_list(encode_list([0x123456, 0xFF0000])) == (0x123456, 0xFF0000)


@pytest.mark.parametrize(
    "gradient, fill, stops",
    [
        ([], 0x000000, (0x000000, 0xFFFFFF)),
        ([0xAAAAAA], 0xAAAAAA, (0x000000, 0xFFFFFF)),
        ([0xAAAAAA, 0xBBBBBB], 0xAAAAAA, (0xBBBBBB, 0xFFFFFF)),
        ([1, 2, 3], 1, (2, 3)),
        ([1, 2, 3, 4, 5], 1, (2, 3, 4, 5)),
    ],
)
def test_normalize_for_render(gradient: list[int], fill: int, stops: tuple[int, ...]) -> None:
    assert normalize_for_render(gradient) == RenderGradient(fill_color=fill, stops=stops)


def test_normalize_does_not_mutate_input() -> None:
    gradient = [0xAAAAAA]
    normalize_for_render(gradient)
    assert gradient == [0xAAAAAA]


def test_presets() -> None:
    assert list(PRESETS) == ["Fire", "Ice", "Storm", "Plasma", "Psychedelic"]
    assert preset_gradient("Fire") == (0xFFFF00, 0xFF0000, 0xFFA500, 0x000000)
    assert preset_gradient("ice") == (0x000000, 0x000000, 0x0000FF, 0xFFFFFF)
    assert preset_gradient("Storm") == (0x00001F, 0xFFFFFF, 0x000000)
    assert preset_gradient("Plasma") == (0, 0, 0x00FF00, 0, 0x800080, 0, 0xFFFF00)
    assert preset_gradient(" PSYCHEDELIC ") == (0, 0, 0xFF0000, 0x00FF00, 0x0000FF)


def test_unknown_preset_lists_choices() -> None:
    with pytest.raises(KeyError, match="Fire, Ice, Storm, Plasma, Psychedelic"):
        preset_gradient("Lava")


def test_gradient_from_colormap() -> None:
    gradient = gradient_from_colormap("gray", 3, fill_color=0x123456)

    assert gradient == (0x123456, 0x000000, 0x808080, 0xFFFFFF)

    with pytest.raises(ValueError):
        gradient_from_colormap("gray", 0)


def test_gradient_swatch_layout() -> None:
    image = gradient_swatch([0x0000FF, 0x000000, 0xFFFFFF], width=100, height=4)
    pixels = np.asarray(image)

    assert image.size == (100, 4)
    assert pixels.shape == (4, 100, 3)
    # Fill block first, then the ramp starting at the first stop.
    assert tuple(pixels[0, 0]) == (0, 0, 255)
    assert tuple(pixels[0, 9]) == (0, 0, 255)
    assert tuple(pixels[0, 10]) == (0, 0, 0)
    # Halfway through the period the ramp reaches the second stop.
    assert tuple(pixels[0, 10 + 45]) == (255, 255, 255)
    assert (pixels[0] == pixels[3]).all()

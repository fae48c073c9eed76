import pytest

from svgsmith.naming import generate_component_name


@pytest.mark.parametrize(
    "filename, mode, expected",
    [
        ("my-cool-logo.png", "logo", "MyCoolLogo"),
        ("my_cool logo.final.png", "icon", "MyCoolLogoFinal"),
        ("HELLO world.svg", "icon", "HelloWorld"),
        ("arrow.svg", "icon", "Arrow"),
        ("123!!!.png", "icon", "Icon123"),
        ("123!!!.png", "logo", "Logo123"),
        ("___.png", "icon", "Icon"),
        ("", "logo", "Logo"),
    ],
)
def test_names_from_filename(filename, mode, expected):
    assert generate_component_name(filename, mode=mode) == expected


def test_custom_name_wins():
    assert generate_component_name("logo.png", "my brand!") == "Mybrand"
    assert generate_component_name("logo.png", "9lives") == "9lives"


def test_blank_custom_name_falls_back_to_filename():
    assert generate_component_name("star.png", "  ") == "Star"
    assert generate_component_name("star.png", "!!!") == "Star"


def test_names_are_truncated():
    name = generate_component_name("a-very-long-file-name-for-an-icon.png")

    assert len(name) == 25
    assert name == "AVeryLongFileNameForAnIco"
    assert len(generate_component_name("x.png", "z" * 40)) == 25

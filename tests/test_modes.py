import pytest

from svgsmith.errors import SvgsmithError, UnsupportedMode
from svgsmith.modes import FIXED_VIEWBOX, ICON_VIEWBOX, PRESERVE_ASPECT, get_mode_config


def test_icon_mode():
    config = get_mode_config("icon")

    assert config.color_count == 1
    assert config.use_current_color is True
    assert config.view_box_policy == FIXED_VIEWBOX
    assert ICON_VIEWBOX == "0 0 24 24"


def test_logo_mode():
    config = get_mode_config("logo")

    assert config.color_count == 6
    assert config.use_current_color is False
    assert config.view_box_policy == PRESERVE_ASPECT


def test_unknown_mode():
    with pytest.raises(UnsupportedMode) as excinfo:
        get_mode_config("banner")

    assert isinstance(excinfo.value, ValueError)
    assert isinstance(excinfo.value, SvgsmithError)
    assert "banner" in excinfo.value.reason


def test_error_message_includes_elapsed_time():
    error = SvgsmithError("tracer crashed", elapsed_ms=42)

    assert str(error) == "tracer crashed (after 42ms)"
    assert str(SvgsmithError("tracer crashed")) == "tracer crashed"

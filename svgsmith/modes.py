from dataclasses import dataclass

from .config import ICON_VIEWBOX_SIZE
from .errors import UnsupportedMode

FIXED_VIEWBOX = "fixed-24x24"
PRESERVE_ASPECT = "preserve-aspect"


@dataclass(frozen=True)
class ModeConfig:
    """Static vectorization policy for one output mode."""

    color_count: int
    use_current_color: bool
    view_box_policy: str
    description: str


MODE_CONFIG: dict[str, ModeConfig] = {
    "icon": ModeConfig(
        color_count=1,
        use_current_color=True,
        view_box_policy=FIXED_VIEWBOX,
        description="Standard Icon - single color, themeable",
    ),
    "logo": ModeConfig(
        color_count=6,
        use_current_color=False,
        view_box_policy=PRESERVE_ASPECT,
        description="Brand Logo - original colors, auto-optimized",
    ),
}

ICON_VIEWBOX = f"0 0 {ICON_VIEWBOX_SIZE} {ICON_VIEWBOX_SIZE}"


def get_mode_config(mode: str) -> ModeConfig:
    """Look up the policy for ``mode``, rejecting unknown modes."""
    try:
        return MODE_CONFIG[mode]
    except KeyError:
        known = ", ".join(sorted(MODE_CONFIG))
        raise UnsupportedMode(f"Unknown mode: {mode!r} (expected one of: {known})") from None

from .errors import SvgsmithError, UnsupportedFormat, UnsupportedMode, VectorizationFailure
from .modes import MODE_CONFIG, ModeConfig, get_mode_config
from .naming import generate_component_name
from .pipeline import ProcessingResult, process_image

__version__ = "0.1.0"

__all__ = [
    "MODE_CONFIG",
    "ModeConfig",
    "ProcessingResult",
    "SvgsmithError",
    "UnsupportedFormat",
    "UnsupportedMode",
    "VectorizationFailure",
    "generate_component_name",
    "get_mode_config",
    "process_image",
]

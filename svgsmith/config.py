import os
from pathlib import Path

# Base paths
PROJECT_ROOT = Path(__file__).parent.parent
OUTPUTS_DIR = PROJECT_ROOT / "data" / "outputs"

# Color extraction defaults
SAMPLE_SIZE = (100, 100)
CENTER_MARGIN = 0.2
MIN_SAMPLE_ALPHA = 128
NEAR_WHITE_CHANNEL = 240
KMEANS_ITERATIONS = 10
FALLBACK_PALETTE = ["#3B82F6", "#8B5CF6", "#06B6D4", "#10B981", "#F59E0B", "#EF4444"]

# Background detection / removal defaults
BACKGROUND_QUANTUM = 10
BACKGROUND_TOLERANCE = 30
TRIM_PADDING = 4

# Tracing defaults
WORKING_SIZE = 512
SILHOUETTE_WHITE_LEVEL = 250
TRACE_THRESHOLD = 128
TRACE_TURD_SIZE = 2
TRACE_OPT_TOLERANCE = 0.2
TRACE_ALPHA_MAX = 1.0
MAX_POSTERIZE_STEPS = 5
SEGMENTATION_TOLERANCE = 60
SEGMENTATION_MIN_BYTES = 50_000

# Post-processing defaults
TEXT_BRIGHTNESS_HIGH = 200
TEXT_BRIGHTNESS_LOW = 30
BACKGROUND_PATH_MAX_COMMANDS = 8
ICON_VIEWBOX_SIZE = 24
LOGO_VIEWBOX_MAX = 100
COMPONENT_NAME_MAX_LENGTH = 25

# Remote background removal (remove.bg compatible)
REMOVE_BG_API_KEY = os.getenv("REMOVE_BG_API_KEY")
REMOVE_BG_URL = os.getenv("REMOVE_BG_URL", "https://api.remove.bg/v1.0/removebg")
REMOVE_BG_TIMEOUT = float(os.getenv("REMOVE_BG_TIMEOUT", "20"))
REMOVE_BG_CACHE_DIR = os.getenv("REMOVE_BG_CACHE_DIR")

# Latency
VECTORIZE_TIMEOUT = float(os.getenv("SVGSMITH_VECTORIZE_TIMEOUT", "30"))
LATENCY_WARNING_MS = int(os.getenv("SVGSMITH_LATENCY_WARNING_MS", "8000"))

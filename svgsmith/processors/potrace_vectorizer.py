"""
Potrace-based tracing backend.

Potrace uses an O(n²) global optimization algorithm that finds the best way
to trace a shape, making it ideal for logos and fonts where sharp corners matter.
It only traces monochrome bitmaps, which is exactly what Vectorizer hands to
its backends: each mask is written as a PBM file and traced by the
``potrace`` command line tool.
"""

import subprocess
import tempfile
from pathlib import Path

import numpy as np

from ..config import VECTORIZE_TIMEOUT
from ..errors import VectorizationFailure
from .vectorizer import TracedPath, TraceParams, Vectorizer, extract_paths


def _save_pbm(bw_array: np.ndarray, output_path: str) -> str:
    """Save a binary array as PBM (portable bitmap) format."""
    h, w = bw_array.shape

    # Convert to 1-bit (0 = white, 1 = black for PBM)
    bits = (bw_array < 128).astype(np.uint8)

    # PBM P4 format (binary)
    header = f"P4\n{w} {h}\n".encode("ascii")

    # Pack bits into bytes (8 pixels per byte)
    packed = np.packbits(bits, axis=1)

    with open(output_path, "wb") as f:
        f.write(header + packed.tobytes())

    return output_path


class PotraceVectorizer(Vectorizer):
    """Vectorizer backed by the ``potrace`` executable."""

    name = "potrace"

    def __init__(self, executable: str = "potrace", timeout: float = VECTORIZE_TIMEOUT):
        """
        Args:
            executable: Name or path of the potrace binary
            timeout: Seconds allowed for a single potrace run
        """
        self.executable = executable
        self.timeout = timeout

    def trace_mask(self, mask: np.ndarray, params: TraceParams) -> list[TracedPath]:
        # Black where the shape is, white elsewhere (potrace traces black)
        bw = np.where(mask, 0, 255).astype(np.uint8)

        with tempfile.TemporaryDirectory() as temp_dir:
            pbm_path = Path(temp_dir) / "mask.pbm"
            svg_path = Path(temp_dir) / "mask.svg"
            _save_pbm(bw, str(pbm_path))

            cmd = [
                self.executable,
                str(pbm_path),
                "-s",  # SVG output
                "-o", str(svg_path),
                "-a", str(params.alpha_max),  # Corner smoothness
                "-t", str(params.turd_size),  # Remove tiny noise paths
                "-O", str(params.opt_tolerance),  # Curve optimization
            ]

            try:
                subprocess.run(cmd, check=True, capture_output=True, timeout=self.timeout)
            except FileNotFoundError as e:
                raise VectorizationFailure(f"potrace executable not found: {self.executable}") from e
            except subprocess.TimeoutExpired as e:
                raise VectorizationFailure(f"potrace timed out after {self.timeout}s") from e
            except subprocess.CalledProcessError as e:
                stderr = (e.stderr or b"").decode(errors="replace").strip()
                raise VectorizationFailure(f"potrace exited with {e.returncode}: {stderr}") from e

            return extract_paths(svg_path.read_text())

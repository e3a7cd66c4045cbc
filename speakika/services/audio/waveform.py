"""Min/max waveform envelope scaled to a drawing surface.

The envelope is computed over pixel columns of a surface whose backing
size is the client size times the device pixel ratio. Rendering is pure:
identical samples and dimensions always yield an identical envelope.
"""

import math
from dataclasses import dataclass

import numpy as np

BACKGROUND_FILL = "rgba(255, 255, 255, 0.05)"
STROKE_COLOR = "rgba(255, 255, 255, 0.9)"
LINE_WIDTH = 2


@dataclass(frozen=True)
class WaveformEnvelope:
    """Per-column minimum and maximum mapped to pixel y coordinates.

    Attributes:
        width: Backing surface width in device pixels.
        height: Backing surface height in device pixels.
        min_y: Pixel y of each column's minimum sample.
        max_y: Pixel y of each column's maximum sample.
    """

    width: int
    height: int
    min_y: tuple[float, ...]
    max_y: tuple[float, ...]

    @property
    def amplitude(self) -> float:
        return self.height / 2

    def to_path(self) -> str:
        """SVG path data tracing the envelope from the left to the right centre."""
        amp = self.amplitude
        parts = [f"M0 {amp:g}"]
        for i, (lo, hi) in enumerate(zip(self.min_y, self.max_y)):
            parts.append(f"L{i} {lo:g}")
            parts.append(f"L{i} {hi:g}")
        parts.append(f"L{self.width} {amp:g}")
        return " ".join(parts)

    def to_svg(self, css_width: str = "100%", css_height: str = "100%") -> str:
        """Standalone SVG: translucent background plus the stroked envelope."""
        return (
            f'<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 {self.width} {self.height}" '
            f'width="{css_width}" height="{css_height}" preserveAspectRatio="none">'
            f'<rect x="0" y="0" width="{self.width}" height="{self.height}" '
            f'fill="{BACKGROUND_FILL}"/>'
            f'<path d="{self.to_path()}" fill="none" stroke="{STROKE_COLOR}" '
            f'stroke-width="{LINE_WIDTH}"/>'
            "</svg>"
        )


def compute_envelope(
    channel: np.ndarray,
    client_width: float,
    client_height: float,
    device_pixel_ratio: float = 1.0,
) -> WaveformEnvelope:
    """Compute the min/max envelope of one channel.

    Args:
        channel: 1-D float samples in [-1.0, 1.0].
        client_width: Surface width in CSS pixels.
        client_height: Surface height in CSS pixels.
        device_pixel_ratio: Device pixels per CSS pixel.

    Returns:
        WaveformEnvelope with one entry per device-pixel column.
    """
    ratio = device_pixel_ratio or 1.0
    width = max(int(client_width * ratio), 0)
    height = max(int(client_height * ratio), 0)
    amp = height / 2

    samples = np.asarray(channel, dtype=np.float32).ravel()
    if width == 0:
        return WaveformEnvelope(width=0, height=height, min_y=(), max_y=())
    if samples.size == 0:
        flat = (amp,) * width
        return WaveformEnvelope(width=width, height=height, min_y=flat, max_y=flat)

    step = math.ceil(samples.size / width)
    # Columns that run past the end read zeros
    padded = np.zeros(width * step, dtype=np.float32)
    padded[: samples.size] = samples
    columns = padded.reshape(width, step)

    lows = np.minimum(columns.min(axis=1), 1.0)
    highs = np.maximum(columns.max(axis=1), -1.0)
    min_y = tuple(float(v) for v in (1.0 + lows) * amp)
    max_y = tuple(float(v) for v in (1.0 + highs) * amp)
    return WaveformEnvelope(width=width, height=height, min_y=min_y, max_y=max_y)

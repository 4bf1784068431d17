"""Per-frame render state and conversion of accumulated radiance into images."""

from __future__ import annotations

import math
import os
import struct
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Iterable

from PIL import Image

from shrimpy.tracer import Camera

_UNIFORM_TAIL_LAYOUT = struct.Struct("<IIfIff2I")
_CHANNELS = 4


@dataclass
class Uniforms:
    """Values handed to the shader every frame (96 bytes on the GPU)."""

    width: int
    height: int
    camera: Camera = field(default_factory=Camera)
    elapsed_seconds: float = 0.0
    frame_count: int = 0
    gamma_correction: float = 2.2
    pseudo_chromatic_aberration: float = 0.0

    def reset(self) -> None:
        """Restart accumulation from the next frame."""
        self.frame_count = 0

    def advance_frame(self, elapsed_seconds: float) -> None:
        """Record the time since start and count one more accumulated frame."""
        self.elapsed_seconds = float(elapsed_seconds)
        self.frame_count += 1

    def current_buffer(self) -> int:
        """Index (0 or 1) of the radiance texture written in the current frame."""
        return self.frame_count % 2

    def to_bytes(self) -> bytes:
        """The 96-byte GPU layout."""
        return self.camera.to_bytes() + _UNIFORM_TAIL_LAYOUT.pack(
            self.width,
            self.height,
            self.elapsed_seconds,
            self.frame_count,
            self.gamma_correction,
            self.pseudo_chromatic_aberration,
            0,
            0,
        )


def _to_byte(value: float) -> int:
    """Saturating float-to-byte conversion: NaN and negatives give 0."""
    if math.isnan(value) or value <= 0.0:
        return 0
    if value >= 255.0:
        return 255
    return int(value)


def _encode(sample: float, frame_count: int, exponent: float) -> int:
    averaged = sample / frame_count
    try:
        corrected = math.pow(averaged, exponent)
    except ValueError:
        return 0
    except OverflowError:
        return 255
    return _to_byte(corrected * 255.0)


def tonemap(samples: Iterable[float], frame_count: int, gamma: float) -> bytes:
    """Average accumulated samples over ``frame_count`` frames, gamma-correct, clamp to bytes."""
    if frame_count < 1:
        raise ValueError("frame_count must be at least 1")
    if gamma <= 0:
        raise ValueError("gamma must be positive")
    exponent = 1.0 / gamma
    return bytes(_encode(float(s), frame_count, exponent) for s in samples)


def render_image(
    samples: Iterable[float], width: int, height: int, frame_count: int, gamma: float
) -> Image.Image:
    """Turn accumulated RGBA radiance samples into an 8-bit RGBA image."""
    data = tonemap(samples, frame_count, gamma)
    needed = width * height * _CHANNELS
    if width < 1 or height < 1 or len(data) < needed:
        raise ValueError("failed to create image from raw data")
    return Image.frombytes("RGBA", (width, height), data[:needed])


def save_render(
    samples: Iterable[float],
    uniforms: Uniforms,
    directory: str | os.PathLike = "imgs",
    now: datetime | None = None,
) -> Path:
    """Write the current render as a PNG named after the timestamp; return its path."""
    image = render_image(
        samples,
        uniforms.width,
        uniforms.height,
        uniforms.frame_count,
        uniforms.gamma_correction,
    )
    stamp = (now or datetime.now()).strftime("%Y-%m-%d-%H-%M-%S")
    path = Path(directory) / f"{stamp}.png"
    with open(path, "wb") as handle:
        image.save(handle, format="PNG")
    return path
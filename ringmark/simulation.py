"""Generate noisy, compression-like frames from a still image."""

from __future__ import annotations

import argparse
from pathlib import Path

import numpy as np
from PIL import Image
from scipy.ndimage import median_filter

N_FRAMES = 100
_NOISE_MEAN = 0.0
_NOISE_STDDEV = 1.5
_SEED = 1


def _add_noise(values: np.ndarray, noise: np.ndarray) -> np.ndarray:
    return np.clip(values.astype(np.int32) + noise, 0, 255)


def generate_compressed_frame(src, rng=None) -> np.ndarray:
    """Return a median-blurred copy of a gray image with block and pixel noise.

    Gaussian noise (mean 0, standard deviation 1.5, truncated toward zero) is
    added first once per 3x3 block and then once per pixel; values stay in
    ``0..255``.
    """
    src = np.asarray(src)
    if src.ndim != 2:
        raise ValueError("src must be a two-dimensional gray image")
    if src.dtype != np.uint8:
        raise ValueError("src must hold 8-bit values")
    if rng is None:
        rng = np.random.default_rng()

    rows, cols = src.shape
    tmp = median_filter(src, size=5, mode="nearest").astype(np.int32)

    n_block_rows = len(range(1, rows - 1, 3))
    n_block_cols = len(range(1, cols - 1, 3))
    if n_block_rows and n_block_cols:
        block_noise = np.trunc(
            rng.normal(_NOISE_MEAN, _NOISE_STDDEV, size=(n_block_rows, n_block_cols))
        ).astype(np.int32)
        expanded = np.repeat(np.repeat(block_noise, 3, axis=0), 3, axis=1)
        h, w = expanded.shape
        tmp[:h, :w] = _add_noise(tmp[:h, :w], expanded)

    pixel_noise = np.trunc(
        rng.normal(_NOISE_MEAN, _NOISE_STDDEV, size=(rows, cols))
    ).astype(np.int32)
    tmp = _add_noise(tmp, pixel_noise)
    return tmp.astype(np.uint8)


def main(argv=None) -> int:
    """Write ``N_FRAMES`` noisy frames of an input image into a directory."""
    parser = argparse.ArgumentParser(
        description="Generate noisy frames from an image for detection tests."
    )
    parser.add_argument("input", help="path to the source image")
    parser.add_argument("output_dir", help="directory receiving the generated frames")
    args = parser.parse_args(argv)

    with Image.open(args.input) as image:
        gray = np.asarray(image.convert("L"), dtype=np.uint8)

    out_dir = Path(args.output_dir)
    rng = np.random.default_rng(_SEED)
    for i in range(N_FRAMES):
        frame = generate_compressed_frame(gray, rng)
        Image.fromarray(frame, mode="L").save(out_dir / f"{i:05d}.png")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
import numpy as np
import pytest
from PIL import Image

from ringmark.simulation import N_FRAMES, generate_compressed_frame, main


def _image(rows=12, cols=15):
    rng = np.random.default_rng(7)
    return rng.integers(0, 256, size=(rows, cols), dtype=np.uint8)


def test_output_keeps_shape_and_dtype():
    src = _image()
    out = generate_compressed_frame(src, np.random.default_rng(0))
    assert out.shape == src.shape
    assert out.dtype == np.uint8


def test_same_seed_same_frame():
    src = _image()
    a = generate_compressed_frame(src, np.random.default_rng(3))
    b = generate_compressed_frame(src, np.random.default_rng(3))
    assert np.array_equal(a, b)


def test_constant_image_stays_close():
    src = np.full((30, 30), 128, dtype=np.uint8)
    out = generate_compressed_frame(src, np.random.default_rng(1)).astype(int)
    assert abs(out.mean() - 128) < 1.0
    assert np.abs(out - 128).max() < 20


def test_values_clipped_at_extremes():
    white = np.full((9, 9), 255, dtype=np.uint8)
    black = np.zeros((9, 9), dtype=np.uint8)
    out_white = generate_compressed_frame(white, np.random.default_rng(2))
    out_black = generate_compressed_frame(black, np.random.default_rng(2))
    assert out_white.max() == 255
    assert out_black.min() == 0
    assert out_white.min() > 200
    assert out_black.max() < 55


def test_rejects_color_image():
    with pytest.raises(ValueError):
        generate_compressed_frame(np.zeros((4, 4, 3), dtype=np.uint8), np.random.default_rng(0))


def test_rejects_non_byte_image():
    with pytest.raises(ValueError):
        generate_compressed_frame(np.zeros((4, 4), dtype=np.float32), np.random.default_rng(0))


def test_main_writes_numbered_frames(tmp_path):
    src_path = tmp_path / "src.png"
    Image.fromarray(_image(6, 6), mode="L").save(src_path)
    out_dir = tmp_path / "out"
    out_dir.mkdir()
    assert main([str(src_path), str(out_dir)]) == 0
    names = sorted(p.name for p in out_dir.iterdir())
    assert len(names) == N_FRAMES
    assert names[0] == "00000.png"
    assert names[-1] == f"{N_FRAMES - 1:05d}.png"
    with Image.open(out_dir / "00000.png") as frame:
        assert frame.size == (6, 6)


def test_main_requires_arguments():
    with pytest.raises(SystemExit):
        main([])
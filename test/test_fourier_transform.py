import numpy as np
import pytest
from fourier_core import fourier_transform
from fourier_core.complex_image import ComplexImage
from fourier_core.rgb_complex_image import RGBComplexImage
from fourier_core.fourier_transform import (
    Direction, FourierTransform, fft1d, cooley_tukey_fft, dft
)

def _random_image(width, height, seed=0, complex_values=False):
    rng = np.random.default_rng(seed)
    data = rng.random(width * height)
    if complex_values:
        data = data + 1j * rng.random(width * height)
    return ComplexImage(width, height, data)

def test_fft1d_matches_numpy_power_of_two():
    rng = np.random.default_rng(0)
    for n in [2, 4, 8, 16, 64]:
        sig = rng.random(n) + 1j * rng.random(n)
        out = sig.copy()
        fft1d(out, Direction.FORWARD)
        assert np.allclose(out, np.fft.fft(sig))

def test_fft1d_matches_numpy_other_lengths():
    rng = np.random.default_rng(1)
    for n in [3, 5, 6, 12, 30]:
        sig = rng.random(n) + 1j * rng.random(n)
        out = sig.copy()
        fft1d(out, Direction.FORWARD)
        assert np.allclose(out, np.fft.fft(sig))
        fft1d(out, Direction.INVERSE)
        assert np.allclose(out, sig)

def test_inverse_is_normalized():
    rng = np.random.default_rng(2)
    sig = rng.random(32) + 1j * rng.random(32)
    out = sig.copy()
    fft1d(out, Direction.INVERSE)
    assert np.allclose(out, np.fft.ifft(sig))

def test_cooley_tukey_agrees_with_dft():
    rng = np.random.default_rng(3)
    sig = rng.random(32) + 1j * rng.random(32)
    a = sig.copy()
    b = sig.copy()
    cooley_tukey_fft(a, Direction.FORWARD)
    dft(b, Direction.FORWARD)
    assert np.allclose(a, b)

def test_length_one_is_noop():
    sig = np.array([2.5 + 1j])
    fft1d(sig, Direction.FORWARD)
    assert sig[0] == 2.5 + 1j

def test_dft_warns_past_threshold(monkeypatch):
    monkeypatch.setattr(fourier_transform, "DFT_WARN_LENGTH", 4)
    sig = np.ones(6, dtype=np.complex128)
    with pytest.warns(RuntimeWarning):
        dft(sig, Direction.FORWARD)

def test_transform2d_matches_numpy():
    ft = FourierTransform()
    for w, h in [(16, 8), (6, 10), (1, 4)]:
        img = _random_image(w, h, seed=w * h)
        F = ft.transform2d(img, Direction.FORWARD)
        assert (F.width, F.height) == (w, h)
        assert np.allclose(F.as_array(), np.fft.fft2(img.as_array()))

def test_transform2d_does_not_modify_input():
    ft = FourierTransform()
    img = _random_image(8, 8)
    before = img.copy()
    ft.transform2d(img, Direction.FORWARD)
    assert img == before

def test_transform2d_zero_size():
    ft = FourierTransform()
    out = ft.transform2d(ComplexImage(0, 5), Direction.FORWARD)
    assert out.width == 0 and out.height == 0
    assert out.data.size == 0

def test_roundtrip_power_of_two():
    ft = FourierTransform()
    img = _random_image(32, 16, seed=5, complex_values=True)
    back = ft.transform2d(ft.transform2d(img, Direction.FORWARD), Direction.INVERSE)
    assert np.max(np.abs(back.data.real - img.data.real)) < 1e-6
    assert np.allclose(back.data, img.data)

def test_roundtrip_non_power_of_two():
    ft = FourierTransform()
    img = _random_image(5, 7, seed=6)
    back = ft.transform2d(ft.transform2d(img, Direction.FORWARD), Direction.INVERSE)
    assert np.allclose(back.data, img.data)

def test_delta_has_flat_spectrum():
    ft = FourierTransform()
    img = ComplexImage(8, 8)
    img.set_at(0, 0, 1.0)
    F = ft.transform2d(img, Direction.FORWARD)
    assert np.allclose(F.data, 1.0)

# --- masks ---
def test_lowpass_mask_natural_layout():
    ft = FourierTransform()
    F = ComplexImage(8, 8, np.ones(64))
    out = ft.apply_frequency_mask(F, 2.0, low_pass=True)
    assert out.at(0, 0) == 1
    assert out.at(7, 0) == 1      # fx = -1
    assert out.at(2, 0) == 1      # radius == cutoff is kept
    assert out.at(4, 4) == 0      # fx = fy = -4
    assert out.at(3, 0) == 0
    assert F.at(4, 4) == 1        # input untouched

def test_highpass_mask_natural_layout():
    ft = FourierTransform()
    F = ComplexImage(8, 8, np.ones(64))
    out = ft.apply_frequency_mask(F, 2.0, low_pass=False)
    assert out.at(0, 0) == 0
    assert out.at(1, 1) == 0
    assert out.at(2, 0) == 1
    assert out.at(4, 4) == 1

def test_circular_mask_center_origin():
    ft = FourierTransform()
    F = ComplexImage(8, 8, np.ones(64))
    out = ft.apply_frequency_mask_circular(F, 0.5)  # max radius = 2 around (4, 4)
    assert out.at(4, 4) == 1
    assert out.at(6, 4) == 1
    assert out.at(7, 4) == 0
    assert out.at(0, 0) == 0

def test_lowpass_removes_high_frequency_detail():
    ft = FourierTransform()
    x = np.arange(32)
    row = np.cos(2 * np.pi * 1 * x / 32) + np.cos(2 * np.pi * 10 * x / 32)
    img = ComplexImage.from_array(np.tile(row, (32, 1)))
    F = ft.transform2d(img, Direction.FORWARD)
    smooth = ft.transform2d(ft.apply_frequency_mask(F, 4.0, low_pass=True), Direction.INVERSE)
    expected = np.tile(np.cos(2 * np.pi * x / 32), (32, 1))
    assert np.allclose(smooth.as_array().real, expected, atol=1e-9)

# --- top-K ---
def test_top_indices_sorted_and_bounded():
    ft = FourierTransform()
    F = ft.transform2d(_random_image(16, 16, seed=7), Direction.FORWARD)
    mags = F.get_magnitude_image()
    idx = ft.get_top_frequency_indices(F, 20)
    assert len(idx) == 20
    values = [mags[y * F.width + x] for x, y in idx]
    assert all(a >= b for a, b in zip(values, values[1:]))
    assert np.allclose(sorted(mags, reverse=True)[:20], values)

def test_top_indices_k_larger_than_bins():
    ft = FourierTransform()
    F = _random_image(3, 2, seed=8)
    assert len(ft.get_top_frequency_indices(F, 100)) == 6
    assert ft.get_top_frequency_indices(F, 0) == []
    assert ft.get_top_frequency_indices(F, -3) == []

def test_top_indices_ties_row_major():
    ft = FourierTransform()
    F = ComplexImage(3, 2, np.ones(6))
    idx = ft.get_top_frequency_indices(F, 6)
    assert idx == [(0, 0), (1, 0), (2, 0), (0, 1), (1, 1), (2, 1)]

def test_keep_top_frequencies():
    ft = FourierTransform()
    F = ft.transform2d(_random_image(8, 8, seed=9), Direction.FORWARD)
    for k in [0, 1, 5, 64, 200]:
        kept = ft.keep_top_frequencies(F, k)
        nonzero = np.count_nonzero(kept.data)
        assert nonzero <= min(k, 64)
        for x, y in ft.get_top_frequency_indices(F, k):
            assert kept.at(x, y) == F.at(x, y)
    assert ft.keep_top_frequencies(F, 64) == F

# --- RGB ---
def _random_rgb(width, height, seed=0):
    rng = np.random.default_rng(seed)
    rgb = rng.integers(0, 256, size=(width * height, 3), dtype=np.uint32)
    packed = (rgb[:, 0] << 24) | (rgb[:, 1] << 16) | (rgb[:, 2] << 8) | np.uint32(0xFF)
    return RGBComplexImage.from_rgb(packed, width, height)

def test_rgb_transform_is_per_channel():
    ft = FourierTransform()
    img = _random_rgb(8, 4, seed=10)
    F = ft.transform_rgb2d(img, Direction.FORWARD)
    assert (F.width, F.height) == (8, 4)
    for idx in range(3):
        assert F.get_channel(idx) == ft.transform2d(img.get_channel(idx), Direction.FORWARD)

def test_rgb_parallel_matches_sequential():
    img = _random_rgb(16, 16, seed=11)
    seq = FourierTransform(parallel_channels=False)
    par = FourierTransform(parallel_channels=True)
    F_seq = seq.transform_rgb2d(img, Direction.FORWARD)
    F_par = par.transform_rgb2d(img, Direction.FORWARD)
    assert F_seq == F_par
    assert seq.keep_top_frequencies_rgb(F_seq, 10) == par.keep_top_frequencies_rgb(F_par, 10)

def test_keep_top_frequencies_rgb_per_channel():
    ft = FourierTransform()
    F = ft.transform_rgb2d(_random_rgb(8, 8, seed=12), Direction.FORWARD)
    kept = ft.keep_top_frequencies_rgb(F, 3)
    for idx in range(3):
        assert kept.get_channel(idx) == ft.keep_top_frequencies(F.get_channel(idx), 3)

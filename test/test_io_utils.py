import numpy as np
import pytest
from PIL import Image
from io_utils.image_handler import (
    read_image, save_image, detect_is_color, pack_rgb, unpack_rgb, rgb_to_grayscale, rgb_to_luma,
    load_grayscale_image, load_rgb_image, save_complex_image, save_rgb_image,
)
from io_utils.file_utils import make_result_filename, save_parameters_txt
from fourier_core.complex_image import ComplexImage
from fourier_core.rgb_complex_image import RGBComplexImage

def test_detect_is_color():
    assert detect_is_color(np.zeros((16,16,3)))
    assert not detect_is_color(np.zeros((16,16)))

def test_save_and_read_roundtrip(tmp_path):
    arr = np.arange(100).reshape(10, 10).astype(np.uint8)
    p = tmp_path / "test.png"
    save_image(str(p), arr)
    out, meta = read_image(str(p))
    assert out.shape == arr.shape
    assert out.dtype == np.uint8
    assert np.array_equal(out, arr)
    assert meta["mode"] == "L"

def test_save_image_rejects_bad_shape(tmp_path):
    with pytest.raises(ValueError):
        save_image(str(tmp_path / "bad.png"), np.zeros((4, 4, 2), dtype=np.uint8))

def test_read_image_alpha(tmp_path):
    arr = np.zeros((10,10,4), dtype=np.uint8)
    p = tmp_path / "rgba.png"
    Image.fromarray(arr).save(p)
    rgb, meta = read_image(str(p))
    assert meta["has_alpha"]
    assert rgb.shape == (10,10,3)

def test_pack_unpack_rgb():
    arr = np.array([[[0x12, 0x34, 0x56], [255, 0, 128]]], dtype=np.uint8)
    packed = pack_rgb(arr)
    assert packed.dtype == np.uint32
    assert int(packed[0]) == 0x123456FF
    assert int(packed[1]) == 0xFF0080FF
    assert np.array_equal(unpack_rgb(packed, 2, 1), arr)

def test_pack_gray_replicates():
    packed = pack_rgb(np.array([[7]], dtype=np.uint8))
    assert int(packed[0]) == 0x070707FF

def test_rgb_to_grayscale_weights():
    arr = np.array([[[255, 0, 0], [0, 255, 0], [0, 0, 255]]], dtype=np.uint8)
    gray = rgb_to_grayscale(arr)
    assert list(gray[0]) == [76, 149, 29]

def test_load_grayscale_image(tmp_path):
    arr = np.array([[0, 255], [51, 102]], dtype=np.uint8)
    p = tmp_path / "gray.png"
    save_image(str(p), arr)
    img = load_grayscale_image(str(p))
    assert isinstance(img, ComplexImage)
    assert (img.width, img.height) == (2, 2)
    assert np.allclose(img.data.real, [0.0, 1.0, 0.2, 0.4])

def test_load_rgb_image(tmp_path):
    arr = np.zeros((3, 4, 3), dtype=np.uint8)
    arr[..., 0] = 255
    arr[1, 2] = (10, 20, 30)
    p = tmp_path / "rgb.png"
    save_image(str(p), arr)
    img = load_rgb_image(str(p))
    assert isinstance(img, RGBComplexImage)
    assert (img.width, img.height) == (4, 3)
    assert img.get_channel(0).at(0, 0) == 1.0
    assert img.get_channel(2).at(2, 1) == pytest.approx(30 / 255.0)

def test_save_complex_and_rgb_images(tmp_path):
    img = ComplexImage.from_array(np.linspace(0.0, 1.0, 12).reshape(3, 4))
    p = save_complex_image(str(tmp_path / "c.png"), img)
    out, _ = read_image(p)
    assert out.shape == (3, 4)
    assert out[0, 0] == 0 and out[-1, -1] == 255

    rgb = RGBComplexImage.from_rgb([0x102030FF] * 6, 3, 2)
    p = save_rgb_image(str(tmp_path / "rgb.png"), rgb)
    out, _ = read_image(p)
    assert out.shape == (2, 3, 3)
    assert tuple(out[1, 2]) == (0x10, 0x20, 0x30)

def test_result_filename_and_parameters(tmp_path):
    path = make_result_filename("fourier", "/data/cat.png", 64, "gray", "frame one", outdir=str(tmp_path))
    assert path.startswith(str(tmp_path))
    assert "cat_k-64_gray_frame_one" in path
    params = save_parameters_txt(str(tmp_path), {"parallel": True, "frequency_counts": [1, 2]})
    with open(params, encoding="utf-8") as f:
        assert f.read() == "frequency_counts: 1, 2\nparallel: True\n"

def test_load_grayscale_keeps_fractional_luma(tmp_path):
    arr = np.array([[[255, 0, 0], [0, 0, 255], [10, 20, 30]]], dtype=np.uint8)
    p = tmp_path / "colour.png"
    save_image(str(p), arr)
    img = load_grayscale_image(str(p))
    expected = rgb_to_luma(arr).reshape(-1) / 255.0
    assert np.allclose(img.data.real, expected)
    assert img.at(0, 0).real == pytest.approx(0.299)
    assert img.at(1, 0).real == pytest.approx(0.114)

import logging

import numpy as np
import pytest

from models.errors import InvalidDimension, UnsupportedMode
from models.expansion import PackPolicy
from models.grayscale_image import GrayscaleImage
from models.image import Image
from models.reduction_policy import ReductionPolicy
from services.grayscale_service import GrayscaleService


@pytest.fixture
def service():
    return GrayscaleService(pack_policy="truncate", with_alpha=False)


def _levels(img: Image) -> np.ndarray:
    """Assert R == G == B and return the shared (H, W) channel."""
    r, g, b = img.pixels[:, :, 0], img.pixels[:, :, 1], img.pixels[:, :, 2]
    assert np.array_equal(r, g) and np.array_equal(g, b)
    return r


def test_method_a_values(service, make_image, primaries):
    gray = service.convert_method_a(make_image(primaries))
    assert gray.to_array().tolist() == [[85, 85, 85], [0, 255, 128]]


def test_method_b_values(service, make_image, primaries):
    gray = service.convert_method_b(make_image(primaries))
    assert gray.to_array().tolist() == [[54, 182, 18], [0, 255, 128]]


@pytest.mark.parametrize("policy", list(ReductionPolicy))
def test_output_keeps_input_dimensions(service, policy):
    img = Image(pixels=np.zeros((3, 5, 3), dtype=np.uint8))
    gray = service.convert(img, policy)
    assert (gray.width, gray.height) == (5, 3)


def test_coordinates_follow_x_column_y_row(service):
    pixels = np.zeros((2, 3, 3), dtype=np.uint8)
    pixels[1, 2] = (90, 90, 90)
    gray = service.convert_method_a(Image(pixels=pixels))
    assert gray.get_pixel(2, 1) == 90
    assert gray.get_pixel(1, 1) == 0


def test_input_is_not_modified(service, make_image, primaries):
    img = make_image(primaries)
    before = img.pixels.copy()
    service.convert_method_a(img)
    service.convert_method_b(img)
    assert np.array_equal(img.pixels, before)


def test_malformed_input_rejected(service):
    with pytest.raises(ValueError):
        service.convert_method_a(Image(pixels=np.zeros((2, 2), dtype=np.uint8)))
    with pytest.raises(ValueError):
        service.convert_method_a(Image(pixels=np.zeros((2, 2, 3), dtype=np.float32)))
    with pytest.raises(ValueError):
        service.convert_method_b(Image(pixels=[[(0, 0, 0)]]))


def test_empty_input_rejected(service):
    with pytest.raises(InvalidDimension):
        service.convert_method_a(Image(pixels=np.zeros((0, 4, 3), dtype=np.uint8)))


def test_direct_mode_uses_sample(service):
    gray = GrayscaleImage(2, 1)
    gray.set_pixel(0, 0, 1)
    gray.set_pixel(1, 0, 200)
    out = service.expand_to_rgb(gray, 1)
    assert out.pixels.shape == (1, 2, 3)
    assert out.pixels.dtype == np.uint8
    assert _levels(out).tolist() == [[1, 200]]


def test_normalize_mode_multiplies_by_255(service):
    gray = GrayscaleImage(2, 1)
    gray.set_pixel(0, 0, 1)
    out = service.expand_to_rgb(gray, 0)
    assert _levels(out).tolist() == [[255, 0]]


@pytest.mark.parametrize("policy, expected", [("truncate", 254), ("clamp", 255)])
def test_normalize_overflow_follows_pack_policy(service, policy, expected):
    gray = GrayscaleImage(1, 1)
    gray.set_pixel(0, 0, 2)
    out = service.expand_to_rgb(gray, 0, pack_policy=policy)
    assert _levels(out)[0, 0] == expected


def test_direct_overflow_follows_service_policy():
    gray = GrayscaleImage(1, 1)
    gray.set_pixel(0, 0, 300)
    assert _levels(GrayscaleService(pack_policy="truncate").expand_to_rgb(gray, 1))[0, 0] == 44
    assert _levels(GrayscaleService(pack_policy=PackPolicy.CLAMP).expand_to_rgb(gray, 1))[0, 0] == 255


def test_normalize_warns_on_unnormalized_samples(service, caplog):
    gray = GrayscaleImage.from_array(np.array([[0, 128]]))
    with caplog.at_level(logging.WARNING):
        service.expand_to_rgb(gray, 0)
    assert "Normalize mode" in caplog.text


@pytest.mark.parametrize("mode", [2, -1, "x"])
def test_unsupported_mode(service, mode):
    with pytest.raises(UnsupportedMode):
        service.expand_to_rgb(GrayscaleImage(1, 1), mode)


def test_alpha_channel_is_opaque(service):
    gray = GrayscaleImage.from_array(np.array([[10, 20]]))
    out = service.expand_to_rgb(gray, 1, with_alpha=True)
    assert out.pixels.shape == (1, 2, 4)
    assert out.pixels[:, :, 3].tolist() == [[255, 255]]
    assert out.pixels[:, :, 0].tolist() == [[10, 20]]


def test_path_is_attached(service, tmp_path):
    out = service.expand_to_rgb(GrayscaleImage(1, 1), 1, path=tmp_path / "g.png")
    assert out.path == tmp_path / "g.png"
    assert out.width == 1 and out.height == 1


@pytest.mark.parametrize("policy", list(ReductionPolicy))
def test_direct_expansion_survives_re_reduction(service, policy):
    rng = np.random.default_rng(7)
    gray = GrayscaleImage.from_array(rng.integers(0, 256, size=(4, 5)))
    rgb = service.expand_to_rgb(gray, 1)
    again = service.convert(rgb, policy)
    assert np.array_equal(again.to_array(), gray.to_array())


def test_defaults_come_from_environment(monkeypatch):
    monkeypatch.setenv("PACK_POLICY", "clamp")
    monkeypatch.setenv("OUTPUT_ALPHA", "true")
    svc = GrayscaleService()
    assert svc.pack_policy is PackPolicy.CLAMP
    assert svc.with_alpha is True


def test_bad_pack_policy_in_environment(monkeypatch):
    monkeypatch.setenv("PACK_POLICY", "wrap")
    with pytest.raises(ValueError):
        GrayscaleService()


@pytest.mark.parametrize("mode", [0.5, 1.9, True, np.float64(0.7)])
def test_non_integer_mode_rejected(service, mode):
    with pytest.raises(UnsupportedMode):
        service.expand_to_rgb(GrayscaleImage(1, 1), mode)

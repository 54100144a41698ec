"""Tests for Product image list management."""

import pytest
from catalog.product.events import ProductImageAdded, ProductImageRemoved, ProductImagesRearranged
from catalog.product.product import MAX_IMAGES_PER_PRODUCT, Product
from protean.exceptions import ValidationError


def _make_product(image_ids=()):
    product = Product.create(name="Pearl Earring", price=250.0, quantity_in_stock=5)
    for image_id in image_ids:
        product.attach_image(image_id)
    product._events.clear()
    return product


class TestAttachImage:
    def test_attach_appends_in_order(self):
        product = _make_product(["img-1", "img-2"])
        product.attach_image("img-3")

        assert product.images == ["img-1", "img-2", "img-3"]

    def test_attach_raises_event(self):
        product = _make_product(["img-1"])
        product.attach_image("img-2")

        assert len(product._events) == 1
        event = product._events[0]
        assert isinstance(event, ProductImageAdded)
        assert event.image_id == "img-2"
        assert event.position == 1

    def test_cannot_exceed_maximum(self):
        product = _make_product([f"img-{i}" for i in range(MAX_IMAGES_PER_PRODUCT)])

        with pytest.raises(ValidationError) as exc:
            product.attach_image("img-extra")
        assert "Cannot have more than 3 images" in str(exc.value)
        assert len(product.images) == MAX_IMAGES_PER_PRODUCT


class TestDetachImage:
    def test_detach_keeps_remaining_order(self):
        product = _make_product(["img-1", "img-2", "img-3"])
        product.detach_image("img-2")

        assert product.images == ["img-1", "img-3"]
        assert isinstance(product._events[0], ProductImageRemoved)

    def test_detach_unknown_image(self):
        product = _make_product(["img-1"])

        with pytest.raises(ValidationError):
            product.detach_image("img-9")
        assert product.images == ["img-1"]


class TestRearrangeImages:
    def test_swap_two_images(self):
        product = _make_product(["img-1", "img-2"])
        product.rearrange_images(["img-2", "img-1"])

        assert product.images == ["img-2", "img-1"]
        event = product._events[0]
        assert isinstance(event, ProductImagesRearranged)
        assert event.image_ids == ["img-2", "img-1"]

    def test_same_order_is_accepted(self):
        product = _make_product(["img-1", "img-2"])
        product.rearrange_images(["img-1", "img-2"])
        assert product.images == ["img-1", "img-2"]

    @pytest.mark.parametrize(
        "submitted",
        [
            ["img-1"],
            ["img-1", "img-2", "img-9"],
            ["img-1", "img-1"],
            ["img-1", "img-9"],
            [],
        ],
    )
    def test_non_permutation_rejected(self, submitted):
        product = _make_product(["img-1", "img-2"])

        with pytest.raises(ValidationError):
            product.rearrange_images(submitted)
        assert product.images == ["img-1", "img-2"]
        assert product._events == []

"""Tests for the Product aggregate: pricing, images and reviews."""

from decimal import Decimal

import pydantic
import pytest

from storefront.catalogue.product.product import MAX_IMAGES, Product
from storefront.shared.exceptions import ValidationError


def _make_product(**overrides):
    values = {
        "name": "  Field Watch  ",
        "description": "A sturdy field watch",
        "price": Decimal("120.005"),
        "category_id": "cat-001",
        "stock": 3,
    }
    values.update(overrides)
    return Product(**values)


class TestProductFields:
    def test_name_is_stripped_and_price_quantized(self):
        product = _make_product()
        assert product.name == "Field Watch"
        assert product.price == Decimal("120.01")

    def test_negative_stock_is_rejected(self):
        with pytest.raises(pydantic.ValidationError):
            _make_product(stock=-1)

    def test_unit_price_prefers_discount(self):
        assert _make_product(discount_price=Decimal("99.99")).unit_price == Decimal("99.99")

    def test_unit_price_without_discount(self):
        assert _make_product(price=Decimal("50")).unit_price == Decimal("50.00")

    def test_visible_only_when_active(self):
        assert Product.VISIBILITY == {"is_active": True}


class TestImages:
    def test_primary_image_is_first(self):
        product = _make_product(images=["a.jpg", "b.jpg"])
        assert product.primary_image == "a.jpg"

    def test_no_images_means_empty_primary(self):
        assert _make_product().primary_image == ""

    def test_add_images_appends(self):
        product = _make_product(images=["a.jpg"])
        product.add_images(["b.jpg", "c.jpg"])
        assert product.images == ["a.jpg", "b.jpg", "c.jpg"]

    def test_image_limit(self):
        product = _make_product(images=[f"{i}.jpg" for i in range(MAX_IMAGES)])
        with pytest.raises(ValidationError):
            product.add_images(["extra.jpg"])
        assert len(product.images) == MAX_IMAGES

    def test_replace_returns_dropped_urls(self):
        product = _make_product(images=["a.jpg", "b.jpg"])
        dropped = product.replace_images(["b.jpg", "c.jpg"])
        assert dropped == ["a.jpg"]
        assert product.images == ["b.jpg", "c.jpg"]

    def test_remove_unknown_image(self):
        product = _make_product(images=["a.jpg"])
        with pytest.raises(ValidationError):
            product.remove_image("z.jpg")


class TestReviews:
    def test_review_updates_average(self):
        product = _make_product()
        product.add_review(user_id="u1", name="Ann", rating=5, comment="Great")
        product.add_review(user_id="u2", name="Bob", rating=2, comment="Meh")
        assert product.num_reviews == 2
        assert product.ratings == 3.5

    def test_one_review_per_user(self):
        product = _make_product()
        product.add_review(user_id="u1", name="Ann", rating=5, comment="Great")
        with pytest.raises(ValidationError, match="Product already reviewed"):
            product.add_review(user_id="u1", name="Ann", rating=1, comment="Changed my mind")
        assert product.num_reviews == 1

    def test_rating_out_of_range(self):
        product = _make_product()
        with pytest.raises(pydantic.ValidationError):
            product.add_review(user_id="u1", name="Ann", rating=6, comment="Too good")

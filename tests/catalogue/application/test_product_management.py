from decimal import Decimal

import pytest

from storefront.catalogue.product.images import (
    AddProductImages,
    ManageImagesHandler,
    RemoveProductImage,
    ReplaceProductImages,
)
from storefront.catalogue.product.management import (
    CreateProduct,
    DeleteProduct,
    ProductManagementHandler,
    UpdateProduct,
)
from storefront.catalogue.product.product import ProductRepository
from storefront.catalogue.product.reviews import AddReview, ReviewHandler
from storefront.shared.exceptions import NotFound, StorageError, Unauthorized, ValidationError
from storefront.storage.port import UploadedFile


def _file(name="watch.jpg"):
    return UploadedFile(data=b"\xff\xd8jpeg", content_type="image/jpeg", filename=name)


class TestCreateProduct:
    def test_creates_in_existing_category(self, store, storage, category):
        handler = ProductManagementHandler(store, storage)
        product = handler.create_product(
            CreateProduct(name="Diver", description="Dive watch", price=Decimal("199.99"), category_id=category.id)
        )

        stored = ProductRepository(store).get(product.id)
        assert stored.name == "Diver"
        assert stored.price == Decimal("199.99")

    def test_price_is_stored_in_cents(self, store, storage, category):
        handler = ProductManagementHandler(store, storage)
        product = handler.create_product(
            CreateProduct(name="Diver", description="Dive watch", price=Decimal("19.99"), category_id=category.id)
        )
        doc = store.collection("products").find_one({"_id": product.id})
        assert doc["price"] == 1999

    def test_unknown_category(self, store, storage):
        handler = ProductManagementHandler(store, storage)
        with pytest.raises(NotFound, match="Category not found"):
            handler.create_product(
                CreateProduct(name="Diver", description="Dive watch", price=Decimal("10"), category_id="missing")
            )

    def test_unknown_brand(self, store, storage, category):
        handler = ProductManagementHandler(store, storage)
        with pytest.raises(NotFound, match="Brand not found"):
            handler.create_product(
                CreateProduct(
                    name="Diver",
                    description="Dive watch",
                    price=Decimal("10"),
                    category_id=category.id,
                    brand_id="missing",
                )
            )


class TestUpdateAndDelete:
    def test_update_changes_fields(self, store, storage, make_product):
        product = make_product()
        handler = ProductManagementHandler(store, storage)
        handler.update_product(UpdateProduct(product_id=product.id, changes={"stock": 3, "featured": True}))

        stored = ProductRepository(store).get(product.id)
        assert stored.stock == 3
        assert stored.featured is True

    def test_delete_removes_images_from_storage(self, store, storage, make_product):
        product = make_product(images=["https://fake-storage.local/products/a.jpg"])
        ProductManagementHandler(store, storage).delete_product(DeleteProduct(product_id=product.id))

        assert storage.deleted == ["https://fake-storage.local/products/a.jpg"]
        assert ProductRepository(store).get_or_none(product.id) is None


class TestImages:
    def test_add_uploads_into_products_folder(self, store, storage, make_product):
        product = make_product()
        updated = ManageImagesHandler(store, storage).add_images(
            AddProductImages(product_id=product.id, files=[_file("a.jpg"), _file("b.jpg")])
        )

        assert len(updated.images) == 2
        assert all("/products/" in url for url in updated.images)
        assert set(updated.images) == set(storage.objects)

    def test_replace_deletes_dropped_urls(self, store, storage, make_product):
        product = make_product()
        handler = ManageImagesHandler(store, storage)
        first = handler.add_images(AddProductImages(product_id=product.id, files=[_file()])).images[0]

        updated = handler.replace_images(ReplaceProductImages(product_id=product.id, files=[_file("new.jpg")]))

        assert first not in updated.images
        assert storage.deleted == [first]

    def test_remove_single_image(self, store, storage, make_product):
        product = make_product()
        handler = ManageImagesHandler(store, storage)
        url = handler.add_images(AddProductImages(product_id=product.id, files=[_file()])).images[0]

        updated = handler.remove_image(RemoveProductImage(product_id=product.id, url=url))
        assert updated.images == []
        assert url in storage.deleted

    def test_remove_foreign_url(self, store, storage, make_product):
        product = make_product()
        with pytest.raises(ValidationError):
            ManageImagesHandler(store, storage).remove_image(
                RemoveProductImage(product_id=product.id, url="https://elsewhere/x.jpg")
            )

    def test_failed_upload_leaves_product_unchanged(self, store, storage, make_product):
        product = make_product()
        storage.configure(should_succeed=False)

        with pytest.raises(StorageError):
            ManageImagesHandler(store, storage).add_images(AddProductImages(product_id=product.id, files=[_file()]))
        assert ProductRepository(store).get(product.id).images == []


class TestReviews:
    def test_review_uses_actor_name(self, store, make_product, customer_actor):
        product = make_product()
        updated = ReviewHandler(store).add_review(customer_actor, AddReview(product_id=product.id, rating=4, comment="Nice"))

        assert updated.num_reviews == 1
        assert updated.reviews[0].name == "Casey Customer"
        assert ProductRepository(store).get(product.id).ratings == 4

    def test_anonymous_cannot_review(self, store, make_product, anonymous):
        product = make_product()
        with pytest.raises(Unauthorized):
            ReviewHandler(store).add_review(anonymous, AddReview(product_id=product.id, rating=4, comment="Nice"))

"""FastAPI endpoints for the Catalogue context."""

from fastapi import APIRouter, Depends, File, Request, UploadFile

from storefront.catalogue.api.schemas import (
    AddReviewRequest,
    BrandDetailOut,
    BrandOut,
    CategoryOut,
    CategoryTreeOut,
    CreateBrandRequest,
    CreateCategoryRequest,
    CreateProductRequest,
    ProductOut,
    UpdateBrandRequest,
    UpdateCategoryRequest,
    UpdateProductRequest,
)
from storefront.catalogue.brand.management import (
    BrandHandler,
    CreateBrand,
    DeleteBrand,
    SetBrandLogo,
    UpdateBrand,
)
from storefront.catalogue.category.management import (
    CategoryHandler,
    CreateCategory,
    DeleteCategory,
    SetCategoryImage,
    UpdateCategory,
)
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
from storefront.catalogue.product.queries import ProductQueries
from storefront.catalogue.product.reviews import AddReview, ReviewHandler
from storefront.dependencies import (
    admin_actor,
    current_actor,
    get_storage_port,
    get_store,
    optional_actor,
    read_upload,
)
from storefront.shared.auth import Actor
from storefront.shared.db import Store
from storefront.shared.schemas import Envelope, ListEnvelope, PageEnvelope, StatusResponse
from storefront.storage.port import StoragePort

product_router = APIRouter(prefix="/products", tags=["products"])
category_router = APIRouter(prefix="/categories", tags=["categories"])
brand_router = APIRouter(prefix="/brands", tags=["brands"])


# --- Product endpoints ---


@product_router.get("", response_model=PageEnvelope[ProductOut])
def list_products(
    request: Request,
    actor: Actor = Depends(optional_actor),
    store: Store = Depends(get_store),
) -> PageEnvelope:
    page = ProductQueries(store).list_products(actor, request.query_params)
    return PageEnvelope.of(page, ProductOut)


@product_router.get("/search", response_model=PageEnvelope[ProductOut])
def search_products(
    request: Request,
    actor: Actor = Depends(optional_actor),
    store: Store = Depends(get_store),
) -> PageEnvelope:
    page = ProductQueries(store).search(actor, request.query_params)
    return PageEnvelope.of(page, ProductOut)


@product_router.get("/top", response_model=ListEnvelope[ProductOut])
def top_products(actor: Actor = Depends(optional_actor), store: Store = Depends(get_store)) -> ListEnvelope:
    return ListEnvelope.of(ProductQueries(store).top_rated(actor), ProductOut)


@product_router.get("/featured", response_model=ListEnvelope[ProductOut])
def featured_products(actor: Actor = Depends(optional_actor), store: Store = Depends(get_store)) -> ListEnvelope:
    return ListEnvelope.of(ProductQueries(store).featured(actor), ProductOut)


@product_router.get("/best-sellers", response_model=ListEnvelope[ProductOut])
def best_seller_products(actor: Actor = Depends(optional_actor), store: Store = Depends(get_store)) -> ListEnvelope:
    return ListEnvelope.of(ProductQueries(store).best_sellers(actor), ProductOut)


@product_router.get("/new-arrivals", response_model=ListEnvelope[ProductOut])
def new_arrival_products(actor: Actor = Depends(optional_actor), store: Store = Depends(get_store)) -> ListEnvelope:
    return ListEnvelope.of(ProductQueries(store).new_arrivals(actor), ProductOut)


@product_router.get("/{product_id}", response_model=Envelope[ProductOut])
def get_product(
    product_id: str,
    actor: Actor = Depends(optional_actor),
    store: Store = Depends(get_store),
) -> Envelope:
    product = ProductQueries(store).get_product(actor, product_id)
    return Envelope(data=ProductOut.model_validate(product))


@product_router.post("", status_code=201, response_model=Envelope[ProductOut])
def create_product(
    body: CreateProductRequest,
    _: Actor = Depends(admin_actor),
    store: Store = Depends(get_store),
    storage: StoragePort = Depends(get_storage_port),
) -> Envelope:
    command = CreateProduct(
        name=body.name,
        description=body.description,
        price=body.price,
        discount_price=body.discount_price,
        category_id=body.category_id,
        brand_id=body.brand_id,
        stock=body.stock,
        featured=body.featured,
        is_best_seller=body.is_best_seller,
        is_new_arrival=body.is_new_arrival,
        tags=body.tags,
        specifications=body.specifications,
        warranty_months=body.warranty_months,
    )
    product = ProductManagementHandler(store, storage).create_product(command)
    return Envelope(data=ProductOut.model_validate(product))


@product_router.put("/{product_id}", response_model=Envelope[ProductOut])
def update_product(
    product_id: str,
    body: UpdateProductRequest,
    _: Actor = Depends(admin_actor),
    store: Store = Depends(get_store),
    storage: StoragePort = Depends(get_storage_port),
) -> Envelope:
    command = UpdateProduct(product_id=product_id, changes=body.model_dump(exclude_unset=True))
    product = ProductManagementHandler(store, storage).update_product(command)
    return Envelope(data=ProductOut.model_validate(product))


@product_router.delete("/{product_id}", response_model=StatusResponse)
def delete_product(
    product_id: str,
    _: Actor = Depends(admin_actor),
    store: Store = Depends(get_store),
    storage: StoragePort = Depends(get_storage_port),
) -> StatusResponse:
    ProductManagementHandler(store, storage).delete_product(DeleteProduct(product_id=product_id))
    return StatusResponse(message="Product deleted successfully")


@product_router.post("/{product_id}/images", status_code=201, response_model=Envelope[ProductOut])
def add_product_images(
    product_id: str,
    images: list[UploadFile] = File(...),
    _: Actor = Depends(admin_actor),
    store: Store = Depends(get_store),
    storage: StoragePort = Depends(get_storage_port),
) -> Envelope:
    command = AddProductImages(product_id=product_id, files=[read_upload(f) for f in images])
    product = ManageImagesHandler(store, storage).add_images(command)
    return Envelope(data=ProductOut.model_validate(product))


@product_router.put("/{product_id}/images", response_model=Envelope[ProductOut])
def replace_product_images(
    product_id: str,
    images: list[UploadFile] = File(...),
    _: Actor = Depends(admin_actor),
    store: Store = Depends(get_store),
    storage: StoragePort = Depends(get_storage_port),
) -> Envelope:
    command = ReplaceProductImages(product_id=product_id, files=[read_upload(f) for f in images])
    product = ManageImagesHandler(store, storage).replace_images(command)
    return Envelope(data=ProductOut.model_validate(product))


@product_router.delete("/{product_id}/images", response_model=Envelope[ProductOut])
def remove_product_image(
    product_id: str,
    url: str,
    _: Actor = Depends(admin_actor),
    store: Store = Depends(get_store),
    storage: StoragePort = Depends(get_storage_port),
) -> Envelope:
    product = ManageImagesHandler(store, storage).remove_image(RemoveProductImage(product_id=product_id, url=url))
    return Envelope(data=ProductOut.model_validate(product))


@product_router.post("/{product_id}/reviews", status_code=201, response_model=StatusResponse)
def add_review(
    product_id: str,
    body: AddReviewRequest,
    actor: Actor = Depends(current_actor),
    store: Store = Depends(get_store),
) -> StatusResponse:
    command = AddReview(product_id=product_id, rating=body.rating, comment=body.comment)
    ReviewHandler(store).add_review(actor, command)
    return StatusResponse(message="Review added")


# --- Category endpoints ---


@category_router.get("", response_model=ListEnvelope[CategoryTreeOut])
def list_categories(actor: Actor = Depends(optional_actor), store: Store = Depends(get_store)) -> ListEnvelope:
    trees = CategoryHandler(store, None).list_top_level(actor)
    data = [CategoryTreeOut.from_tree(tree) for tree in trees]
    return ListEnvelope(count=len(data), data=data)


@category_router.get("/all", response_model=ListEnvelope[CategoryOut])
def list_all_categories(actor: Actor = Depends(optional_actor), store: Store = Depends(get_store)) -> ListEnvelope:
    return ListEnvelope.of(CategoryHandler(store, None).list_all(actor), CategoryOut)


@category_router.get("/{category_id}", response_model=Envelope[CategoryTreeOut])
def get_category(
    category_id: str,
    actor: Actor = Depends(optional_actor),
    store: Store = Depends(get_store),
) -> Envelope:
    tree = CategoryHandler(store, None).get_category(actor, category_id)
    return Envelope(data=CategoryTreeOut.from_tree(tree))


@category_router.post("", status_code=201, response_model=Envelope[CategoryOut])
def create_category(
    body: CreateCategoryRequest,
    _: Actor = Depends(admin_actor),
    store: Store = Depends(get_store),
    storage: StoragePort = Depends(get_storage_port),
) -> Envelope:
    command = CreateCategory(name=body.name, description=body.description, parent_id=body.parent_id)
    category = CategoryHandler(store, storage).create_category(command)
    return Envelope(data=CategoryOut.model_validate(category))


@category_router.put("/{category_id}", response_model=Envelope[CategoryOut])
def update_category(
    category_id: str,
    body: UpdateCategoryRequest,
    _: Actor = Depends(admin_actor),
    store: Store = Depends(get_store),
    storage: StoragePort = Depends(get_storage_port),
) -> Envelope:
    command = UpdateCategory(category_id=category_id, changes=body.model_dump(exclude_unset=True))
    category = CategoryHandler(store, storage).update_category(command)
    return Envelope(data=CategoryOut.model_validate(category))


@category_router.put("/{category_id}/image", response_model=Envelope[CategoryOut])
def set_category_image(
    category_id: str,
    image: UploadFile = File(...),
    _: Actor = Depends(admin_actor),
    store: Store = Depends(get_store),
    storage: StoragePort = Depends(get_storage_port),
) -> Envelope:
    command = SetCategoryImage(category_id=category_id, file=read_upload(image))
    category = CategoryHandler(store, storage).set_image(command)
    return Envelope(data=CategoryOut.model_validate(category))


@category_router.delete("/{category_id}", response_model=StatusResponse)
def delete_category(
    category_id: str,
    _: Actor = Depends(admin_actor),
    store: Store = Depends(get_store),
    storage: StoragePort = Depends(get_storage_port),
) -> StatusResponse:
    CategoryHandler(store, storage).delete_category(DeleteCategory(category_id=category_id))
    return StatusResponse(message="Category deleted successfully")


# --- Brand endpoints ---


@brand_router.get("", response_model=ListEnvelope[BrandOut])
def list_brands(actor: Actor = Depends(optional_actor), store: Store = Depends(get_store)) -> ListEnvelope:
    return ListEnvelope.of(BrandHandler(store, None).list_brands(actor), BrandOut)


@brand_router.get("/featured", response_model=ListEnvelope[BrandOut])
def featured_brands(store: Store = Depends(get_store)) -> ListEnvelope:
    return ListEnvelope.of(BrandHandler(store, None).featured_brands(), BrandOut)


@brand_router.get("/{brand_id}", response_model=Envelope[BrandDetailOut])
def get_brand(
    brand_id: str,
    actor: Actor = Depends(optional_actor),
    store: Store = Depends(get_store),
) -> Envelope:
    detail = BrandHandler(store, None).get_brand(actor, brand_id)
    return Envelope(data=BrandDetailOut.from_detail(detail))


@brand_router.post("", status_code=201, response_model=Envelope[BrandOut])
def create_brand(
    body: CreateBrandRequest,
    _: Actor = Depends(admin_actor),
    store: Store = Depends(get_store),
    storage: StoragePort = Depends(get_storage_port),
) -> Envelope:
    command = CreateBrand(
        name=body.name,
        description=body.description,
        featured=body.featured,
        country=body.country,
        founded_year=body.founded_year,
        website=str(body.website) if body.website else None,
    )
    brand = BrandHandler(store, storage).create_brand(command)
    return Envelope(data=BrandOut.model_validate(brand))


@brand_router.put("/{brand_id}", response_model=Envelope[BrandOut])
def update_brand(
    brand_id: str,
    body: UpdateBrandRequest,
    _: Actor = Depends(admin_actor),
    store: Store = Depends(get_store),
    storage: StoragePort = Depends(get_storage_port),
) -> Envelope:
    command = UpdateBrand(brand_id=brand_id, changes=body.model_dump(mode="json", exclude_unset=True))
    brand = BrandHandler(store, storage).update_brand(command)
    return Envelope(data=BrandOut.model_validate(brand))


@brand_router.put("/{brand_id}/logo", response_model=Envelope[BrandOut])
def set_brand_logo(
    brand_id: str,
    logo: UploadFile = File(...),
    _: Actor = Depends(admin_actor),
    store: Store = Depends(get_store),
    storage: StoragePort = Depends(get_storage_port),
) -> Envelope:
    brand = BrandHandler(store, storage).set_logo(SetBrandLogo(brand_id=brand_id, file=read_upload(logo)))
    return Envelope(data=BrandOut.model_validate(brand))


@brand_router.delete("/{brand_id}", response_model=StatusResponse)
def delete_brand(
    brand_id: str,
    _: Actor = Depends(admin_actor),
    store: Store = Depends(get_store),
    storage: StoragePort = Depends(get_storage_port),
) -> StatusResponse:
    BrandHandler(store, storage).delete_brand(DeleteBrand(brand_id=brand_id))
    return StatusResponse(message="Brand deleted successfully")

"""FastAPI endpoints for the Content context: blogs, FAQs and testimonials."""

from fastapi import APIRouter, Depends, File, Request, UploadFile

from storefront.content.api.schemas import (
    AddCommentRequest,
    BlogOut,
    CommentOut,
    CreateBlogRequest,
    CreateFAQRequest,
    FAQOut,
    SubmitTestimonialRequest,
    TestimonialOut,
    UpdateBlogRequest,
    UpdateFAQRequest,
    UpdateTestimonialRequest,
)
from storefront.content.blog.management import AddComment, BlogHandler, CreateBlog, SetBlogImage, UpdateBlog
from storefront.content.faq.management import CreateFAQ, FAQHandler, UpdateFAQ
from storefront.content.testimonial.management import (
    SetTestimonialImage,
    SubmitTestimonial,
    TestimonialHandler,
    UpdateTestimonial,
)
from storefront.dependencies import admin_actor, get_storage_port, get_store, optional_actor, read_upload
from storefront.shared.auth import Actor
from storefront.shared.db import Store
from storefront.shared.schemas import Envelope, ListEnvelope, PageEnvelope, StatusResponse
from storefront.storage.port import StoragePort

blog_router = APIRouter(prefix="/blogs", tags=["blogs"])
faq_router = APIRouter(prefix="/faqs", tags=["faqs"])
testimonial_router = APIRouter(prefix="/testimonials", tags=["testimonials"])


# --- Blog endpoints ---


@blog_router.get("", response_model=PageEnvelope[BlogOut])
def list_blogs(
    request: Request,
    actor: Actor = Depends(optional_actor),
    store: Store = Depends(get_store),
) -> PageEnvelope:
    return PageEnvelope.of(BlogHandler(store).list_blogs(actor, request.query_params), BlogOut)


@blog_router.get("/{blog_id}", response_model=Envelope[BlogOut])
def get_blog(blog_id: str, actor: Actor = Depends(optional_actor), store: Store = Depends(get_store)) -> Envelope:
    return Envelope(data=BlogOut.model_validate(BlogHandler(store).get_blog(actor, blog_id)))


@blog_router.post("", status_code=201, response_model=Envelope[BlogOut])
def create_blog(
    body: CreateBlogRequest,
    actor: Actor = Depends(admin_actor),
    store: Store = Depends(get_store),
) -> Envelope:
    blog = BlogHandler(store).create_blog(actor, CreateBlog(**body.model_dump()))
    return Envelope(data=BlogOut.model_validate(blog))


@blog_router.put("/{blog_id}", response_model=Envelope[BlogOut])
def update_blog(
    blog_id: str,
    body: UpdateBlogRequest,
    actor: Actor = Depends(admin_actor),
    store: Store = Depends(get_store),
) -> Envelope:
    command = UpdateBlog(blog_id=blog_id, changes=body.model_dump(exclude_unset=True))
    return Envelope(data=BlogOut.model_validate(BlogHandler(store).update_blog(actor, command)))


@blog_router.put("/{blog_id}/image", response_model=Envelope[BlogOut])
def set_blog_image(
    blog_id: str,
    featured_image: UploadFile = File(...),
    actor: Actor = Depends(admin_actor),
    store: Store = Depends(get_store),
    storage: StoragePort = Depends(get_storage_port),
) -> Envelope:
    command = SetBlogImage(blog_id=blog_id, file=read_upload(featured_image))
    return Envelope(data=BlogOut.model_validate(BlogHandler(store, storage).set_image(actor, command)))


@blog_router.delete("/{blog_id}", response_model=StatusResponse)
def delete_blog(
    blog_id: str,
    actor: Actor = Depends(admin_actor),
    store: Store = Depends(get_store),
    storage: StoragePort = Depends(get_storage_port),
) -> StatusResponse:
    BlogHandler(store, storage).delete_blog(actor, blog_id)
    return StatusResponse(message="Blog post deleted successfully")


@blog_router.get("/{blog_id}/comments", response_model=ListEnvelope[CommentOut])
def list_comments(
    blog_id: str,
    actor: Actor = Depends(optional_actor),
    store: Store = Depends(get_store),
) -> ListEnvelope:
    return ListEnvelope.of(BlogHandler(store).list_comments(actor, blog_id), CommentOut)


@blog_router.post("/{blog_id}/comments", status_code=201, response_model=Envelope[CommentOut])
def add_comment(
    blog_id: str,
    body: AddCommentRequest,
    actor: Actor = Depends(optional_actor),
    store: Store = Depends(get_store),
) -> Envelope:
    command = AddComment(blog_id=blog_id, name=body.name, email=str(body.email), comment=body.comment)
    comment = BlogHandler(store).add_comment(actor, command)
    return Envelope(message="Comment added successfully", data=CommentOut.model_validate(comment))


# --- FAQ endpoints ---


@faq_router.get("", response_model=ListEnvelope[FAQOut])
def list_faqs(actor: Actor = Depends(optional_actor), store: Store = Depends(get_store)) -> ListEnvelope:
    data = [FAQOut.from_faq(faq) for faq in FAQHandler(store).list_faqs(actor)]
    return ListEnvelope(count=len(data), data=data)


@faq_router.get("/category/{category}", response_model=ListEnvelope[FAQOut])
def list_faqs_by_category(
    category: str,
    actor: Actor = Depends(optional_actor),
    store: Store = Depends(get_store),
) -> ListEnvelope:
    data = [FAQOut.from_faq(faq) for faq in FAQHandler(store).list_by_category(actor, category)]
    return ListEnvelope(count=len(data), data=data)


@faq_router.get("/{faq_id}", response_model=Envelope[FAQOut])
def get_faq(faq_id: str, actor: Actor = Depends(optional_actor), store: Store = Depends(get_store)) -> Envelope:
    return Envelope(data=FAQOut.from_faq(FAQHandler(store).get_faq(actor, faq_id)))


@faq_router.post("", status_code=201, response_model=Envelope[FAQOut])
def create_faq(body: CreateFAQRequest, _: Actor = Depends(admin_actor), store: Store = Depends(get_store)) -> Envelope:
    return Envelope(data=FAQOut.from_faq(FAQHandler(store).create_faq(CreateFAQ(**body.model_dump()))))


@faq_router.put("/{faq_id}", response_model=Envelope[FAQOut])
def update_faq(
    faq_id: str,
    body: UpdateFAQRequest,
    _: Actor = Depends(admin_actor),
    store: Store = Depends(get_store),
) -> Envelope:
    command = UpdateFAQ(faq_id=faq_id, changes=body.model_dump(exclude_unset=True))
    return Envelope(data=FAQOut.from_faq(FAQHandler(store).update_faq(command)))


@faq_router.delete("/{faq_id}", response_model=StatusResponse)
def delete_faq(faq_id: str, _: Actor = Depends(admin_actor), store: Store = Depends(get_store)) -> StatusResponse:
    FAQHandler(store).delete_faq(faq_id)
    return StatusResponse(message="FAQ deleted successfully")


# --- Testimonial endpoints ---


@testimonial_router.get("", response_model=ListEnvelope[TestimonialOut])
def list_testimonials(actor: Actor = Depends(optional_actor), store: Store = Depends(get_store)) -> ListEnvelope:
    return ListEnvelope.of(TestimonialHandler(store).list_testimonials(actor), TestimonialOut)


@testimonial_router.get("/featured", response_model=ListEnvelope[TestimonialOut])
def featured_testimonials(store: Store = Depends(get_store)) -> ListEnvelope:
    return ListEnvelope.of(TestimonialHandler(store).featured(), TestimonialOut)


@testimonial_router.post("", status_code=201, response_model=Envelope[TestimonialOut])
def submit_testimonial(
    body: SubmitTestimonialRequest,
    actor: Actor = Depends(optional_actor),
    store: Store = Depends(get_store),
) -> Envelope:
    testimonial = TestimonialHandler(store).submit(actor, SubmitTestimonial(**body.model_dump()))
    message = None if testimonial.is_approved else "Thank you! Your testimonial will appear once approved"
    return Envelope(message=message, data=TestimonialOut.model_validate(testimonial))


@testimonial_router.get("/{testimonial_id}", response_model=Envelope[TestimonialOut])
def get_testimonial(
    testimonial_id: str,
    actor: Actor = Depends(admin_actor),
    store: Store = Depends(get_store),
) -> Envelope:
    return Envelope(data=TestimonialOut.model_validate(TestimonialHandler(store).get(actor, testimonial_id)))


@testimonial_router.put("/{testimonial_id}", response_model=Envelope[TestimonialOut])
def update_testimonial(
    testimonial_id: str,
    body: UpdateTestimonialRequest,
    actor: Actor = Depends(admin_actor),
    store: Store = Depends(get_store),
) -> Envelope:
    command = UpdateTestimonial(testimonial_id=testimonial_id, changes=body.model_dump(exclude_unset=True))
    return Envelope(data=TestimonialOut.model_validate(TestimonialHandler(store).update(actor, command)))


@testimonial_router.put("/{testimonial_id}/approve", response_model=Envelope[TestimonialOut])
def approve_testimonial(
    testimonial_id: str,
    actor: Actor = Depends(admin_actor),
    store: Store = Depends(get_store),
) -> Envelope:
    testimonial = TestimonialHandler(store).approve(actor, testimonial_id)
    return Envelope(message="Testimonial approved", data=TestimonialOut.model_validate(testimonial))


@testimonial_router.put("/{testimonial_id}/image", response_model=Envelope[TestimonialOut])
def set_testimonial_image(
    testimonial_id: str,
    image: UploadFile = File(...),
    actor: Actor = Depends(admin_actor),
    store: Store = Depends(get_store),
    storage: StoragePort = Depends(get_storage_port),
) -> Envelope:
    command = SetTestimonialImage(testimonial_id=testimonial_id, file=read_upload(image))
    testimonial = TestimonialHandler(store, storage).set_image(actor, command)
    return Envelope(data=TestimonialOut.model_validate(testimonial))


@testimonial_router.delete("/{testimonial_id}", response_model=StatusResponse)
def delete_testimonial(
    testimonial_id: str,
    actor: Actor = Depends(admin_actor),
    store: Store = Depends(get_store),
    storage: StoragePort = Depends(get_storage_port),
) -> StatusResponse:
    TestimonialHandler(store, storage).delete(actor, testimonial_id)
    return StatusResponse(message="Testimonial deleted successfully")

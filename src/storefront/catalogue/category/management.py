"""Category management: commands, handler and read side."""

from dataclasses import dataclass
from typing import Any

from storefront.catalogue.category.category import Category, CategoryRepository
from storefront.shared.auth import Actor, is_visible_to, visibility_filter
from storefront.shared.db import Store
from storefront.shared.domain import Command
from storefront.shared.exceptions import Conflict, NotFound, ValidationError
from storefront.shared.logging import get_logger
from storefront.storage.port import StoragePort, UploadedFile

logger = get_logger(__name__)

IMAGE_FOLDER = "categories"


class CreateCategory(Command):
    name: str
    description: str = ""
    parent_id: str | None = None


class UpdateCategory(Command):
    category_id: str
    changes: dict[str, Any]


class SetCategoryImage(Command):
    category_id: str
    file: UploadedFile


class DeleteCategory(Command):
    category_id: str


@dataclass
class CategoryTree:
    """A top-level category with its direct subcategories."""

    category: Category
    subcategories: list[Category]


class CategoryHandler:
    def __init__(self, store: Store, storage: StoragePort) -> None:
        self.categories = CategoryRepository(store)
        self.storage = storage

    def _check_parent(self, category_id: str | None, parent_id: str | None) -> None:
        if parent_id is None:
            return
        if parent_id == category_id:
            raise ValidationError({"parent_id": ["A category cannot be its own parent"]})
        if not self.categories.exists({"_id": parent_id}):
            raise NotFound("Parent category not found")

    def create_category(self, command: CreateCategory) -> Category:
        if self.categories.exists({"name": command.name.strip()}):
            raise Conflict("Category already exists")
        self._check_parent(None, command.parent_id)

        category = Category(name=command.name, description=command.description, parent_id=command.parent_id)
        self.categories.add(category)
        logger.info("Category created", category_id=category.id, name=category.name)
        return category

    def update_category(self, command: UpdateCategory) -> Category:
        category = self.categories.get(command.category_id)
        if "parent_id" in command.changes:
            self._check_parent(category.id, command.changes["parent_id"])
        new_name = command.changes.get("name")
        if new_name and self.categories.exists({"name": new_name.strip(), "_id": {"$ne": category.id}}):
            raise Conflict("Category already exists")

        category.update(**command.changes)
        self.categories.add(category)
        return category

    def set_image(self, command: SetCategoryImage) -> Category:
        category = self.categories.get(command.category_id)
        f = command.file
        url = self.storage.upload(f.data, f.content_type, IMAGE_FOLDER, f.filename)
        previous = category.replace_image(url)
        self.categories.add(category)
        if previous:
            self.storage.delete(previous)
        return category

    def delete_category(self, command: DeleteCategory) -> None:
        category = self.categories.get(command.category_id)
        if self.categories.exists({"parent_id": category.id}):
            raise Conflict(
                "Cannot delete category with subcategories. Please delete or reassign subcategories first."
            )
        if category.image:
            self.storage.delete(category.image)
        self.categories.delete(category)
        logger.info("Category deleted", category_id=category.id)

    # -------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------
    def _tree(self, actor: Actor, category: Category) -> CategoryTree:
        scope = visibility_filter(actor, Category)
        children = self.categories.find({"parent_id": category.id, **scope}, sort=[("name", 1)])
        return CategoryTree(category=category, subcategories=children)

    def list_top_level(self, actor: Actor) -> list[CategoryTree]:
        scope = visibility_filter(actor, Category)
        roots = self.categories.find({"parent_id": None, **scope}, sort=[("name", 1)])
        return [self._tree(actor, root) for root in roots]

    def list_all(self, actor: Actor) -> list[Category]:
        return self.categories.find(visibility_filter(actor, Category), sort=[("name", 1)])

    def get_category(self, actor: Actor, category_id: str) -> CategoryTree:
        category = self.categories.get(category_id)
        if not is_visible_to(actor, category):
            raise NotFound("Category not found")
        return self._tree(actor, category)

"""Category aggregate and its management commands.

Products reference categories by name, so renaming a category does not touch
existing products.
"""

from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Identifier, String, Text
from protean.utils.globals import current_domain

from storefront.domain import storefront

DEFAULT_CATEGORY_IMAGE = "/images/category.png"


@storefront.aggregate
class Category:
    name = String(required=True, max_length=100, sanitize=False)
    description = Text(sanitize=False)
    image = String(max_length=500, default=DEFAULT_CATEGORY_IMAGE, sanitize=False)


@storefront.command(part_of="Category")
class CreateCategory:
    name = String(required=True, max_length=100, sanitize=False)
    description = Text(sanitize=False)
    image = String(max_length=500, sanitize=False)


@storefront.command(part_of="Category")
class UpdateCategory:
    category_id = Identifier(required=True)
    name = String(max_length=100, sanitize=False)
    description = Text(sanitize=False)
    image = String(max_length=500, sanitize=False)


@storefront.command(part_of="Category")
class DeleteCategory:
    category_id = Identifier(required=True)


def _ensure_unique_name(repo, name, category_id=None):
    for existing in repo._dao.query.all().items:
        if existing.name.lower() == name.strip().lower() and str(existing.id) != str(category_id):
            raise ValidationError({"name": [f"Category '{name}' already exists"]})


@storefront.command_handler(part_of=Category)
class ManageCategoryHandler:
    @handle(CreateCategory)
    def create_category(self, command):
        repo = current_domain.repository_for(Category)
        _ensure_unique_name(repo, command.name)

        category = Category(
            name=command.name.strip(),
            description=command.description,
            image=command.image or DEFAULT_CATEGORY_IMAGE,
        )
        repo.add(category)
        return str(category.id)

    @handle(UpdateCategory)
    def update_category(self, command):
        repo = current_domain.repository_for(Category)
        category = repo.get(command.category_id)

        if command.name:
            _ensure_unique_name(repo, command.name, category_id=category.id)
            category.name = command.name.strip()
        if command.description:
            category.description = command.description
        if command.image:
            category.image = command.image
        repo.add(category)

    @handle(DeleteCategory)
    def delete_category(self, command):
        repo = current_domain.repository_for(Category)
        category = repo.get(command.category_id)
        repo._dao.delete(category)

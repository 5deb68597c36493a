"""Discount code administration and lookup."""

from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Float, Identifier, Integer, String
from protean.utils.globals import current_domain

from storefront.discount.discount import Discount, InvalidDiscountError, normalize_code
from storefront.domain import storefront


@storefront.command(part_of="Discount")
class CreateDiscount:
    code = String(required=True, max_length=50, sanitize=False)
    percentage = Float(required=True, min_value=1.0, max_value=100.0)
    usage_limit = Integer(required=True, min_value=1)


@storefront.command(part_of="Discount")
class DeleteDiscount:
    discount_id = Identifier(required=True)


def find_discount(code):
    """Look up a discount by code, case-insensitively. Returns ``None`` when unknown."""
    normalized = normalize_code(code)
    if not normalized:
        return None
    matches = current_domain.repository_for(Discount)._dao.query.filter(code=normalized).all().items
    return matches[0] if matches else None


def valid_discount(code):
    """Return the discount for ``code`` or raise ``InvalidDiscountError`` if unknown or exhausted."""
    discount = find_discount(code)
    if discount is None:
        raise InvalidDiscountError(code)
    discount.ensure_valid()
    return discount


@storefront.command_handler(part_of=Discount)
class ManageDiscountHandler:
    @handle(CreateDiscount)
    def create_discount(self, command):
        if find_discount(command.code) is not None:
            raise ValidationError({"code": [f"Discount code '{normalize_code(command.code)}' already exists"]})

        discount = Discount.create(
            code=command.code,
            percentage=command.percentage,
            usage_limit=command.usage_limit,
        )
        current_domain.repository_for(Discount).add(discount)
        return str(discount.id)

    @handle(DeleteDiscount)
    def delete_discount(self, command):
        repo = current_domain.repository_for(Discount)
        discount = repo.get(command.discount_id)
        repo._dao.delete(discount)

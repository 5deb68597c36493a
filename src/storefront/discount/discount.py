"""Discount aggregate: a percentage-off code with a usage ceiling.

Codes are stored upper-case and looked up case-insensitively. A code is valid
while ``used_count < usage_limit``. ``redeem`` is the only mutation of
``used_count`` and is called exactly once per placed order.
"""

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import Float, Integer, String

from storefront.discount.events import DiscountCreated, DiscountRedeemed
from storefront.domain import storefront

INVALID_DISCOUNT_MESSAGE = "Invalid or expired discount code"


class InvalidDiscountError(ValidationError):
    """The code does not exist or has reached its usage limit."""

    def __init__(self, code=None):
        super().__init__({"code": [INVALID_DISCOUNT_MESSAGE]})
        self.code = code


def normalize_code(code) -> str:
    return (code or "").strip().upper()


@storefront.aggregate
class Discount:
    code = String(required=True, max_length=50, sanitize=False)
    percentage = Float(required=True, min_value=1.0, max_value=100.0)
    usage_limit = Integer(required=True, min_value=1)
    used_count = Integer(default=0, min_value=0)

    @invariant.post
    def used_count_must_not_exceed_limit(self):
        if (self.used_count or 0) > self.usage_limit:
            raise ValidationError({"used_count": ["Discount used more times than its limit allows"]})

    @classmethod
    def create(cls, code, percentage, usage_limit):
        normalized = normalize_code(code)
        if not normalized:
            raise ValidationError({"code": ["Discount code is required"]})

        discount = cls(code=normalized, percentage=percentage, usage_limit=usage_limit, used_count=0)
        discount.raise_(
            DiscountCreated(
                discount_id=str(discount.id),
                code=discount.code,
                percentage=discount.percentage,
                usage_limit=discount.usage_limit,
            )
        )
        return discount

    @property
    def remaining(self) -> int:
        return max(0, self.usage_limit - (self.used_count or 0))

    @property
    def is_valid(self) -> bool:
        return (self.used_count or 0) < self.usage_limit

    def ensure_valid(self):
        if not self.is_valid:
            raise InvalidDiscountError(self.code)

    def redeem(self, order_id):
        """Consume one use of the code on behalf of ``order_id``."""
        self.ensure_valid()
        self.used_count = (self.used_count or 0) + 1
        self.raise_(
            DiscountRedeemed(
                discount_id=str(self.id),
                code=self.code,
                order_id=str(order_id),
                used_count=self.used_count,
                usage_limit=self.usage_limit,
            )
        )

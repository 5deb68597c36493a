"""Storefront bounded context: catalogue, shopping carts, discount codes and orders.

Carts are ordinary aggregates (one per user). Checkout snapshots a cart into an
immutable Order and redeems the discount code in the same unit of work.
"""

from protean.domain import Domain

from shared.logging import configure_logging, get_logger

configure_logging()

logger = get_logger(__name__)

storefront = Domain(name="storefront")

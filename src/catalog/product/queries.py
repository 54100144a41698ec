"""Read side of the catalog: filtered listings and id lookups.

Nothing here opens a session. Single lookups raise ``ObjectNotFoundError``;
batch lookups are strict and fail on the first missing id.
"""

from dataclasses import dataclass, field
from math import ceil

from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.utils.globals import current_domain

from catalog.product.product import Category, Product

DEFAULT_PAGE_SIZE = 10


@dataclass(frozen=True)
class FilterCriteria:
    """Listing filters. ``page`` is zero-based."""

    page: int = 0
    size: int = DEFAULT_PAGE_SIZE
    category: str | None = None
    is_popular: bool | None = None
    search: str | None = None

    def __post_init__(self):
        errors = {}
        if not isinstance(self.page, int) or self.page < 0:
            errors["page"] = ["Page must be a non-negative integer"]
        if not isinstance(self.size, int) or self.size < 1:
            errors["size"] = ["Size must be a positive integer"]
        if self.category is not None and self.category not in {c.value for c in Category}:
            errors["category"] = [f"Unknown category {self.category}"]
        if errors:
            raise ValidationError(errors)

    def lookups(self) -> dict:
        lookups = {}
        if self.category:
            lookups["category"] = self.category
        if isinstance(self.is_popular, bool):
            lookups["is_popular"] = self.is_popular
        if isinstance(self.search, str) and self.search:
            lookups["name__icontains"] = self.search
        return lookups


@dataclass(frozen=True)
class Pagination:
    items: list = field(default_factory=list)
    total_elements: int = 0
    total_pages: int = 0
    page: int = 0
    size: int = DEFAULT_PAGE_SIZE


def list_products(criteria: FilterCriteria | None = None) -> Pagination:
    criteria = criteria or FilterCriteria()
    query = current_domain.repository_for(Product)._dao.query

    lookups = criteria.lookups()
    if lookups:
        query = query.filter(**lookups)

    results = query.order_by("created_at").offset(criteria.page * criteria.size).limit(criteria.size).all()

    return Pagination(
        items=list(results.items),
        total_elements=results.total,
        total_pages=ceil(results.total / criteria.size),
        page=criteria.page,
        size=criteria.size,
    )


def get_product(product_id) -> Product:
    try:
        return current_domain.repository_for(Product).get(str(product_id))
    except ObjectNotFoundError:
        raise ObjectNotFoundError(f"Product with id {product_id} not found") from None


def get_products_with_ids(product_ids) -> list[Product]:
    """Return the products for ``product_ids`` in the order given.

    A single missing id fails the whole batch.
    """
    if not isinstance(product_ids, list | tuple) or not all(isinstance(pid, str) for pid in product_ids):
        raise ValidationError({"product_ids": ["Invalid array of product ids"]})

    repo = current_domain.repository_for(Product)
    products = []
    for product_id in product_ids:
        try:
            products.append(repo.get(product_id))
        except ObjectNotFoundError:
            raise ObjectNotFoundError(f"Product with id {product_id} doesn't exist") from None
    return products

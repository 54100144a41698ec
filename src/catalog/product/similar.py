"""Similar-products relation synchronizer.

An edge between two products is the presence of each one's id in the other's
``similar_products`` list. Every change to the relation goes through this
module so that both endpoints are updated in the same session.

The synchronizer never commits or aborts. It resolves every endpoint before
mutating anything, so a failed delta leaves all loaded documents untouched
and the caller's abort discards nothing but reads.
"""

from dataclasses import dataclass

import structlog
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.utils.globals import current_domain

from catalog.product.product import Product
from catalog.product.transaction import TransactionalSession
from catalog.shared.errors import TransactionError

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class SimilarityDelta:
    """Outcome of one synchronization."""

    added: tuple[str, ...] = ()
    removed: tuple[str, ...] = ()
    dropped: tuple[str, ...] = ()  # ids whose endpoint no longer exists


def find_product(product_id) -> Product | None:
    try:
        return current_domain.repository_for(Product).get(str(product_id))
    except ObjectNotFoundError:
        return None


def _require_session(session: TransactionalSession) -> None:
    if session is None or not session.in_progress:
        raise TransactionError("Similar products can only be changed inside an open session")


def link_products(product: Product, other: Product, session: TransactionalSession) -> None:
    """Add the edge ``product <-> other`` and save ``other``.

    ``product`` is left for the caller to save, since it usually carries
    other changes made in the same session.
    """
    _require_session(session)

    if product.id == other.id:
        raise ValidationError({"similar_products": ["Cannot add product itself as a similar product"]})

    product.link_similar(other.id)
    other.link_similar(product.id)
    current_domain.repository_for(Product).add(other)


def unlink_products(product: Product, other: Product, session: TransactionalSession) -> None:
    """Remove the edge ``product <-> other`` and save ``other``."""
    _require_session(session)

    product.unlink_similar(other.id)
    other.unlink_similar(product.id)
    current_domain.repository_for(Product).add(other)


def sync_similar_products(product: Product, desired_ids, session: TransactionalSession) -> SimilarityDelta:
    """Make ``product``'s edges match ``desired_ids`` on both endpoints.

    Endpoints being removed that no longer exist are skipped and their id is
    dropped from ``product``. Endpoints being added must exist, otherwise the
    whole delta fails with ``ObjectNotFoundError``.
    """
    _require_session(session)

    current = [str(pid) for pid in product.similar_products]
    desired = list(dict.fromkeys(str(pid) for pid in desired_ids))

    to_remove = [pid for pid in current if pid not in desired]
    to_add = [pid for pid in desired if pid not in current]

    if str(product.id) in to_add:
        raise ValidationError({"similar_products": ["Cannot add product itself as a similar product"]})

    removals = [(pid, find_product(pid)) for pid in to_remove]

    additions = []
    for pid in to_add:
        other = find_product(pid)
        if other is None:
            raise ObjectNotFoundError(f"Product with id {pid} from similar product array not found")
        additions.append(other)

    dropped = []
    for pid, other in removals:
        if other is None:
            logger.warning("Dropping dangling similar product", product_id=str(product.id), similar_product_id=pid)
            product.unlink_similar(pid)
            dropped.append(pid)
            continue
        unlink_products(product, other, session)

    for other in additions:
        link_products(product, other, session)

    return SimilarityDelta(
        added=tuple(to_add),
        removed=tuple(pid for pid, other in removals if other is not None),
        dropped=tuple(dropped),
    )

"""Image record management.

Creates and deletes ``ProductImage`` records inside a caller's transactional
session. Nothing here talks to the file store: bytes are uploaded or removed
by the caller once the session has committed.
"""

from uuid import uuid4

import structlog
from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from catalog.product.image import ImageFile, ProductImage
from catalog.product.transaction import TransactionalSession
from catalog.shared.errors import TransactionError

logger = structlog.get_logger(__name__)


def image_path_for(image_id: str, owner_product_id: str, file: ImageFile) -> str:
    """Storage path of an image: ``products/<product_id>/<image_id>.<ext>``."""
    return f"products/{owner_product_id}/{image_id}.{file.extension}"


def _require_session(session: TransactionalSession) -> None:
    if session is None or not session.in_progress:
        raise TransactionError("Image records can only be changed inside an open session")


def create_image(file: ImageFile, owner_product_id: str, session: TransactionalSession) -> str:
    """Persist a new image record for ``owner_product_id`` and return its id."""
    _require_session(session)

    image_id = str(uuid4())
    image = ProductImage(id=image_id, url=image_path_for(image_id, owner_product_id, file))
    current_domain.repository_for(ProductImage).add(image)

    logger.debug("Created image record", image_id=image_id, product_id=str(owner_product_id), path=image.url)
    return image_id


def delete_image(image_id: str, session: TransactionalSession) -> str:
    """Remove an image record and return the path its file was stored at.

    Raises ``ObjectNotFoundError`` if no record exists for ``image_id``.
    """
    _require_session(session)

    repo = current_domain.repository_for(ProductImage)
    image = repo.get(image_id)
    path = image.url
    repo._dao.delete(image)

    logger.debug("Deleted image record", image_id=str(image_id), path=path)
    return path


def find_image(image_id: str) -> ProductImage | None:
    try:
        return current_domain.repository_for(ProductImage).get(image_id)
    except ObjectNotFoundError:
        return None

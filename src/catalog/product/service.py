"""Product consistency orchestration.

``ProductService`` exposes one method per catalog use case. Operations that
touch more than one document follow the same template:

    open session -> validate -> mutate documents -> commit
    -> file-store side effect -> release

Anything raised before the commit aborts the session and leaves the store
as it was. File-store calls happen strictly after the commit; when one
fails, the committed documents stay and the failure is returned inside
``CatalogResult.side_effect_errors`` instead of being raised.
"""

from dataclasses import dataclass

import structlog
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.utils.globals import current_domain

from catalog.filestore import FileStore, get_file_store
from catalog.product import queries
from catalog.product.image import ImageFile
from catalog.product.images import create_image, delete_image, find_image, image_path_for
from catalog.product.product import (
    ACCEPTED_IMG_EXTENSIONS,
    MAX_IMAGES_PER_PRODUCT,
    MIN_IMAGES_PER_PRODUCT,
    TARGETED_IMG_SIZE,
    Product,
)
from catalog.product.similar import find_product, link_products, sync_similar_products
from catalog.product.transaction import transaction
from catalog.shared.errors import ConflictError, SideEffectError
from catalog.utils.logging import bind_operation, clear_context

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class CatalogResult:
    """Outcome of a mutating operation.

    ``product`` reflects the committed state. A non-empty
    ``side_effect_errors`` marks a degraded success.
    """

    product: Product
    side_effect_errors: tuple[SideEffectError, ...] = ()

    @property
    def degraded(self) -> bool:
        return bool(self.side_effect_errors)


def _validate_image_file(file, field_name="images"):
    if not isinstance(file, ImageFile):
        raise ValidationError({field_name: ["Image not uploaded"]})
    if file.extension not in ACCEPTED_IMG_EXTENSIONS:
        raise ValidationError(
            {field_name: [f"Unsupported image format {file.extension!r}, expected one of {ACCEPTED_IMG_EXTENSIONS}"]}
        )


def _validate_id_list(ids, field_name, message):
    if not isinstance(ids, list | tuple) or not all(isinstance(i, str) for i in ids):
        raise ValidationError({field_name: [message]})


def _require_value(value, field_name, label):
    if value is None or (isinstance(value, str) and not value.strip()):
        raise ValidationError({field_name: [f"New product {label} not present"]})


class ProductService:
    """Catalog use cases over the product, image, and file stores."""

    def __init__(self, file_store: FileStore | None = None) -> None:
        self._file_store = file_store

    @property
    def file_store(self) -> FileStore:
        return self._file_store or get_file_store()

    # ------------------------------------------------------------------
    # Side effects
    # ------------------------------------------------------------------
    def _upload(self, path: str, file: ImageFile) -> SideEffectError | None:
        if file.size > TARGETED_IMG_SIZE:
            logger.warning("Image exceeds targeted size", path=path, size=file.size, targeted_size=TARGETED_IMG_SIZE)

        try:
            self.file_store.upload(path, file.content, file.content_type)
        except Exception as exc:
            logger.warning("Image upload failed after commit", path=path, error=str(exc))
            return SideEffectError(SideEffectError.UPLOAD, path, exc, file=file)
        return None

    def _delete_file(self, path: str) -> SideEffectError | None:
        try:
            self.file_store.delete(path)
        except Exception as exc:
            logger.warning("Image file deletion failed after commit", path=path, error=str(exc))
            return SideEffectError(SideEffectError.DELETE, path, exc)
        return None

    def retry_side_effect(self, error: SideEffectError) -> None:
        """Replay a failed upload or delete. Raises ``SideEffectError`` if it fails again."""
        if error.action == SideEffectError.UPLOAD:
            retry_error = self._upload(error.path, error.file)
        elif error.action == SideEffectError.DELETE:
            retry_error = self._delete_file(error.path)
        else:
            raise ValueError(f"Unknown side effect action: {error.action}")

        if retry_error is not None:
            raise retry_error

        logger.info("Side effect replayed", action=error.action, path=error.path)

    # ------------------------------------------------------------------
    # Creation
    # ------------------------------------------------------------------
    def create_product(
        self,
        name,
        price,
        quantity_in_stock,
        images,
        description=None,
        category=None,
        is_popular=False,
        similar_products=(),
    ) -> CatalogResult:
        bind_operation("create_product")
        try:
            if not isinstance(images, list | tuple):
                raise ValidationError({"images": ["Image files not present"]})
            if not MIN_IMAGES_PER_PRODUCT <= len(images) <= MAX_IMAGES_PER_PRODUCT:
                raise ValidationError(
                    {
                        "images": [
                            f"A product needs between {MIN_IMAGES_PER_PRODUCT} and {MAX_IMAGES_PER_PRODUCT} images"
                        ]
                    }
                )
            for file in images:
                _validate_image_file(file)

            _validate_id_list(similar_products, "similar_products", "Invalid array of similar products")
            if len(set(similar_products)) != len(similar_products):
                raise ValidationError({"similar_products": ["Similar products must not repeat"]})

            with transaction() as session:
                product = Product.create(
                    name=name,
                    price=price,
                    quantity_in_stock=quantity_in_stock,
                    description=description,
                    category=category,
                    is_popular=is_popular,
                )

                similar = []
                for similar_id in similar_products:
                    other = find_product(similar_id)
                    if other is None:
                        raise ObjectNotFoundError(
                            f"Product with id {similar_id} from similar product array not found"
                        )
                    similar.append(other)

                uploads = []
                for file in images:
                    image_id = create_image(file, product.id, session)
                    product.attach_image(image_id)
                    uploads.append((image_path_for(image_id, product.id, file), file))

                for other in similar:
                    link_products(product, other, session)

                current_domain.repository_for(Product).add(product)

            errors = [self._upload(path, file) for path, file in uploads]

            result = CatalogResult(product=product, side_effect_errors=tuple(e for e in errors if e))
            logger.info(
                "Product created",
                product_id=str(product.id),
                image_count=len(product.images),
                similar_count=len(product.similar_products),
                degraded=result.degraded,
            )
            return result
        finally:
            clear_context()

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    def list_products(self, criteria: queries.FilterCriteria | None = None) -> queries.Pagination:
        return queries.list_products(criteria)

    def get_product(self, product_id) -> Product:
        return queries.get_product(product_id)

    def get_products_with_ids(self, product_ids) -> list[Product]:
        return queries.get_products_with_ids(product_ids)

    # ------------------------------------------------------------------
    # Images
    # ------------------------------------------------------------------
    def add_image(self, product_id, file) -> CatalogResult:
        bind_operation("add_image", product_id=str(product_id))
        try:
            _validate_image_file(file, field_name="image")

            with transaction() as session:
                product = queries.get_product(product_id)

                if not len(product.images) < MAX_IMAGES_PER_PRODUCT:
                    raise ValidationError(
                        {
                            "images": [
                                f"Already {MAX_IMAGES_PER_PRODUCT} images for product present. Delete some image."
                            ]
                        }
                    )

                image_id = create_image(file, product.id, session)
                product.attach_image(image_id)
                current_domain.repository_for(Product).add(product)

            error = self._upload(image_path_for(image_id, product.id, file), file)

            logger.info("Image added", image_id=image_id, degraded=error is not None)
            return CatalogResult(product=product, side_effect_errors=(error,) if error else ())
        finally:
            clear_context()

    def delete_image(self, product_id, image_id) -> CatalogResult:
        bind_operation("delete_image", product_id=str(product_id), image_id=str(image_id))
        try:
            with transaction() as session:
                product = queries.get_product(product_id)

                if find_image(image_id) is None:
                    raise ObjectNotFoundError(f"Image with id {image_id} not found")

                if not product.has_image(image_id):
                    raise ConflictError(f"Image with id {image_id} does not belong to product with id {product_id}")

                if len(product.images) <= MIN_IMAGES_PER_PRODUCT:
                    raise ValidationError(
                        {"images": [f"A product must keep at least {MIN_IMAGES_PER_PRODUCT} image"]}
                    )

                product.detach_image(image_id)
                path = delete_image(image_id, session)
                current_domain.repository_for(Product).add(product)

            error = self._delete_file(path)

            logger.info("Image deleted", path=path, degraded=error is not None)
            return CatalogResult(product=product, side_effect_errors=(error,) if error else ())
        finally:
            clear_context()

    def rearrange_images(self, product_id, image_ids) -> CatalogResult:
        _validate_id_list(image_ids, "images", "Payload must be an array of strings")

        product = queries.get_product(product_id)
        product.rearrange_images(image_ids)
        current_domain.repository_for(Product).add(product)

        return CatalogResult(product=product)

    # ------------------------------------------------------------------
    # Scalar fields
    # ------------------------------------------------------------------
    def _edit_details(self, product_id, **changes) -> CatalogResult:
        product = queries.get_product(product_id)
        product.update_details(**changes)
        current_domain.repository_for(Product).add(product)

        return CatalogResult(product=product)

    def edit_name(self, product_id, name) -> CatalogResult:
        _require_value(name, "name", "name")
        return self._edit_details(product_id, name=name)

    def edit_quantity(self, product_id, quantity_in_stock) -> CatalogResult:
        _require_value(quantity_in_stock, "quantity_in_stock", "quantity")
        return self._edit_details(product_id, quantity_in_stock=quantity_in_stock)

    def edit_description(self, product_id, description) -> CatalogResult:
        _require_value(description, "description", "description")
        return self._edit_details(product_id, description=description)

    def edit_category(self, product_id, category) -> CatalogResult:
        _require_value(category, "category", "category")
        return self._edit_details(product_id, category=category)

    def edit_basic_details(
        self,
        product_id,
        name=None,
        description=None,
        quantity_in_stock=None,
        category=None,
        is_popular=None,
        price=None,
    ) -> CatalogResult:
        changes = {
            "name": name,
            "description": description,
            "quantity_in_stock": quantity_in_stock,
            "category": category,
            "is_popular": is_popular,
            "price": price,
        }
        changes = {key: value for key, value in changes.items() if value is not None}
        if not changes:
            raise ValidationError({"details": ["No product details to update"]})

        return self._edit_details(product_id, **changes)

    # ------------------------------------------------------------------
    # Similar products
    # ------------------------------------------------------------------
    def edit_similar_products(self, product_id, similar_product_ids) -> CatalogResult:
        bind_operation("edit_similar_products", product_id=str(product_id))
        try:
            _validate_id_list(similar_product_ids, "similar_products", "Invalid array of new similar products")
            if len(set(similar_product_ids)) != len(similar_product_ids):
                raise ValidationError({"similar_products": ["Similar products must not repeat"]})

            with transaction() as session:
                product = queries.get_product(product_id)
                delta = sync_similar_products(product, similar_product_ids, session)
                current_domain.repository_for(Product).add(product)

            logger.info(
                "Similar products updated",
                added=list(delta.added),
                removed=list(delta.removed),
                dropped=list(delta.dropped),
            )
            return CatalogResult(product=product)
        finally:
            clear_context()

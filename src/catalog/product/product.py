"""Product aggregate root.

A product owns an ordered list of image ids and a list of similar product
ids. Both are plain identifiers: the image records live in their own
aggregate and similar products are peers, so every edge is duplicated on
both endpoints and kept in step by ``catalog.product.similar``.
"""

from datetime import datetime
from enum import Enum

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Float, Integer, List, String, Text

from catalog.domain import catalog

MAX_IMAGES_PER_PRODUCT = 3
MIN_IMAGES_PER_PRODUCT = 1
MIN_PRODUCT_PRICE = 0
MIN_QTY_IN_STOCK = 0

ACCEPTED_IMG_EXTENSIONS = ("jpeg", "jpg", "png")

# Target size in bytes (100 kilobytes) for stored images
TARGETED_IMG_SIZE = 100 * 1024


class Category(Enum):
    """Enumeration of product categories."""

    ANKLET = "ANKLET"
    BODY_JEWELLERY = "BODY_JEWELLERY"
    BRACELET = "BRACELET"
    EARRING = "EARRING"
    NECKLACE = "NECKLACE"
    OTHERS = "OTHERS"
    PHONE_STRAP = "PHONE_STRAP"


@catalog.aggregate
class Product:
    """Product aggregate root."""

    name: String(required=True, min_length=3, max_length=200)
    description: Text(default="")
    price: Float(required=True, min_value=MIN_PRODUCT_PRICE)
    quantity_in_stock: Integer(required=True, min_value=MIN_QTY_IN_STOCK)
    category: String(choices=Category, default=Category.OTHERS.value)
    is_popular: Boolean(default=False)
    images: List(content_type=String)
    similar_products: List(content_type=String)
    created_at: DateTime(default=datetime.now)
    updated_at: DateTime(default=datetime.now)

    @invariant.post
    def images_cannot_exceed_maximum(self):
        if len(self.images or []) > MAX_IMAGES_PER_PRODUCT:
            raise ValidationError(
                {"images": [f"Cannot have more than {MAX_IMAGES_PER_PRODUCT} images"]}
            )

    @invariant.post
    def description_length_must_be_valid(self):
        description = self.description or ""
        if description and not 5 <= len(description) <= 1000:
            raise ValidationError(
                {"description": ["Description should be minimum 5 and maximum 1000 characters long"]}
            )

    @invariant.post
    def cannot_be_similar_to_itself(self):
        if self.id and self.id in (self.similar_products or []):
            raise ValidationError({"similar_products": ["Cannot add product itself as a similar product"]})

    @classmethod
    def create(
        cls,
        name,
        price,
        quantity_in_stock,
        description=None,
        category=None,
        is_popular=False,
    ):
        from catalog.product.events import ProductCreated

        now = datetime.now()
        product = cls(
            name=name,
            description=description or "",
            price=price,
            quantity_in_stock=quantity_in_stock,
            category=category or Category.OTHERS.value,
            is_popular=bool(is_popular),
            images=[],
            similar_products=[],
            created_at=now,
            updated_at=now,
        )
        product.raise_(
            ProductCreated(
                product_id=product.id,
                name=name,
                category=product.category,
                price=price,
                created_at=now,
            )
        )
        return product

    def has_image(self, image_id) -> bool:
        return str(image_id) in self.images

    def is_similar_to(self, product_id) -> bool:
        return str(product_id) in self.similar_products

    def attach_image(self, image_id):
        from catalog.product.events import ProductImageAdded

        if len(self.images) >= MAX_IMAGES_PER_PRODUCT:
            raise ValidationError({"images": [f"Cannot have more than {MAX_IMAGES_PER_PRODUCT} images"]})

        self.images = [*self.images, str(image_id)]
        self.updated_at = datetime.now()

        self.raise_(
            ProductImageAdded(
                product_id=self.id,
                image_id=str(image_id),
                position=len(self.images) - 1,
            )
        )

    def detach_image(self, image_id):
        from catalog.product.events import ProductImageRemoved

        if not self.has_image(image_id):
            raise ValidationError({"images": [f"Image {image_id} not found"]})

        self.images = [i for i in self.images if i != str(image_id)]
        self.updated_at = datetime.now()

        self.raise_(
            ProductImageRemoved(
                product_id=self.id,
                image_id=str(image_id),
            )
        )

    def rearrange_images(self, image_ids):
        from catalog.product.events import ProductImagesRearranged

        image_ids = [str(i) for i in image_ids]
        # Same length and same set means a permutation, duplicates included
        if len(image_ids) != len(self.images) or set(image_ids) != set(self.images):
            raise ValidationError({"images": ["Images are different"]})

        self.images = image_ids
        self.updated_at = datetime.now()

        self.raise_(
            ProductImagesRearranged(
                product_id=self.id,
                image_ids=image_ids,
            )
        )

    def link_similar(self, product_id):
        from catalog.product.events import SimilarProductLinked

        if str(product_id) == str(self.id):
            raise ValidationError({"similar_products": ["Cannot add product itself as a similar product"]})
        if self.is_similar_to(product_id):
            return

        self.similar_products = [*self.similar_products, str(product_id)]
        self.updated_at = datetime.now()

        self.raise_(
            SimilarProductLinked(
                product_id=self.id,
                similar_product_id=str(product_id),
            )
        )

    def unlink_similar(self, product_id):
        from catalog.product.events import SimilarProductUnlinked

        if not self.is_similar_to(product_id):
            return

        self.similar_products = [p for p in self.similar_products if p != str(product_id)]
        self.updated_at = datetime.now()

        self.raise_(
            SimilarProductUnlinked(
                product_id=self.id,
                similar_product_id=str(product_id),
            )
        )

    def update_details(
        self,
        name=None,
        description=None,
        quantity_in_stock=None,
        category=None,
        is_popular=None,
        price=None,
    ):
        from catalog.product.events import ProductDetailsUpdated

        if name is not None:
            self.name = name
        if description is not None:
            self.description = description
        if quantity_in_stock is not None:
            self.quantity_in_stock = quantity_in_stock
        if category is not None:
            self.category = category
        if is_popular is not None:
            self.is_popular = is_popular
        if price is not None:
            self.price = price

        self.updated_at = datetime.now()

        self.raise_(
            ProductDetailsUpdated(
                product_id=self.id,
                name=self.name,
                description=self.description,
                quantity_in_stock=self.quantity_in_stock,
                category=self.category,
                is_popular=self.is_popular,
                price=self.price,
            )
        )

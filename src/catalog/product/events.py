"""Domain events for the Product aggregate."""

from protean.fields import Boolean, DateTime, Float, Identifier, Integer, List, String

from catalog.domain import catalog


@catalog.event(part_of="Product")
class ProductCreated:
    """A new product was added to the catalog."""

    __version__ = 1

    product_id: Identifier(required=True)
    name: String(required=True)
    category: String(required=True)
    price: Float(required=True)
    created_at: DateTime(required=True)


@catalog.event(part_of="Product")
class ProductDetailsUpdated:
    """One or more scalar fields of a product changed."""

    __version__ = 1

    product_id: Identifier(required=True)
    name: String(required=True)
    description: String()
    quantity_in_stock: Integer(required=True)
    category: String(required=True)
    is_popular: Boolean()
    price: Float(required=True)


@catalog.event(part_of="Product")
class ProductImageAdded:
    """An image record was attached to the end of a product's image list."""

    __version__ = 1

    product_id: Identifier(required=True)
    image_id: Identifier(required=True)
    position: Integer(required=True)


@catalog.event(part_of="Product")
class ProductImageRemoved:
    __version__ = 1

    product_id: Identifier(required=True)
    image_id: Identifier(required=True)


@catalog.event(part_of="Product")
class ProductImagesRearranged:
    __version__ = 1

    product_id: Identifier(required=True)
    image_ids: List(content_type=String)


# Edge events are raised on both endpoints of a similar-products edge


@catalog.event(part_of="Product")
class SimilarProductLinked:
    __version__ = 1

    product_id: Identifier(required=True)
    similar_product_id: Identifier(required=True)


@catalog.event(part_of="Product")
class SimilarProductUnlinked:
    __version__ = 1

    product_id: Identifier(required=True)
    similar_product_id: Identifier(required=True)

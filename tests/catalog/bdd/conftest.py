"""Shared BDD fixtures and step definitions for the catalog."""

import pytest
from catalog.product.image import ImageFile, ProductImage
from catalog.product.product import Product
from catalog.shared.errors import ConflictError
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.utils.globals import current_domain
from pytest_bdd import given, parsers, then

# Map error names used in feature files to exception classes
_ERROR_CLASSES = {
    "validation": ValidationError,
    "not found": ObjectNotFoundError,
    "conflict": ConflictError,
}


def _image_files(count):
    return [ImageFile(filename=f"shot-{i}.jpg", content=f"file-{i}".encode()) for i in range(count)]


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------
@pytest.fixture()
def error():
    """Container for captured catalog errors."""
    return {"exc": None}


@pytest.fixture()
def outcome():
    """Container for the result of the last successful operation."""
    return {"result": None}


@pytest.fixture()
def image_files():
    """Factory for distinct JPEG files numbered from zero."""
    return _image_files


@pytest.fixture()
def stored_product():
    """Reload a product from its repository."""

    def _load(product_id):
        return current_domain.repository_for(Product).get(product_id)

    return _load


@pytest.fixture()
def image_path():
    """Look up the storage path recorded for an image."""

    def _path(image_id):
        return current_domain.repository_for(ProductImage).get(image_id).url

    return _path


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given(parsers.cfparse("a product with {count:d} images"), target_fixture="product")
def product_with_images(service, image_files, count):
    return service.create_product(
        name="Layered Necklace",
        price=300.0,
        quantity_in_stock=2,
        images=image_files(count),
    ).product


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse("the operation fails with a {kind} error"))
def operation_fails(error, kind):
    assert error["exc"] is not None, "Expected the operation to fail"
    assert isinstance(error["exc"], _ERROR_CLASSES[kind])


@then(parsers.cfparse("the product has {count:d} images"))
def product_has_n_images(product, stored_product, count):
    assert len(stored_product(product.id).images) == count


@then(parsers.cfparse("{count:d} image records exist"))
def image_records_exist(count):
    assert current_domain.repository_for(ProductImage)._dao.query.all().total == count

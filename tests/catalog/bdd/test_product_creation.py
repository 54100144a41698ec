"""BDD tests for product creation."""

from catalog.product.image import ProductImage
from catalog.product.product import Product
from protean.exceptions import ValidationError
from protean.utils.globals import current_domain
from pytest_bdd import given, parsers, scenarios, then, when

scenarios("features/product_creation.feature")


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given("the file store rejects uploads")
def file_store_rejects_uploads(file_store):
    file_store.configure(fail_uploads=True)


# ---------------------------------------------------------------------------
# When steps
# ---------------------------------------------------------------------------
@when(parsers.cfparse("a product is created with {count:d} image files"), target_fixture="product")
def create_product(service, image_files, count, error, outcome):
    try:
        result = service.create_product(
            name="Ear Cuff",
            price=150.0,
            quantity_in_stock=8,
            images=image_files(count),
        )
    except ValidationError as exc:
        error["exc"] = exc
        return None

    outcome["result"] = result
    return result.product


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then("the images keep the order of the files")
def images_keep_order(product, file_store, stored_product, image_path):
    stored = stored_product(product.id)
    contents = [file_store.files[image_path(image_id)] for image_id in stored.images]
    assert contents == [f"file-{i}".encode() for i in range(len(stored.images))]


@then("every image file is stored")
def every_file_stored(product, file_store, stored_product, image_path):
    for image_id in stored_product(product.id).images:
        assert file_store.exists(image_path(image_id))


@then("no product or image is stored")
def nothing_stored(file_store):
    assert current_domain.repository_for(Product)._dao.query.all().total == 0
    assert current_domain.repository_for(ProductImage)._dao.query.all().total == 0
    assert file_store.calls == []


@then("the operation succeeds in degraded mode")
def degraded_success(outcome):
    assert outcome["result"] is not None
    assert outcome["result"].degraded is True


@then("no image file is stored")
def no_file_stored(file_store):
    assert file_store.files == {}

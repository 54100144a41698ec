"""BDD tests for the similar-products relation."""

from protean.exceptions import ObjectNotFoundError, ValidationError
from pytest_bdd import given, parsers, scenarios, then, when

scenarios("features/similar_products.feature")


def _set_similar(service, products, name, others, error):
    try:
        service.edit_similar_products(products[name], others)
    except (ValidationError, ObjectNotFoundError) as exc:
        error["exc"] = exc


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given(parsers.cfparse('products "{first}", "{second}" and "{third}" exist'), target_fixture="products")
def products_exist(service, image_files, first, second, third):
    products = {}
    for name in (first, second, third):
        product = service.create_product(
            name=f"Product {name}",
            price=60.0,
            quantity_in_stock=5,
            images=image_files(1),
        ).product
        products[name] = product.id
    return products


# ---------------------------------------------------------------------------
# When steps
# ---------------------------------------------------------------------------
@given(parsers.cfparse('the similar products of "{name}" are set to "{other}"'))
@when(parsers.cfparse('the similar products of "{name}" are set to "{other}"'))
def set_similar(service, products, name, other, error):
    _set_similar(service, products, name, [products[other]], error)


@when(parsers.cfparse('the similar products of "{name}" are set to "{other}" and a missing product'))
def set_similar_with_missing(service, products, name, other, error):
    _set_similar(service, products, name, [products[other], "missing-product"], error)


@when(parsers.cfparse('the similar products of "{name}" are cleared'))
def clear_similar(service, products, name, error):
    _set_similar(service, products, name, [], error)


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse('"{name}" lists "{other}" as similar'))
def lists_as_similar(products, stored_product, name, other):
    assert stored_product(products[name]).similar_products == [products[other]]


@then(parsers.cfparse('"{name}" lists no similar products'))
def lists_nothing(products, stored_product, name):
    assert stored_product(products[name]).similar_products == []

from storefront.normalizer.product import normalize_row, parse_row, resolve_images
from storefront.products.models import PLACEHOLDER_IMAGE
from tests.conftest import sample_row


def test_missing_images_fall_back_to_placeholder():
    product = normalize_row(sample_row())
    assert product.images == [PLACEHOLDER_IMAGE]
    assert product.imageUrl == PLACEHOLDER_IMAGE


def test_json_encoded_image_array():
    product = normalize_row(sample_row(images='["a.jpg","b.jpg"]'))
    assert product.images == ["a.jpg", "b.jpg"]
    assert product.imageUrl == "a.jpg"


def test_comma_delimited_images_are_trimmed():
    assert resolve_images({"images": "a.jpg, b.jpg"}) == ["a.jpg", "b.jpg"]
    assert resolve_images({"images": " a.jpg ,, b.jpg , "}) == ["a.jpg", "b.jpg"]


def test_native_list_is_used_as_is():
    assert resolve_images({"images": ["x.jpg", "y.jpg"], "image_url": "z.jpg"}) == ["x.jpg", "y.jpg"]


def test_json_non_array_falls_back_to_split():
    assert resolve_images({"images": "42"}) == ["42"]
    assert resolve_images({"images": '{"a": 1}'}) == ['{"a": 1}']


def test_image_url_used_when_images_empty():
    assert resolve_images({"images": [], "image_url": "single.jpg"}) == ["single.jpg"]
    assert resolve_images({"images": "[]", "image_url": "single.jpg"}) == ["single.jpg"]
    assert resolve_images({"images": "", "image_url": "single.jpg"}) == ["single.jpg"]


def test_original_price_defaults_to_price():
    product = normalize_row(sample_row(price=500))
    assert product.original_price == 500
    assert product.discount_percent == 0


def test_original_price_kept_when_present():
    product = normalize_row(sample_row(price="450.50", original_price="600", discount_percent="25"))
    assert product.price == 450.5
    assert product.original_price == 600
    assert product.discount_percent == 25


def test_optional_strings_default_to_empty():
    product = normalize_row(sample_row(model_no=None, warranty="2 years"))
    assert product.modelNo == ""
    assert product.dimensions == ""
    assert product.materials == ""
    assert product.weight_capacity == ""
    assert product.delivery_timeframe == ""
    assert product.warranty == "2 years"
    assert product.videos == []


def test_flags_and_features():
    product = normalize_row(sample_row(is_featured=1, is_promo=None, in_stock=True, features=["Oak", "Linen"]))
    assert product.isFeatured is True
    assert product.is_promo is False
    assert product.inStock is True
    assert product.features == ["Oak", "Linen"]
    assert normalize_row(sample_row(features="Oak, Linen")).features == []


def test_malformed_fields_degrade_and_are_reported():
    result = parse_row(sample_row(price="call us", in_stock="false", features="Oak"))

    assert result.product.price == 0
    assert result.product.inStock is True
    assert not result.ok
    assert any(issue.startswith("price") for issue in result.issues)
    assert any(issue.startswith("in_stock") for issue in result.issues)
    assert any(issue.startswith("features") for issue in result.issues)


def test_huge_numbers_degrade_instead_of_raising():
    result = parse_row(sample_row(price=10**400, original_price=-(10**400), discount_percent="1e999"))

    assert result.product.price == 0
    assert result.product.original_price == 0
    assert result.product.discount_percent == 0
    assert "price: number out of range for a float" in result.issues
    assert any(issue.startswith("original_price") for issue in result.issues)
    assert any(issue.startswith("discount_percent") for issue in result.issues)
    assert normalize_row(sample_row(price=10**400)).price == 0


def test_clean_row_has_no_issues():
    assert parse_row(sample_row(images=["a.jpg"])).ok


def test_missing_required_fields_never_raise():
    result = parse_row({"id": 7})
    assert result.product.id == "7"
    assert result.product.name == ""
    assert result.product.images == [PLACEHOLDER_IMAGE]
    assert "name: missing" in result.issues

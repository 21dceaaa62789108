import pytest

from app.services.pickup_classifier import classify
from app.services.pickup_reassign_types import Order, PickupRules, ShippingLine

pytestmark = pytest.mark.grp_reassign

RULES = PickupRules(
    tag_keyword="pickup",
    shipping_keywords=("pickup", "pick up", "local"),
    location_name="Americana",
)


def _order(tags=(), lines=()):
    return Order(external_id="1", display_number="#1001", tags=tuple(tags), shipping_lines=tuple(lines))


@pytest.mark.parametrize("tag", ["pickup-order", "PICKUP", "Store Pickup", "xxpickupxx"])
def test_pickup_tag_wins_regardless_of_shipping(tag):
    lines = [ShippingLine(code="standard", title="Standard Shipping", source="shopify")]
    v = classify(_order(tags=[tag], lines=lines), RULES)
    assert v.is_pickup is True
    assert v.reason == f"tag:{tag}"


@pytest.mark.parametrize(
    "line",
    [
        ShippingLine(code="PICKUP-STORE", title=""),
        ShippingLine(code="", title="In-store Pick Up"),
        ShippingLine(code="local_delivery", title="Delivery"),
        ShippingLine(code="custom", title="AMERICANA counter"),
    ],
)
def test_shipping_line_keywords_and_location_name(line):
    assert classify(_order(lines=[line]), RULES).is_pickup is True


def test_second_shipping_line_can_match():
    lines = [
        ShippingLine(code="standard", title="Standard Shipping"),
        ShippingLine(code="x", title="Pickup at Americana"),
    ]
    assert classify(_order(lines=lines), RULES).is_pickup is True


def test_standard_shipping_is_not_pickup():
    lines = [ShippingLine(code="standard", title="Standard Shipping", source="shopify")]
    v = classify(_order(tags=["vip", "wholesale"], lines=lines), RULES)
    assert v.is_pickup is False
    assert v.reason is None


def test_source_field_is_not_a_rule():
    # source=shopify 不再作为自提依据
    lines = [ShippingLine(code="ups_ground", title="UPS Ground", source="shopify")]
    assert classify(_order(lines=lines), RULES).is_pickup is False


def test_missing_collections_never_raise():
    assert classify(Order(external_id="", display_number=""), RULES).is_pickup is False
    assert classify(_order(tags=[""], lines=[ShippingLine()]), RULES).is_pickup is False


def test_empty_location_name_does_not_match_everything():
    rules = PickupRules(location_name="   ")
    lines = [ShippingLine(code="ground", title="Ground")]
    assert classify(_order(lines=lines), rules).is_pickup is False


def test_substring_matching_false_positive_is_accepted():
    # 已知局限：子串匹配，"Locally" 含 "local"
    lines = [ShippingLine(code="ground", title="Locally Roasted Coffee Club")]
    assert classify(_order(lines=lines), RULES).is_pickup is True


def test_custom_rule_table():
    rules = PickupRules(tag_keyword="click-collect", shipping_keywords=("curbside",), location_name="")
    assert classify(_order(tags=["Click-Collect"]), rules).is_pickup is True
    assert classify(_order(tags=["pickup"]), rules).is_pickup is False
    assert classify(_order(lines=[ShippingLine(title="Curbside")]), rules).is_pickup is True

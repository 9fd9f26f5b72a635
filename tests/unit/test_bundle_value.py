# tests/unit/test_bundle_value.py
from bundle_sources.domain.bundle import BundleLinkValue, BundleOptionValue, BundleProduct
from bundle_sources.models.enums import ShipmentType


def test_child_skus_are_deduped_in_option_order():
    b = BundleProduct(
        sku="b",
        shipment_type=ShipmentType.TOGETHER,
        options=(
            BundleOptionValue(option_id=1, children=(BundleLinkValue("A"), BundleLinkValue("B"))),
            BundleOptionValue(option_id=2, children=(BundleLinkValue("B"), BundleLinkValue("C"))),
        ),
    )
    assert list(b.iter_child_skus()) == ["A", "B", "C"]
    assert b.sibling_skus("B") == ["A", "C"]
    assert b.has_child("C")
    assert not b.has_child("D")


def test_empty_bundle_has_no_children():
    b = BundleProduct(sku="b", shipment_type=ShipmentType.SEPARATELY)
    assert list(b.iter_child_skus()) == []
    assert b.sibling_skus("A") == []

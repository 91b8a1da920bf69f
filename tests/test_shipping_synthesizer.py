# tests/test_shipping_synthesizer.py

"""Tests for shipping-method synthesis."""

import unittest

from dropship_import.models.product import PartialProduct
from dropship_import.services.result_merger import merge_partials
from dropship_import.services.shipping_synthesizer import (
    FREE_SHIPPING_NAME,
    apply_shipping,
    synthesize_shipping_methods,
)


class TestSynthesizeShippingMethods(unittest.TestCase):
    """Verify the per-family method table."""

    def test_always_two_methods(self) -> None:
        for source in ("AliExpress", "Amazon", "eBay", "Walmart", "Temu", "myshop"):
            with self.subTest(source=source):
                methods = synthesize_shipping_methods(source, None, False)
                self.assertEqual(len(methods), 2)

    def test_ambiguous_zero_cost_is_not_free(self) -> None:
        """A zero cost without the explicit flag keeps normal labels."""
        methods = synthesize_shipping_methods("Amazon", 0.0, False)
        self.assertEqual(len(methods), 2)
        self.assertNotIn(FREE_SHIPPING_NAME, [m.name for m in methods])
        self.assertEqual(methods[0].name, "Standard Shipping")
        self.assertEqual(methods[0].cost, 5.99)
        self.assertEqual(methods[1].id, "sm-prime")

    def test_explicit_free_flag(self) -> None:
        methods = synthesize_shipping_methods("myshop", 8.0, True)
        self.assertEqual(methods[0].name, FREE_SHIPPING_NAME)
        self.assertEqual(methods[0].cost, 0.0)
        self.assertEqual(methods[1].cost, 20.0)

    def test_base_cost_scales_express(self) -> None:
        methods = synthesize_shipping_methods("AliExpress", 4.0, False)
        self.assertEqual([m.cost for m in methods], [4.0, 12.0])
        self.assertEqual(methods[0].carrier, "China Post")

    def test_defaults_without_cost(self) -> None:
        methods = synthesize_shipping_methods("Etsy", None, False)
        self.assertEqual([m.cost for m in methods], [5.0, 15.0])
        self.assertEqual(methods[0].estimated_days, "5-15")

    def test_prime_cost_pinned(self) -> None:
        methods = synthesize_shipping_methods("Amazon", 3.0, False)
        self.assertEqual([m.cost for m in methods], [3.0, 0.0])


class TestApplyShipping(unittest.TestCase):
    """Verify shipping fields on a merged product."""

    def test_unknown_cost_takes_first_method_cost(self) -> None:
        product = apply_shipping(merge_partials(PartialProduct(source="Etsy")))
        self.assertEqual(product.shipping_cost, 5.0)
        self.assertEqual(len(product.shipping_methods), 2)

    def test_free_product_stays_free(self) -> None:
        product = apply_shipping(merge_partials(
            PartialProduct(source="eBay", free_shipping=True)
        ))
        self.assertEqual(product.shipping_cost, 0.0)
        self.assertEqual(product.shipping_methods[0].name, FREE_SHIPPING_NAME)

    def test_input_not_mutated(self) -> None:
        merged = merge_partials(PartialProduct(source="Walmart"))
        apply_shipping(merged)
        self.assertEqual(merged.shipping_methods, [])


if __name__ == "__main__":
    unittest.main()

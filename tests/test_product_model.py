# tests/test_product_model.py

"""Tests for the product data models."""

import dataclasses
import unittest

from dropship_import.models.errors import (
    ExtractionError,
    FetchFailedError,
    InternalError,
    InvalidURLError,
    UnsupportedSourceError,
)
from dropship_import.models.product import (
    PartialProduct,
    ProductVariant,
    ShippingMethod,
)
from dropship_import.services.result_merger import merge_partials


class TestPartialProduct(unittest.TestCase):
    """Verify the optional-field partial record."""

    def test_defaults_all_unset(self) -> None:
        self.assertEqual(PartialProduct().filled_fields(), [])

    def test_filled_fields(self) -> None:
        partial = PartialProduct(title="Lamp", price=0.0)
        self.assertEqual(partial.filled_fields(), ["title", "price"])


class TestExtractedProduct(unittest.TestCase):
    """Verify the complete product record."""

    def setUp(self) -> None:
        self.product = merge_partials(PartialProduct(
            title="Lamp",
            price=10.0,
            free_shipping=True,
            variants=[ProductVariant(id="color", name="Color", options=["Red"])],
            shipping_methods=[
                ShippingMethod("sm-std", "Standard", 0.0, "5-8", "USPS")
            ],
        ))

    def test_is_frozen(self) -> None:
        with self.assertRaises(dataclasses.FrozenInstanceError):
            self.product.title = "Other"  # type: ignore[misc]

    def test_to_dict_uses_camel_case(self) -> None:
        data = self.product.to_dict()
        for key in (
            "originalPrice", "minOrder", "shippingTime", "shippingCost",
            "isFreeShipping", "shippingMethods", "sourceUrl",
        ):
            self.assertIn(key, data)
        self.assertTrue(data["isFreeShipping"])
        self.assertEqual(data["shippingMethods"][0]["estimatedDays"], "5-8")
        self.assertEqual(data["variants"][0]["options"], ["Red"])


class TestErrors(unittest.TestCase):
    """Verify the error hierarchy."""

    def test_all_errors_share_base(self) -> None:
        for cls in (
            InvalidURLError, UnsupportedSourceError,
            FetchFailedError, InternalError,
        ):
            with self.subTest(cls=cls.__name__):
                self.assertTrue(issubclass(cls, ExtractionError))

    def test_message_is_user_facing(self) -> None:
        self.assertEqual(str(InvalidURLError("Invalid URL format")), "Invalid URL format")


if __name__ == "__main__":
    unittest.main()

# dropship_import/services/shipping_synthesizer.py

"""Derive a plausible shipping-options catalog for an extracted product."""

import logging
from dataclasses import dataclass, replace

from dropship_import.extractors.source_detector import shipping_family
from dropship_import.models.product import ExtractedProduct, ShippingMethod

logger = logging.getLogger("dropship_import.shipping")

FREE_SHIPPING_NAME = "Free Shipping"


@dataclass(frozen=True)
class _MethodTemplate:
    """One row of the per-family shipping table.

    With a detected base cost, the first method charges the base cost
    and the second charges ``base * multiplier``. ``multiplier=None``
    pins the method to its default cost.
    """

    id: str
    name: str
    default_cost: float
    multiplier: float | None
    estimated_days: str
    carrier: str


_FAMILY_METHODS: dict[str, tuple[_MethodTemplate, _MethodTemplate]] = {
    "cross_border": (
        _MethodTemplate("sm-std", "ePacket / Standard", 3.50, 1.0, "15-30", "China Post"),
        _MethodTemplate("sm-exp", "Express Shipping", 15.00, 3.0, "5-10", "DHL/FedEx"),
    ),
    "amazon": (
        _MethodTemplate("sm-std", "Standard Shipping", 5.99, 1.0, "5-8", "USPS"),
        _MethodTemplate("sm-prime", "Priority/Prime", 0.0, None, "1-3", "Amazon Logistics"),
    ),
    "ebay": (
        _MethodTemplate("sm-std", "Standard", 4.99, 1.0, "5-10", "USPS/UPS"),
        _MethodTemplate("sm-exp", "Expedited", 12.99, 2.0, "2-5", "UPS"),
    ),
    "walmart": (
        _MethodTemplate("sm-std", "Standard", 0.0, 1.0, "3-7", "FedEx/USPS"),
        _MethodTemplate("sm-exp", "Express", 9.99, 2.0, "1-3", "FedEx"),
    ),
    "budget": (
        _MethodTemplate("sm-std", "Standard Shipping", 0.0, 1.0, "7-15", "Standard"),
        _MethodTemplate("sm-exp", "Express", 8.99, 2.5, "3-7", "Express"),
    ),
    "generic": (
        _MethodTemplate("sm-std", "Standard Shipping", 5.00, 1.0, "5-15", "Standard"),
        _MethodTemplate("sm-exp", "Express Shipping", 15.00, 2.5, "2-5", "Express"),
    ),
}


def _cost_for(template: _MethodTemplate, base_cost: float) -> float:
    if base_cost > 0 and template.multiplier is not None:
        return round(base_cost * template.multiplier, 2)
    return template.default_cost


def synthesize_shipping_methods(
    source: str,
    shipping_cost: float | None,
    free_shipping: bool,
) -> list[ShippingMethod]:
    """Return exactly two shipping methods for *source*.

    Only an explicit free-shipping signal turns the first method into
    "Free Shipping"; a zero or missing cost alone does not.
    """
    family = shipping_family(source)
    base_cost = shipping_cost or 0.0
    methods = [
        ShippingMethod(
            id=t.id,
            name=t.name,
            cost=_cost_for(t, base_cost),
            estimated_days=t.estimated_days,
            carrier=t.carrier,
        )
        for t in _FAMILY_METHODS[family]
    ]

    if free_shipping:
        methods[0].cost = 0.0
        methods[0].name = FREE_SHIPPING_NAME

    logger.debug(
        "Synthesised %s shipping for source=%r base=%.2f free=%s",
        family,
        source,
        base_cost,
        free_shipping,
    )
    return methods


def apply_shipping(product: ExtractedProduct) -> ExtractedProduct:
    """Return *product* with shipping methods, cost and time filled in."""
    methods = synthesize_shipping_methods(
        product.source, product.shipping_cost, product.free_shipping
    )
    shipping_cost = product.shipping_cost
    if not shipping_cost and not product.free_shipping:
        shipping_cost = methods[0].cost
    shipping_time = (
        product.shipping_time or f"{methods[0].estimated_days} days"
    )
    return replace(
        product,
        shipping_methods=methods,
        shipping_cost=shipping_cost,
        shipping_time=shipping_time,
    )

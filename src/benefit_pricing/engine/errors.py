"""
Pricing errors.

UnknownProductType is the error callers are expected to handle; the
configuration errors signal a broken rate table or selection and are
raised instead of pricing the coverage at zero.
"""


class PricingError(Exception):
    """Base class for all pricing failures."""


class UnknownProductType(PricingError, ValueError):
    """Raised when a product's type tag has no pricing strategy."""

    def __init__(self, product_type):
        self.product_type = product_type
        super().__init__(f"Unknown product type: {product_type}")


class PricingConfigurationError(PricingError, ValueError):
    """A product or selection is missing data needed to price it."""


class MissingRateError(PricingConfigurationError):
    """No rate entry in the product's costs matches the requested key."""

    def __init__(self, key: str, product_type: str = None):
        self.key = key
        self.product_type = product_type
        where = f" for {product_type}" if product_type else ""
        super().__init__(f"No rate configured{where}: {key}")


class MissingCoverageError(PricingConfigurationError):
    """A role was priced without a matching coverage election."""

    def __init__(self, role: str):
        self.role = role
        super().__init__(f"No coverage level selected for role: {role}")


class UnknownContributionMode(PricingConfigurationError):
    """Employer contribution mode is neither percentage nor dollar."""

    def __init__(self, mode):
        self.mode = mode
        super().__init__(f"Unknown employer contribution mode: {mode}")


class ProductNotFoundError(PricingError, KeyError):
    """Product id is not present in the catalog."""

    def __init__(self, product_id: str):
        self.product_id = product_id
        super().__init__(product_id)

    def __str__(self) -> str:
        return f"Product not found in catalog: {self.product_id}"

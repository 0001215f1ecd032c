"""
Pricing Engine - Prices catalog products by id with traceability.

Wraps the pure calculators in pricing.py with:
- Product lookup from the compiled catalog
- Structured PriceResult output with an execution trace
- Legacy dict output for callers that only want numbers
"""
import logging
from typing import Optional

from ..config.settings import get_settings, Settings
from .catalog import ProductCatalog
from .models import Employee, Product, QuoteRequest, PriceResult, SelectedOptions, TraceStep
from .pricing import price_product

logger = logging.getLogger(__name__)


class PricingEngine:
    """
    Catalog-backed pricing engine.

    Resolution order:
    1. Look up the product by id in the catalog
    2. Dispatch on product type to its calculator (raw price)
    3. Subtract the employer contribution
    4. Truncate to cents
    """

    def __init__(self, settings: Optional[Settings] = None, catalog: Optional[ProductCatalog] = None):
        """Initialize engine with the product catalog."""
        self.settings = settings or get_settings()
        if catalog is None:
            catalog = ProductCatalog.load(self.settings.product_catalog)
        self.catalog = catalog

    def reload_data(self):
        """Reload the product catalog from disk."""
        self.__init__(self.settings)

    def get_product(self, product_id: str) -> Product:
        return self.catalog.get(product_id)

    def calculate(self, request: QuoteRequest) -> PriceResult:
        """
        Price a catalog product with full traceability.

        Args:
            request: QuoteRequest with product id, employee and selections

        Returns:
            PriceResult with raw price, contribution, final price and trace
        """
        product = self.catalog.get(request.product_id)
        result = price_product(product, request.employee, request.selected_options)

        lookup = [TraceStep("Product Lookup", "Found product in catalog", product.name or product.id)]
        if request.request_date:
            lookup.append(TraceStep("Context", "Request date", request.request_date))
        if request.channel:
            lookup.append(TraceStep("Context", "Channel", request.channel))
        result.trace[:0] = lookup

        logger.debug("Priced %s at %.2f", request.product_id, result.price)
        return result

    def calculate_quote(self, product_id: str, employee, selected_options) -> dict:
        """
        Price a product (legacy dict format).

        Args:
            product_id: Catalog product id
            employee: Employee or its mapping form
            selected_options: SelectedOptions or its mapping form

        Returns:
            Dict with Product, Type, Raw Price, Employer Contribution, Price keys
        """
        result = self.calculate(QuoteRequest(
            product_id=product_id,
            employee=Employee.coerce(employee),
            selected_options=SelectedOptions.coerce(selected_options),
        ))
        return {
            "Product": result.product_id,
            "Type": result.product_type,
            "Raw Price": result.raw_price,
            "Employer Contribution": result.employer_contribution,
            "Price": result.price,
        }

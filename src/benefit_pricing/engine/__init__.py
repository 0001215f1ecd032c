"""Engine subpackage - core premium calculation and resolution."""
from .catalog import ProductCatalog
from .pricing import (
    calculate_product_price,
    price_product,
    calculate_vol_life_price,
    calculate_vol_life_price_per_role,
    calculate_ltd_price,
    calculate_commuter_price,
    get_employer_contribution,
    format_price,
)
from .pricing_engine import PricingEngine
from .models import (
    Product,
    Employee,
    SelectedOptions,
    CoverageElection,
    RateEntry,
    PercentageContribution,
    FixedDollarContribution,
    PriceResult,
    QuoteRequest,
)
from .errors import (
    PricingError,
    UnknownProductType,
    PricingConfigurationError,
    MissingRateError,
    MissingCoverageError,
    UnknownContributionMode,
    ProductNotFoundError,
)

__all__ = [
    'calculate_product_price', 'price_product', 'calculate_vol_life_price',
    'calculate_vol_life_price_per_role', 'calculate_ltd_price',
    'calculate_commuter_price', 'get_employer_contribution', 'format_price',
    'PricingEngine', 'ProductCatalog', 'Product', 'Employee', 'SelectedOptions',
    'CoverageElection', 'RateEntry', 'PercentageContribution',
    'FixedDollarContribution', 'PriceResult', 'QuoteRequest',
    'PricingError', 'UnknownProductType', 'PricingConfigurationError',
    'MissingRateError', 'MissingCoverageError', 'UnknownContributionMode',
    'ProductNotFoundError',
]

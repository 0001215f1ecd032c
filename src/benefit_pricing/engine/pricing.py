"""
Premium calculation for benefit products.

Resolution order for a single product:
1. Dispatch on the product type to its calculator
2. Calculator prices the selection against the product's rate table (raw price)
3. Subtract the employer contribution (percentage of raw price or flat dollars)
4. Truncate to cents

Calculators return raw, unformatted prices. Only ``price_product`` (and
``calculate_product_price`` on top of it) applies the contribution and the
truncation.
"""
import logging
import math
from typing import Mapping, Optional

from .errors import (
    MissingCoverageError,
    MissingRateError,
    PricingConfigurationError,
    UnknownProductType,
)
from .models import (
    COMMUTER,
    EMPLOYEE,
    LONG_TERM_DISABILITY,
    PRODUCT_TYPES,
    VOLUNTARY_LIFE,
    Employee,
    PriceResult,
    Product,
    RateEntry,
    SelectedOptions,
    parse_costs,
    parse_coverage_level,
    parse_employer_contribution,
)

logger = logging.getLogger(__name__)


def calculate_product_price(product, employee, selected_options) -> float:
    """
    Price a product for an employee's selections.

    Returns the employee's cost after employer contribution, truncated to
    two decimals. Raises UnknownProductType for an unrecognized type tag.
    """
    return price_product(product, employee, selected_options).price


def price_product(product, employee, selected_options) -> PriceResult:
    """Price a product and return the full breakdown with trace."""
    # Unknown tags fail before their rate table is parsed
    product_type = _product_type(product)
    if product_type not in PRODUCT_TYPES:
        raise UnknownProductType(product_type)

    product = Product.coerce(product)
    employee = Employee.coerce(employee)
    selected_options = SelectedOptions.coerce(selected_options)

    logger.debug("Pricing product %s of type %s", product.id, product.type)

    if product.type == VOLUNTARY_LIFE:
        raw_price = calculate_vol_life_price(product, selected_options)
    elif product.type == LONG_TERM_DISABILITY:
        raw_price = calculate_ltd_price(product, employee, selected_options)
    elif product.type == COMMUTER:
        raw_price = calculate_commuter_price(product, selected_options)
    else:
        raise UnknownProductType(product.type)

    contribution = get_employer_contribution(product.employer_contribution, raw_price)

    result = PriceResult(
        product_type=product.type,
        product_id=product.id,
        raw_price=raw_price,
        employer_contribution=contribution,
        price=0.0,
    )
    result.add_trace("Product Type", f"Dispatched to {product.type} calculator", product.type)
    result.add_trace("Raw Price", "Premium before employer contribution", f"${raw_price:.4f}")

    if product.employer_contribution is None:
        result.add_trace("Employer Contribution", "No employer contribution configured")
    else:
        result.add_trace(
            "Employer Contribution",
            f"{product.employer_contribution.mode} mode, {product.employer_contribution.value:g}",
            f"${contribution:.4f}",
        )

    net_price = raw_price - contribution
    if net_price < 0:
        result.add_warning(
            f"Employer contribution ${contribution:.2f} exceeds raw price ${raw_price:.2f}; price set to $0.00"
        )
        net_price = 0.0

    result.price = format_price(net_price)
    result.add_trace("Format", "Truncated to cents", f"${result.price:.2f}")
    return result


def calculate_vol_life_price(product, selected_options) -> float:
    """Sum the per-role prices for every coverage level elected."""
    product = Product.coerce(product)
    selected_options = SelectedOptions.coerce(selected_options)

    price = 0.0
    for election in selected_options.coverage_level:
        price += calculate_vol_life_price_per_role(
            election.role, selected_options.coverage_level, product.costs
        )
    return price


def calculate_vol_life_price_per_role(role: str, coverage_level, costs) -> float:
    """
    Price one covered role: ``coverage / costDivisor * price``.

    ``costDivisor`` defaults to 1000, so ``price`` is a per-$1000 rate.
    """
    election = next(
        (entry for entry in parse_coverage_level(coverage_level) if entry.role == role),
        None,
    )
    if election is None:
        raise MissingCoverageError(role)

    rate = find_rate(costs, role=role, product_type=VOLUNTARY_LIFE)
    return election.coverage / rate.cost_divisor * rate.price


def calculate_ltd_price(product, employee, selected_options=None) -> float:
    """
    Monthly long-term disability premium.

    The insured amount is the covered share of salary, truncated to whole
    dollars and capped at the product maximum. Elected coverage levels are
    not consulted.
    """
    product = Product.coerce(product)
    employee = Employee.coerce(employee)

    insured_amount = ltd_insured_amount(product, employee)
    rate = find_rate(product.costs, role=EMPLOYEE, product_type=LONG_TERM_DISABILITY)
    return insured_amount / rate.cost_divisor * rate.price


def ltd_insured_amount(product: Product, employee: Employee) -> float:
    if employee.salary is None:
        raise PricingConfigurationError("Employee salary is required to price long-term disability")
    if product.coverage_percentage is None:
        raise PricingConfigurationError("Long-term disability product has no coveragePercentage")

    insured_amount = math.trunc(employee.salary * product.coverage_percentage / 100)
    if product.maximum_coverage is not None:
        insured_amount = min(insured_amount, product.maximum_coverage)
    return insured_amount


def calculate_commuter_price(product, selected_options) -> float:
    """Flat rate for the selected commuter benefit ("train" or "parking")."""
    if isinstance(product, Mapping) and not product.get("type"):
        # Untyped rate mappings are keyed by benefit here
        product = {**product, "type": COMMUTER}
    product = Product.coerce(product)
    selected_options = SelectedOptions.coerce(selected_options)

    if not selected_options.benefit:
        raise PricingConfigurationError("No commuter benefit selected")

    rate = find_rate(product.costs, benefit=selected_options.benefit, product_type=COMMUTER)
    return rate.price


def get_employer_contribution(employer_contribution, raw_price: float) -> float:
    """
    Dollar amount the employer pays towards ``raw_price``.

    Percentage mode returns ``raw_price * (value / 100)``; dollar mode
    returns the configured amount whatever the price.
    """
    contribution = parse_employer_contribution(employer_contribution)
    if contribution is None:
        return 0.0
    return contribution.amount(raw_price)


def format_price(price: float) -> float:
    """Truncate (never round) to two decimal places."""
    return math.trunc(price * 100) / 100


def find_rate(costs, role: Optional[str] = None, benefit: Optional[str] = None,
              product_type: Optional[str] = None) -> RateEntry:
    """Find the rate entry for a role or a commuter benefit."""
    key_field = "benefit" if benefit is not None else "role"
    key = benefit if benefit is not None else role

    for entry in parse_costs(costs, key_field=key_field):
        if getattr(entry, key_field) == key:
            return entry
    raise MissingRateError(key, product_type)


def _product_type(product) -> Optional[str]:
    if isinstance(product, Product):
        return product.type
    if isinstance(product, Mapping):
        return product.get("type")
    if product is None:
        return None
    raise TypeError(f"Cannot build Product from {type(product).__name__}")

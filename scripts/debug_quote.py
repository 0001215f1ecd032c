"""
Print a traced quote for one catalog product.

Usage:
    python scripts/debug_quote.py voluntaryLife
    python scripts/debug_quote.py commuter --benefit parking
    python scripts/debug_quote.py longTermDisability --salary 106800
"""
import argparse
import sys
from pathlib import Path

# Add src to path
src_path = Path(__file__).parent.parent / 'src'
sys.path.insert(0, str(src_path))

from benefit_pricing.config.settings import configure_logging
from benefit_pricing.engine import (
    CoverageElection,
    Employee,
    PricingEngine,
    QuoteRequest,
    SelectedOptions,
)


def parse_coverage(values: list[str]) -> tuple:
    """Parse ``role=amount`` pairs, e.g. ``ee=125000 sp=75000``."""
    elections = []
    for value in values:
        role, _, amount = value.partition('=')
        elections.append(CoverageElection(role=role, coverage=float(amount)))
    return tuple(elections)


def debug():
    parser = argparse.ArgumentParser(description="Trace the price of a catalog product")
    parser.add_argument("product_id")
    parser.add_argument("--salary", type=float, default=106800)
    parser.add_argument("--coverage", nargs="*", default=["ee=125000"])
    parser.add_argument("--benefit", default="train")
    parser.add_argument("--log-level", default=None)
    args = parser.parse_args()

    configure_logging(args.log_level)
    engine = PricingEngine()

    print("Loaded Products:")
    for product_id in engine.catalog.list_ids():
        print(f"  {product_id}")

    coverage = parse_coverage(args.coverage)
    req = QuoteRequest(
        product_id=args.product_id,
        employee=Employee(salary=args.salary),
        selected_options=SelectedOptions(
            family_members_to_cover=tuple(e.role for e in coverage),
            coverage_level=coverage,
            benefit=args.benefit,
        ),
    )

    print(f"\n--- Pricing {args.product_id} ---")
    result = engine.calculate(req)
    print(result.get_trace_text())
    for warning in result.warnings:
        print(f"WARNING: {warning}")
    print(f"\nFinal Price: ${result.price:.2f}")


if __name__ == "__main__":
    debug()

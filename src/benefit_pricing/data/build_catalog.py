"""
Catalog Builder - Compiles product settings and rate tables into a JSON catalog.

Reads products.csv (one row per product) and rates.csv (one row per rate
table entry), validates them against the pricing models, and writes
products_catalog.json plus a build report.
"""
import pandas as pd
import json
import logging
from datetime import datetime
from typing import Optional
from pathlib import Path

from ..config.settings import get_settings, Settings
from ..engine.errors import PricingConfigurationError
from ..engine.catalog import get_file_hash
from ..engine.models import COMMUTER, PRODUCT_TYPES, Product, parse_employer_contribution

logger = logging.getLogger(__name__)

PRODUCT_COLUMNS = ['product_id', 'type']
RATE_COLUMNS = ['product_id', 'price']


def _read_table(path: Path) -> pd.DataFrame:
    df = pd.read_csv(path, dtype=str).fillna('')
    df.columns = [c.strip() for c in df.columns]
    for col in df.columns:
        df[col] = df[col].astype(str).str.strip()
    return df


def _warn(report: dict, msg: str, verbose: bool):
    report["warnings"].append(msg)
    logger.warning(msg)
    if verbose:
        print(f"WARNING: {msg}")


def _fail(report: dict, msg: str, verbose: bool) -> dict:
    report["errors"].append(msg)
    report["status"] = "failed"
    logger.error(msg)
    if verbose:
        print(msg)
    return report


def _rate_entries(rates: pd.DataFrame, product_id: str, key_field: str,
                  report: dict, verbose: bool) -> list[dict]:
    """Turn the rate rows of one product into catalog cost entries."""
    entries = []
    for _, row in rates[rates['product_id'] == product_id].iterrows():
        key = row.get(key_field, '')
        if not key:
            _warn(report, f"Rate row for {product_id} has no {key_field}; skipped", verbose)
            continue

        price = pd.to_numeric(row['price'], errors='coerce')
        if pd.isna(price):
            _warn(report, f"Rate {product_id}/{key} has non-numeric price '{row['price']}'; skipped", verbose)
            continue

        entry = {"price": float(price), key_field: key}
        divisor = pd.to_numeric(row.get('cost_divisor', ''), errors='coerce')
        if not pd.isna(divisor):
            if divisor <= 0:
                _warn(report, f"Rate {product_id}/{key} has non-positive cost_divisor; skipped", verbose)
                continue
            entry["costDivisor"] = float(divisor)
        entries.append(entry)
    return entries


def _product_entry(row: pd.Series, costs: list[dict]) -> dict:
    entry = {
        "id": row['product_id'],
        "name": row.get('name') or row['product_id'],
        "type": row['type'],
        "costs": costs,
        "employerContribution": None,
    }
    if row.get('contribution_mode'):
        entry["employerContribution"] = {
            "mode": row['contribution_mode'],
            "contribution": float(row.get('contribution_value') or 0),
        }
    if row.get('coverage_percentage'):
        entry["coveragePercentage"] = float(row['coverage_percentage'])
    if row.get('maximum_coverage'):
        entry["maximumCoverage"] = float(row['maximum_coverage'])
    return entry


def build_product_catalog(settings: Optional[Settings] = None, verbose: bool = True) -> dict:
    """
    Build the product catalog from the product and rate CSV files.

    Args:
        settings: Optional settings override
        verbose: Print progress messages

    Returns:
        Build report dictionary
    """
    settings = settings or get_settings()

    report = {
        "timestamp": datetime.now().isoformat(),
        "status": "pending",
        "input_files": {},
        "metrics": {},
        "warnings": [],
        "errors": []
    }

    for label, path in (("products_csv", settings.products_csv), ("rates_csv", settings.rates_csv)):
        if not path.exists():
            return _fail(report, f"CRITICAL ERROR: {path} not found.", verbose)
        report["input_files"][label] = {"path": str(path), "hash": get_file_hash(path)}

    try:
        products = _read_table(settings.products_csv)
        rates = _read_table(settings.rates_csv)
    except (OSError, pd.errors.ParserError, pd.errors.EmptyDataError) as e:
        return _fail(report, f"ERROR: Failed to read input tables. {e}", verbose)

    for name, df, required in (("products.csv", products, PRODUCT_COLUMNS), ("rates.csv", rates, RATE_COLUMNS)):
        missing = [c for c in required if c not in df.columns]
        if missing:
            return _fail(report, f"ERROR: {name} is missing columns: {', '.join(missing)}", verbose)

    # Duplicate product ids: keep the first row
    duplicates = int(products['product_id'].duplicated().sum())
    report["metrics"]["duplicates_removed"] = duplicates
    if duplicates:
        products = products.drop_duplicates('product_id')
        if verbose:
            print(f"Removed {duplicates} duplicate product rows")

    catalog = {}
    by_type = {}
    for _, row in products.iterrows():
        product_id = row['product_id']
        if not product_id:
            _warn(report, "Product row without product_id; skipped", verbose)
            continue
        if row['type'] not in PRODUCT_TYPES:
            _warn(report, f"Product {product_id} has unknown type '{row['type']}'; skipped", verbose)
            continue

        key_field = 'benefit' if row['type'] == COMMUTER else 'role'
        costs = _rate_entries(rates, product_id, key_field, report, verbose)
        if not costs:
            _warn(report, f"Product {product_id} has no rates", verbose)

        try:
            entry = _product_entry(row, costs)
            parse_employer_contribution(entry["employerContribution"])
            Product.from_dict(entry)
        except (PricingConfigurationError, ValueError) as e:
            _warn(report, f"Product {product_id} is invalid: {e}; skipped", verbose)
            continue

        catalog[product_id] = entry
        by_type[row['type']] = by_type.get(row['type'], 0) + 1
        if verbose:
            print(f"SUCCESS: Compiled {product_id} ({row['type']}) with {len(costs)} rates")

    orphans = sorted(set(rates['product_id']) - set(products['product_id']))
    for product_id in orphans:
        _warn(report, f"Rates reference unknown product '{product_id}'", verbose)

    report["metrics"]["product_count"] = len(catalog)
    report["metrics"]["rate_rows"] = len(rates)
    report["metrics"]["products_by_type"] = by_type

    output_path = settings.product_catalog
    output_path.parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, 'w', encoding='utf-8') as f:
        json.dump({
            "generated": report["timestamp"],
            "source_hashes": {k: v["hash"] for k, v in report["input_files"].items()},
            "products": catalog,
        }, f, indent=2)
    report["output_file"] = str(output_path)
    report["status"] = "success"

    if verbose:
        print(f"\nPROCESS COMPLETE: {output_path} generated with {len(catalog)} products.")

    # Save build report
    report_path = settings.build_report
    report_path.parent.mkdir(parents=True, exist_ok=True)
    with open(report_path, 'w', encoding='utf-8') as f:
        json.dump(report, f, indent=2)

    if verbose:
        print(f"Build report saved to: {report_path}")

    return report


if __name__ == "__main__":
    build_product_catalog()

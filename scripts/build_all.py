#!/usr/bin/env python
"""
Build pipeline - compiles the product catalog and runs the pricing tests.

Usage:
    python scripts/build_all.py
"""
import sys
from pathlib import Path

# Add src to path
src_path = Path(__file__).parent.parent / 'src'
sys.path.insert(0, str(src_path))

from benefit_pricing.config.settings import configure_logging
from benefit_pricing.data.build_catalog import build_product_catalog


def main():
    configure_logging()

    print("=" * 60)
    print("BENEFIT PRICING BUILD PIPELINE")
    print("=" * 60)
    print()
    
    print("[1/2] Building product catalog...")
    report = build_product_catalog(verbose=True)
    
    if report["status"] != "success":
        print("\n❌ BUILD FAILED")
        for error in report["errors"]:
            print(f"  ERROR: {error}")
        sys.exit(1)
    
    print()
    print("[2/2] Running pricing tests...")
    
    import subprocess
    test_result = subprocess.run(
        [sys.executable, '-m', 'pytest', 'tests', '-v', '--tb=short'],
        cwd=Path(__file__).parent.parent
    )
    
    if test_result.returncode != 0:
        print("\n❌ TESTS FAILED")
        sys.exit(1)
    
    print()
    print("=" * 60)
    print("✅ BUILD COMPLETE")
    print("=" * 60)
    print()
    print("Summary:")
    print(f"  Products: {report['metrics']['product_count']}")
    print(f"  Rate rows: {report['metrics']['rate_rows']}")
    print(f"  Duplicates removed: {report['metrics']['duplicates_removed']}")
    print()
    print("Products by type:")
    for product_type, count in report['metrics'].get('products_by_type', {}).items():
        print(f"  {product_type}: {count}")
    if report["warnings"]:
        print()
        print("Warnings:")
        for warning in report["warnings"]:
            print(f"  {warning}")


if __name__ == "__main__":
    main()

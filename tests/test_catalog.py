"""Catalog build and load tests, run against temporary CSV inputs."""
import json

import pytest

from benefit_pricing.config.settings import Settings, get_package_data_dir
from benefit_pricing.data.build_catalog import build_product_catalog
from benefit_pricing.engine import ProductCatalog, ProductNotFoundError
from benefit_pricing.engine.models import FixedDollarContribution

PRODUCTS_CSV = """product_id,type,name,contribution_mode,contribution_value,coverage_percentage,maximum_coverage
vol-basic,voluntaryLife,Voluntary Life,percentage,10,,
ltd-core,longTermDisability,Long Term Disability,dollar,10,60,150000
transit,commuter,Commuter,dollar,75,,
"""

RATES_CSV = """product_id,role,benefit,price,cost_divisor
vol-basic,ee,,0.35,1000
vol-basic,sp,,0.12,
ltd-core,ee,,0.5,1000
transit,,train,84.75,1
transit,,parking,250,1
"""


def make_settings(tmp_path, products=PRODUCTS_CSV, rates=RATES_CSV) -> Settings:
    (tmp_path / 'products.csv').write_text(products, encoding='utf-8')
    (tmp_path / 'rates.csv').write_text(rates, encoding='utf-8')
    return Settings(
        project_root=tmp_path,
        data_dir=tmp_path,
        products_csv=tmp_path / 'products.csv',
        rates_csv=tmp_path / 'rates.csv',
        product_catalog=tmp_path / 'products_catalog.json',
        build_report=tmp_path / 'outputs' / 'build_report.json',
    )


def test_build_catalog_success(tmp_path):
    settings = make_settings(tmp_path)
    report = build_product_catalog(settings, verbose=False)

    assert report["status"] == "success"
    assert report["errors"] == []
    assert report["warnings"] == []
    assert report["metrics"]["product_count"] == 3
    assert report["metrics"]["rate_rows"] == 5
    assert report["metrics"]["products_by_type"] == {
        "voluntaryLife": 1, "longTermDisability": 1, "commuter": 1,
    }
    assert settings.build_report.exists()
    assert json.loads(settings.build_report.read_text(encoding='utf-8'))["status"] == "success"


def test_built_catalog_loads_and_defaults_divisor(tmp_path):
    settings = make_settings(tmp_path)
    build_product_catalog(settings, verbose=False)
    catalog = ProductCatalog.load(settings.product_catalog)

    assert catalog.list_ids() == ["ltd-core", "transit", "vol-basic"]
    spouse = [entry for entry in catalog.get("vol-basic").costs if entry.role == "sp"][0]
    assert spouse.cost_divisor == 1000.0

    ltd = catalog.get("ltd-core")
    assert ltd.coverage_percentage == 60.0
    assert ltd.maximum_coverage == 150000.0
    assert ltd.employer_contribution == FixedDollarContribution(10.0)
    assert {entry.benefit for entry in catalog.get("transit").costs} == {"train", "parking"}
    assert catalog.catalog_hash


def test_build_catalog_skips_bad_rows(tmp_path):
    products = PRODUCTS_CSV + "vision-1,vision,Vision,,,,\nbad-mode,commuter,Bad,voucher,5,,\n"
    rates = RATES_CSV + "transit,,bike,free,1\nghost,ee,,1.0,1000\nbad-mode,,train,10,1\n"
    settings = make_settings(tmp_path, products, rates)

    report = build_product_catalog(settings, verbose=False)
    warnings = "\n".join(report["warnings"])

    assert report["status"] == "success"
    assert report["metrics"]["product_count"] == 3
    assert "unknown type 'vision'" in warnings
    assert "bad-mode is invalid" in warnings
    assert "non-numeric price 'free'" in warnings
    assert "unknown product 'ghost'" in warnings


def test_build_catalog_removes_duplicate_products(tmp_path):
    products = PRODUCTS_CSV + "transit,commuter,Commuter Copy,dollar,50,,\n"
    settings = make_settings(tmp_path, products)

    report = build_product_catalog(settings, verbose=False)
    catalog = ProductCatalog.load(settings.product_catalog)

    assert report["metrics"]["duplicates_removed"] == 1
    assert catalog.get("transit").name == "Commuter"


def test_build_catalog_missing_input(tmp_path):
    settings = make_settings(tmp_path)
    settings.rates_csv.unlink()

    report = build_product_catalog(settings, verbose=False)

    assert report["status"] == "failed"
    assert "not found" in report["errors"][0]
    assert not settings.product_catalog.exists()


def test_build_catalog_missing_columns(tmp_path):
    settings = make_settings(tmp_path, rates="product_id,role\nvol-basic,ee\n")

    report = build_product_catalog(settings, verbose=False)

    assert report["status"] == "failed"
    assert "price" in report["errors"][0]


def test_bundled_catalog_matches_bundled_tables(tmp_path):
    data_dir = get_package_data_dir()
    settings = Settings(
        project_root=tmp_path,
        data_dir=data_dir,
        products_csv=data_dir / 'products.csv',
        rates_csv=data_dir / 'rates.csv',
        product_catalog=tmp_path / 'products_catalog.json',
        build_report=tmp_path / 'build_report.json',
    )
    build_product_catalog(settings, verbose=False)

    built = json.loads(settings.product_catalog.read_text(encoding='utf-8'))["products"]
    bundled = json.loads((data_dir / 'products_catalog.json').read_text(encoding='utf-8'))["products"]
    assert built == bundled


def test_catalog_lookup():
    catalog = ProductCatalog.from_products([
        {"id": "vl", "type": "voluntaryLife", "costs": {"ee": 0.35}},
        {"type": "commuter", "costs": {"train": 84.75}},
    ])

    assert len(catalog) == 2
    assert "vl" in catalog
    assert " commuter " in catalog
    assert catalog.get("vl").type == "voluntaryLife"
    assert [p.type for p in catalog.by_type("commuter")] == ["commuter"]

    with pytest.raises(ProductNotFoundError, match="dental"):
        catalog.get("dental")


def test_catalog_load_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError, match="build_catalog"):
        ProductCatalog.load(tmp_path / 'products_catalog.json')

import pytest

from benefit_pricing.config.settings import Settings
from benefit_pricing.engine import (
    Employee,
    PricingEngine,
    ProductCatalog,
    ProductNotFoundError,
    QuoteRequest,
    SelectedOptions,
    UnknownProductType,
)
from conftest import PRODUCTS


@pytest.fixture(scope="module")
def engine():
    """Engine over the bundled catalog."""
    return PricingEngine(Settings.load())


def test_engine_loads_bundled_catalog(engine):
    assert engine.catalog.list_ids() == ["commuter", "longTermDisability", "voluntaryLife"]


def test_calculate_vol_life(engine, employee):
    request = QuoteRequest(
        product_id="voluntaryLife",
        employee=employee,
        selected_options=SelectedOptions.from_dict({
            "familyMembersToCover": ["ee", "sp"],
            "coverageLevel": [
                {"role": "ee", "coverage": 200000},
                {"role": "sp", "coverage": 75000},
            ],
        }),
        request_date="2026-10-19",
    )
    result = engine.calculate(request)

    assert result.product_id == "voluntaryLife"
    assert result.raw_price == 79
    assert result.price == 71.09
    assert [t.step for t in result.trace][:2] == ["Product Lookup", "Context"]
    assert "Found product in catalog = Voluntary Life" in result.get_trace_text()


def test_calculate_ltd_respects_cap(engine):
    request = QuoteRequest(
        product_id="longTermDisability",
        employee=Employee(salary=400000),
        selected_options=SelectedOptions(),
    )
    result = engine.calculate(request)

    # 60% of 400000 is capped at 150000 insured
    assert result.raw_price == 75.0
    assert result.price == 65.0


def test_calculate_quote_legacy_dict(engine, employee):
    quote = engine.calculate_quote("commuter", employee, {"benefit": "parking"})

    assert quote == {
        "Product": "commuter",
        "Type": "commuter",
        "Raw Price": 250.0,
        "Employer Contribution": 75.0,
        "Price": 175.0,
    }


def test_calculate_unknown_product_id(engine, employee):
    with pytest.raises(ProductNotFoundError):
        engine.calculate_quote("dental", employee, {})


def test_calculate_unknown_product_type(employee):
    catalog = ProductCatalog.from_products([{"id": "eye-care", "type": "vision"}])
    engine = PricingEngine(Settings.load(), catalog=catalog)

    with pytest.raises(UnknownProductType, match="Unknown product type: vision"):
        engine.calculate_quote("eye-care", employee, {})


def test_engine_with_in_memory_catalog(employee):
    catalog = ProductCatalog.from_products(PRODUCTS.values())
    engine = PricingEngine(Settings.load(), catalog=catalog)

    quote = engine.calculate_quote("longTermDisability", employee, {"familyMembersToCover": ["ee"]})
    assert quote["Raw Price"] == 32.04
    assert quote["Price"] == 22.04


def test_reload_data():
    settings = Settings.load()
    engine = PricingEngine(settings, catalog=ProductCatalog())
    assert len(engine.catalog) == 0

    engine.reload_data()
    assert len(engine.catalog) == 3
    assert engine.catalog.source_path == settings.product_catalog


def test_missing_catalog_file(tmp_path):
    settings = Settings.load(data_dir=tmp_path)
    with pytest.raises(FileNotFoundError):
        PricingEngine(settings)

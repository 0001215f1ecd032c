"""
Shared fixtures: the three reference products and an employee.

The product dicts use the catalog's camelCase configuration shape so the
tests exercise the same parsing path as catalog-loaded products.
"""
import os
import sys

import pytest

# Add src to path for internal imports
src_path = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), 'src')
if src_path not in sys.path:
    sys.path.insert(0, src_path)

from benefit_pricing.engine import Employee, Product

EMPLOYEE = {
    "firstName": "Dana",
    "lastName": "Reyes",
    "salary": 106800,
}

PRODUCTS = {
    "voluntaryLife": {
        "id": "voluntaryLife",
        "name": "Voluntary Life",
        "type": "voluntaryLife",
        "costs": [
            {"role": "ee", "price": 0.35, "costDivisor": 1000},
            {"role": "sp", "price": 0.12, "costDivisor": 1000},
            {"role": "ch", "price": 0.05, "costDivisor": 1000},
        ],
        "employerContribution": {"mode": "percentage", "contribution": 10},
    },
    "longTermDisability": {
        "id": "longTermDisability",
        "name": "Long Term Disability",
        "type": "longTermDisability",
        "coveragePercentage": 60,
        "costs": [
            {"role": "ee", "price": 0.5, "costDivisor": 1000},
        ],
        "employerContribution": {"mode": "dollar", "contribution": 10},
    },
    "commuter": {
        "id": "commuter",
        "name": "Commuter Benefits",
        "type": "commuter",
        "costs": [
            {"benefit": "train", "price": 84.75, "costDivisor": 1},
            {"benefit": "parking", "price": 250, "costDivisor": 1},
        ],
        "employerContribution": {"mode": "dollar", "contribution": 75},
    },
}


@pytest.fixture
def employee():
    return Employee.from_dict(EMPLOYEE)


@pytest.fixture
def products():
    return {product_id: Product.from_dict(data) for product_id, data in PRODUCTS.items()}


@pytest.fixture
def vol_life(products):
    return products["voluntaryLife"]


@pytest.fixture
def ltd(products):
    return products["longTermDisability"]


@pytest.fixture
def commuter(products):
    return products["commuter"]

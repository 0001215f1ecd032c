"""
Product Catalog - Loads compiled products for lookup by id.
"""
import hashlib
import json
import logging
from pathlib import Path
from typing import Iterator, Optional

from .errors import ProductNotFoundError
from .models import Product

logger = logging.getLogger(__name__)


def get_file_hash(path: Path) -> str:
    """Get SHA256 hash of a file."""
    if not path.exists():
        return ""
    with open(path, 'rb') as f:
        return hashlib.sha256(f.read()).hexdigest()[:12]


class ProductCatalog:
    """
    In-memory product catalog keyed by product id.

    Built from products_catalog.json (see build_catalog.py) or directly from
    Product objects.
    """

    def __init__(self, products: Optional[dict[str, Product]] = None):
        self.products: dict[str, Product] = dict(products or {})
        self.source_path: Optional[Path] = None
        self.catalog_hash: Optional[str] = None

    @classmethod
    def from_products(cls, products) -> 'ProductCatalog':
        """Build a catalog from Product objects or their mapping form."""
        catalog = cls()
        for product in products:
            product = Product.coerce(product)
            catalog.products[product.id or product.type] = product
        return catalog

    @classmethod
    def load(cls, path: Path) -> 'ProductCatalog':
        """Load a compiled JSON catalog."""
        if not path.exists():
            raise FileNotFoundError(
                f"{path.name} not found at {path}. "
                "Execute build_catalog.py first."
            )

        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)

        catalog = cls()
        for product_id, raw in data.get('products', {}).items():
            raw = dict(raw)
            raw.setdefault('id', product_id)
            catalog.products[product_id] = Product.from_dict(raw)

        catalog.source_path = path
        catalog.catalog_hash = get_file_hash(path)
        logger.info("Loaded %d products from %s", len(catalog), path)
        return catalog

    def get(self, product_id: str) -> Product:
        """Get a product by id."""
        try:
            return self.products[str(product_id).strip()]
        except KeyError:
            raise ProductNotFoundError(product_id) from None

    def list_ids(self) -> list[str]:
        return sorted(self.products)

    def by_type(self, product_type: str) -> list[Product]:
        return [p for p in self.products.values() if p.type == product_type]

    def __contains__(self, product_id) -> bool:
        return str(product_id).strip() in self.products

    def __len__(self) -> int:
        return len(self.products)

    def __iter__(self) -> Iterator[Product]:
        return iter(self.products.values())

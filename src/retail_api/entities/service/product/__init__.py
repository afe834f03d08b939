"""Entity package: Product."""

from .entity import LowStockProduct, Product, ProductInput, ProductSummary
from .repository import ProductQuery, ProductRepository
from .table import ProductTable

__all__ = [
    "LowStockProduct",
    "Product",
    "ProductInput",
    "ProductQuery",
    "ProductRepository",
    "ProductSummary",
    "ProductTable",
]

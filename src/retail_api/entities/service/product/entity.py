"""Entity: Product."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from retail_api.entities.core._base import Entity


class Product(Entity):
    """Product as returned to API callers.

    ``unit_price`` is exposed as a JSON number so created products echo the
    submitted price.
    """

    model_config = ConfigDict(from_attributes=True)

    product_id: int = Field(description="Store-assigned identifier")
    stock_code: str = Field(description="Unique stock code")
    description: str = Field(description="Product description")
    unit_price: float | None = Field(default=None, description="Unit price, > 0")
    stock_quantity: int = Field(default=0, description="Units in stock")
    reorder_level: int = Field(default=10, description="Low-stock threshold")
    is_active: bool = Field(default=True, description="Whether the product is sold")

    def __eq__(self, other: Any) -> bool:
        """Compare products by business attributes, ignoring timestamps."""
        if not isinstance(other, Product):
            return False

        return (
            self.product_id == other.product_id
            and self.stock_code == other.stock_code
            and self.description == other.description
            and self.unit_price == other.unit_price
            and self.stock_quantity == other.stock_quantity
            and self.reorder_level == other.reorder_level
            and self.is_active == other.is_active
        )


class ProductInput(BaseModel):
    """Request body for create and update.

    Fields accept any JSON value; ProductService checks their shape.
    """

    stock_code: Any = Field(default=None, examples=["85123A"])
    description: Any = Field(default=None, examples=["WHITE HANGING HEART T-LIGHT HOLDER"])
    unit_price: Any = Field(default=None, examples=[2.55])

    @property
    def has_unit_price(self) -> bool:
        return "unit_price" in self.model_fields_set


class LowStockProduct(BaseModel):
    """Row of the low-stock report."""

    model_config = ConfigDict(from_attributes=True)

    product_id: int
    stock_code: str
    description: str
    stock_quantity: int
    reorder_level: int


class ProductSummary(BaseModel):
    """Aggregate statistics across the whole products table."""

    total_products: int = 0
    active_products: int = 0
    avg_price: float | None = None
    total_stock: int = 0

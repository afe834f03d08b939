"""Product database table model."""

from decimal import Decimal

import sqlalchemy as sa
from sqlmodel import Field

from retail_api.entities.core._base import EntityTable


class ProductTable(EntityTable, table=True):
    """Database persistence model for products.

    The store enforces stock_code uniqueness and a strictly positive
    unit_price; the service maps those violations to 409 and 400.
    """

    __tablename__ = "products"
    __table_args__ = (
        sa.CheckConstraint(
            "unit_price IS NULL OR unit_price > 0",
            name="ck_products_unit_price_positive",
        ),
        sa.CheckConstraint(
            "stock_quantity >= 0", name="ck_products_stock_quantity_non_negative"
        ),
    )

    product_id: int | None = Field(default=None, primary_key=True)
    stock_code: str = Field(max_length=32, unique=True, index=True, nullable=False)
    description: str = Field(max_length=255, nullable=False)
    unit_price: Decimal | None = Field(default=None, max_digits=10, decimal_places=2)
    stock_quantity: int = Field(
        default=0, nullable=False, sa_column_kwargs={"server_default": "0"}
    )
    reorder_level: int = Field(
        default=10, nullable=False, sa_column_kwargs={"server_default": "10"}
    )
    is_active: bool = Field(
        default=True, nullable=False, sa_column_kwargs={"server_default": sa.true()}
    )

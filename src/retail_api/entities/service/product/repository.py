"""Data access for the products table."""

from dataclasses import dataclass
from decimal import Decimal

from sqlalchemy import case, func, or_
from sqlmodel import Session, col, select

from retail_api.entities.core._base import utcnow
from retail_api.entities.service.product.entity import (
    LowStockProduct,
    Product,
    ProductSummary,
)
from retail_api.entities.service.product.table import ProductTable

# Caller-facing sort keys mapped to columns; nothing else reaches ORDER BY
SORTABLE_COLUMNS = {
    "product_id": ProductTable.product_id,
    "stock_code": ProductTable.stock_code,
    "description": ProductTable.description,
    "unit_price": ProductTable.unit_price,
}
DEFAULT_SORT_COLUMN = "stock_code"


@dataclass(frozen=True)
class ProductQuery:
    """Normalized listing parameters."""

    page: int = 1
    limit: int = 10
    search: str = ""
    sort_by: str = DEFAULT_SORT_COLUMN
    descending: bool = False

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


def _like_pattern(term: str) -> str:
    escaped = term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


class ProductRepository:
    """Data-access layer for products.

    Methods flush but never commit; the caller owns the transaction.
    """

    def __init__(self, session: Session) -> None:
        self._session = session

    def list_page(self, query: ProductQuery) -> list[Product]:
        column = SORTABLE_COLUMNS.get(query.sort_by, SORTABLE_COLUMNS[DEFAULT_SORT_COLUMN])
        order = col(column).desc() if query.descending else col(column).asc()

        statement = select(ProductTable)
        if query.search:
            pattern = _like_pattern(query.search)
            statement = statement.where(
                or_(
                    col(ProductTable.stock_code).ilike(pattern, escape="\\"),
                    col(ProductTable.description).ilike(pattern, escape="\\"),
                )
            )
        statement = (
            statement.order_by(order, col(ProductTable.product_id).asc())
            .offset(query.offset)
            .limit(query.limit)
        )
        rows = self._session.exec(statement).all()
        return [Product.model_validate(row) for row in rows]

    def get(self, product_id: int) -> Product | None:
        row = self._session.get(ProductTable, product_id)
        if row is None:
            return None
        return Product.model_validate(row)

    def get_by_stock_code(self, stock_code: str) -> Product | None:
        statement = select(ProductTable).where(ProductTable.stock_code == stock_code)
        row = self._session.exec(statement).first()
        if row is None:
            return None
        return Product.model_validate(row)

    def create(
        self, stock_code: str, description: str, unit_price: Decimal | None
    ) -> Product:
        row = ProductTable(
            stock_code=stock_code, description=description, unit_price=unit_price
        )
        self._session.add(row)
        self._session.flush()
        self._session.refresh(row)
        return Product.model_validate(row)

    def update(
        self,
        product_id: int,
        stock_code: str,
        description: str,
        unit_price: Decimal | None,
    ) -> Product | None:
        row = self._session.get(ProductTable, product_id)
        if row is None:
            return None

        row.stock_code = stock_code
        row.description = description
        row.unit_price = unit_price
        row.updated_at = utcnow()
        self._session.add(row)
        self._session.flush()
        self._session.refresh(row)
        return Product.model_validate(row)

    def delete(self, product_id: int) -> Product | None:
        row = self._session.get(ProductTable, product_id)
        if row is None:
            return None

        deleted = Product.model_validate(row)
        self._session.delete(row)
        self._session.flush()
        return deleted

    def summary(self) -> ProductSummary:
        statement = select(
            func.count(),
            func.count(case((col(ProductTable.is_active).is_(True), 1))),
            func.avg(ProductTable.unit_price),
            func.coalesce(func.sum(ProductTable.stock_quantity), 0),
        ).select_from(ProductTable)
        total, active, avg_price, total_stock = self._session.exec(statement).one()
        return ProductSummary(
            total_products=total,
            active_products=active,
            avg_price=float(avg_price) if avg_price is not None else None,
            total_stock=total_stock,
        )

    def low_stock(self) -> list[LowStockProduct]:
        statement = (
            select(ProductTable)
            .where(col(ProductTable.stock_quantity) <= col(ProductTable.reorder_level))
            .order_by(
                col(ProductTable.stock_quantity).asc(),
                col(ProductTable.product_id).asc(),
            )
        )
        rows = self._session.exec(statement).all()
        return [LowStockProduct.model_validate(row) for row in rows]

"""Product use cases: input validation, store access and error mapping."""

import math
import re
from collections.abc import Iterator
from contextlib import contextmanager
from decimal import Decimal, InvalidOperation
from typing import Any

from loguru import logger
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session

from retail_api.core.errors import (
    InternalError,
    NotFoundError,
    ValidationError,
    map_database_error,
)
from retail_api.entities.service.product import (
    LowStockProduct,
    Product,
    ProductInput,
    ProductQuery,
    ProductRepository,
    ProductSummary,
)

_INTEGER_ID = re.compile(r"-?\d+")
# product_id is a 32-bit integer column; larger ids cannot match a row
_MAX_PRODUCT_ID = 2**31 - 1
# unit_price is NUMERIC(10, 2)
_MAX_UNIT_PRICE = Decimal("99999999.99")
_CENT = Decimal("0.01")
# LIMIT and OFFSET are bound as 64-bit integers
_MAX_PAGE_PARAM = 2**31 - 1
_MAX_LENGTHS = {"stock_code": 32, "description": 255}


def is_integer_identifier(identifier: str) -> bool:
    """Whether ``identifier`` reads fully as an integer product id."""
    return _INTEGER_ID.fullmatch(identifier) is not None


def parse_product_id(identifier: str) -> int:
    if not is_integer_identifier(identifier):
        raise ValidationError("Product id must be an integer")
    return int(identifier)


def _required_text(value: Any) -> str | None:
    if not isinstance(value, str) or not value.strip():
        return None
    return value


def parse_unit_price(value: Any) -> Decimal:
    """Accept a positive JSON number or numeric string."""
    error = ValidationError("unit_price must be a positive number")
    if isinstance(value, bool) or not isinstance(value, (int, float, str)):
        raise error
    if isinstance(value, float) and not math.isfinite(value):
        raise error
    try:
        price = Decimal(str(value).strip())
    except InvalidOperation:
        raise error from None
    if not price.is_finite() or price <= 0:
        raise error
    if price > _MAX_UNIT_PRICE:
        raise ValidationError(f"unit_price must not exceed {_MAX_UNIT_PRICE}")
    if price.quantize(_CENT) != price:
        raise ValidationError("unit_price must have at most 2 decimal places")
    return price


def validate_product_input(payload: ProductInput) -> tuple[str, str, Decimal | None]:
    """Check a create/update body and return its normalized fields."""
    stock_code = _required_text(payload.stock_code)
    description = _required_text(payload.description)
    if stock_code is None or description is None:
        raise ValidationError("Missing required fields: stock_code and description")
    for field, value in (("stock_code", stock_code), ("description", description)):
        if len(value) > _MAX_LENGTHS[field]:
            raise ValidationError(
                f"{field} must be at most {_MAX_LENGTHS[field]} characters"
            )

    unit_price = None
    if payload.has_unit_price:
        unit_price = parse_unit_price(payload.unit_price)
    return stock_code, description, unit_price


def normalize_query(
    page: int = 1,
    limit: int = 10,
    search: str | None = None,
    sort_by: str | None = None,
    sort_order: str | None = None,
) -> ProductQuery:
    """Build listing parameters, falling back on unknown sort keys."""
    if page < 1:
        raise ValidationError("page must be a positive integer")
    if limit < 1:
        raise ValidationError("limit must be a positive integer")
    if page > _MAX_PAGE_PARAM or limit > _MAX_PAGE_PARAM:
        raise ValidationError(f"page and limit must not exceed {_MAX_PAGE_PARAM}")
    return ProductQuery(
        page=page,
        limit=limit,
        search=search or "",
        sort_by=sort_by or "stock_code",
        descending=(sort_order or "").upper() == "DESC",
    )


class ProductService:
    """Products use cases bound to one request-scoped session."""

    def __init__(self, session: Session) -> None:
        self._session = session
        self._repository = ProductRepository(session)

    @contextmanager
    def _store_errors(self, operation: str) -> Iterator[None]:
        try:
            yield
        except SQLAlchemyError as exc:
            self._session.rollback()
            error = map_database_error(exc)
            log = logger.bind(operation=operation, error_type=type(exc).__name__)
            if isinstance(error, InternalError):
                log.exception("Database error: {}", exc)
            else:
                log.warning("Database constraint error: {}", exc)
            raise error from exc

    def list_products(self, query: ProductQuery) -> list[Product]:
        with self._store_errors("list"):
            return self._repository.list_page(query)

    def get_by_identifier(self, identifier: str) -> Product:
        with self._store_errors("get"):
            if is_integer_identifier(identifier):
                product = self._get_by_id(int(identifier))
            else:
                product = self._repository.get_by_stock_code(identifier)
        if product is None:
            raise NotFoundError()
        return product

    def _get_by_id(self, product_id: int) -> Product | None:
        if abs(product_id) > _MAX_PRODUCT_ID:
            return None
        return self._repository.get(product_id)

    def create(self, payload: ProductInput) -> Product:
        stock_code, description, unit_price = validate_product_input(payload)
        with self._store_errors("create"):
            product = self._repository.create(stock_code, description, unit_price)
            self._session.commit()
        logger.info("Created product {} ({})", product.product_id, product.stock_code)
        return product

    def update(self, identifier: str, payload: ProductInput) -> Product:
        product_id = parse_product_id(identifier)
        stock_code, description, unit_price = validate_product_input(payload)
        with self._store_errors("update"):
            if abs(product_id) > _MAX_PRODUCT_ID:
                raise NotFoundError()
            product = self._repository.update(
                product_id, stock_code, description, unit_price
            )
            if product is None:
                raise NotFoundError()
            self._session.commit()
        logger.info("Updated product {}", product_id)
        return product

    def delete(self, identifier: str) -> Product:
        product_id = parse_product_id(identifier)
        with self._store_errors("delete"):
            if abs(product_id) > _MAX_PRODUCT_ID:
                raise NotFoundError()
            product = self._repository.delete(product_id)
            if product is None:
                raise NotFoundError()
            self._session.commit()
        logger.info("Deleted product {}", product_id)
        return product

    def analytics_summary(self) -> ProductSummary:
        with self._store_errors("analytics_summary"):
            return self._repository.summary()

    def low_stock(self) -> list[LowStockProduct]:
        with self._store_errors("low_stock"):
            return self._repository.low_stock()

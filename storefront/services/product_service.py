# storefront/services/product_service.py
import math

from sqlalchemy.orm import Session

from storefront.data.models.product import ProductModel
from storefront.domain.errors import NotFoundError, ValidationError
from storefront.domain.schemas import Pagination, ProductIn, ProductOut, ProductUpdate
from storefront.repos.product_repo import ProductRepo
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

SORTABLE_FIELDS = {
    "name": ProductModel.name,
    "price": ProductModel.price,
    "stock": ProductModel.stock,
    "category": ProductModel.category,
    "created_at": ProductModel.created_at,
    "updated_at": ProductModel.updated_at,
}
DEFAULT_SORT = "-created_at"


def parse_sort(sort: str | None) -> list:
    """
    "price,-name" -> [price asc, name desc]
    Pusty sort -> najnowsze pierwsze. Id zawsze na koncu dla stabilnej paginacji.
    """
    order_by = []
    descending_default = True

    for token in (sort or DEFAULT_SORT).split(","):
        token = token.strip()
        if not token:
            continue

        descending = token.startswith("-")
        name = token.lstrip("-+")

        column = SORTABLE_FIELDS.get(name)
        if column is None:
            raise ValidationError(f"Cannot sort by '{name}'")

        order_by.append(column.desc() if descending else column.asc())
        descending_default = descending

    if not order_by:
        order_by.append(ProductModel.created_at.desc())

    order_by.append(ProductModel.id.desc() if descending_default else ProductModel.id.asc())
    return order_by


class ProductService:
    def __init__(self, db: Session):
        self.repo = ProductRepo(db)

    #query
    def list_products(
        self,
        category: str | None = None,
        search: str | None = None,
        sort: str | None = None,
        page: int = 1,
        limit: int = 10,
    ) -> tuple[list[ProductOut], Pagination]:
        order_by = parse_sort(sort)
        offset = (page - 1) * limit

        products, total = self.repo.list_products(
            category=category,
            search=search.strip() if search else None,
            order_by=order_by,
            offset=offset,
            limit=limit,
        )

        pagination = Pagination(
            page=page,
            limit=limit,
            total=total,
            total_pages=math.ceil(total / limit),
        )
        return [ProductOut.model_validate(p) for p in products], pagination

    def get_product(self, product_id: int) -> ProductOut:
        return ProductOut.model_validate(self._get_or_404(product_id))

    #commands
    def create_product(self, payload: ProductIn) -> ProductOut:
        product = self.repo.create_product(ProductModel(**payload.model_dump()))
        logger.info(f"Created product {product.id} ({product.name})")
        return ProductOut.model_validate(product)

    def update_product(self, product_id: int, payload: ProductUpdate) -> ProductOut:
        product = self._get_or_404(product_id)

        changes = payload.model_dump(exclude_unset=True, exclude_none=True)
        for field, value in changes.items():
            setattr(product, field, value)

        saved = self.repo.save(product)
        logger.info(f"Updated product {product_id}: {sorted(changes)}")
        return ProductOut.model_validate(saved)

    def delete_product(self, product_id: int) -> None:
        product = self._get_or_404(product_id)
        self.repo.delete_product(product)
        logger.info(f"Deleted product {product_id}")

    def _get_or_404(self, product_id: int) -> ProductModel:
        product = self.repo.get_product(product_id)
        if not product:
            raise NotFoundError("Product not found")
        return product

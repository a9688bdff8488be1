# storefront/repos/product_repo.py
from sqlalchemy import func, or_, select, update
from sqlalchemy.orm import Session

from storefront.data.models.product import ProductModel


class ProductRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_product(self, product_id: int) -> ProductModel | None:
        return self.db.get(ProductModel, product_id)

    def list_products(
        self,
        category: str | None,
        search: str | None,
        order_by: list,
        offset: int,
        limit: int,
    ) -> tuple[list[ProductModel], int]:
        stmt = select(ProductModel)

        if category:
            stmt = stmt.where(ProductModel.category == category)
        if search:
            # autoescape, % i _ w wyszukiwaniu to zwykle znaki
            term = search.lower()
            stmt = stmt.where(
                or_(
                    func.lower(ProductModel.name).contains(term, autoescape=True),
                    func.lower(ProductModel.description).contains(term, autoescape=True),
                )
            )

        total = self.db.execute(
            select(func.count()).select_from(stmt.subquery())
        ).scalar_one()

        products = self.db.execute(
            stmt.order_by(*order_by).offset(offset).limit(limit)
        ).scalars().all()

        return list(products), total

    def create_product(self, product: ProductModel) -> ProductModel:
        self.db.add(product)
        self.db.commit()
        self.db.refresh(product)
        return product

    def save(self, product: ProductModel) -> ProductModel:
        self.db.add(product)
        self.db.commit()
        self.db.refresh(product)
        return product

    def delete_product(self, product: ProductModel) -> None:
        self.db.delete(product)
        self.db.commit()

    # bez commita, wywolujacy zarzadza transakcja
    def decrement_stock(self, product_id: int, quantity: int) -> int:
        """
        Warunkowe zmniejszenie stanu:
        update products set stock = stock - :q where id = :id and stock >= :q
        Zwraca rowcount, 0 oznacza brak wystarczajacego stanu.
        """
        result = self.db.execute(
            update(ProductModel)
            .where(ProductModel.id == product_id, ProductModel.stock >= quantity)
            .values(stock=ProductModel.stock - quantity)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount

    def increment_stock(self, product_id: int, quantity: int) -> int:
        result = self.db.execute(
            update(ProductModel)
            .where(ProductModel.id == product_id)
            .values(stock=ProductModel.stock + quantity)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount

# storefront/repos/order_repo.py
from sqlalchemy import select, update
from sqlalchemy.orm import Session

from storefront.data.models.order import OrderModel


class OrderRepo:
    def __init__(self, db: Session):
        self.db = db

    def add_order(self, order: OrderModel) -> OrderModel:
        # flush bez commita, zamowienie jest czescia wiekszej transakcji
        self.db.add(order)
        self.db.flush()
        return order

    def get_order(self, order_id: int) -> OrderModel | None:
        return self.db.get(OrderModel, order_id)

    def list_orders(self, user_id: int | None = None) -> list[OrderModel]:
        stmt = select(OrderModel)
        if user_id is not None:
            stmt = stmt.where(OrderModel.user_id == user_id)
        return list(
            self.db.execute(
                stmt.order_by(OrderModel.created_at.desc(), OrderModel.id.desc())
            ).scalars().all()
        )

    def update_status(self, order_id: int, old_status: str, new_status: str) -> int:
        """
        Warunkowa zmiana statusu:
        update orders set status = :new where id = :id and status = :old
        Zwraca rowcount, 0 oznacza ze ktos zmienil status wczesniej.
        """
        result = self.db.execute(
            update(OrderModel)
            .where(OrderModel.id == order_id, OrderModel.status == old_status)
            .values(status=new_status)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount

    def commit(self):
        self.db.commit()

    def rollback(self):
        self.db.rollback()

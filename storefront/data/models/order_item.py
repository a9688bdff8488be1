from sqlalchemy import Column, Integer, ForeignKey, String, Numeric

from sqlalchemy.orm import relationship

from storefront.data.database import Base


class OrderItemModel(Base):
    """Snapshot pozycji zamowienia, cena zamrozona w chwili zakupu."""

    __tablename__ = "order_items"

    id = Column(Integer, primary_key=True)
    order_id = Column(Integer, ForeignKey("orders.id", ondelete="CASCADE"), nullable=False, index=True)
    product_id = Column(Integer, ForeignKey("products.id", ondelete="SET NULL"), nullable=True)

    product_name = Column(String(100), nullable=False)
    quantity = Column(Integer, nullable=False)
    price = Column(Numeric(10, 2), nullable=False)

    order = relationship("OrderModel", back_populates="items")

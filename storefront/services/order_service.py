# storefront/services/order_service.py
from decimal import Decimal
from enum import Enum

from sqlalchemy.orm import Session

from storefront.data.models.order import OrderModel
from storefront.data.models.order_item import OrderItemModel
from storefront.data.models.user import UserModel
from storefront.domain.errors import NotFoundError, ValidationError
from storefront.domain.schemas import AddressIn, AddressOut, OrderItemOut, OrderOut, OrderUserOut
from storefront.repos.cart_repo import CartRepo
from storefront.repos.order_repo import OrderRepo
from storefront.repos.product_repo import ProductRepo
from storefront.services.policy import Action, authorize
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

PAYMENT_METHOD = "Cash on Delivery"


class OrderStatus(str, Enum):
    PENDING = "Pending"
    SHIPPED = "Shipped"
    DELIVERED = "Delivered"
    CANCELLED = "Cancelled"


# Delivered i Cancelled sa koncowe
TRANSITIONS = {
    OrderStatus.PENDING: {OrderStatus.SHIPPED, OrderStatus.CANCELLED},
    OrderStatus.SHIPPED: {OrderStatus.DELIVERED, OrderStatus.CANCELLED},
    OrderStatus.DELIVERED: set(),
    OrderStatus.CANCELLED: set(),
}


class _InsufficientStock(Exception):
    def __init__(self, product_name: str):
        super().__init__(product_name)
        self.product_name = product_name


class _StatusChanged(Exception):
    pass


def to_order_out(order: OrderModel) -> OrderOut:
    return OrderOut(
        id=order.id,
        user_id=order.user_id,
        user=OrderUserOut.model_validate(order.user) if order.user else None,
        items=[OrderItemOut.model_validate(i) for i in order.items],
        total_price=order.total_price,
        address=AddressOut(
            street=order.street,
            city=order.city,
            state=order.state,
            zip_code=order.zip_code,
            country=order.country,
        ),
        status=order.status,
        payment_method=order.payment_method,
        created_at=order.created_at,
        updated_at=order.updated_at,
    )


class OrderService:
    """
    Serwis odpowiedzialny za domene zamowien.
    Zamowienie to niezmienny snapshot koszyka, zmienia sie tylko status.
    """

    def __init__(self, db: Session):
        self.db = db
        self.repo = OrderRepo(db)
        self.carts = CartRepo(db)
        self.products = ProductRepo(db)

    def create_order(self, user_id: int, address: AddressIn) -> OrderOut:
        """
        Use Case: Tworzenie zamowienia z koszyka.

        1. Koszyk musi istniec i nie byc pusty
        2. Sprawdza stan kazdego produktu
        3. Snapshot pozycji z aktualna cena, warunkowe zmniejszenie stanu
        4. Total = suma cena * ilosc
        5. Zamowienie Pending, koszyk wyczyszczony

        Kroki 2-5 w jednej transakcji, rollback jesli ktorykolwiek produkt
        nie ma wystarczajacego stanu.
        """
        cart = self.carts.get_cart_by_user(user_id)
        items = self.carts.get_cart_items(cart.id) if cart else []

        if not items:
            raise ValidationError("Your cart is empty")

        for item in items:
            if item.product.stock < item.quantity:
                raise ValidationError(f"Not enough stock for {item.product.name}")

        try:
            snapshot = []
            for item in items:
                product = item.product
                # update ... where stock >= qty, chroni przed wyscigiem dwoch zamowien
                if self.products.decrement_stock(product.id, item.quantity) == 0:
                    raise _InsufficientStock(product.name)

                snapshot.append(
                    OrderItemModel(
                        product_id=product.id,
                        product_name=product.name,
                        quantity=item.quantity,
                        price=product.price,
                    )
                )

            total = sum((i.price * i.quantity for i in snapshot), Decimal("0.00"))

            order = self.repo.add_order(
                OrderModel(
                    user_id=user_id,
                    items=snapshot,
                    total_price=total,
                    status=OrderStatus.PENDING.value,
                    payment_method=PAYMENT_METHOD,
                    **address.model_dump(),
                )
            )

            self.carts.clear_cart_items(cart.id)
            self.repo.commit()

        except _InsufficientStock as e:
            self.repo.rollback()
            logger.warning(f"Order for user {user_id} rolled back, stock changed for {e.product_name}")
            raise ValidationError(f"Not enough stock for {e.product_name}")
        except Exception:
            self.repo.rollback()
            raise

        logger.info(f"Order {order.id} created for user {user_id}, total {total}")

        return to_order_out(self._reload(order.id))

    def get_order(self, order_id: int, requester: UserModel) -> OrderOut:
        """
        Use Case: Pobranie zamowienia (Query), wlasciciel albo admin.
        """
        order = self.repo.get_order(order_id)

        if not order:
            raise NotFoundError("Order not found")

        authorize(requester, Action.ORDER_READ, owner_id=order.user_id)

        return to_order_out(order)

    def list_my_orders(self, user_id: int) -> list[OrderOut]:
        return [to_order_out(o) for o in self.repo.list_orders(user_id=user_id)]

    def list_all_orders(self) -> tuple[list[OrderOut], Decimal]:
        orders = self.repo.list_orders()
        total_amount = sum((o.total_price for o in orders), Decimal("0.00"))
        return [to_order_out(o) for o in orders], total_amount

    def update_status(self, order_id: int, status: str) -> OrderOut:
        try:
            new_status = OrderStatus(status)
        except ValueError:
            raise ValidationError("Invalid order status")

        order = self.repo.get_order(order_id)
        if not order:
            raise NotFoundError("Order not found")

        current = OrderStatus(order.status)

        # ten sam status = no-op, brak ponownego zwrotu stanu
        if new_status == current:
            return to_order_out(order)

        if new_status not in TRANSITIONS[current]:
            raise ValidationError(
                f"Cannot change order status from {current.value} to {new_status.value}"
            )

        try:
            # update ... where status = :current, rownolegla zmiana nie zwroci stanu drugi raz
            if self.repo.update_status(order_id, current.value, new_status.value) == 0:
                raise _StatusChanged()

            if new_status == OrderStatus.CANCELLED:
                for item in order.items:
                    # produkt mogl zostac usuniety, wtedy nie ma czego zwracac
                    if item.product_id is not None:
                        self.products.increment_stock(item.product_id, item.quantity)
                logger.info(f"Order {order_id} cancelled, stock restored for {len(order.items)} items")

            self.repo.commit()
        except _StatusChanged:
            # ktos zmienil status w miedzyczasie, ocen przejscie od nowa na swiezym stanie
            self.repo.rollback()
            logger.warning(f"Order {order_id} status changed concurrently, retrying {new_status.value}")
            return self.update_status(order_id, new_status.value)
        except Exception:
            self.repo.rollback()
            raise

        logger.info(f"Order {order_id} status {current.value} -> {new_status.value}")

        return to_order_out(self._reload(order_id))

    def _reload(self, order_id: int) -> OrderModel:
        return self.repo.get_order(order_id)

# storefront/api/routers/orders.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from storefront.api.deps import require
from storefront.api.responses import created, success
from storefront.data.database import get_db
from storefront.data.models.user import UserModel
from storefront.domain.schemas import OrderCreate, OrderStatusIn
from storefront.services.order_service import OrderService
from storefront.services.policy import Action

router = APIRouter(prefix="/orders", tags=["orders"])


@router.post("", status_code=201)
def create_order(
    payload: OrderCreate,
    user: UserModel = Depends(require(Action.ORDER_CREATE)),
    db: Session = Depends(get_db),
):
    """
    Tworzy zamowienie z koszyka uzytkownika i czysci koszyk.
    """
    order = OrderService(db).create_order(user.id, payload.address)
    return created(order, "Order created successfully")


@router.get("/me")
def my_orders(
    user: UserModel = Depends(require(Action.ORDER_LIST_OWN)),
    db: Session = Depends(get_db),
):
    orders = OrderService(db).list_my_orders(user.id)
    return success(orders, "Orders retrieved successfully", meta={"count": len(orders)})


@router.get("", dependencies=[Depends(require(Action.ORDER_LIST_ALL))])
def all_orders(db: Session = Depends(get_db)):
    orders, total_amount = OrderService(db).list_all_orders()
    return success(
        orders,
        "Orders retrieved successfully",
        meta={"count": len(orders), "total_amount": float(total_amount)},
    )


@router.get("/{order_id}")
def get_order(
    order_id: int,
    user: UserModel = Depends(require(Action.ORDER_LIST_OWN)),
    db: Session = Depends(get_db),
):
    """
    Wlasciciel albo admin, sprawdzane w serwisie przez polityke dostepu.
    """
    order = OrderService(db).get_order(order_id, user)
    return success(order, "Order retrieved successfully")


@router.patch("/{order_id}/status", dependencies=[Depends(require(Action.ORDER_UPDATE_STATUS))])
def update_order_status(order_id: int, payload: OrderStatusIn, db: Session = Depends(get_db)):
    order = OrderService(db).update_status(order_id, payload.status)
    return success(order, "Order status updated successfully")

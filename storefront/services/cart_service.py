from decimal import Decimal
from typing import List

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from storefront.data.models.cart import CartModel
from storefront.data.models.cart_item import CartItemModel
from storefront.domain.errors import NotFoundError, ValidationError
from storefront.domain.schemas import CartItemOut, CartOut
from storefront.repos.cart_repo import CartRepo
from storefront.repos.product_repo import ProductRepo
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

NOT_ENOUGH_STOCK = "Not enough stock available"


def cart_total(items: List[CartItemModel]) -> Decimal:
    # cena zawsze aktualna z produktu, total nie jest nigdzie zapisywany
    return sum((i.product.price * i.quantity for i in items), Decimal("0.00"))


class CartService:
    """
    Prosta implementacja cqrs i proste use case dla domeny cart
    commands (add, update, remove, clear) modyfikuja stan
    query (get) tylko odczyt, koszyk tworzony leniwie przy pierwszym dostepie
    """

    def __init__(self, db: Session):
        self.repo = CartRepo(db)
        self.products = ProductRepo(db)

    #query - odczyt
    def get_cart(self, user_id: int) -> CartOut:
        cart = self._get_or_create(user_id)
        return self._to_out(cart)

    #commands
    def add_item(self, user_id: int, product_id: int, quantity: int = 1) -> CartOut:
        if quantity < 1:
            raise ValidationError("Quantity must be at least 1")

        product = self.products.get_product(product_id)
        if not product:
            raise NotFoundError("Product not found")

        if product.stock < quantity:
            raise ValidationError(NOT_ENOUGH_STOCK)

        cart = self._get_or_create(user_id)

        # Sprawdz czy produkt juz jest w koszyku
        existing_item = self.repo.get_cart_item(cart.id, product_id)

        if existing_item:
            new_quantity = existing_item.quantity + quantity
            if product.stock < new_quantity:
                raise ValidationError(NOT_ENOUGH_STOCK)

            logger.info(
                f"Product {product_id} already in cart {cart.id}, "
                f"quantity {existing_item.quantity} -> {new_quantity}"
            )
            existing_item.quantity = new_quantity
        else:
            logger.info(f"Adding product {product_id} x{quantity} to cart {cart.id}")
            self.repo.add_cart_item(
                CartItemModel(
                    cart_id=cart.id,
                    product_id=product_id,
                    quantity=quantity,
                )
            )

        self.repo.commit()
        return self.get_cart(user_id)

    def update_item(self, user_id: int, product_id: int, quantity: int) -> CartOut:
        if quantity < 1:
            raise ValidationError("Quantity must be at least 1")

        product = self.products.get_product(product_id)
        if not product:
            raise NotFoundError("Product not found")

        cart = self.repo.get_cart_by_user(user_id)
        if not cart:
            raise NotFoundError("Cart not found")

        item = self.repo.get_cart_item(cart.id, product_id)
        if not item:
            raise NotFoundError("Item not found in cart")

        if product.stock < quantity:
            raise ValidationError(NOT_ENOUGH_STOCK)

        item.quantity = quantity
        self.repo.commit()

        logger.info(f"Cart {cart.id}: product {product_id} quantity set to {quantity}")

        return self.get_cart(user_id)

    def remove_item(self, user_id: int, product_id: int) -> CartOut:
        cart = self._get_or_create(user_id)

        removed = self.repo.delete_cart_item(cart.id, product_id)
        self.repo.commit()

        if removed:
            logger.info(f"Removed product {product_id} from cart {cart.id}")

        return self.get_cart(user_id)

    def clear(self, user_id: int) -> CartOut:
        cart = self._get_or_create(user_id)

        self.repo.clear_cart_items(cart.id)
        self.repo.commit()

        logger.info(f"Cleared cart {cart.id}")

        return self.get_cart(user_id)

    def _get_or_create(self, user_id: int) -> CartModel:
        cart = self.repo.get_cart_by_user(user_id)
        if cart:
            return cart

        try:
            created = self.repo.create_cart(CartModel(user_id=user_id))
        except IntegrityError:
            # rownolegly request utworzyl koszyk pierwszy (unique user_id)
            self.repo.rollback()
            return self.repo.get_cart_by_user(user_id)

        logger.info(f"Created cart {created.id} for user {user_id}")
        return created

    def _to_out(self, cart: CartModel) -> CartOut:
        items = self.repo.get_cart_items(cart.id)

        return CartOut(
            id=cart.id,
            user_id=cart.user_id,
            items=[
                CartItemOut(
                    product_id=i.product_id,
                    name=i.product.name,
                    price=i.product.price,
                    image_url=i.product.image_url,
                    stock=i.product.stock,
                    quantity=i.quantity,
                    subtotal=i.product.price * i.quantity,
                )
                for i in items
            ],
            total=cart_total(items),
        )

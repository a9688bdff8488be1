# storefront/data/seed.py
from decimal import Decimal

from storefront.data.database import Base, SessionLocal, engine
from storefront.data.models import OrderItemModel, OrderModel, ProductModel, UserModel
from storefront.utils.logging import get_logger
from storefront.utils.security import hash_password

logger = get_logger(__name__)

USERS = [
    {"name": "Admin User", "email": "admin@storefront.dev", "password": "AdminPass123", "role": "admin"},
    {"name": "Customer User", "email": "customer@storefront.dev", "password": "CustomerPass123", "role": "customer"},
]

PRODUCTS = [
    {
        "name": "Classic Men Watch",
        "description": "Elegant classic watch for men with leather strap.",
        "price": Decimal("120.00"),
        "category": "Men",
        "image_url": "https://example.com/men1.jpg",
        "stock": 10,
    },
    {
        "name": "Sporty Men Watch",
        "description": "Sporty and durable watch for men.",
        "price": Decimal("150.00"),
        "category": "Men",
        "image_url": "https://example.com/men2.jpg",
        "stock": 8,
    },
    {
        "name": "Elegant Women Watch",
        "description": "Elegant watch for women with gold finish.",
        "price": Decimal("130.00"),
        "category": "Women",
        "image_url": "https://example.com/women1.jpg",
        "stock": 12,
    },
    {
        "name": "Casual Women Watch",
        "description": "Casual and stylish watch for women.",
        "price": Decimal("90.00"),
        "category": "Women",
        "image_url": "https://example.com/women2.jpg",
        "stock": 15,
    },
]


def seed(session_factory=SessionLocal) -> bool:
    """Seeduje tylko pusta baze. Zwraca True jesli cokolwiek dodano."""
    db = session_factory()
    try:
        # not forcing: only seed if empty
        if db.query(UserModel).first():
            logger.info("Database already seeded, skipping")
            return False

        users = [
            UserModel(
                name=u["name"],
                email=u["email"],
                password_hash=hash_password(u["password"]),
                role=u["role"],
            )
            for u in USERS
        ]
        products = [ProductModel(**p) for p in PRODUCTS]
        db.add_all(users + products)
        db.flush()

        customer = users[1]
        lines = [(products[0], 1), (products[2], 2)]
        db.add(
            OrderModel(
                user_id=customer.id,
                items=[
                    OrderItemModel(
                        product_id=p.id,
                        product_name=p.name,
                        quantity=qty,
                        price=p.price,
                    )
                    for p, qty in lines
                ],
                total_price=sum((p.price * qty for p, qty in lines), Decimal("0.00")),
                status="Pending",
                payment_method="Cash on Delivery",
                street="123 Main St",
                city="Springfield",
                state="IL",
                zip_code="62701",
                country="USA",
            )
        )
        db.commit()

        logger.info(f"Seeded {len(users)} users, {len(products)} products and 1 order")
        return True
    finally:
        db.close()


if __name__ == "__main__":
    Base.metadata.create_all(bind=engine)
    seed()

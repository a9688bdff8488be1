# storefront/api/__init__.py
from fastapi import APIRouter, Depends

from storefront.api.deps import api_rate_limit
from storefront.api.routers import auth, carts, orders, products, users

# wszystko pod /api liczy sie do ogolnego limitu zapytan
api_router = APIRouter(prefix="/api", dependencies=[Depends(api_rate_limit)])
api_router.include_router(auth.router)
api_router.include_router(products.router)
api_router.include_router(carts.router)
api_router.include_router(orders.router)
api_router.include_router(users.router)

# storefront/api/routers/products.py
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from storefront.api.deps import require
from storefront.api.responses import created, success
from storefront.data.database import get_db
from storefront.domain.schemas import Category, ProductIn, ProductUpdate
from storefront.services.policy import Action
from storefront.services.product_service import ProductService

router = APIRouter(prefix="/products", tags=["products"])

admin_only = require(Action.PRODUCT_WRITE)


@router.get("")
def list_products(
    category: Optional[Category] = Query(None),
    search: Optional[str] = Query(None, max_length=100),
    sort: Optional[str] = Query(None),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=10000),
    db: Session = Depends(get_db),
):
    products, pagination = ProductService(db).list_products(
        category=category,
        search=search,
        sort=sort,
        page=page,
        limit=limit,
    )
    return success(products, "Products retrieved successfully", pagination=pagination)


@router.get("/{product_id}")
def get_product(product_id: int, db: Session = Depends(get_db)):
    product = ProductService(db).get_product(product_id)
    return success(product, "Product retrieved successfully")


@router.post("", status_code=201, dependencies=[Depends(admin_only)])
def create_product(payload: ProductIn, db: Session = Depends(get_db)):
    product = ProductService(db).create_product(payload)
    return created(product, "Product created successfully")


@router.put("/{product_id}", dependencies=[Depends(admin_only)])
def update_product(product_id: int, payload: ProductUpdate, db: Session = Depends(get_db)):
    product = ProductService(db).update_product(product_id, payload)
    return success(product, "Product updated successfully")


@router.delete("/{product_id}", dependencies=[Depends(admin_only)])
def delete_product(product_id: int, db: Session = Depends(get_db)):
    ProductService(db).delete_product(product_id)
    return success(None, "Product deleted successfully")

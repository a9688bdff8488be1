from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from storefront.api.deps import require
from storefront.api.responses import created, success
from storefront.data.database import get_db
from storefront.data.models.user import UserModel
from storefront.domain.schemas import AdminCreateIn, RoleIn
from storefront.services.policy import Action
from storefront.services.user_service import UserService

admin_only = require(Action.USER_MANAGE)

# wszystkie trasy tylko dla admina
router = APIRouter(prefix="/users", tags=["users"], dependencies=[Depends(admin_only)])


@router.get("")
def list_users(
    search: Optional[str] = Query(None, max_length=100),
    role: Optional[str] = Query(None),
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1, le=10000),
    db: Session = Depends(get_db),
):
    users, pagination = UserService(db).list_users(search=search, role=role, page=page, limit=limit)
    return success(users, "Users retrieved successfully", pagination=pagination)


@router.post("/admins", status_code=201)
def create_admin(payload: AdminCreateIn, db: Session = Depends(get_db)):
    user = UserService(db).create_admin(payload)
    return created({"user": user}, "Admin user created successfully")


@router.get("/{user_id}")
def get_user(user_id: int, db: Session = Depends(get_db)):
    user = UserService(db).get_user(user_id)
    return success({"user": user}, "User retrieved successfully")


@router.put("/{user_id}/role")
def update_role(
    user_id: int,
    payload: RoleIn,
    admin: UserModel = Depends(admin_only),
    db: Session = Depends(get_db),
):
    user = UserService(db).update_role(admin, user_id, payload.role)
    return success({"user": user}, f"User role updated to {payload.role} successfully")


@router.delete("/{user_id}")
def delete_user(
    user_id: int,
    admin: UserModel = Depends(admin_only),
    db: Session = Depends(get_db),
):
    UserService(db).delete_user(admin, user_id)
    return success(None, "User deleted successfully")

# storefront/api/routers/auth.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from storefront.api.deps import auth_rate_limit, get_current_user, require
from storefront.api.responses import created, success
from storefront.data.database import get_db
from storefront.data.models.user import UserModel
from storefront.domain.schemas import LoginIn, PasswordChangeIn, ProfileUpdateIn, RegisterIn
from storefront.services.auth_service import AuthService
from storefront.services.policy import Action

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/register", status_code=201, dependencies=[Depends(auth_rate_limit)])
def register(payload: RegisterIn, db: Session = Depends(get_db)):
    result = AuthService(db).register(payload)
    return created(result, "User registered successfully")


@router.post("/login", dependencies=[Depends(auth_rate_limit)])
def login(payload: LoginIn, db: Session = Depends(get_db)):
    result = AuthService(db).login(payload)
    return success(result, "Login successful")


@router.get("/me")
def me(user: UserModel = Depends(get_current_user), db: Session = Depends(get_db)):
    return success({"user": AuthService(db).me(user)}, "User profile retrieved successfully")


@router.patch("/me")
def update_me(
    payload: ProfileUpdateIn,
    user: UserModel = Depends(require(Action.PROFILE_MANAGE)),
    db: Session = Depends(get_db),
):
    updated = AuthService(db).update_profile(user, payload)
    return success({"user": updated}, "Profile updated successfully")


@router.put("/password")
def change_password(
    payload: PasswordChangeIn,
    user: UserModel = Depends(require(Action.PROFILE_MANAGE)),
    db: Session = Depends(get_db),
):
    result = AuthService(db).change_password(user, payload)
    return success(result, "Password updated successfully")

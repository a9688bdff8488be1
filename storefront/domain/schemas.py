# storefront/domain/schemas.py
import re
from datetime import datetime
from decimal import Decimal
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

_STRONG_PASSWORD = re.compile(r"^(?=.*\d)(?=.*[a-z])(?=.*[A-Z])")
ZIP_CODE_PATTERN = r"^[0-9]{5}(-[0-9]{4})?$"


def _check_strong_password(value: str) -> str:
    if not _STRONG_PASSWORD.match(value):
        raise ValueError(
            "Password must contain at least one number, one uppercase and one lowercase letter"
        )
    return value


class _Stripped(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)


# =====================================================
# AUTH / USERS
# =====================================================
class RegisterIn(_Stripped):
    """Rejestracja klienta."""

    name: str = Field(..., min_length=2, max_length=50)
    email: EmailStr
    password: str = Field(..., min_length=8)

    @field_validator("password")
    @classmethod
    def strong_password(cls, value: str) -> str:
        return _check_strong_password(value)


class LoginIn(_Stripped):
    email: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class ProfileUpdateIn(_Stripped):
    name: Optional[str] = Field(None, min_length=2, max_length=50)
    phone: Optional[str] = Field(None, max_length=30)
    street: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip_code: Optional[str] = Field(None, pattern=ZIP_CODE_PATTERN)
    country: Optional[str] = None


class PasswordChangeIn(BaseModel):
    current_password: str = Field(..., min_length=1)
    new_password: str = Field(..., min_length=8)

    @field_validator("new_password")
    @classmethod
    def strong_password(cls, value: str) -> str:
        return _check_strong_password(value)


class AdminCreateIn(_Stripped):
    name: str = Field(..., min_length=2, max_length=50)
    email: EmailStr
    password: str = Field(..., min_length=8)


class RoleIn(BaseModel):
    role: str


class UserOut(BaseModel):
    id: int
    name: str
    email: str
    role: str
    phone: Optional[str] = None
    street: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip_code: Optional[str] = None
    country: Optional[str] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class AuthOut(BaseModel):
    user: UserOut
    token: str


# =====================================================
# PRODUCTS
# =====================================================
Category = Literal["Men", "Women"]


class ProductIn(_Stripped):
    name: str = Field(..., min_length=2, max_length=100)
    description: str = Field(..., min_length=10)
    price: Decimal = Field(..., ge=0, max_digits=10, decimal_places=2)
    category: Category
    image_url: str = Field(..., pattern=r"^https?://.+")
    stock: int = Field(..., ge=0)


class ProductUpdate(_Stripped):
    """Czesciowa aktualizacja produktu, pola pominiete zostaja bez zmian."""

    name: Optional[str] = Field(None, min_length=2, max_length=100)
    description: Optional[str] = Field(None, min_length=10)
    price: Optional[Decimal] = Field(None, ge=0, max_digits=10, decimal_places=2)
    category: Optional[Category] = None
    image_url: Optional[str] = Field(None, pattern=r"^https?://.+")
    stock: Optional[int] = Field(None, ge=0)


class ProductOut(BaseModel):
    id: int
    name: str
    description: str
    price: float
    category: str
    image_url: str
    stock: int
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class Pagination(BaseModel):
    page: int
    limit: int
    total: int
    total_pages: int


# =====================================================
# CART
# =====================================================
class CartItemIn(BaseModel):
    """Schema dla dodawania produktu do koszyka."""

    product_id: int = Field(..., gt=0)
    quantity: int = Field(1, ge=1)


class CartItemUpdate(BaseModel):
    # quantity sprawdzane w serwisie (BadRequest dla < 1)
    product_id: int = Field(..., gt=0)
    quantity: int


class CartItemOut(BaseModel):
    product_id: int
    name: str
    price: float
    image_url: str
    stock: int
    quantity: int
    subtotal: float


class CartOut(BaseModel):
    id: int
    user_id: int
    items: List[CartItemOut]
    total: float


# =====================================================
# ORDERS
# =====================================================
class AddressIn(_Stripped):
    street: str = Field(..., min_length=1)
    city: str = Field(..., min_length=1)
    state: str = Field(..., min_length=1)
    zip_code: str = Field(..., pattern=ZIP_CODE_PATTERN)
    country: str = Field(..., min_length=1)


class AddressOut(BaseModel):
    street: str
    city: str
    state: str
    zip_code: str
    country: str


class OrderCreate(BaseModel):
    address: AddressIn


class OrderStatusIn(BaseModel):
    status: str


class OrderItemOut(BaseModel):
    product_id: Optional[int] = None
    product_name: str
    quantity: int
    price: float

    model_config = ConfigDict(from_attributes=True)


class OrderUserOut(BaseModel):
    id: int
    name: str
    email: str

    model_config = ConfigDict(from_attributes=True)


class OrderOut(BaseModel):
    id: int
    user_id: Optional[int] = None
    # None gdy kupujacy zostal usuniety
    user: Optional[OrderUserOut] = None
    items: List[OrderItemOut]
    total_price: float
    address: AddressOut
    status: str
    payment_method: str
    created_at: datetime
    updated_at: datetime

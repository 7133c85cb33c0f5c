# storefront/schemas.py
from datetime import datetime
from pydantic import BaseModel, EmailStr, Field
from typing import Optional

# largest id the INTEGER primary keys can hold
MAX_ID = 2**31 - 1


# User
class UserOut(BaseModel):
    id: int
    email: str
    name: str
    class Config:
        from_attributes = True


class SignupRequest(BaseModel):
    email: EmailStr
    password: str
    name: str


class LoginRequest(BaseModel):
    email: str
    password: str


class AuthResponse(BaseModel):
    success: bool = True
    user: UserOut
    access_token: str
    token_type: str = "bearer"


class MeResponse(BaseModel):
    user: Optional[UserOut] = None


# Product
class ProductOut(BaseModel):
    id: int
    name: str
    description: Optional[str] = None
    price: int                      # minor currency units
    stock_qty: int
    image_url: Optional[str] = None
    category: Optional[str] = None
    is_featured: bool = False
    created_at: Optional[datetime] = None
    class Config:
        from_attributes = True


# Cart entry
class CartItemOut(BaseModel):
    id: int
    product_id: int
    quantity: int
    added_at: Optional[datetime] = None
    product: Optional[ProductOut] = None
    class Config:
        from_attributes = True


# the storefront JS posts camelCase keys
class CartAddRequest(BaseModel):
    product_id: int = Field(alias="productId", le=MAX_ID)
    quantity: int = 1
    class Config:
        populate_by_name = True


class CartUpdateRequest(BaseModel):
    quantity: int


class CartAddResponse(BaseModel):
    success: bool = True
    created: bool
    quantity: int
    message: str


class CartUpdateResponse(BaseModel):
    success: bool = True
    id: int
    quantity: int


class CartCountResponse(BaseModel):
    count: int


# Contact form
class ContactRequest(BaseModel):
    name: str
    email: str
    subject: Optional[str] = None
    message: str


class SuccessResponse(BaseModel):
    success: bool = True
    message: Optional[str] = None


class ErrorResponse(BaseModel):
    error: str
    code: str
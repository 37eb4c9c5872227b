"""
Pydantic Schemas for Request/Response Validation

JSON bodies use camelCase keys (``paymentMethod``, ``itemId``,
``unitPrice``) while Python attributes stay snake_case. Money values
are ``Decimal`` and serialize as strings to keep them exact.
"""

import re
from datetime import datetime
from decimal import Decimal
from typing import Optional, List

from pydantic import BaseModel, ConfigDict, Field, HttpUrl, EmailStr, field_validator
from pydantic.alias_generators import to_camel

from uaifood.models import MAX_ID, UserRole, PaymentMethod, OrderStatus
from uaifood.services.ordering.pricing import MAX_QUANTITY


PHONE_PATTERN = r"^\(?\d{2}\)? ?9?\d{4}-?\d{4}$"


class CamelModel(BaseModel):
    """Base schema: camelCase aliases, ORM attribute loading."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


# =============================================================================
# USER SCHEMAS
# =============================================================================

class UserCreate(CamelModel):
    """
    Self-registration payload.

    There is deliberately no ``role`` field: unknown keys are ignored, so
    a caller sending ``"role": "ADMIN"`` still registers as a client.
    """
    name: str = Field(..., min_length=3, max_length=100, examples=["Ana Souza"])
    phone: str = Field(..., pattern=PHONE_PATTERN, examples=["34 98888-1111"])
    email: EmailStr = Field(..., examples=["ana@teste.com"])
    password: str = Field(..., min_length=6, max_length=72)


class UserUpdate(CamelModel):
    """Profile update; ``role`` is honoured only for administrators."""
    name: str = Field(..., min_length=3, max_length=100)
    phone: str = Field(..., pattern=PHONE_PATTERN)
    email: EmailStr
    password: Optional[str] = Field(None, min_length=6, max_length=72)
    role: Optional[UserRole] = None


class LoginRequest(CamelModel):
    email: str
    password: str


# =============================================================================
# ADDRESS SCHEMAS
# =============================================================================

class AddressCreate(CamelModel):
    """Address payload used for both create and update."""
    street: str = Field(..., min_length=3, max_length=255)
    number: str = Field(..., min_length=1, max_length=20)
    district: str = Field(..., min_length=3, max_length=100)
    city: str = Field(..., min_length=2, max_length=100)
    state: str = Field(..., min_length=2, max_length=2, examples=["MG"])
    zip_code: str = Field(..., examples=["38000000"])

    @field_validator("state")
    @classmethod
    def validate_state(cls, v: str) -> str:
        if not v.isalpha():
            raise ValueError("State must have exactly 2 letters.")
        return v.upper()

    @field_validator("zip_code")
    @classmethod
    def validate_zip_code(cls, v: str) -> str:
        cleaned = v.replace("-", "")
        if not re.match(r"^\d{8}$", cleaned):
            raise ValueError("Invalid zip code.")
        return cleaned


class AddressResponse(CamelModel):
    id: int
    street: str
    number: str
    district: str
    city: str
    state: str
    zip_code: str
    user_id: int


class UserResponse(CamelModel):
    id: int
    name: str
    phone: str
    email: str
    role: UserRole
    created_at: datetime
    address: Optional[AddressResponse] = None


class UserSummary(CamelModel):
    id: int
    name: str
    role: UserRole


class RegisterResponse(CamelModel):
    message: str
    user: UserResponse


class LoginResponse(CamelModel):
    message: str
    token: str
    user: UserSummary


# =============================================================================
# CATALOG SCHEMAS
# =============================================================================

class CategoryCreate(CamelModel):
    description: str = Field(..., min_length=3, max_length=100, examples=["Lanches"])


class ItemCreate(CamelModel):
    """Menu item payload used for both create and update."""
    description: str = Field(..., min_length=3, max_length=255, examples=["X-Salada"])
    unit_price: Decimal = Field(..., gt=0, max_digits=10, decimal_places=2, examples=["18.90"])
    image_url: Optional[HttpUrl] = None
    category_id: int = Field(..., ge=1, le=MAX_ID)


class CategoryResponse(CamelModel):
    id: int
    description: str


class ItemBrief(CamelModel):
    id: int
    description: str
    unit_price: Decimal
    image_url: Optional[str] = None
    category_id: int


class ItemResponse(ItemBrief):
    category: Optional[CategoryResponse] = None


class CategoryWithItems(CategoryResponse):
    items: List[ItemBrief] = []


# =============================================================================
# ORDER SCHEMAS
# =============================================================================

class OrderLineCreate(CamelModel):
    """
    One requested line. Only the item reference and quantity are read;
    any price sent by the client is dropped.
    """
    item_id: int = Field(..., ge=1, le=MAX_ID, examples=[1])
    quantity: int = Field(..., ge=1, le=MAX_QUANTITY, examples=[2])


class OrderCreate(CamelModel):
    """Checkout payload."""
    payment_method: PaymentMethod = Field(..., examples=["PIX"])
    items: List[OrderLineCreate] = Field(..., min_length=1)


class OrderStatusAdvance(CamelModel):
    """
    Optional body of the status-advance call. When ``status`` is given it
    must be the immediate next status; anything else is rejected.
    """
    status: Optional[OrderStatus] = None


class OrderLineResponse(CamelModel):
    id: int
    item_id: int
    quantity: int
    item: Optional[ItemBrief] = None


class OrderResponse(CamelModel):
    id: int
    client_id: int
    payment_method: PaymentMethod
    status: OrderStatus
    total: Decimal
    created_at: datetime
    lines: List[OrderLineResponse] = []


class ClientInfo(CamelModel):
    id: int
    name: str
    email: str
    phone: str


class AdminOrderResponse(OrderResponse):
    """Order as seen by administrators, with the owning client."""
    client: Optional[ClientInfo] = None


# =============================================================================
# GENERIC RESPONSES
# =============================================================================

class MessageResponse(BaseModel):
    message: str


class ErrorResponse(BaseModel):
    """Standard error response."""
    message: str


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    database: str
    token_blacklist: str
    environment: str
    timestamp: datetime

"""
SQLAlchemy Database Models

Relational layout for the ordering backend:
- Users (clients and administrators) with one optional address
- Menu catalog: categories and items
- Orders and their lines

Money columns are fixed-point ``Numeric(10, 2)`` and map to ``Decimal``.
"""

import enum
from datetime import datetime, timezone

from sqlalchemy import Column, Integer, String, Numeric, DateTime, Enum, ForeignKey
from sqlalchemy.orm import relationship

from uaifood.database import Base


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def enum_column(enum_cls: type[enum.Enum], name: str) -> Enum:
    """Store enum values ("pending") instead of member names ("PENDING")."""
    return Enum(
        enum_cls,
        name=name,
        values_callable=lambda members: [m.value for m in members],
        validate_strings=True,
    )


class UserRole(str, enum.Enum):
    """Closed set of principal roles."""
    CLIENT = "CLIENT"
    ADMIN = "ADMIN"


class PaymentMethod(str, enum.Enum):
    """Accepted payment methods at checkout."""
    CASH = "CASH"
    DEBIT = "DEBIT"
    CREDIT = "CREDIT"
    PIX = "PIX"


class OrderStatus(str, enum.Enum):
    """Order status workflow (see ``uaifood.services.ordering.status``)."""
    PENDING = "pending"
    PREPARING = "preparing"
    DELIVERING = "delivering"
    DELIVERED = "delivered"


# Largest value an Integer primary key column can hold
MAX_ID = 2**31 - 1


class User(Base):
    """
    Registered user.

    Clients register themselves; administrators are only created by the
    bootstrap step or promoted by another administrator.
    """
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    name = Column(String(100), nullable=False)
    phone = Column(String(20), nullable=False)
    email = Column(String(255), nullable=False, unique=True, index=True)
    password = Column(String(255), nullable=False)  # bcrypt hash
    role = Column(enum_column(UserRole, "user_role"), default=UserRole.CLIENT, nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    address = relationship("Address", uselist=False, lazy="selectin")

    def __repr__(self):
        return f"<User #{self.id} - {self.email} - {self.role.value}>"


class Address(Base):
    """Delivery address; at most one per user."""
    __tablename__ = "addresses"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    street = Column(String(255), nullable=False)
    number = Column(String(20), nullable=False)
    district = Column(String(100), nullable=False)
    city = Column(String(100), nullable=False)
    state = Column(String(2), nullable=False)
    zip_code = Column(String(8), nullable=False)
    user_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
        index=True,
    )

    def __repr__(self):
        return f"<Address #{self.id} - user {self.user_id}>"


class Category(Base):
    """Menu section (e.g. "Lanches", "Bebidas")."""
    __tablename__ = "categories"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    description = Column(String(100), nullable=False)

    items = relationship("Item", back_populates="category", lazy="selectin")

    def __repr__(self):
        return f"<Category #{self.id} - {self.description}>"


class Item(Base):
    """Menu entry with its current authoritative unit price."""
    __tablename__ = "items"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    description = Column(String(255), nullable=False)
    unit_price = Column(Numeric(10, 2), nullable=False)
    image_url = Column(String(500), nullable=True)
    category_id = Column(
        Integer,
        ForeignKey("categories.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )

    category = relationship("Category", back_populates="items", lazy="selectin")

    def __repr__(self):
        return f"<Item #{self.id} - {self.description} - {self.unit_price}>"


class Order(Base):
    """
    Customer order.

    ``total`` is always derived from catalog prices at creation time and
    ``status`` only moves forward through ``OrderStatus``.
    """
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    client_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    payment_method = Column(enum_column(PaymentMethod, "payment_method"), nullable=False)
    status = Column(
        enum_column(OrderStatus, "order_status"),
        default=OrderStatus.PENDING,
        nullable=False,
        index=True,
    )
    total = Column(Numeric(10, 2), nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False, index=True)

    lines = relationship(
        "OrderLine",
        back_populates="order",
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by="OrderLine.id",
    )
    client = relationship("User", lazy="selectin", viewonly=True)

    def __repr__(self):
        return f"<Order #{self.id} - client {self.client_id} - {self.status.value}>"


class OrderLine(Base):
    """One (item, quantity) pairing of an order; immutable after creation."""
    __tablename__ = "order_lines"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    order_id = Column(
        Integer,
        ForeignKey("orders.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    item_id = Column(
        Integer,
        ForeignKey("items.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    quantity = Column(Integer, nullable=False)

    order = relationship("Order", back_populates="lines")
    item = relationship("Item", lazy="selectin")

    def __repr__(self):
        return f"<OrderLine #{self.id} - item {self.item_id} x{self.quantity}>"

"""
Database Models Package
SQLAlchemy ORM models for PostgreSQL.
"""

from app.models.company import Branch, Company
from app.models.user import User
from app.models.plan import Plan
from app.models.subscription import Subscription
from app.models.catalog import ComplementOption, Product
from app.models.ingredient import Ingredient, IngredientCategory
from app.models.stock_movement import StockMovement
from app.models.payment_method import BranchPaymentMethod, PaymentMethod
from app.models.notification import Announcement, NotificationRead
from app.models.dining_table import DiningTable
from app.models.order import Order
from app.models.cash_register import CashMovement, CashRegister

__all__ = [
    "Company",
    "Branch",
    "User",
    "Plan",
    "Subscription",
    "Product",
    "ComplementOption",
    "IngredientCategory",
    "Ingredient",
    "StockMovement",
    "PaymentMethod",
    "BranchPaymentMethod",
    "NotificationRead",
    "Announcement",
    "DiningTable",
    "Order",
    "CashRegister",
    "CashMovement",
]

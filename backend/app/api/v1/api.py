"""
API v1 Router
Aggregates all API endpoints.
"""
from fastapi import APIRouter

from app.api.v1.endpoints import (
    auth,
    cash_registers,
    ingredient_categories,
    ingredients,
    notifications,
    payment_methods,
    plans,
    stock,
    subscriptions,
    tables,
    uploads,
)

api_router = APIRouter()

# Health check for API
@api_router.get("/ping", tags=["Health"])
async def ping():
    """Simple ping endpoint to verify API is responding"""
    return {"message": "pong", "api_version": "v1"}

# Include endpoint routers
api_router.include_router(auth.router, prefix="/auth", tags=["Authentication"])
api_router.include_router(plans.router, prefix="/plans", tags=["Plans"])
api_router.include_router(subscriptions.router, prefix="/subscriptions", tags=["Subscriptions"])

api_router.include_router(
    ingredient_categories.router,
    prefix="/ingredient-categories",
    tags=["Ingredient Categories"],
)
api_router.include_router(ingredients.router, prefix="/ingredients", tags=["Ingredients"])
api_router.include_router(stock.router, prefix="/stock-movements", tags=["Stock"])
api_router.include_router(payment_methods.router, prefix="/payment-methods", tags=["Payment Methods"])
api_router.include_router(tables.router, prefix="/tables", tags=["Tables"])
api_router.include_router(cash_registers.router, prefix="/cash-registers", tags=["Cash Registers"])

api_router.include_router(notifications.router, prefix="/notifications", tags=["Notifications"])
api_router.include_router(uploads.router, prefix="/upload", tags=["Upload"])

"""
REST API main application.
Entry point for the FastAPI POS server.
"""

from fastapi import FastAPI

from pos_api.core.lifespan import lifespan
from pos_api.routers import (
    finance_router,
    health_router,
    hotel_router,
    kitchen_router,
    ktv_router,
    menu_router,
    orders_router,
)

app = FastAPI(
    title="POS Engine API",
    description="Order lifecycle and billing for the hotel, restaurant and KTV",
    version="0.1.0",
    lifespan=lifespan,
)

app.include_router(health_router)
app.include_router(orders_router)
app.include_router(kitchen_router)
app.include_router(ktv_router)
app.include_router(hotel_router)
app.include_router(menu_router)
app.include_router(finance_router)

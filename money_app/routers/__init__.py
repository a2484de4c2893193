"""Feature routers, mounted together under ``/api``."""

from fastapi import FastAPI

from . import (
    analytics,
    budgets,
    calendar,
    categories,
    dashboard,
    debts,
    gamification,
    goals,
    recurring,
    reports,
    transactions,
    wallets,
)

_FEATURE_ROUTERS = (
    wallets.router,
    categories.router,
    transactions.router,
    budgets.router,
    dashboard.router,
    reports.router,
    analytics.router,
    gamification.router,
    recurring.router,
    goals.router,
    debts.router,
    calendar.router,
)


def register_routers(app: FastAPI) -> None:
    """Attach all API routes to the FastAPI application."""

    for router in _FEATURE_ROUTERS:
        app.include_router(router, prefix="/api")

"""
Registre central des routers (API v1, webhooks, health).
"""
from fastapi import FastAPI
from billing_backend.checkout import views as checkout_views
from billing_backend.quotes import views as quotes_views
from billing_backend.promotions import views as promotions_views
from billing_backend.subscriptions import views as subscriptions_views
from billing_backend.webhooks import views as webhooks_views
from billing_backend.health.router import router as health_router


def register_routers(app: FastAPI) -> None:
    """
    Agrège tous les routers de l'application.
    - L'ordre n'a pas d'impact sauf conflits de chemins (évités par préfixes).
    """
    # API v1
    app.include_router(checkout_views.router)
    app.include_router(quotes_views.router)
    app.include_router(promotions_views.router)
    app.include_router(subscriptions_views.router)
    # Webhooks fournisseur
    app.include_router(webhooks_views.router)
    # Health & monitoring
    app.include_router(health_router)

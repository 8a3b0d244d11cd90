"""
Entrypoint ASGI pour les process managers:
    gunicorn -k uvicorn.workers.UvicornWorker billing_backend.asgi:app
La construction de l'app (middlewares, handlers, routers) vit dans billing_backend.app_setup.
"""
from billing_backend.app import app

__all__ = ["app"]

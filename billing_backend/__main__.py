"""
Lancement local de l'API de facturation: `python -m billing_backend`.

Variables lues:
- HOST / PORT: interface et port d'écoute (0.0.0.0:8000 par défaut)
- UVICORN_RELOAD: "1"/"true"/"yes" pour le rechargement automatique (dev)
- LOG_LEVEL: niveau de logs uvicorn ("info" par défaut)
"""
import os

import uvicorn


def main() -> None:
    uvicorn.run(
        "billing_backend.asgi:app",
        host=os.environ.get("HOST", "0.0.0.0"),
        port=int(os.environ.get("PORT", "8000")),
        reload=os.environ.get("UVICORN_RELOAD", "").lower() in ("1", "true", "yes"),
        log_level=os.environ.get("LOG_LEVEL", "info"),
    )


if __name__ == "__main__":
    main()

# billing_backend.config
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional
import os
from dotenv import load_dotenv

# Calculer le chemin du projet puis charger .env de manière explicite
BASE_DIR = Path(__file__).resolve().parent.parent
ENV_PATH = BASE_DIR / ".env"
load_dotenv(dotenv_path=ENV_PATH, override=True)

"""
Configuration centrale du backend de facturation.

- Charge le fichier .env à la racine du projet (BASE_DIR/.env)
- Expose les réglages HTTP transverses (CORS/hosts, cookies) sous forme de constantes
- Construit un objet BillingSettings (Stripe, catalogue de prix, e-mail, URLs de retour)
  injecté dans les services au lieu d'être relu depuis l'environnement à chaque requête
"""

def _clean_env(v: Optional[str]) -> str:
    """
    Nettoie une valeur d'environnement:
    - supprime les espaces et guillemets (simples, doubles) et backticks
    - retourne toujours une chaîne (jamais None)
    """
    return (v or "").strip().strip("'").strip('"').strip("`")

def _env(*names: str, default: str = "") -> str:
    """Première variable définie parmi `names` (permet de garder les anciens noms du déploiement)."""
    for name in names:
        value = _clean_env(os.getenv(name))
        if value:
            return value
    return default

def _env_bool(name: str, default: bool = False) -> bool:
    raw = _clean_env(os.getenv(name))
    if not raw:
        return default
    return raw.lower() in ("1", "true", "yes", "on")

def _env_int(name: str, default: int) -> int:
    raw = _clean_env(os.getenv(name))
    try:
        return int(raw) if raw else default
    except ValueError:
        return default

# Cookies/ Sécurité
COOKIE_SECURE = (os.getenv("COOKIE_SECURE", "false").lower() == "true")

# CORS (le formulaire de checkout est servi depuis le site vitrine)
CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]
ALLOWED_HOSTS = [h.strip() for h in os.getenv("ALLOWED_HOSTS", "localhost,127.0.0.1").split(",") if h.strip()]

DEFAULT_WEB_BASE_URL = "https://datelia.ai"
DEFAULT_STRIPE_API_VERSION = "2024-06-20"


@dataclass(frozen=True)
class BillingSettings:
    """
    Réglages de facturation, lus une seule fois au démarrage.
    Les identifiants de prix sont des références opaques du catalogue Stripe.
    """

    stripe_secret_key: str = ""
    stripe_webhook_secret: str = ""
    stripe_api_version: str = DEFAULT_STRIPE_API_VERSION
    webhook_tolerance: int = 300

    price_id_users: str = ""
    price_id_pack_entry: str = ""
    price_id_pack_pro: str = ""
    price_id_pack_enterprise: str = ""
    price_id_docs: str = ""
    tax_rate_id: str = ""

    web_base_url: str = DEFAULT_WEB_BASE_URL
    checkout_success_path: str = "/merci"
    checkout_cancel_path: str = "/annule"
    quote_expires_days: int = 14
    quote_notify_support: bool = False

    resend_api_key: str = ""
    sender_email: str = "hello@datelia.ai"
    support_email: str = "support@datelia.ai"
    calendly_link: str = ""

    # Clés indispensables: sans elles, aucun devis ni webhook ne peut aboutir.
    REQUIRED_KEYS = (
        ("stripe_secret_key", "STRIPE_SECRET_KEY"),
        ("stripe_webhook_secret", "STRIPE_WEBHOOK_SECRET"),
        ("price_id_users", "PRICE_ID_USERS"),
        ("price_id_pack_pro", "PRICE_ID_PACK_PRO"),
        ("price_id_pack_enterprise", "PRICE_ID_PACK_ENTERPRISE"),
    )

    @property
    def live_mode(self) -> bool:
        return self.stripe_secret_key.startswith("sk_live_")

    @property
    def success_url(self) -> str:
        return f"{self.web_base_url.rstrip('/')}{self.checkout_success_path}"

    @property
    def cancel_url(self) -> str:
        return f"{self.web_base_url.rstrip('/')}{self.checkout_cancel_path}"

    def missing_required(self) -> List[str]:
        """Noms des variables d'environnement obligatoires non renseignées."""
        return [env_name for attr, env_name in self.REQUIRED_KEYS if not getattr(self, attr)]


def load_settings() -> BillingSettings:
    """
    Construit BillingSettings depuis l'environnement.
    - Accepte les anciens noms (PRICE_ID_PACK_ESSENTIEL, PRICE_ID_PACK_ENTREPRISE, TAX_RATE_20_ID)
    - WEB_BASE_URL sans schéma est préfixée en https://
    """
    web_base_url = _env("WEB_BASE_URL", default=DEFAULT_WEB_BASE_URL)
    if not web_base_url.startswith("http"):
        web_base_url = "https://" + web_base_url
    return BillingSettings(
        stripe_secret_key=_env("STRIPE_SECRET_KEY"),
        stripe_webhook_secret=_env("STRIPE_WEBHOOK_SECRET"),
        stripe_api_version=_env("STRIPE_API_VERSION", default=DEFAULT_STRIPE_API_VERSION),
        webhook_tolerance=_env_int("STRIPE_WEBHOOK_TOLERANCE", 300),
        price_id_users=_env("PRICE_ID_USERS"),
        price_id_pack_entry=_env("PRICE_ID_PACK_ENTRY", "PRICE_ID_PACK_ESSENTIEL"),
        price_id_pack_pro=_env("PRICE_ID_PACK_PRO"),
        price_id_pack_enterprise=_env("PRICE_ID_PACK_ENTERPRISE", "PRICE_ID_PACK_ENTREPRISE"),
        price_id_docs=_env("PRICE_ID_DOCS"),
        tax_rate_id=_env("TAX_RATE_ID", "TAX_RATE_20_ID"),
        web_base_url=web_base_url.rstrip("/"),
        checkout_success_path=_env("CHECKOUT_SUCCESS_PATH", default="/merci"),
        checkout_cancel_path=_env("CHECKOUT_CANCEL_PATH", default="/annule"),
        quote_expires_days=_env_int("QUOTE_EXPIRES_DAYS", 14),
        quote_notify_support=_env_bool("QUOTE_NOTIFY_SUPPORT"),
        resend_api_key=_env("RESEND_API_KEY"),
        sender_email=_env("SENDER_EMAIL", default="hello@datelia.ai"),
        support_email=_env("SUPPORT_EMAIL", default="support@datelia.ai"),
        calendly_link=_env("CALENDLY_LINK"),
    )

import copy
import dataclasses
import hashlib
import hmac
import itertools
import os
import time
from typing import Any, Dict, Generator, List, Optional

import pytest
from fastapi.testclient import TestClient

# Avant l'import de l'app: pas de Redis en tests, hôte du TestClient accepté
os.environ.setdefault("DISABLE_FASTAPI_LIMITER_INIT_FOR_TESTS", "1")
os.environ.setdefault("ALLOWED_HOSTS", "testserver,localhost,127.0.0.1")

from billing_backend.app import app as fastapi_app
from billing_backend.config import BillingSettings
from billing_backend.deps import get_settings

TEST_SETTINGS = BillingSettings(
    stripe_secret_key="sk_test_123",
    stripe_webhook_secret="whsec_test_secret",
    price_id_users="price_users",
    price_id_pack_pro="price_pro",
    price_id_pack_enterprise="price_enterprise",
    price_id_docs="price_docs",
    web_base_url="https://datelia.test",
    calendly_link="https://calendly.test/datelia/onboarding",
)


# Marquage automatique selon le dossier
def pytest_collection_modifyitems(config, items):
    for item in items:
        nodeid = item.nodeid.replace("\\", "/")
        if "tests/unit/" in nodeid:
            item.add_marker(pytest.mark.unit)
        elif "tests/integration/" in nodeid:
            item.add_marker(pytest.mark.integration)
        elif "tests/functional/" in nodeid:
            item.add_marker(pytest.mark.functional)


class _Api:
    """Ressource Stripe simulée: journalise chaque appel et lève l'erreur programmée."""

    name = ""

    def __init__(self, owner: "FakeStripe"):
        self.owner = owner

    def _call(self, method: str, **params):
        key = f"{self.name}.{method}"
        self.owner.calls.append((key, params))
        exc = self.owner.failures.get(key)
        if exc is not None:
            raise exc


class _CustomerApi(_Api):
    name = "Customer"

    def list(self, email=None, limit=10):
        self._call("list", email=email, limit=limit)
        data = [copy.deepcopy(c) for c in self.owner.customers.values() if c.get("email") == email]
        return {"object": "list", "data": data[:limit]}

    def create(self, email=None, **params):
        self._call("create", email=email, **params)
        cid = f"cus_{next(self.owner.ids)}"
        self.owner.customers[cid] = {"id": cid, "email": email, "metadata": {}, "description": None}
        return copy.deepcopy(self.owner.customers[cid])

    def retrieve(self, customer_id):
        self._call("retrieve", id=customer_id)
        return copy.deepcopy(self.owner.customers[customer_id])

    def modify(self, customer_id, metadata=None, description=None):
        self._call("modify", id=customer_id, metadata=metadata, description=description)
        customer = self.owner.customers.setdefault(
            customer_id, {"id": customer_id, "email": None, "metadata": {}, "description": None}
        )
        # Comme Stripe: fusion clé par clé, "" supprime la clé
        for key, value in (metadata or {}).items():
            if value == "":
                customer["metadata"].pop(key, None)
            else:
                customer["metadata"][key] = value
        if description is not None:
            customer["description"] = description
        return copy.deepcopy(customer)


class _QuoteApi(_Api):
    name = "Quote"

    def create(self, **params):
        self._call("create", **params)
        qid = f"qt_{next(self.owner.ids)}"
        self.owner.quotes[qid] = {"id": qid, "status": "draft", "url": None, **params}
        return copy.deepcopy(self.owner.quotes[qid])

    def finalize_quote(self, quote_id):
        self._call("finalize_quote", id=quote_id)
        quote = self.owner.quotes[quote_id]
        quote["status"] = "open"
        if self.owner.quote_url_on_finalize:
            quote["url"] = f"https://quote.stripe.test/{quote_id}"
        return copy.deepcopy(quote)

    def retrieve(self, quote_id):
        self._call("retrieve", id=quote_id)
        quote = self.owner.quotes[quote_id]
        if not quote.get("url") and self.owner.quote_url_on_retrieve:
            quote["url"] = f"https://quote.stripe.test/{quote_id}"
        return copy.deepcopy(quote)


class _PromotionCodeApi(_Api):
    name = "PromotionCode"

    def list(self, code=None, active=None, limit=10):
        self._call("list", code=code, active=active, limit=limit)
        data = [
            copy.deepcopy(p) for p in self.owner.promotion_codes
            if p.get("code") == code and (active is None or p.get("active") == active)
        ]
        return {"object": "list", "data": data[:limit]}


class _SessionApi(_Api):
    name = "checkout.Session"

    def create(self, **params):
        self._call("create", **params)
        sid = f"cs_test_{next(self.owner.ids)}"
        url = f"https://checkout.stripe.test/{sid}" if self.owner.checkout_url else None
        return {"id": sid, "url": url, **params}


class _CheckoutNamespace:
    def __init__(self, owner: "FakeStripe"):
        self.Session = _SessionApi(owner)


class _PaymentMethodApi(_Api):
    name = "PaymentMethod"

    def list(self, customer=None, type=None):
        self._call("list", customer=customer, type=type)
        return {"object": "list", "data": copy.deepcopy(self.owner.payment_methods.get(customer, []))}


class _SubscriptionApi(_Api):
    name = "Subscription"

    def create(self, **params):
        self._call("create", **params)
        return {"id": f"sub_{next(self.owner.ids)}", "status": "trialing", **params}


class FakeStripe:
    """
    Remplaçant du module stripe pour les repositories (via stripe_client.get_stripe).
    - calls: liste de ("Ressource.methode", params)
    - failures: {"Quote.finalize_quote": stripe.APIConnectionError(...)} pour simuler une panne
    """

    def __init__(self):
        self.ids = itertools.count(1)
        self.calls: List[Any] = []
        self.failures: Dict[str, Exception] = {}
        self.customers: Dict[str, Dict[str, Any]] = {}
        self.quotes: Dict[str, Dict[str, Any]] = {}
        self.promotion_codes: List[Dict[str, Any]] = []
        self.payment_methods: Dict[str, List[Dict[str, Any]]] = {}
        self.quote_url_on_finalize = True
        self.quote_url_on_retrieve = True
        self.checkout_url = True

        self.Customer = _CustomerApi(self)
        self.Quote = _QuoteApi(self)
        self.PromotionCode = _PromotionCodeApi(self)
        self.checkout = _CheckoutNamespace(self)
        self.PaymentMethod = _PaymentMethodApi(self)
        self.Subscription = _SubscriptionApi(self)

    def calls_to(self, key: str) -> List[Dict[str, Any]]:
        return [params for name, params in self.calls if name == key]

    def add_customer(self, email: Optional[str], metadata: Optional[Dict[str, str]] = None) -> str:
        cid = f"cus_{next(self.ids)}"
        self.customers[cid] = {"id": cid, "email": email, "metadata": dict(metadata or {}), "description": None}
        return cid


class _FakeResendResponse:
    def __init__(self, status_code: int = 200, payload: Optional[Dict[str, Any]] = None):
        self.status_code = status_code
        self._payload = payload if payload is not None else {"id": "email_123"}
        self.text = str(self._payload)
        self.content = self.text.encode()

    def json(self):
        return self._payload


@pytest.fixture
def settings() -> BillingSettings:
    return TEST_SETTINGS


@pytest.fixture(autouse=True)
def fake_stripe(monkeypatch) -> FakeStripe:
    """Aucun appel réseau vers Stripe: tous les repositories passent par ce faux module."""
    fake = FakeStripe()
    monkeypatch.setattr("billing_backend.infra.stripe_client.get_stripe", lambda: fake)
    return fake


@pytest.fixture
def sent_emails(monkeypatch) -> List[Dict[str, Any]]:
    """Capture les envois Resend (requests.post) sans réseau."""
    sent: List[Dict[str, Any]] = []

    def _fake_post(url, json=None, headers=None, timeout=None):
        sent.append({"url": url, "json": json, "headers": headers, "timeout": timeout})
        return _FakeResendResponse()

    monkeypatch.setattr("billing_backend.infra.resend_client.requests.post", _fake_post)
    return sent


def sign_stripe_payload(payload: bytes, secret: str = TEST_SETTINGS.stripe_webhook_secret, timestamp: Optional[int] = None) -> str:
    """En-tête Stripe-Signature: t=<ts>,v1=HMAC_SHA256(secret, "<ts>.<payload>")."""
    ts = int(time.time()) if timestamp is None else timestamp
    signed = f"{ts}.".encode("utf-8") + payload
    sig = hmac.new(secret.encode("utf-8"), signed, hashlib.sha256).hexdigest()
    return f"t={ts},v1={sig}"


@pytest.fixture
def sign_payload():
    return sign_stripe_payload


@pytest.fixture(scope="session")
def app():
    return fastapi_app


@pytest.fixture(autouse=True)
def _override_settings(app):
    app.dependency_overrides[get_settings] = lambda: TEST_SETTINGS
    try:
        yield
    finally:
        app.dependency_overrides.clear()


@pytest.fixture()
def client(app) -> Generator[TestClient, None, None]:
    with TestClient(app) as c:
        yield c


@pytest.fixture
def use_settings(app):
    """Remplace les réglages de l'app pour un test (ex: configuration incomplète)."""
    def _apply(**changes) -> BillingSettings:
        custom = dataclasses.replace(TEST_SETTINGS, **changes)
        app.dependency_overrides[get_settings] = lambda: custom
        return custom
    return _apply

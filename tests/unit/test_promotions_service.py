import pytest
import stripe
from fastapi import HTTPException

from billing_backend.promotions import service as promotions_service


def _promo(code="WELCOME20", active=True):
    return {
        "id": "promo_1",
        "code": code,
        "active": active,
        "coupon": {"id": "co_1", "percent_off": 20.0, "amount_off": None, "currency": "eur", "duration": "once"},
    }


def test_resolve_empty_code_makes_no_call(fake_stripe):
    assert promotions_service.resolve("  ") is None
    assert promotions_service.resolve(None) is None
    assert fake_stripe.calls == []


def test_resolve_active_code(fake_stripe):
    fake_stripe.promotion_codes.append(_promo())
    discount = promotions_service.resolve(" WELCOME20 ")
    assert discount is not None
    assert discount.to_stripe() == {"promotion_code": "promo_1"}
    assert discount.coupon_id == "co_1"
    assert fake_stripe.calls_to("PromotionCode.list")[0]["active"] is True


def test_resolve_inactive_or_unknown_code_is_none(fake_stripe):
    fake_stripe.promotion_codes.append(_promo(active=False))
    assert promotions_service.resolve("WELCOME20") is None
    assert promotions_service.resolve("NOPE") is None


def test_resolve_provider_error_is_not_blocking(fake_stripe):
    fake_stripe.failures["PromotionCode.list"] = stripe.APIConnectionError("Network down")
    assert promotions_service.resolve("WELCOME20") is None


def test_lookup_requires_code():
    with pytest.raises(HTTPException) as exc:
        promotions_service.lookup("")
    assert exc.value.status_code == 400
    assert exc.value.detail == "Missing code"


def test_lookup_not_found(fake_stripe):
    assert promotions_service.lookup("NOPE") == {"ok": True, "found": False}


def test_lookup_found_returns_coupon(fake_stripe):
    fake_stripe.promotion_codes.append(_promo())
    res = promotions_service.lookup("WELCOME20")
    assert res["found"] is True
    assert res["coupon"] == {
        "id": "co_1",
        "percent_off": 20.0,
        "amount_off": None,
        "currency": "eur",
        "duration": "once",
    }


def test_lookup_propagates_provider_error(fake_stripe):
    fake_stripe.failures["PromotionCode.list"] = stripe.APIConnectionError("Network down")
    with pytest.raises(stripe.StripeError):
        promotions_service.lookup("WELCOME20")

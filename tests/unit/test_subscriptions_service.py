from datetime import datetime, timezone

import pytest
import stripe
from fastapi import HTTPException

from billing_backend.catalog import Catalog
from billing_backend.subscriptions.models import SubscriptionRequest, parse_trial_start, trial_end_timestamp
from billing_backend.subscriptions.service import SubscriptionService


def test_parse_trial_start_accepts_zulu_and_offsets():
    assert parse_trial_start("2025-03-01T09:00:00Z") == datetime(2025, 3, 1, 9, tzinfo=timezone.utc)
    assert parse_trial_start("2025-03-01T11:00:00+02:00").timestamp() == datetime(2025, 3, 1, 9, tzinfo=timezone.utc).timestamp()


def test_parse_trial_start_naive_is_utc():
    assert parse_trial_start("2025-03-01").tzinfo == timezone.utc


def test_parse_trial_start_rejects_garbage():
    with pytest.raises(ValueError):
        parse_trial_start("demain")


def test_trial_end_is_fourteen_days_later():
    start = datetime(2025, 3, 1, tzinfo=timezone.utc)
    assert trial_end_timestamp(start) == int(start.timestamp()) + 14 * 24 * 3600


def test_request_accepts_legacy_field_name():
    req = SubscriptionRequest.model_validate({"customerId": "cus_1", "trial_start_iso": "2025-03-01"})
    assert req.customer_id == "cus_1"
    assert SubscriptionRequest(customer_id="cus_2").customer_id == "cus_2"


def test_create_trial_subscription(settings, fake_stripe):
    fake_stripe.payment_methods["cus_1"] = [{"id": "pm_card_1"}]
    req = SubscriptionRequest(customer_id="cus_1", team_size="4", docs_per_month="150", trial_start_iso="2025-03-01T00:00:00Z")

    res = SubscriptionService(Catalog(settings)).create_trial_subscription(req)

    expected_end = int(datetime(2025, 3, 15, tzinfo=timezone.utc).timestamp())
    assert res["ok"] is True
    assert res["trial_end"] == expected_end
    params = fake_stripe.calls_to("Subscription.create")[0]
    assert params["items"] == [
        {"price": "price_users", "quantity": 4},
        {"price": "price_docs", "quantity": 2},
    ]
    assert params["trial_end"] == expected_end
    assert params["default_payment_method"] == "pm_card_1"
    assert params["proration_behavior"] == "create_prorations"
    assert res["subscriptionId"].startswith("sub_")


def test_create_without_card_leaves_default_payment_method_unset(settings, fake_stripe):
    req = SubscriptionRequest(customer_id="cus_1", trial_start_iso="2025-03-01")
    SubscriptionService(Catalog(settings)).create_trial_subscription(req)
    params = fake_stripe.calls_to("Subscription.create")[0]
    assert "default_payment_method" not in params
    assert params["items"] == [{"price": "price_users", "quantity": 1}]


@pytest.mark.parametrize("payload", [
    {"trial_start_iso": "2025-03-01"},
    {"customer_id": "cus_1"},
    {"customer_id": "  ", "trial_start_iso": "2025-03-01"},
])
def test_missing_fields_are_rejected(settings, fake_stripe, payload):
    with pytest.raises(HTTPException) as exc:
        SubscriptionService(Catalog(settings)).create_trial_subscription(SubscriptionRequest(**payload))
    assert exc.value.status_code == 400
    assert exc.value.detail == "customerId and trial_start_iso are required"
    assert fake_stripe.calls == []


def test_invalid_trial_start_is_rejected(settings, fake_stripe):
    req = SubscriptionRequest(customer_id="cus_1", trial_start_iso="01/03/2025")
    with pytest.raises(HTTPException) as exc:
        SubscriptionService(Catalog(settings)).create_trial_subscription(req)
    assert exc.value.status_code == 400
    assert exc.value.detail == "Invalid trial_start_iso"


def test_provider_failure_is_500(settings, fake_stripe):
    fake_stripe.failures["Subscription.create"] = stripe.InvalidRequestError("No such customer", "customer")
    req = SubscriptionRequest(customer_id="cus_404", trial_start_iso="2025-03-01")
    with pytest.raises(HTTPException) as exc:
        SubscriptionService(Catalog(settings)).create_trial_subscription(req)
    assert exc.value.status_code == 500
    assert exc.value.detail == "Failed to create subscription"

from dataclasses import dataclass
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class Discount:
    """Remise résolue depuis un code promo actif."""

    promotion_code_id: str
    coupon_id: str
    code: str = ""
    percent_off: Optional[float] = None
    amount_off: Optional[int] = None
    currency: str = "eur"
    duration: Optional[str] = None

    def to_stripe(self) -> Dict[str, Any]:
        return {"promotion_code": self.promotion_code_id}

    def coupon_payload(self) -> Dict[str, Any]:
        return {
            "id": self.coupon_id,
            "percent_off": self.percent_off or None,
            "amount_off": self.amount_off or None,
            "currency": self.currency or "eur",
            "duration": self.duration,
        }


def discount_from_promotion(promo: Dict[str, Any]) -> Discount:
    """Construit une Discount depuis un objet PromotionCode Stripe (dict)."""
    coupon = promo.get("coupon") or {}
    if isinstance(coupon, str):
        coupon = {"id": coupon}
    return Discount(
        promotion_code_id=str(promo.get("id") or ""),
        coupon_id=str(coupon.get("id") or ""),
        code=str(promo.get("code") or ""),
        percent_off=coupon.get("percent_off"),
        amount_off=coupon.get("amount_off"),
        currency=coupon.get("currency") or "eur",
        duration=coupon.get("duration"),
    )

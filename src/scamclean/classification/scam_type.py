"""Scam type classification for reported phone numbers.

Free-text labels collected from community block lists ("Giả mạo công an",
"Shopee giao hàng", "spam", ...) are mapped onto a fixed taxonomy using a
transparent keyword cascade:

    label -> lower-case + strip -> first rule with a matching keyword wins

Rules are evaluated in the order of :data:`CLASSIFICATION_RULES`. Keywords
overlap between categories, so the order is part of the contract: dedicated
categories come first and the generic ``spam`` / ``bot`` / ``rác`` terms are
only consulted once everything else failed.
"""

from __future__ import annotations

from enum import Enum
from types import MappingProxyType
from typing import Any, Mapping, Tuple


class ScamCategory(str, Enum):
    """Supported scam categories (``locker_type`` values)."""

    FAKE_POLICE = "fake_police"
    FAKE_ELECTRICITY_COMPANY = "fake_electricity_company"
    FAKE_BANKING = "fake_bank_credit_securities"
    PHONE_SPAM = "phone_spam"
    ONLINE_DELIVERY = "online_delivery"
    FAKE_PRIZE = "fake_ads_prize"
    CUSTOMER_SERVICE = "customer_service"
    REAL_ESTATE = "real_estate"
    INSURANCE = "insurance"
    SCAM = "scam"
    OTHER = "other"


CATEGORY_DESCRIPTIONS: Mapping[ScamCategory, str] = MappingProxyType(
    {
        ScamCategory.FAKE_POLICE: "Giả mạo công an / dịch vụ công",
        ScamCategory.FAKE_ELECTRICITY_COMPANY: "Lừa đảo đóng tiền điện nước",
        ScamCategory.FAKE_BANKING: "Giả mạo, lừa đảo ngân hàng / tín dụng / chứng khoán",
        ScamCategory.PHONE_SPAM: "Nháy máy spam",
        ScamCategory.ONLINE_DELIVERY: "Giao hàng trực tuyến",
        ScamCategory.FAKE_PRIZE: "Quảng cáo / trúng thưởng",
        ScamCategory.CUSTOMER_SERVICE: "Dịch vụ / CSKH / Tổng đài",
        ScamCategory.REAL_ESTATE: "Bất động sản",
        ScamCategory.INSURANCE: "Bảo hiểm",
        ScamCategory.SCAM: "Lừa đảo",
        ScamCategory.OTHER: "Khác",
    }
)

Rule = Tuple[ScamCategory, Tuple[str, ...]]

# --- Ordered keyword cascade (first match wins) ---
CLASSIFICATION_RULES: Tuple[Rule, ...] = (
    (ScamCategory.FAKE_POLICE, ("công an", "police", "dịch vụ công", "công chức")),
    (ScamCategory.FAKE_ELECTRICITY_COMPANY, ("điện", "nước", "evn", "tiền điện")),
    (
        ScamCategory.FAKE_BANKING,
        (
            "ngân hàng",
            "bank",
            "tín dụng",
            "chứng khoán",
            "vp bank",
            "vietcombank",
            "acb",
            "techcombank",
            "bidv",
            "tài chính",
        ),
    ),
    (ScamCategory.PHONE_SPAM, ("nháy máy", "nhá máy", "spam call", "missed call")),
    (
        ScamCategory.ONLINE_DELIVERY,
        ("giao hàng", "ship", "delivery", "vận chuyển", "grab", "shopee", "lazada"),
    ),
    (
        ScamCategory.FAKE_PRIZE,
        ("quảng cáo", "trúng thưởng", "khuyến mãi", "voucher", "giải thưởng", "ads"),
    ),
    (
        ScamCategory.CUSTOMER_SERVICE,
        ("cskh", "chăm sóc khách hàng", "tổng đài", "hỗ trợ", "customer service", "dịch vụ"),
    ),
    (
        ScamCategory.REAL_ESTATE,
        ("bất động sản", "nhà đất", "real estate", "môi giới", "căn hộ", "chung cư"),
    ),
    (ScamCategory.INSURANCE, ("bảo hiểm", "insurance", "daichi", "prudential", "manulife")),
    # Bare "lừa" / "đảo" also match unrelated labels (e.g. "đảo" = island).
    (ScamCategory.SCAM, ("lừa đảo", "lừa", "đảo", "scam", "fraud", "đòi nợ", "lua dao")),
    # Generic spam catch-all.
    (ScamCategory.PHONE_SPAM, ("spam", "bot", "rác")),
)


def classify(raw_label: Any) -> ScamCategory:
    """Classify a free-text label into a :class:`ScamCategory`.

    Args:
        raw_label: Label from the source record (name, tag, contact type).

    Returns:
        The category of the first rule with a keyword contained in the
        normalized label, or ``ScamCategory.OTHER``.
    """
    if not raw_label or not isinstance(raw_label, str):
        return ScamCategory.OTHER

    normalized = raw_label.lower().strip()

    for category, keywords in CLASSIFICATION_RULES:
        if any(keyword in normalized for keyword in keywords):
            return category

    return ScamCategory.OTHER


def describe(category: ScamCategory | str) -> str:
    """Return the Vietnamese description for ``category``.

    Accepts enum members or their string values; anything unknown falls back
    to the ``other`` description.
    """
    try:
        member = ScamCategory(category)
    except ValueError:
        member = ScamCategory.OTHER
    return CATEGORY_DESCRIPTIONS.get(member, CATEGORY_DESCRIPTIONS[ScamCategory.OTHER])

"""
GovServe Orders Engine - Fines Catalog & Boundary Codec
=======================================================
Fines reach the system as JSON blobs (checkout form, admin edit
screen, legacy rows). They are decoded ONCE here into Fine values;
nothing past this module looks at raw dicts.

A fine is a lost report when the blob says so (`isLostReport`),
or, for legacy blobs without the flag, when its name contains one
of the configured lost-report markers.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Iterable, Sequence, Tuple, Union

from core.config.rules import PricingRules
from core.primitives.errors import ValidationError
from core.primitives.money import Money
from engines.orders.models import Fine


# ══════════════════════════════════════════════════════════════
# PREDEFINED FINES
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class CatalogFine:
    fine_id: str
    name: str
    amount_minor: int
    is_lost_report: bool = False

    def to_fine(self, currency: str) -> Fine:
        return Fine(
            name=self.name,
            amount=Money(self.amount_minor, currency),
            is_lost_report=self.is_lost_report,
        )


LOST_REPORT_FINE_ID = "fine_004"

PREDEFINED_FINES: Tuple[CatalogFine, ...] = (
    CatalogFine("fine_001", "حالة اجتماعية", 5000),
    CatalogFine("fine_002", "مهنة", 5000),
    CatalogFine("fine_003", "انتهاء", 5000),
    CatalogFine(LOST_REPORT_FINE_ID, "محضر فقد", 10000, is_lost_report=True),
    CatalogFine("fine_005", "عنوان", 5000),
    CatalogFine("fine_006", "تالف", 5000),
    CatalogFine("fine_007", "تأخير", 5000),
)

_CATALOG_BY_ID = {fine.fine_id: fine for fine in PREDEFINED_FINES}


def fines_from_catalog(fine_ids: Iterable[str], currency: str = "EGP") -> Tuple[Fine, ...]:
    """Resolve selected catalog ids to Fine values. Unknown ids are rejected."""
    resolved = []
    for fine_id in fine_ids:
        entry = _CATALOG_BY_ID.get(fine_id)
        if entry is None:
            raise ValidationError(f"Unknown fine id '{fine_id}'.")
        resolved.append(entry.to_fine(currency))
    return tuple(resolved)


# ══════════════════════════════════════════════════════════════
# BOUNDARY CODEC
# ══════════════════════════════════════════════════════════════

def is_lost_report_name(name: str, rules: PricingRules) -> bool:
    lowered = name.lower()
    return any(marker.lower() in lowered for marker in rules.lost_report_markers)


def _decode_entry(entry: dict, rules: PricingRules, currency: str) -> Fine:
    if not isinstance(entry, dict):
        raise ValidationError(f"fine entry must be an object, got {type(entry).__name__}.")
    name = entry.get("name")
    if not isinstance(name, str) or not name.strip():
        raise ValidationError("fine entry requires a non-empty 'name'.")
    amount = entry.get("amount", 0)
    if isinstance(amount, bool) or not isinstance(amount, int):
        raise ValidationError(
            f"fine '{name}' amount must be integer minor units, got {amount!r}."
        )
    flag = entry.get("isLostReport")
    if flag is None:
        flag = is_lost_report_name(name, rules)
    elif not isinstance(flag, bool):
        raise ValidationError(f"fine '{name}' isLostReport must be boolean.")
    return Fine(name=name.strip(), amount=Money(amount, currency), is_lost_report=flag)


def decode_fines(
    raw: Union[str, bytes, Sequence[dict], None],
    rules: PricingRules | None = None,
    currency: str | None = None,
) -> Tuple[Fine, ...]:
    """
    Decode a fines blob into Fine values.

    Accepts a JSON string (possibly double-encoded, as older rows
    are), an already-parsed list, or None/empty for "no fines".
    Amounts are read in `currency` (the owning order's), falling
    back to the configured default.
    """
    rules = rules or PricingRules()
    currency = currency or rules.currency
    if raw is None or raw == "" or raw == b"":
        return ()
    data = raw
    # Legacy rows store the list JSON-encoded twice.
    while isinstance(data, (str, bytes)):
        try:
            data = json.loads(data)
        except json.JSONDecodeError as exc:
            raise ValidationError(f"fines blob is not valid JSON: {exc}") from exc
    if data is None:
        return ()
    if not isinstance(data, list):
        raise ValidationError(f"fines blob must be a list, got {type(data).__name__}.")
    return tuple(_decode_entry(entry, rules, currency) for entry in data)


def encode_fines(fines: Iterable[Fine]) -> str:
    """Encode fines for storage. Always writes the explicit lost-report flag."""
    return json.dumps([fine.to_dict() for fine in fines], ensure_ascii=False)

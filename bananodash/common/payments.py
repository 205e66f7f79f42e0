"""Payment statistics derived from a BananoMiner `user_address` payload.

Mirrors what the dashboard page computes in the browser so operators can get
the same numbers from the command line. Only the `/api` JSON contract is used.
"""

from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, Field


EXPLORER_BLOCK_URL = "https://creeper.banano.cc/explorer/block/{block_hash}"
RECENT_PAYOUTS_LIMIT = 10

_OLDEST = datetime.min.replace(tzinfo=timezone.utc)


class Payout(BaseModel):
    """One payout row as shown in the "Last 10 Payouts" table."""

    created_at: str | None = None
    amount: float = 0.0
    score: float = 0.0
    work_units: float = 0.0
    block_hash: str = ""
    explorer_url: str = ""


class PaymentSummary(BaseModel):
    """Aggregates shown on the dashboard info cards."""

    wallet_name: str | None = None
    created_at: str | None = None
    total_amount: float = 0.0
    latest_work_units: float = 0.0
    latest_score: float = 0.0
    payment_count: int = 0
    recent: list[Payout] = Field(default_factory=list)


def parse_timestamp(value: Any) -> datetime | None:
    """Parse an ISO-8601 timestamp; naive values are taken as UTC."""

    if not isinstance(value, str) or not value:
        return None
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def sort_newest_first(payments: list[dict[str, Any]]) -> list[dict[str, Any]]:
    """Order payments by `created_at` descending; unparseable dates go last."""

    return sorted(
        payments,
        key=lambda p: parse_timestamp(p.get("created_at")) or _OLDEST,
        reverse=True,
    )


def _number(value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0.0
    return float(value)


def _text(value: Any) -> str | None:
    return None if value is None else str(value)


def explorer_url(block_hash: str) -> str:
    return EXPLORER_BLOCK_URL.format(block_hash=block_hash)


def _mapping(value: Any) -> dict[str, Any]:
    return value if isinstance(value, dict) else {}


def summarize_payments(data: Any, limit: int = RECENT_PAYOUTS_LIMIT) -> PaymentSummary:
    """Build the dashboard summary for one upstream payload.

    The payload shape belongs to BananoMiner, so anything that is not an
    object is read as empty and non-object payment entries are skipped.
    """

    data = _mapping(data)
    user = _mapping(data.get("user"))
    raw_payments = data.get("payments")
    if not isinstance(raw_payments, list):
        raw_payments = []
    payments = sort_newest_first([p for p in raw_payments if isinstance(p, dict)])
    newest = payments[0] if payments else {}

    recent = []
    for payment in payments[:limit]:
        block_hash = str(payment.get("block_hash") or "")
        recent.append(
            Payout(
                created_at=_text(payment.get("created_at")),
                amount=_number(payment.get("amount")),
                score=_number(payment.get("score")),
                work_units=_number(payment.get("work_units")),
                block_hash=block_hash,
                explorer_url=explorer_url(block_hash) if block_hash else "",
            )
        )

    return PaymentSummary(
        wallet_name=_text(user.get("name")),
        created_at=_text(user.get("created_at")),
        total_amount=sum(_number(p.get("amount")) for p in payments),
        latest_work_units=_number(newest.get("work_units")),
        latest_score=_number(newest.get("score")),
        payment_count=len(payments),
        recent=recent,
    )


def format_summary(summary: PaymentSummary) -> str:
    """Render a summary as plain text for terminals."""

    lines = [
        f"Wallet:            {summary.wallet_name or '-'}",
        f"Created:           {summary.created_at or '-'}",
        f"Total BAN:         {summary.total_amount:.2f} BAN",
        f"Latest work units: {summary.latest_work_units:,.0f}",
        f"Latest score:      {summary.latest_score:,.0f}",
        "",
        f"Last {len(summary.recent)} payouts:",
    ]
    for payout in summary.recent:
        lines.append(
            f"  {payout.created_at or '-':<25} {payout.amount:>10.2f} BAN"
            f"  score={payout.score:,.0f}  wus={payout.work_units:,.0f}  {payout.explorer_url}"
        )
    return "\n".join(lines)

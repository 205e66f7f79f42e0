"""Print BananoMiner payout statistics for one wallet via a running dashboard."""

import argparse
import sys

import requests

from bananodash.common.payments import format_summary, summarize_payments


def fetch_stats(base_url: str, wallet: str) -> dict:
    """POST one lookup to the dashboard's `/api` proxy and return its JSON."""

    resp = requests.post(
        f"{base_url.rstrip('/')}/api",
        json={"wallet": wallet},
        timeout=15,
    )
    try:
        payload = resp.json()
    except requests.JSONDecodeError as exc:
        raise SystemExit(f"lookup returned non-JSON body (status {resp.status_code})") from exc
    if not resp.ok or (isinstance(payload, dict) and payload.get("error")):
        message = payload.get("error") if isinstance(payload, dict) else None
        raise SystemExit(message or f"lookup failed with status {resp.status_code}")
    return payload


def main() -> None:
    """CLI entrypoint for wallet payout summaries."""

    parser = argparse.ArgumentParser(description="Summarize BananoMiner payouts for a wallet.")
    parser.add_argument("--wallet", required=True)
    parser.add_argument("--base-url", default="http://localhost:8000")
    parser.add_argument("--json", dest="as_json", action="store_true", help="Print JSON instead of text")
    args = parser.parse_args()

    summary = summarize_payments(fetch_stats(args.base_url, args.wallet))
    if args.as_json:
        sys.stdout.write(summary.model_dump_json(indent=2) + "\n")
    else:
        print(format_summary(summary))


if __name__ == "__main__":
    main()

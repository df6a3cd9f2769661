# backend/healthcarer/cli.py
"""
Command-line client for the booking API.

    healthcarer-cli init
    healthcarer-cli availability [--carer-id C] [--date YYYYMMDD]
    healthcarer-cli book C YYYYMMDD HHMM "Person Name"
    healthcarer-cli cancel C YYYYMMDD HHMM
    healthcarer-cli carers

Connectivity failures (network errors, HTTP 5xx) are retried with
exponential backoff. Booking outcomes ("already booked", "no booking")
are answers, not failures, and are printed as is.

Exit codes: 0 success, 1 rejected by the API, 2 API unreachable.
"""

import argparse
import json
import logging
import os
import sys
from typing import Optional

import httpx
from dotenv import load_dotenv
from tenacity import RetryCallState, retry, retry_if_exception_type, stop_after_attempt, wait_exponential

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "http://localhost:3000"


class ApiUnavailable(Exception):
    """API could not be reached or kept failing with 5xx."""


class _ServerError(Exception):
    def __init__(self, response: httpx.Response):
        super().__init__(f"HTTP {response.status_code}")
        self.response = response


def _log_before_sleep(retry_state: RetryCallState) -> None:
    sleep_seconds = getattr(retry_state.next_action, "sleep", None)
    exc = retry_state.outcome.exception() if retry_state.outcome else None
    logger.warning(
        "Attempt %s failed (%s), retrying in %ss",
        retry_state.attempt_number,
        exc,
        sleep_seconds,
    )


class ApiClient:
    """Synchronous client for the booking REST API."""

    def __init__(
        self,
        base_url: str = DEFAULT_API_URL,
        retry_attempts: int = 3,
        backoff_seconds: float = 1.0,
        timeout: float = 10.0,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.retry_attempts = retry_attempts
        self.backoff_seconds = backoff_seconds
        self._client = httpx.Client(base_url=self.base_url, timeout=timeout, transport=transport)

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "ApiClient":
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    def _send(self, method: str, path: str, **kwargs) -> httpx.Response:
        resp = self._client.request(method, path, **kwargs)
        if resp.status_code >= 500:
            raise _ServerError(resp)
        return resp

    def _request(self, method: str, path: str, **kwargs) -> dict:
        decorated = retry(
            retry=retry_if_exception_type((httpx.TransportError, _ServerError)),
            stop=stop_after_attempt(self.retry_attempts),
            wait=wait_exponential(multiplier=self.backoff_seconds, min=0, max=self.backoff_seconds * 8),
            before_sleep=_log_before_sleep,
            reraise=True,
        )(self._send)

        try:
            resp = decorated(method, path, **kwargs)
        except httpx.TransportError as e:
            raise ApiUnavailable(f"{method} {path}: {e}") from e
        except _ServerError as e:
            raise ApiUnavailable(f"{method} {path}: {_error_text(e.response)}") from e

        return resp.json()

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    def initialize(self) -> dict:
        return self._request("POST", "/api/initialize")

    def get_availability(self, carer_id: Optional[str] = None, date: Optional[str] = None) -> dict:
        params = {k: v for k, v in {"carer_id": carer_id, "date": date}.items() if v}
        return self._request("GET", "/api/availability", params=params)

    def book(self, carer_id: str, date: str, time_slot: str, person_name: str) -> dict:
        return self._request("POST", "/api/book", json={
            "carer_id": carer_id,
            "date": date,
            "time_slot": time_slot,
            "person_name": person_name,
        })

    def cancel(self, carer_id: str, date: str, time_slot: str) -> dict:
        return self._request("DELETE", "/api/cancel", json={
            "carer_id": carer_id,
            "date": date,
            "time_slot": time_slot,
        })

    def get_carers(self) -> dict:
        return self._request("GET", "/api/carers")


def _error_text(resp: httpx.Response) -> str:
    try:
        body = resp.json()
        return body.get("error") or body.get("message") or str(body)
    except ValueError:
        return resp.text[:200] if resp.text else f"HTTP {resp.status_code}"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="healthcarer-cli", description="Carer appointment booking client")
    parser.add_argument(
        "--base-url",
        default=os.getenv("HEALTHCARER_API_URL", DEFAULT_API_URL),
        help="API base URL (env HEALTHCARER_API_URL)",
    )
    parser.add_argument("--retries", type=int, default=3, help="Attempts on connectivity failure")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("init", help="Initialize all time slots")

    avail = sub.add_parser("availability", help="Show slots")
    avail.add_argument("--carer-id")
    avail.add_argument("--date", help="YYYYMMDD")

    book = sub.add_parser("book", help="Book a slot")
    book.add_argument("carer_id")
    book.add_argument("date", help="YYYYMMDD")
    book.add_argument("time_slot", help="HHMM")
    book.add_argument("person_name")

    cancel = sub.add_parser("cancel", help="Cancel a booking")
    cancel.add_argument("carer_id")
    cancel.add_argument("date", help="YYYYMMDD")
    cancel.add_argument("time_slot", help="HHMM")

    sub.add_parser("carers", help="List carers")
    return parser


def run(args: argparse.Namespace, client: ApiClient) -> int:
    if args.command == "init":
        result = client.initialize()
    elif args.command == "availability":
        result = client.get_availability(args.carer_id, args.date)
    elif args.command == "book":
        result = client.book(args.carer_id, args.date, args.time_slot, args.person_name)
    elif args.command == "cancel":
        result = client.cancel(args.carer_id, args.date, args.time_slot)
    else:
        result = client.get_carers()

    print(json.dumps(result, indent=2))
    return 0 if result.get("success") else 1


def main(argv: Optional[list[str]] = None) -> int:
    load_dotenv()
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s - %(message)s",
    )
    args = build_parser().parse_args(argv)

    with ApiClient(args.base_url, retry_attempts=max(1, args.retries)) as client:
        try:
            return run(args, client)
        except ApiUnavailable as e:
            logger.error(f"API unavailable: {e}")
            return 2


if __name__ == "__main__":
    sys.exit(main())

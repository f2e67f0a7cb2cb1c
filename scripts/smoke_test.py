#!/usr/bin/env python3
"""Smoke test against the live Garmin Connect service.

Uses the configured account (GC_USERNAME / GC_PASSWORD, optional GC_TOKEN_DIR
to reuse garth tokens, or .env) and runs a
handful of read-only calls through the full client stack.

Usage:
    python scripts/smoke_test.py                           # last 7 days
    python scripts/smoke_test.py --days 30 --verbose       # wider window, verbose
    python scripts/smoke_test.py --download gpx            # also fetch one export
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from collections.abc import Awaitable, Callable
from datetime import date, timedelta
from typing import Any

from garmin_connect.client import GarminConnectClient
from garmin_connect.domain.models import DownloadFormat
from garmin_connect.factory import get_client
from shared.config import settings
from shared.exceptions import GarminConnectError
from shared.logging import configure_logging

# ── Test infrastructure ─────────────────────────────────────────


class CheckResult:
    def __init__(self, name: str, passed: bool, detail: str = ""):
        self.name = name
        self.passed = passed
        self.detail = detail


class SmokeRunner:
    def __init__(self, client: GarminConnectClient, days: int, verbose: bool = False):
        self.client = client
        self.verbose = verbose
        self.end_date = date.today()
        self.start_date = self.end_date - timedelta(days=days)
        self.results: list[CheckResult] = []
        self.activity_id: int | None = None

    def _record(self, name: str, passed: bool, detail: str = "") -> CheckResult:
        result = CheckResult(name, passed, detail)
        self.results.append(result)
        status = "PASS" if passed else "FAIL"
        line = f" [{status}] {name}"
        if detail and (not passed or self.verbose):
            line += f"  ({detail})"
        print(line)
        return result

    async def _check(self, name: str, call: Callable[[], Awaitable[Any]]) -> Any:
        try:
            value = await call()
        except GarminConnectError as e:
            self._record(name, False, f"{e.title}: {e.detail}")
            return None
        self._record(name, True, _describe(value))
        return value

    # ── Individual checks ────────────────────────────────────────

    async def check_profile(self) -> None:
        await self._check("Social profile", self.client.get_social_profile)

    async def check_activities(self) -> None:
        activities = await self._check(
            f"Activities {self.start_date}..{self.end_date}",
            lambda: self.client.get_activities_by_date(self.start_date, self.end_date),
        )
        if activities:
            self.activity_id = activities[0].activity_id

    async def check_wellness(self) -> None:
        await self._check("User summary", lambda: self.client.get_user_summary(self.end_date))
        await self._check(
            "Heart rates", lambda: self.client.get_wellness_heart_rates(self.end_date)
        )
        await self._check(
            "Body composition",
            lambda: self.client.get_body_composition(self.start_date, self.end_date),
        )

    async def check_devices(self) -> None:
        await self._check("Devices", self.client.get_devices)

    async def check_download(self, fmt: DownloadFormat) -> None:
        if self.activity_id is None:
            self._record(f"Download {fmt.value}", False, "no activity in window")
            return
        activity_id = self.activity_id
        await self._check(
            f"Download {fmt.value}",
            lambda: self.client.download_activity(activity_id, fmt),
        )

    async def run_all(self, download: DownloadFormat | None) -> int:
        await self.check_profile()
        await self.check_activities()
        await self.check_wellness()
        await self.check_devices()
        if download is not None:
            await self.check_download(download)

        passed = sum(1 for r in self.results if r.passed)
        failed = len(self.results) - passed
        print(f"\n{passed}/{len(self.results)} passed")
        return failed


def _describe(value: Any) -> str:
    if isinstance(value, bytes):
        return f"{len(value)} bytes"
    if isinstance(value, list):
        return f"{len(value)} item(s)"
    return type(value).__name__


# ── Entry point ──────────────────────────────────────────────────


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Smoke test for the Garmin Connect client")
    parser.add_argument(
        "--days",
        type=int,
        default=7,
        help="Size of the activity/wellness window in days (default: 7)",
    )
    parser.add_argument(
        "--download",
        type=DownloadFormat,
        choices=list(DownloadFormat),
        default=None,
        help="Also download the newest activity in this format",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Print result details on success (default: only on failure)",
    )
    return parser.parse_args()


async def _run(args: argparse.Namespace) -> int:
    async with get_client() as client:
        runner = SmokeRunner(client, days=args.days, verbose=args.verbose)
        return await runner.run_all(args.download)


def main() -> None:
    args = parse_args()
    configure_logging(json_output=settings.log_json, level=settings.log_level)

    print("Garmin Connect Client Smoke Test")
    print(f"Target: {settings.base_url}")
    print()

    failed = asyncio.run(_run(args))
    sys.exit(failed)


if __name__ == "__main__":
    main()

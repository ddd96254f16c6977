"""Resolve availability for one option or a batch of requests read from JSON."""
from __future__ import annotations

import argparse
import asyncio
import json
import logging
from datetime import date
from pathlib import Path
from typing import Any, Dict, List

from availability_engine.availability import AvailabilityOrchestrator, AvailabilityRequest
from availability_engine.config.settings import Settings
from availability_engine.core.logging import configure_logging
from availability_engine.services.hostconnect import HostConnectClient
from availability_engine.utils.cache import MemoryTtlCache
from availability_engine.utils.throttling import gather_bounded

logger = logging.getLogger(__name__)


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Check bookability and rates for inventory options")
    parser.add_argument("--option-id", help="Option code to check")
    parser.add_argument("--start-date", type=date.fromisoformat, help="First day of the stay (YYYY-MM-DD)")
    parser.add_argument("--units", type=int, default=1, help="Stay length in charge units")
    parser.add_argument("--adults", type=int, default=2, help="Adults per room when --pax is not given")
    parser.add_argument(
        "--pax",
        type=str,
        help="JSON list of pax configs, e.g. '[{\"room_type\": \"Double\", \"adults\": 2}]'",
    )
    parser.add_argument(
        "--requests",
        type=Path,
        help="JSON file holding a list of requests; resolved concurrently",
    )
    parser.add_argument("--output", type=Path, help="Write results to this file instead of stdout")
    return parser.parse_args()


def build_requests(args: argparse.Namespace, settings: Settings) -> List[AvailabilityRequest]:
    if args.requests:
        payload = json.loads(args.requests.read_text(encoding="utf-8"))
        if isinstance(payload, dict):
            payload = [payload]
        requests = []
        for item in payload:
            item.setdefault("display_in_supplier_currency", settings.display_rate_in_supplier_currency)
            requests.append(AvailabilityRequest.from_dict(item))
        return requests
    if not args.option_id or not args.start_date:
        raise SystemExit("--option-id and --start-date are required without --requests")
    pax = json.loads(args.pax) if args.pax else [{"adults": args.adults}]
    return [
        AvailabilityRequest.from_dict(
            {
                "option_id": args.option_id,
                "start_date": args.start_date.isoformat(),
                "duration_units": args.units,
                "pax_configs": pax,
                "display_in_supplier_currency": settings.display_rate_in_supplier_currency,
            }
        )
    ]


async def run(args: argparse.Namespace, settings: Settings) -> List[Dict[str, Any]]:
    requests = build_requests(args, settings)
    config = settings.custom_rate_config()
    async with HostConnectClient(
        endpoint=settings.hostconnect_endpoint,
        agent_id=settings.agent_id,
        agent_password=settings.agent_password,
        timeout=settings.request_timeout_s,
    ) as client:
        orchestrator = AvailabilityOrchestrator.from_transport(
            client,
            cache=MemoryTtlCache(),
            agent_currency_ttl_s=settings.agent_currency_cache_ttl_s,
        )
        results = await gather_bounded(
            (orchestrator.resolve_availability(request, config) for request in requests),
            limit=settings.max_concurrent_requests,
        )
    logger.info("Resolved %s request(s)", len(results))
    return [
        {"option_id": request.option_id, "start_date": request.start_date.isoformat(), **result.to_dict()}
        for request, result in zip(requests, results)
    ]


def main() -> None:
    args = parse_args()
    settings = Settings()
    configure_logging(settings.log_level, settings.log_dir)
    output = asyncio.run(run(args, settings))
    text = json.dumps(output, indent=2)
    if args.output:
        args.output.parent.mkdir(parents=True, exist_ok=True)
        args.output.write_text(text, encoding="utf-8")
        logger.info("Wrote %s", args.output)
    else:
        print(text)


if __name__ == "__main__":
    main()

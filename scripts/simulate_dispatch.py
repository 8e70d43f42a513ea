#!/usr/bin/env python3
"""
simulate_dispatch.py
Drive one roadside job through the dispatch engine in-process and print
every notification it publishes.

Examples:
  # Car tube patch at the default location, technician online
  python scripts/simulate_dispatch.py --vehicle CAR --service TUBE_PATCH

  # Technician offline: the offer timer discards the job
  python scripts/simulate_dispatch.py --offline -v

  # Faster run, write the event log to a file
  python scripts/simulate_dispatch.py --offer-delay 0.5 --tick 0.1 -o events.json
"""

import sys
import json
import asyncio
import logging
import argparse
from typing import Any, Dict, List, Optional

from dispatch.core.config import Settings
from dispatch.models.event import EventType
from dispatch.models.job import JobEvent, JobStatus, ServiceType, VehicleType
from dispatch.services.dispatch_engine import DispatchEngine

# ---------- Logging ----------
def setup_logging(verbosity: int) -> None:
    level = logging.WARNING if verbosity == 0 else logging.INFO if verbosity == 1 else logging.DEBUG
    logging.basicConfig(level=level, format="%(levelname)s: %(message)s")

log = logging.getLogger("simulate_dispatch")

# ---------- Output ----------
def save_json(obj: List[Dict[str, Any]], out_path: Optional[str]) -> None:
    if not out_path:
        print(json.dumps(obj, indent=2, ensure_ascii=False))
        return
    with open(out_path, "w", encoding="utf-8") as f:
        json.dump(obj, f, indent=2, ensure_ascii=False)
    log.info("Saved %s", out_path)

# ---------- Simulation ----------
async def wait_for_status(engine: DispatchEngine, job_id: str, status: JobStatus, timeout: float) -> bool:
    """Poll until the active job reaches `status` or leaves the slot"""
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout
    while loop.time() < deadline:
        job = engine.active_job
        if job is None or job.id != job_id:
            return False
        if job.status == status:
            return True
        await asyncio.sleep(0.05)
    return False

async def drive_job(engine: DispatchEngine, args) -> None:
    job = await engine.create_job(
        ServiceType(args.service), VehicleType(args.vehicle), lat=args.lat, lng=args.lng
    )
    log.info("Created %s, price=%s, otp=%s", job.id, job.price, job.otp)

    offered = await wait_for_status(engine, job.id, JobStatus.OFFERED, args.offer_delay + 2)
    if not offered:
        log.warning("Job %s was not offered", job.id)
        return

    await engine.update_status(job.id, JobEvent.ACCEPT)

    # Let the technician approach for a few ticks
    for _ in range(args.ticks):
        await asyncio.sleep(args.tick)
        snapshot = engine.tracking_snapshot()
        if snapshot:
            log.info("Technician %.2f km away, ETA %s min", snapshot.distance_km, snapshot.eta_minutes)

    await engine.update_status(job.id, JobEvent.ARRIVE)
    await engine.update_status(job.id, JobEvent.START)
    await engine.update_status(job.id, JobEvent.COMPLETE, otp=job.otp)
    log.info("Job %s completed, history size %d", job.id, len(engine.history))

def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Run one roadside job through the dispatch engine."
    )
    parser.add_argument("--service", choices=[s.value for s in ServiceType], default=ServiceType.TUBE_PATCH.value, help="Requested repair.")
    parser.add_argument("--vehicle", choices=[v.value for v in VehicleType], default=VehicleType.CAR.value, help="Customer vehicle.")
    parser.add_argument("--lat", type=float, default=None, help="Service latitude (default location when omitted).")
    parser.add_argument("--lng", type=float, default=None, help="Service longitude (default location when omitted).")
    parser.add_argument("--offline", action="store_true", help="Keep the technician offline.")
    parser.add_argument("--offer-delay", type=float, default=3.0, help="Seconds before the offer decision.")
    parser.add_argument("--tick", type=float, default=1.0, help="Seconds between tracker ticks.")
    parser.add_argument("--ticks", type=int, default=5, help="Ticks to observe while en route.")

    # Output + verbosity
    parser.add_argument("-o", "--out", help="Path to write the event log (default: print to stdout).")
    parser.add_argument("-v", "--verbose", action="count", default=0, help="-v for INFO, -vv for DEBUG.")
    return parser

async def run(args):
    setup_logging(args.verbose)

    config = Settings(offer_delay_seconds=args.offer_delay, tick_interval_seconds=args.tick)
    engine = DispatchEngine(config)
    queue = engine.events.subscribe()

    try:
        await engine.set_technician_online(not args.offline)
        await drive_job(engine, args)
    finally:
        await engine.shutdown()

    events = []
    while not queue.empty():
        event = queue.get_nowait()
        events.append(json.loads(event.model_dump_json()))
        if event.type == EventType.NO_TECHNICIAN_FOUND:
            log.warning(event.message)
    save_json(events, args.out)

def main():
    parser = build_arg_parser()
    args = parser.parse_args()
    try:
        asyncio.run(run(args))
    except KeyboardInterrupt:
        print("\nInterrupted.")
    except Exception as e:
        log.exception("Fatal error: %s", e)
        sys.exit(1)

if __name__ == "__main__":
    main()

"""CLI entry point: python main.py capture.jsonl

Replays a JSON-lines capture through the full pipeline. Each line is
``{"source": "twitter", "payload": {...}}``. Launches go to the dry-run
executor, so nothing leaves the process except configured alerts.
"""

import argparse
import asyncio
import json
import sys
from dataclasses import replace

from launchgate.ingestion import SourceType
from launchgate.launch import DryRunLaunchExecutor
from launchgate.logging_config import LogFormat, LogLevel, configure_logging
from launchgate.service import LaunchGateService
from launchgate.settings import get_settings


def read_capture(path: str) -> list[tuple[str, dict]]:
    records = []
    with open(path, encoding="utf-8") as fh:
        for line_no, line in enumerate(fh, start=1):
            line = line.strip()
            if not line:
                continue
            try:
                record = json.loads(line)
            except json.JSONDecodeError as e:
                print(f"  Skipping line {line_no}: {e}", file=sys.stderr)
                continue
            if not isinstance(record, dict) or "source" not in record:
                print(f"  Skipping line {line_no}: missing 'source'", file=sys.stderr)
                continue
            records.append((record["source"], record.get("payload", {})))
    return records


async def replay(records: list[tuple[str, dict]], manual: bool) -> dict:
    settings = get_settings()
    if manual:
        settings = settings.model_copy(update={"auto_launch": False})
    executor = DryRunLaunchExecutor()
    service = LaunchGateService.from_settings(settings, executor)

    await service.start()
    for source, payload in records:
        await service.intake(source, payload)
    await service.stop()

    status = service.status()
    status["dry_run_launches"] = [r.ticker for r in executor.requests]
    return status


def main():
    parser = argparse.ArgumentParser(
        description="LaunchGate - replay captured social signals through the launch pipeline"
    )
    parser.add_argument("capture", help="JSON-lines file of {source, payload} records")
    parser.add_argument(
        "--manual", action="store_true",
        help="Hold policy-approved candidates instead of launching them"
    )
    parser.add_argument(
        "--verbose", action="store_true",
        help="Debug-level console logging"
    )
    args = parser.parse_args()

    settings = get_settings()
    log_config = settings.logging_config()
    if args.verbose:
        log_config = replace(log_config, level=LogLevel.DEBUG, format=LogFormat.CONSOLE)
    configure_logging(log_config)

    records = read_capture(args.capture)
    print("=" * 60)
    print("LAUNCHGATE - CAPTURE REPLAY")
    print(f"Records: {len(records)}")
    print("=" * 60)

    sources = {s.value for s in SourceType}
    unknown = sorted({src for src, _ in records if src not in sources})
    if unknown:
        print(f"Unknown sources in capture: {', '.join(unknown)}", file=sys.stderr)
        return 2

    status = asyncio.run(replay(records, args.manual))

    print("\nCandidates by status:")
    for name, count in sorted(status["twitter"]["candidates"].items()):
        print(f"  {name:<20} {count}")
    alpha = status["alpha"]
    print(f"\nAlpha signals: {alpha['total_processed']} processed, "
          f"{alpha['filtered']} filtered, {alpha['high_priority']} high priority")
    print(f"Dry-run launches: {', '.join(status['dry_run_launches']) or 'none'}")
    return 0


if __name__ == "__main__":
    sys.exit(main())

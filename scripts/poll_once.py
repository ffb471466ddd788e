#!/usr/bin/env python3
"""Run a single live OilFox poll cycle and print the reconciled tree.

Credentials come from ``OILFOX_EMAIL`` / ``OILFOX_PASSWORD`` (plus the
optional ``OILFOX_*`` variables understood by ``OilFoxConfig.from_env``).
The token and the named-value tree are kept in JSON files so repeated
runs exercise the idempotent reconciliation against persisted state.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path

_repo = Path(__file__).resolve().parent.parent
_src = _repo / "src"
if _src.is_dir():
    sys.path.insert(0, str(_src))

from pyoilfox import (  # noqa: E402
    FileTokenStore,
    JsonFileNamedValueStore,
    OilFoxClient,
    OilFoxConfig,
    OilFoxError,
    StatusRecorder,
    SyncEngine,
)


def _parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run one live OilFox synchronization cycle")
    parser.add_argument(
        "--schema",
        choices=("v1", "v2"),
        default=None,
        help="Summary schema generation. Defaults to OILFOX_SCHEMA_VERSION or v1.",
    )
    parser.add_argument(
        "--state-dir",
        type=Path,
        default=Path(".oilfox"),
        help="Directory for token.json and values.json (default: ./.oilfox).",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable DEBUG logging (secrets are redacted).",
    )
    return parser.parse_args()


async def _run(args: argparse.Namespace) -> int:
    overrides = {"schema_version": args.schema} if args.schema else {}
    try:
        config = OilFoxConfig.from_env(**overrides)
    except OilFoxError as exc:
        print(f"Invalid configuration: {exc}")
        return 2

    if not config.credentials.is_complete:
        print("Set OILFOX_EMAIL and OILFOX_PASSWORD")
        return 2

    store = JsonFileNamedValueStore(args.state_dir / "values.json")
    status = StatusRecorder()

    async with OilFoxClient(config) as client:
        engine = SyncEngine(
            client,
            token_store=FileTokenStore(args.state_dir / "token.json"),
            sink=store,
            status=status,
        )
        result = await engine.run_once()

    print(f"Outcome: {result.outcome.value} (stage={result.stage.value}, status={status.status})")
    if result.error is not None:
        print(f"Error: {result.error}")
        return 1

    tree = {
        f"{group.label} [{group.external_id}]": store.as_dict(group.handle)
        for group in store.groups()
        if group.parent_scope == config.parent_scope
    }
    print(json.dumps(tree, indent=2, ensure_ascii=False))
    return 0


def main() -> int:
    args = _parse_args()
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO)
    return asyncio.run(_run(args))


if __name__ == "__main__":
    raise SystemExit(main())

"""Device summary endpoint.

Endpoints:
  - GET /v3/user/summary  (older schema, nested ``chartData``)
  - GET /v4/summary       (newer schema, flattened ``lastMetering``)
"""

from __future__ import annotations

from typing import Any

from pyoilfox._constants import SUMMARY_PATH, SchemaVersion
from pyoilfox._transport import Transport


async def fetch_summary(transport: Transport, token: str, schema_version: SchemaVersion) -> Any:
    """Fetch the raw summary JSON for *schema_version*."""
    return await transport.get_json(SUMMARY_PATH[schema_version], token)

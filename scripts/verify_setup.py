"""Verify the Sourcegraph endpoint and credential by reading the first events of a stream."""

from __future__ import annotations

import asyncio
import sys
from contextlib import aclosing

from sgstream.client import SourcegraphClient
from sgstream.config import get_settings
from sgstream.models.schemas import SearchOptions
from sgstream.utils.exceptions import ConfigurationError, TransportError


async def check_credentials() -> bool:
    settings = get_settings()
    try:
        SourcegraphClient.from_settings(settings)
    except ConfigurationError as exc:
        print(f"[FAIL] Credentials: {exc} (set SRC_ACCESS_TOKEN or SRC_OAUTH_TOKEN)")
        return False
    kind = "access token" if settings.SRC_ACCESS_TOKEN else "OAuth token"
    print(f"[OK] Credentials: using {kind}")
    return True


async def check_stream() -> bool:
    settings = get_settings()
    try:
        client = SourcegraphClient.from_settings(settings)
    except ConfigurationError:
        print("[SKIP] Stream: no usable credentials")
        return False

    try:
        async with aclosing(client.raw("count:1 type:repo", SearchOptions(version="V3", display_limit=1))) as events:
            async for event in events:
                print(f"[OK] Stream at {settings.SRC_ENDPOINT}: first event '{event.event}'")
                return True
        print(f"[WARN] Stream at {settings.SRC_ENDPOINT}: opened but no events received")
        return True
    except TransportError as exc:
        print(f"[FAIL] Stream: {exc}")
        return False


async def main() -> None:
    print("=" * 50)
    print("sgstream — Setup Verification")
    print("=" * 50)

    results = [await check_credentials(), await check_stream()]

    print("=" * 50)
    passed = sum(results)
    total = len(results)
    print(f"Results: {passed}/{total} checks passed")
    if not all(results):
        print("Some checks failed. Review output above.")
        sys.exit(1)
    print("All systems operational.")


if __name__ == "__main__":
    asyncio.run(main())

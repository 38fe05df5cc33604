"""
Warm the district cache from CLI.

    python -m scripts.warm_cache
    python -m scripts.warm_cache --district PUNE
    python -m scripts.warm_cache --clear
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
from typing import Any, Sequence

from app.config import get_dataset_settings, get_logging_settings
from app.connectors.dataset_source import DatasetLoadError
from app.services.district_data_service import (
    DistrictDataService,
    DistrictNotFoundError,
    build_district_data_service,
)

logger = logging.getLogger(__name__)


async def warm(
    service: DistrictDataService,
    state_name: str,
    *,
    district: str | None = None,
    clear: bool = False,
) -> dict[str, Any]:
    """
    Populate the district list, state summary and one or every district record.
    """

    if clear:
        service.clear_cache()

    names = await service.get_district_list(state_name)
    summary = await service.get_state_data(state_name)
    targets = [district] if district else names
    for name in targets:
        await service.get_district_data(state_name, name)

    return {
        "state": state_name,
        "cleared": clear,
        "district_count": summary.district_count,
        "districts_warmed": targets,
        "cache_entries": len(service.cache.keys()),
    }


def main(argv: Sequence[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Load the district dataset through the cache.")
    parser.add_argument(
        "--district",
        dest="district",
        default=None,
        help="Optional single district to warm; all districts when omitted.",
    )
    parser.add_argument(
        "--clear",
        action="store_true",
        help="Drop every cache entry before warming.",
    )
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, get_logging_settings().level, logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    service = build_district_data_service()
    state_name = get_dataset_settings().state_name
    try:
        payload = asyncio.run(warm(service, state_name, district=args.district, clear=args.clear))
    except DistrictNotFoundError as exc:
        print(json.dumps({"error": str(exc)}, indent=2))
        return 2
    except DatasetLoadError as exc:
        logger.error("Cache warm-up failed: %s", exc)
        print(json.dumps({"error": str(exc)}, indent=2))
        return 1

    print(json.dumps(payload, indent=2))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

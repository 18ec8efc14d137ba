import argparse
import asyncio
import os
import sys

# Add project root to path
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from langlink.config.constants import (
    CACHE_RECORD,
    CACHE_SEQUENCE_RECORD,
    HISTORY_RECORD,
    METRICS_RECORD,
    PREFERENCES_RECORD,
)
from langlink.config.redis import close_redis, create_redis
from langlink.config.settings import get_settings
from langlink.services.core.storage import RecordStore

RECORDS = {
    "cache": (CACHE_RECORD, CACHE_SEQUENCE_RECORD),
    "history": (HISTORY_RECORD,),
    "metrics": (METRICS_RECORD,),
    "preferences": (PREFERENCES_RECORD,),
}


async def clear_state(names):
    settings = get_settings()
    redis = create_redis(settings)
    store = RecordStore(redis, prefix=settings.STORAGE_KEY_PREFIX)
    try:
        for name in names:
            print(f"🧹 Clearing {name}...")
            await store.delete(*RECORDS[name])
        print("✅ Done.")
    finally:
        await close_redis(redis)


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Delete persisted LangLink records from Redis")
    parser.add_argument("records", nargs="*", help=f"records to clear: {', '.join(sorted(RECORDS))} (default: all)")
    args = parser.parse_args()
    unknown = set(args.records) - set(RECORDS)
    if unknown:
        parser.error(f"unknown records: {', '.join(sorted(unknown))}")
    asyncio.run(clear_state(args.records or sorted(RECORDS)))

from __future__ import annotations
import asyncio
from streakzz.db import SessionLocal
from streakzz.schemas.admin import CleanupResult
from streakzz.services.participants import cleanup_inactive_participants

async def run_cleanup() -> CleanupResult:
    async with SessionLocal() as session:
        return await cleanup_inactive_participants(session)

def cleanup_participants() -> CleanupResult:
    # CLI / cron entry point (sync)
    return asyncio.run(run_cleanup())

if __name__ == "__main__":
    from streakzz.logging_setup import configure_logging
    configure_logging()
    print(cleanup_participants().message)

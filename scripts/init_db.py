"""
Database initialization script

Run once (the app also does this on startup) to create the users indexes:
    python scripts/init_db.py
"""

import asyncio
import sys
from pathlib import Path
from dotenv import load_dotenv

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

# Load environment variables
load_dotenv()

import logging

from aadhaar_auth.core.config import load_settings, validate_settings
from aadhaar_auth.db.indexes import create_indexes
from aadhaar_auth.db.mongo import MongoDatabase

logging.basicConfig(level=logging.INFO, format='%(levelname)s: %(message)s')
logger = logging.getLogger(__name__)


async def main():
    settings = load_settings()
    validate_settings(settings)

    db = MongoDatabase.from_settings(settings)
    await db.connect()

    try:
        await create_indexes(db)

        indexes = await db.users.index_information()
        logger.info("users indexes:")
        for idx_name in indexes.keys():
            if idx_name != "_id_":
                logger.info(f"  {idx_name}")

        logger.info(f"Users: {await db.users.count_documents({})}")

    finally:
        await db.close()


if __name__ == "__main__":
    asyncio.run(main())

"""MongoDB client lifecycle.

The client is created once by the application lifespan and closed on
shutdown; repositories receive a Database handle through dependency injection.
"""

import os
import logging
from pymongo import MongoClient
from pymongo.errors import ConnectionFailure, PyMongoError

logger = logging.getLogger(__name__)

# Set pymongo logger to WARNING to reduce noise from driver-level logs
pymongo_logger = logging.getLogger('pymongo')
pymongo_logger.setLevel(logging.WARNING)

MONGO_URL = os.getenv('MONGO_URL')
DATABASE_NAME = os.getenv('MONGODB_DATABASE', 'tasklist')


def create_mongodb_client(url: str | None = None) -> MongoClient | None:
    """Open a MongoDB client and verify it with a ping.

    Returns:
        MongoDB client or None if the URL is missing or the server is unreachable
    """
    url = url or MONGO_URL
    if not url:
        logger.error("[MONGODB] MONGO_URL not configured.")
        return None

    try:
        client = MongoClient(
            url,
            tz_aware=True,  # Return timezone-aware UTC datetimes
            serverSelectionTimeoutMS=5000,
            connectTimeoutMS=5000,
            socketTimeoutMS=30000,
            maxPoolSize=10,
            minPoolSize=0,
            maxIdleTimeMS=30000,
            waitQueueTimeoutMS=10000,
            retryWrites=True,
            retryReads=True,
        )
        client.admin.command('ping')
        logger.info(f"[MONGODB] Connected successfully to {DATABASE_NAME}")
        return client
    except (ConnectionFailure, PyMongoError) as e:
        logger.error(f"[MONGODB] Initial connection failed: {str(e)[:200]}")
        return None


def close_mongodb_client(client: MongoClient | None) -> None:
    """Close the client opened at startup. Safe to call with None."""
    if client is None:
        return
    client.close()
    logger.info("[MONGODB] Connection closed")

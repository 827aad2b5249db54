"""
PostgreSQL database connections

Centralizes every way the application opens a connection:
- psycopg2 connections returning tuples (health checks, DDL)
- psycopg2 connections with RealDictCursor (repositories, API responses)

Every connection is opened with retry logic so a brief database restart
does not surface as a failed request.
"""
import time
import logging

import psycopg2
from psycopg2.extras import RealDictCursor

from .config import settings


logger = logging.getLogger(__name__)

# Seconds psycopg2 waits for the server before giving up on one attempt
CONNECTION_TIMEOUT = 10


def _get_database_url() -> str:
    database_url = settings.DATABASE_URL
    if not database_url:
        raise Exception("DATABASE_URL not configured")
    return database_url


def _connect_with_retry(cursor_factory=None, max_retries=3, retry_delay=1.0):
    """
    Open a psycopg2 connection, retrying on OperationalError

    Args:
        cursor_factory: Optional psycopg2 cursor factory (e.g. RealDictCursor)
        max_retries: Maximum number of connection attempts (default: 3)
        retry_delay: Initial delay between retries in seconds (default: 1.0)

    Returns:
        psycopg2 connection object

    Raises:
        psycopg2.OperationalError: If all retry attempts fail
    """
    database_url = _get_database_url()
    last_error = None

    for attempt in range(1, max_retries + 1):
        try:
            logger.debug(f"Database connection attempt {attempt}/{max_retries}")
            conn = psycopg2.connect(
                database_url,
                cursor_factory=cursor_factory,
                connect_timeout=CONNECTION_TIMEOUT
            )

            # Test connection with a simple query
            cursor = conn.cursor()
            cursor.execute("SELECT 1")
            cursor.close()

            logger.debug(f"Database connection successful on attempt {attempt}")
            return conn

        except psycopg2.OperationalError as e:
            last_error = e
            logger.warning(f"Connection error on attempt {attempt}/{max_retries}: {e}")

            # Don't retry on last attempt
            if attempt < max_retries:
                # Exponential backoff
                delay = retry_delay * (2 ** (attempt - 1))
                logger.info(f"Retrying in {delay:.2f} seconds...")
                time.sleep(delay)
            else:
                logger.error(f"All {max_retries} connection attempts failed")
                raise

    raise last_error if last_error else Exception("Connection failed after all retries")


def get_db_connection_with_retry(max_retries=3, retry_delay=1.0):
    """
    Get a psycopg2 connection (tuple rows) with automatic retry

    Example:
        conn = get_db_connection_with_retry()
        cursor = conn.cursor()
        cursor.execute("SELECT 1")
        cursor.close()
        conn.close()
    """
    return _connect_with_retry(max_retries=max_retries, retry_delay=retry_delay)


def get_db_connection_dict_with_retry(max_retries=3, retry_delay=1.0):
    """
    Get a psycopg2 connection with RealDictCursor and automatic retry

    Same as get_db_connection_with_retry but rows come back as dicts,
    which is what the repositories and JSON responses expect.
    """
    return _connect_with_retry(
        cursor_factory=RealDictCursor,
        max_retries=max_retries,
        retry_delay=retry_delay
    )


def get_db_connection_dict():
    """
    Get a database connection with RealDictCursor (returns dictionaries)

    Repositories call this once per operation and close the connection
    in a finally block.
    """
    return get_db_connection_dict_with_retry()

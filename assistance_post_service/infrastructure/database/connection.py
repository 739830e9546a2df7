"""
Database connection and utilities
"""
import asyncpg
from typing import Optional, List
import logging

from ...config import settings

logger = logging.getLogger(__name__)


SCHEMA_STATEMENTS = [
    """
    CREATE TABLE IF NOT EXISTS members (
        id BIGSERIAL PRIMARY KEY,
        name VARCHAR(100) NOT NULL,
        nickname VARCHAR(100),
        email VARCHAR(255) NOT NULL,
        profile_image_url TEXT,
        age INTEGER,
        gender VARCHAR(20),
        disability_type VARCHAR(30),
        created_at TIMESTAMP DEFAULT NOW()
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS posts (
        id BIGSERIAL PRIMARY KEY,
        author_id BIGINT NOT NULL REFERENCES members (id),
        title VARCHAR(255) NOT NULL,
        assistance_type VARCHAR(30) NOT NULL,
        start_time TIMESTAMP NOT NULL,
        end_time TIMESTAMP NOT NULL,
        schedule_type VARCHAR(30) NOT NULL,
        schedule_details TEXT,
        district VARCHAR(30) NOT NULL,
        content TEXT NOT NULL,
        post_type VARCHAR(20) NOT NULL,
        disability_type VARCHAR(30),
        created_at TIMESTAMP NOT NULL DEFAULT NOW(),
        modified_at TIMESTAMP NOT NULL DEFAULT NOW()
    )
    """,
    """
    CREATE INDEX IF NOT EXISTS idx_posts_created_at
    ON posts (created_at)
    """,
    """
    CREATE INDEX IF NOT EXISTS idx_posts_type_created_at
    ON posts (post_type, created_at)
    """,
    # No foreign key to posts: matchings outlive deleted posts
    """
    CREATE TABLE IF NOT EXISTS matchings (
        id BIGSERIAL PRIMARY KEY,
        post_id BIGINT NOT NULL,
        matching_status VARCHAR(20) NOT NULL,
        created_at TIMESTAMP DEFAULT NOW()
    )
    """,
    """
    CREATE INDEX IF NOT EXISTS idx_matchings_post
    ON matchings (post_id)
    """,
]


class ConnectionSession:
    """Query helpers bound to one acquired connection"""

    def __init__(self, conn: asyncpg.Connection):
        self.conn = conn

    async def fetch_one(self, query: str, *args) -> Optional[asyncpg.Record]:
        """Fetch a single row"""
        return await self.conn.fetchrow(query, *args)

    async def fetch_all(self, query: str, *args) -> List[asyncpg.Record]:
        """Fetch all rows"""
        return await self.conn.fetch(query, *args)

    async def fetch_value(self, query: str, *args):
        """Fetch the first column of the first row"""
        return await self.conn.fetchval(query, *args)

    async def execute(self, query: str, *args) -> str:
        """Execute a query without returning results"""
        return await self.conn.execute(query, *args)


class DatabaseConnection:
    """Database connection manager"""

    def __init__(self):
        self.pool: Optional[asyncpg.Pool] = None

    async def connect(self):
        """Create database connection pool"""
        try:
            self.pool = await asyncpg.create_pool(
                settings.DATABASE_URL,
                min_size=1,
                max_size=settings.DB_POOL_SIZE,
                command_timeout=settings.DB_COMMAND_TIMEOUT,
            )
            logger.info(f"Database pool created with size {settings.DB_POOL_SIZE}")

            if settings.DB_INIT_SCHEMA:
                await self._init_schema()
        except Exception as e:
            logger.error(f"Failed to connect to database: {e}")
            raise

    async def disconnect(self):
        """Close database connection pool"""
        if self.pool:
            await self.pool.close()
            self.pool = None
            logger.info("Database pool closed")

    async def _init_schema(self):
        """Initialize database schema"""
        async with self.pool.acquire() as conn:
            for statement in SCHEMA_STATEMENTS:
                await conn.execute(statement)

        logger.info("Database schema initialized successfully")

    async def acquire(self) -> asyncpg.Connection:
        """Take a connection out of the pool"""
        if not self.pool:
            raise RuntimeError("Database pool is not initialized")
        return await self.pool.acquire()

    async def release(self, conn: asyncpg.Connection) -> None:
        """Give a connection back to the pool"""
        await self.pool.release(conn)


# Global database instance
db_connection = DatabaseConnection()


async def get_db_connection() -> DatabaseConnection:
    """Dependency for getting database connection"""
    return db_connection

"""
Redis Configuration

Configures Redis connection settings and provides a factory function
for the client used by the Redis metadata backend.
"""

import os
from typing import Optional

import redis


class RedisConfig:
    """Redis configuration settings."""

    def __init__(self):
        self.host = os.getenv("REDIS_HOST", "localhost")
        self.port = int(os.getenv("REDIS_PORT", 6379))
        self.db = int(os.getenv("REDIS_DB", 0))
        self.password = os.getenv("REDIS_PASSWORD")
        self.max_connections = int(os.getenv("REDIS_MAX_CONNECTIONS", 20))
        self.key_prefix = os.getenv("REDIS_KEY_PREFIX", "file_info")

        # Redis URL format: redis://[:password@]host:port/db
        self.url = os.getenv("REDIS_URL")
        if self.url:
            connection_params = redis.connection.parse_url(self.url)
            self.host = connection_params.get("host", self.host)
            self.port = connection_params.get("port", self.port)
            self.db = connection_params.get("db", self.db)
            self.password = connection_params.get("password", self.password)


def create_redis_client(config: Optional[RedisConfig] = None) -> redis.Redis:
    """
    Create a pooled Redis client.

    Args:
        config: Redis configuration, uses default if None

    Returns:
        Redis client
    """
    if config is None:
        config = RedisConfig()

    connection_kwargs = {
        "host": config.host,
        "port": config.port,
        "db": config.db,
        "max_connections": config.max_connections,
    }
    if config.password:
        connection_kwargs["password"] = config.password

    pool = redis.ConnectionPool(**connection_kwargs)
    return redis.Redis(connection_pool=pool)

"""PostgreSQL access for the MindCare stores.

One ThreadedConnectionPool per process, shared by Flask's request
threads. Credentials come from DB_* variables locally, or from an AWS
Secrets Manager secret when DB_SECRET_ARN is set. Any failure to reach
the database is reported as StoreUnavailableError so the HTTP layer can
answer with its "not ready" response.
"""
import json
import logging
import os
import threading
import time
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Dict, Iterator, Optional

import boto3
import psycopg2
from psycopg2 import pool

from mindcare.shared.errors import StoreUnavailableError

logger = logging.getLogger(__name__)


def database_enabled() -> bool:
    """Whether repositories should use PostgreSQL instead of memory."""
    return os.getenv("DATABASE_ENABLED", "false").lower() == "true"


@dataclass(frozen=True)
class DatabaseConfig:
    """Where the risk and alert tables live and how big the pool is."""
    host: str
    port: int = 5432
    database: str = "mindcare"
    username: str = ""
    password: str = ""
    min_connections: int = 1
    max_connections: int = 10
    connect_timeout: int = 10
    ssl_mode: str = "prefer"

    @classmethod
    def from_env(cls) -> "DatabaseConfig":
        """Read DB_HOST, DB_PORT, DB_NAME, DB_USER, DB_PASSWORD,
        DB_MIN_CONN, DB_MAX_CONN and DB_SSL_MODE.
        """
        env = os.environ
        return cls(
            host=env.get("DB_HOST", "localhost"),
            port=int(env.get("DB_PORT", "5432")),
            database=env.get("DB_NAME", "mindcare"),
            username=env.get("DB_USER", ""),
            password=env.get("DB_PASSWORD", ""),
            min_connections=int(env.get("DB_MIN_CONN", "1")),
            max_connections=int(env.get("DB_MAX_CONN", "10")),
            ssl_mode=env.get("DB_SSL_MODE", "prefer"),
        )

    @classmethod
    def from_secrets_manager(cls, secret_arn: str, region: str = "us-east-1") -> "DatabaseConfig":
        """Build the config from an RDS-style JSON secret.

        The secret carries host, port, dbname, username and password;
        missing location fields fall back to the DB_* variables and pool
        sizing always comes from the environment.
        """
        try:
            secrets = boto3.client("secretsmanager", region_name=region)
            payload = secrets.get_secret_value(SecretId=secret_arn)["SecretString"]
            secret = json.loads(payload)
        except Exception as e:
            logger.error(
                "DB_SECRET_LOAD_FAILED",
                extra={"error": str(e), "secret_arn": secret_arn}
            )
            raise

        base = cls.from_env()
        return cls(
            host=secret.get("host", base.host),
            port=int(secret.get("port", base.port)),
            database=secret.get("dbname", base.database),
            username=secret.get("username", ""),
            password=secret.get("password", ""),
            min_connections=base.min_connections,
            max_connections=base.max_connections,
            ssl_mode=base.ssl_mode,
        )


def _pool_kwargs(config: DatabaseConfig) -> Dict[str, Any]:
    return {
        "minconn": config.min_connections,
        "maxconn": config.max_connections,
        "host": config.host,
        "port": config.port,
        "database": config.database,
        "user": config.username,
        "password": config.password,
        "connect_timeout": config.connect_timeout,
        "sslmode": config.ssl_mode,
    }


class ConnectionManager:
    """Lazily opened pool with checkout/return and a readiness probe."""

    def __init__(self, config: DatabaseConfig):
        self.config = config
        self._pool: Optional[pool.ThreadedConnectionPool] = None
        self._initialized = False
        self._lock = threading.Lock()

        logger.info(
            "DB_MANAGER_CONFIGURED",
            extra={
                "host": config.host,
                "database": config.database,
                "pool_size": f"{config.min_connections}-{config.max_connections}",
            }
        )

    def initialize(self) -> None:
        """Open the pool if it is not open yet.

        Concurrent first callers share one pool.

        Raises:
            StoreUnavailableError: If the database refuses connections
        """
        if self._initialized:
            return

        with self._lock:
            if self._initialized:
                return

            try:
                self._pool = pool.ThreadedConnectionPool(**_pool_kwargs(self.config))
            except psycopg2.OperationalError as e:
                logger.error(
                    "DB_POOL_OPEN_FAILED",
                    extra={"error": str(e), "host": self.config.host}
                )
                raise StoreUnavailableError("Database not available") from e

            self._initialized = True

        logger.info("DB_POOL_OPENED", extra={"host": self.config.host})

    @contextmanager
    def get_connection(self) -> Iterator[Any]:
        """Check a connection out of the pool for one unit of work.

        The connection is rolled back if the block raises and is always
        returned to the pool.

        Raises:
            StoreUnavailableError: If no connection can be checked out
        """
        self.initialize()

        try:
            conn = self._pool.getconn()
        except (pool.PoolError, psycopg2.OperationalError) as e:
            logger.error("DB_CHECKOUT_FAILED", extra={"error": str(e)})
            raise StoreUnavailableError("Database not available") from e

        try:
            yield conn
        except Exception:
            conn.rollback()
            raise
        finally:
            self._pool.putconn(conn)

    def health_check(self) -> Dict[str, Any]:
        """Round-trip a trivial query for the /ready probes.

        Error details go to the log only.
        """
        if not self._initialized:
            return {"status": "not_initialized", "healthy": False}

        started = time.monotonic()
        try:
            with self.get_connection() as conn:
                with conn.cursor() as cur:
                    cur.execute("SELECT 1")
                    cur.fetchone()
        except Exception as e:
            logger.error("DB_HEALTH_CHECK_FAILED", extra={"error": str(e)})
            return {"status": "error", "healthy": False}

        return {
            "status": "connected",
            "healthy": True,
            "latency_ms": round((time.monotonic() - started) * 1000, 1),
        }

    def close(self) -> None:
        """Close every pooled connection; the next checkout reopens the pool."""
        with self._lock:
            if self._pool is not None:
                self._pool.closeall()
                logger.info("DB_POOL_CLOSED")

            self._pool = None
            self._initialized = False


_connection_manager: Optional[ConnectionManager] = None


def get_connection_manager() -> ConnectionManager:
    """Process-wide ConnectionManager.

    Uses the Secrets Manager secret named by DB_SECRET_ARN (region from
    AWS_REGION) when set, the DB_* variables otherwise.
    """
    global _connection_manager

    if _connection_manager is None:
        secret_arn = os.getenv("DB_SECRET_ARN")
        if secret_arn:
            config = DatabaseConfig.from_secrets_manager(
                secret_arn, region=os.getenv("AWS_REGION", "us-east-1")
            )
        else:
            config = DatabaseConfig.from_env()
        _connection_manager = ConnectionManager(config)

    return _connection_manager

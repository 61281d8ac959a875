"""
Database connection and transaction management using raw PostgreSQL
Booking admission runs in READ COMMITTED with row locks and a bounded lock timeout;
read models run in REPEATABLE READ snapshots
"""
import logging
from contextlib import contextmanager
from pathlib import Path

import psycopg2
from psycopg2 import pool, extras, sql
from psycopg2.extensions import (
    ISOLATION_LEVEL_READ_COMMITTED,
    ISOLATION_LEVEL_REPEATABLE_READ,
)

from .config import Settings, load_settings

logger = logging.getLogger(__name__)
sql_logger = logging.getLogger('database.sql')


class DatabaseUnavailableError(RuntimeError):
    """Raised when no connection to PostgreSQL can be obtained"""


class EchoCursor(extras.LoggingCursor, extras.RealDictCursor):
    """Dict-row cursor that passes every statement to the connection's logger"""


class DatabaseManager:
    """
    Database manager with transaction support and connection pooling
    """

    def __init__(self, database_url=None, echo=False, settings: Settings = None):
        """
        Initialize database manager

        Args:
            database_url: Database connection URL (defaults to env variable)
            echo: Log every SQL statement at DEBUG on the ``database.sql`` logger
            settings: Preloaded settings (defaults to environment)
        """
        self.settings = settings or load_settings(database_url=database_url)
        self.database_url = database_url or self.settings.database_url
        self.echo = echo or self.settings.echo
        self.cursor_factory = EchoCursor if self.echo else extras.RealDictCursor

        self.db_config = self._parse_database_url(self.database_url)

        try:
            self.connection_pool = pool.ThreadedConnectionPool(
                minconn=self.settings.pool_min,
                maxconn=self.settings.pool_max,
                connection_factory=extras.LoggingConnection if self.echo else None,
                **self.db_config
            )
        except psycopg2.Error as e:
            raise DatabaseUnavailableError(f"Failed to create database connection pool: {e}") from e

    def _parse_database_url(self, url):
        """Parse a postgresql:// URL into connection parameters"""
        config = {'database': 'airline_booking', 'host': 'localhost', 'port': 5432}
        if not (url.startswith('postgresql://') or url.startswith('postgres://')):
            return config

        url = url.split('://', 1)[1]

        # user:password@host:port/database
        if '@' in url:
            auth, location = url.rsplit('@', 1)
            user, _, password = auth.partition(':')
            config['user'] = user
            if password:
                config['password'] = password
        else:
            location = url

        host_port, _, database = location.partition('/')
        if database:
            config['database'] = database.split('?', 1)[0]

        host, _, port = host_port.partition(':')
        if host:
            config['host'] = host
        if port:
            config['port'] = int(port)

        return config

    def get_connection(self):
        """Get a connection from the pool; its cursors return dict rows"""
        try:
            conn = self.connection_pool.getconn()
        except psycopg2.OperationalError as e:
            raise DatabaseUnavailableError(f"Unable to connect to database: {e}") from e

        if self.echo:
            conn.initialize(sql_logger)
        conn.cursor_factory = self.cursor_factory
        return conn

    def return_connection(self, conn):
        """Return a connection to the pool, discarding broken ones"""
        self.connection_pool.putconn(conn, close=bool(conn.closed))

    def close_all_connections(self):
        """Close all connections in the pool"""
        if self.connection_pool:
            self.connection_pool.closeall()

    def create_tables(self):
        """Create all database tables from schema"""
        schema_file = Path(__file__).parent / 'schema.sql'

        if not schema_file.exists():
            raise FileNotFoundError(f"Schema file not found: {schema_file}")

        schema_sql = schema_file.read_text()

        conn = self.get_connection()
        try:
            with conn.cursor() as cursor:
                cursor.execute(schema_sql)
            conn.commit()
        finally:
            self.return_connection(conn)

    def drop_tables(self):
        """Drop all database tables (use with caution!)"""
        conn = self.get_connection()
        try:
            with conn.cursor() as cursor:
                cursor.execute("""
                    SELECT tablename FROM pg_tables
                    WHERE schemaname = 'public'
                """)
                tables = [row['tablename'] for row in cursor.fetchall()]

                for table in tables:
                    cursor.execute(sql.SQL("DROP TABLE IF EXISTS {} CASCADE").format(
                        sql.Identifier(table)
                    ))
            conn.commit()
        finally:
            self.return_connection(conn)

    def _begin(self, conn, isolation_level):
        conn.set_isolation_level(isolation_level or ISOLATION_LEVEL_READ_COMMITTED)
        if self.settings.lock_timeout_ms:
            with conn.cursor() as cursor:
                cursor.execute("SET LOCAL lock_timeout = %s", (f"{self.settings.lock_timeout_ms}ms",))

    @contextmanager
    def get_cursor(self, isolation_level=None, cursor_factory=None):
        """
        Get a cursor with automatic connection management

        Args:
            isolation_level: Transaction isolation level
            cursor_factory: Cursor factory (defaults to dict rows)

        Usage:
            with db.get_cursor() as cursor:
                cursor.execute("SELECT * FROM flights")
                results = cursor.fetchall()
        """
        conn = self.get_connection()
        try:
            self._begin(conn, isolation_level)
            cursor = conn.cursor(cursor_factory=cursor_factory or self.cursor_factory)
            try:
                yield cursor
                conn.commit()
            except Exception:
                if not conn.closed:
                    conn.rollback()
                raise
            finally:
                cursor.close()
        finally:
            self.return_connection(conn)

    @contextmanager
    def transaction(self, isolation_level=None):
        """
        Provide a transactional scope with a connection

        Everything executed on the yielded connection commits together or not at all.

        Usage:
            with db.transaction() as conn:
                with conn.cursor() as cursor:
                    cursor.execute("INSERT INTO bookings ...")
        """
        conn = self.get_connection()
        try:
            self._begin(conn, isolation_level)
            yield conn
            conn.commit()
        except Exception:
            if not conn.closed:
                conn.rollback()
            raise
        finally:
            self.return_connection(conn)

    @contextmanager
    def snapshot(self):
        """Read-only cursor over a single REPEATABLE READ snapshot"""
        with self.get_cursor(isolation_level=ISOLATION_LEVEL_REPEATABLE_READ) as cursor:
            yield cursor


# Global database manager instance
_db_manager = None


def get_db_manager() -> DatabaseManager:
    """Get or create global database manager instance"""
    global _db_manager
    if _db_manager is None:
        _db_manager = DatabaseManager()
    return _db_manager


def set_db_manager(db_manager: DatabaseManager | None) -> None:
    """Override the global database manager instance.

    Test fixtures use this so that the service layer operates on the test
    database. Passing ``None`` resets the singleton so the next
    ``get_db_manager`` call recreates it with default settings.
    """
    global _db_manager
    _db_manager = db_manager


def init_db():
    """Initialize database with tables"""
    db_manager = get_db_manager()
    db_manager.create_tables()
    logger.info("Database schema ready at %s", db_manager.db_config.get('database'))

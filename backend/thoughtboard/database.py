from datetime import datetime, timezone
from sqlalchemy import event, inspect, text
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.pool import StaticPool
from thoughtboard.config import settings
from thoughtboard.utils.logging_config import database_logger


def _engine_options() -> dict:
    if settings.is_sqlite:
        # One shared connection: in-memory databases live only as long as it does
        return {
            "connect_args": {"check_same_thread": False},
            "poolclass": StaticPool,
        }
    return {
        "pool_size": settings.DB_POOL_SIZE,
        "max_overflow": settings.DB_MAX_OVERFLOW,
        "pool_pre_ping": settings.DB_POOL_PRE_PING,
    }


engine = create_async_engine(
    settings.DATABASE_URL,
    echo=settings.DEBUG,
    **_engine_options(),
)
async_session = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


if settings.is_sqlite:
    @event.listens_for(engine.sync_engine, "connect")
    def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
        # ON DELETE CASCADE is ignored by SQLite unless this is on
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


class Base(DeclarativeBase):
    pass


async def get_db():
    async with async_session() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


# Columns added after the first release: (table, column, DDL type)
COLUMN_MIGRATIONS = [
    ("thoughts", "width", "FLOAT"),
    ("thoughts", "height", "FLOAT"),
]


def _missing_columns(sync_conn) -> list[tuple[str, str, str]]:
    inspector = inspect(sync_conn)
    tables = set(inspector.get_table_names())
    missing = []
    for table, column, ddl_type in COLUMN_MIGRATIONS:
        if table not in tables:
            continue
        existing = {col["name"] for col in inspector.get_columns(table)}
        if column not in existing:
            missing.append((table, column, ddl_type))
    return missing


async def run_migrations(conn):
    """
    Add columns missing from databases created by older releases.
    Simple migration without Alembic.
    """
    missing = await conn.run_sync(_missing_columns)
    for table, column, ddl_type in missing:
        await conn.execute(text(f"ALTER TABLE {table} ADD COLUMN {column} {ddl_type}"))
        database_logger.info(f"Added missing column {table}.{column}")


async def init_db():
    # Register models with Base.metadata
    from thoughtboard import models  # noqa: F401

    database_logger.info("Initializing database...")

    async with engine.begin() as conn:
        await run_migrations(conn)
        await conn.run_sync(Base.metadata.create_all)

    database_logger.success("Database schema created/updated")


async def dispose_engine() -> None:
    await engine.dispose()


def utcnow() -> datetime:
    """Naive UTC timestamp; SQLite drops tzinfo on the way back anyway."""
    return datetime.now(timezone.utc).replace(tzinfo=None)

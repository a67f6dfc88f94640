import argparse
import asyncio

from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from todo_api import models  # noqa: F401
from todo_api.config import Settings, get_settings
from todo_api.models.base import Base
from todo_api.utils.logger import setup_logger

logger = setup_logger("db")


def create_engine_from_settings(settings: Settings) -> AsyncEngine:
    """Build the application engine. No connection is opened until first use."""
    url = settings.database_url
    logger.debug(f"Application DB URL: {url}")

    if settings.is_postgres:
        engine = create_async_engine(
            url,
            pool_pre_ping=True,
            pool_size=20,
            max_overflow=30,
            pool_timeout=60,
            pool_recycle=300,
            echo=False,
            connect_args={"timeout": 30},
        )
        if settings.db_schema:
            engine = engine.execution_options(
                schema_translate_map={None: settings.db_schema}
            )
        return engine

    if url.startswith("sqlite+aiosqlite://"):
        # In-memory databases only live as long as their single connection
        if ":memory:" in url:
            return create_async_engine(
                url,
                echo=False,
                poolclass=StaticPool,
                connect_args={"check_same_thread": False},
            )
        return create_async_engine(url, echo=False)

    raise ValueError(f"Unsupported database URL prefix: {url}")


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        autocommit=False,
        autoflush=False,
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


async def init_db(engine: AsyncEngine, schema_name: str | None = None):
    """Create the schema (Postgres only) and all tables that do not exist yet."""
    if not Base.metadata.tables:
        logger.warning("Base.metadata.tables is EMPTY! No tables will be created.")
    else:
        logger.debug(
            f"Tables registered in Base.metadata: {list(Base.metadata.tables.keys())}"
        )

    async with engine.begin() as conn:
        if schema_name:
            await conn.execute(text(f'CREATE SCHEMA IF NOT EXISTS "{schema_name}"'))
        await conn.run_sync(Base.metadata.create_all)

    logger.info("Database schema initialized.")


async def reset_db(engine: AsyncEngine, schema_name: str | None = None):
    logger.warning(
        "Attempting to reset the application database. THIS IS A DESTRUCTIVE OPERATION."
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    logger.info("All application tables dropped.")
    await init_db(engine, schema_name)
    logger.info("Application database has been reset and re-initialized.")


async def close_db(engine: AsyncEngine):
    """Closes database connections."""
    logger.info("Closing database connections.")
    await engine.dispose()
    logger.info("Database connections closed.")


async def check_db_connection(engine: AsyncEngine, db_name="Application DB"):
    """Performs a simple query to check actual DB connectivity."""
    session_maker = create_session_factory(engine)
    async with session_maker() as session:
        try:
            result = await session.execute(text("SELECT 1"))
            if result.scalar_one() == 1:
                logger.info(
                    f"Successfully connected to {db_name} and executed a test query."
                )
                return True
            raise RuntimeError(f"Test query to {db_name} returned an unexpected result.")
        except Exception as e:
            logger.error(
                f"Failed to execute test query on {db_name}: {e}", exc_info=True
            )
            raise RuntimeError(
                f"Database connectivity check failed for {db_name}."
            ) from e


async def _run_action(action: str, settings: Settings):
    engine = create_engine_from_settings(settings)
    try:
        if action == "init":
            await init_db(engine, settings.db_schema)
        elif action == "reset":
            await reset_db(engine, settings.db_schema)
        elif action == "check":
            await check_db_connection(engine)
    finally:
        await close_db(engine)


if __name__ == "__main__":
    parser = argparse.ArgumentParser(
        description="Application Database Initialization Utility"
    )
    parser.add_argument(
        "action",
        choices=["init", "reset", "check"],
        help="'init' to create missing tables, "
        "'reset' to drop and recreate all tables, "
        "'check' to verify database connectivity.",
    )
    args = parser.parse_args()
    settings = get_settings()

    if args.action == "reset":
        confirm = input(
            "WARNING: This will delete all data of the application DB. Are you sure? (yes/no): "
        )
        if confirm.lower() != "yes":
            logger.info("Application Database reset cancelled by user.")
            raise SystemExit(0)

    asyncio.run(_run_action(args.action, settings))
    logger.info("Application Database utility script finished.")

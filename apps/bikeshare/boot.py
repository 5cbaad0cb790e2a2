from __future__ import annotations

from core.logging_utils import get_logger, log_event
from core.settings import Settings
from core.sql_exec import get_engine_for_url

from .catalog import SchemaCatalog, information_schema_loader
from .executor import EngineExecutor
from .processor import QueryProcessor

log = get_logger(__name__)


def build_processor(settings: Settings) -> QueryProcessor:
    """Wire engine, schema catalog and executor from configuration."""

    url = settings.get_app_db_url()
    if not url:
        raise RuntimeError("APP_DB_URL (or DATABASE_URL) must be configured")
    engine = get_engine_for_url(url, echo=bool(settings.get_bool("APP_SQL_ECHO", False)))
    schema = settings.get_db_schema()
    catalog = SchemaCatalog(
        information_schema_loader(engine, schema),
        ttl_seconds=settings.get_schema_cache_ttl(),
    )
    log_event(
        log,
        "boot",
        "boot.db_url",
        {"dialect": str(url).split("://")[0], "schema": schema},
    )
    return QueryProcessor(catalog, EngineExecutor(engine))


__all__ = ["build_processor"]

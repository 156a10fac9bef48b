# =============================================================================
# app/routers/diagnostics.py - Admin Connection Diagnostics
# =============================================================================
# GET /diagnostics (under /admin/dashboard) runs four checks and reports
# each one separately:
#   1. environment    - URL present, anon key present (masked)
#   2. connection     - fruits row count, bounded by a timeout
#   3. tables         - row count of every catalog table
#   4. storage        - bucket listing
#
# A failing check never stops the others.
# =============================================================================

import asyncio
import logging
from typing import Any

from fastapi import APIRouter
from pydantic import BaseModel, Field

from app.dependencies import ServicesDep
from core.stores import TABLES

logger = logging.getLogger(__name__)

admin_router = APIRouter()

# Characters of the anon key shown in the report
KEY_PREFIX_LENGTH = 20


class CheckResult(BaseModel):
    ok: bool
    message: str
    details: dict[str, Any] = Field(default_factory=dict)


class DiagnosticsResponse(BaseModel):
    ok: bool
    environment: CheckResult
    connection: CheckResult
    tables: CheckResult
    storage: CheckResult


def mask_key(key: str) -> str:
    """Show only the start of a key."""
    if not key:
        return ""
    return f"{key[:KEY_PREFIX_LENGTH]}..."


def _check_environment(services) -> CheckResult:
    settings = services.settings
    details = {
        "url": settings.SUPABASE_URL,
        "anon_key": mask_key(settings.SUPABASE_ANON_KEY),
    }
    if settings.SUPABASE_URL and settings.SUPABASE_ANON_KEY:
        return CheckResult(ok=True, message="Variables d'environnement présentes", details=details)
    return CheckResult(ok=False, message="Variables d'environnement manquantes", details=details)


async def _check_connection(services) -> CheckResult:
    timeout = services.settings.DIAGNOSTICS_TIMEOUT_SECONDS
    try:
        count = await asyncio.wait_for(
            asyncio.to_thread(services.db.count_rows, "fruits"),
            timeout=timeout,
        )
        return CheckResult(ok=True, message="Connexion réussie", details={"fruits": count})
    except asyncio.TimeoutError:
        logger.warning(f"Diagnostics connection check timed out after {timeout}s")
        return CheckResult(ok=False, message=f"Délai dépassé ({timeout}s)")
    except Exception as e:
        logger.warning(f"Diagnostics connection check failed: {e}")
        return CheckResult(ok=False, message=str(e))


def _check_tables(services) -> CheckResult:
    counts: dict[str, Any] = {}
    ok = True
    for table in TABLES:
        try:
            counts[table] = services.db.count_rows(table)
        except Exception as e:
            logger.warning(f"Diagnostics count of {table} failed: {e}")
            counts[table] = f"error: {e}"
            ok = False

    message = "Toutes les tables sont accessibles" if ok else "Certaines tables sont inaccessibles"
    return CheckResult(ok=ok, message=message, details=counts)


def _check_storage(services) -> CheckResult:
    try:
        buckets = services.db.list_buckets()
        return CheckResult(ok=True, message=f"{len(buckets)} bucket(s)", details={"buckets": buckets})
    except Exception as e:
        logger.warning(f"Diagnostics storage check failed: {e}")
        return CheckResult(ok=False, message=str(e))


@admin_router.get("/diagnostics", response_model=DiagnosticsResponse)
async def run_diagnostics(services: ServicesDep):
    """Run every check and report each result."""
    environment = _check_environment(services)
    connection = await _check_connection(services)
    tables = await asyncio.to_thread(_check_tables, services)
    storage = await asyncio.to_thread(_check_storage, services)

    return DiagnosticsResponse(
        ok=all(check.ok for check in (environment, connection, tables, storage)),
        environment=environment,
        connection=connection,
        tables=tables,
        storage=storage,
    )

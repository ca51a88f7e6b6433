"""UpgradeService — schema versioning with Alembic.

``init`` and ``upgrade`` both go through here:

- a database whose tables came from ``schema.metadata`` (every store opens
  that way) but that was never stamped is stamped at head;
- otherwise pending revisions are listed and, unless only checking, run.
"""

from __future__ import annotations

import logging

from sqlalchemy import inspect

from groupcart.infrastructure.database.migrations import (
    current_revision,
    head_revision,
    pending_revisions,
    stamp_head,
    upgrade_head,
)
from groupcart.infrastructure.database.schema import TABLE_NAMES
from groupcart.services.base import BaseService
from groupcart.services.result import ErrorCode, ServiceResult
from groupcart.services.telemetry import trace_span, traced

logger = logging.getLogger(__name__)


class UpgradeService(BaseService):
    """Reports and applies schema revisions for the store's database."""

    def current_revision(self) -> str | None:
        return current_revision(self._store.engine)

    def _has_schema(self) -> bool:
        present = set(inspect(self._store.engine).get_table_names())
        return present.issuperset(TABLE_NAMES)

    def _database_label(self) -> str:
        return self._store.engine.url.render_as_string(hide_password=True)

    def stamp(self) -> ServiceResult:
        """Mark the database as being at head without running revisions."""
        op = "stamp"
        try:
            stamp_head(self._store.url)
        except Exception as exc:
            logger.error("stamp failed for %s", self._database_label(), exc_info=True)
            return ServiceResult.failure(op, ErrorCode.INTERNAL, f"Failed to stamp database: {exc}")
        return ServiceResult(ok=True, op=op, data={"current": self.current_revision()})

    @traced
    def initialize(self) -> ServiceResult:
        """Report the database and its revision, stamping it on first run."""
        op = "init"
        revision = self.current_revision()
        if revision is None:
            stamped = self.stamp()
            if not stamped.ok:
                message = stamped.error.message if stamped.error else "stamp failed"
                return ServiceResult.failure(op, ErrorCode.INTERNAL, message)
            revision = stamped.data["current"]

        logger.info("database ready: %s at %s", self._database_label(), revision)
        return ServiceResult(
            ok=True,
            op=op,
            data={
                "database": self._database_label(),
                "revision": revision,
                "tables": list(TABLE_NAMES),
            },
        )

    @traced
    def check_pending(self) -> ServiceResult:
        """List the revisions ``apply`` would run, without running them."""
        op = "upgrade"
        try:
            head = head_revision(self._store.url)
            current = self.current_revision()
            pending = pending_revisions(self._store.url, current)
        except Exception as exc:
            logger.error("migration check failed", exc_info=True)
            return ServiceResult.failure(
                op, ErrorCode.INTERNAL, f"Failed to check migrations: {exc}"
            )

        return ServiceResult(
            ok=True,
            op=op,
            data={
                "pending_count": len(pending),
                "pending": [
                    {"revision": rev.revision, "description": rev.doc or ""} for rev in pending
                ],
                "current": current,
                "head": head,
            },
        )

    @traced
    def apply(self) -> ServiceResult:
        """Bring the database to head."""
        op = "upgrade"

        check = self.check_pending()
        if not check.ok:
            return check
        current = check.data["current"]

        if current is None and self._has_schema():
            stamped = self.stamp()
            if not stamped.ok:
                return stamped
            return ServiceResult(
                ok=True,
                op=op,
                data={"applied_count": 0, "current": stamped.data["current"]},
                warnings=["Existing schema stamped at head without running migrations"],
            )

        if check.data["pending_count"] == 0:
            return ServiceResult(
                ok=True,
                op=op,
                data={
                    "applied_count": 0,
                    "current": current,
                    "message": "Database is already up to date",
                },
            )

        try:
            with trace_span("alembic_upgrade"):
                upgrade_head(self._store.url)
        except Exception as exc:
            logger.error("migration failed", exc_info=True)
            return ServiceResult.failure(op, ErrorCode.INTERNAL, f"Migration failed: {exc}")

        logger.info("database upgraded: %s -> %s", current, check.data["head"])
        return ServiceResult(
            ok=True,
            op=op,
            data={
                "applied_count": check.data["pending_count"],
                "applied": check.data["pending"],
                "current": self.current_revision(),
            },
        )

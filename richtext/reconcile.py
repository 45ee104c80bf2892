"""Decomposition of composite relation bitmasks.

Every row of the relation table must carry exactly one atomic relation kind.
Rows written by older code (or by `richtext.commit`, which ORs kinds into an
existing row) may carry a composite mask such as ``6`` (EMBED | LINK). The
reconciler replaces each such row with one row per kind it contains and
deletes the original.

Kinds are visited in `ATOMIC_KINDS` order (ascending bit value), so the
inserted rows come out in the same order on every run. Reconciling an
already reconciled version changes nothing.

The read of a version's rows and the writes that follow are not atomic on
their own. They run inside `RelationTableInterface.transaction()`, and the
caller must not reconcile the same version from two threads at once.
"""

from pydantic import BaseModel

from rtschema.relation import ATOMIC_KINDS
from rtschema.storage import RelationTableInterface

from richtext.logging import setup_logging

logger = setup_logging()


class ReconciliationResult(BaseModel):
    """Outcome of reconciling one content version.

    Attributes:
        rows_examined: Rows read for the version.
        rows_split: Composite rows that were replaced and deleted.
        rows_inserted: Atomic rows inserted in their place.
    """

    model_config = {"frozen": True}

    rows_examined: int = 0
    rows_split: int = 0
    rows_inserted: int = 0


class RelationBitmaskReconciler:
    """Split composite relation rows into one row per atomic kind."""

    def __init__(self, table: RelationTableInterface):
        self.table = table

    def reconcile(self, from_content_id: int, from_version: int) -> ReconciliationResult:
        """Reconcile all relation rows of one content version.

        Errors from the table propagate: a version left with composite rows
        cannot be read correctly by relation queries.
        """
        rows_split = rows_inserted = 0

        with self.table.transaction():
            rows = self.table.fetch_rows(from_content_id, from_version)
            for row in rows:
                if row.is_atomic():
                    continue
                for kind in ATOMIC_KINDS:
                    if row.kind_mask & kind:
                        self.table.insert_row(row.with_kind(kind))
                        rows_inserted += 1
                self.table.delete_row(row.id)  # type: ignore[arg-type]
                rows_split += 1

        result = ReconciliationResult(rows_examined=len(rows), rows_split=rows_split, rows_inserted=rows_inserted)
        if rows_split:
            logger.info(
                {
                    "message": "Split composite relation rows",
                    "content_id": from_content_id,
                    "version": from_version,
                    **result.model_dump(),
                }
            )
        return result

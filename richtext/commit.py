"""Committing input relations to the relation table.

This follows the legacy repository's commit rules for object-level relations
(rows with ``field_definition_id == 0``). For each kind in the input list:

1. Existing rows of that kind whose target is no longer referenced lose the
   kind: the row is deleted if that was its only kind, otherwise the kind's
   bit is cleared.
2. Each newly referenced target gets the kind. If an object-level row to that
   target already exists the kind is OR-ed into its mask, which can leave a
   composite mask behind; otherwise a row carrying just that kind is inserted.

Kinds absent from the input list are not touched. Composite masks left by
step 2 are split afterwards by `richtext.reconcile.RelationBitmaskReconciler`.
"""

from typing import Mapping

from pydantic import BaseModel

from rtschema.relation import RelationKind, RelationRow
from rtschema.storage import RelationTableInterface

from richtext.logging import setup_logging

logger = setup_logging()


class CommitResult(BaseModel):
    model_config = {"frozen": True}

    inserted: int = 0
    updated: int = 0
    deleted: int = 0


def commit_input_relations(
    table: RelationTableInterface,
    from_content_id: int,
    from_version: int,
    input_relations: Mapping[RelationKind, frozenset[int]],
) -> CommitResult:
    """Bring object-level relations of one version in line with `input_relations`.

    Args:
        table: Relation table to write to.
        from_content_id: Content object holding the relations.
        from_version: Version being published.
        input_relations: Target content ids per relation kind.

    Returns:
        Row counts touched by the commit.
    """
    inserted = updated = deleted = 0

    for kind, target_ids in input_relations.items():
        rows = [r for r in table.fetch_rows(from_content_id, from_version) if r.field_definition_id == 0]
        pending = set(target_ids)

        for row in rows:
            if not row.kind_mask & kind:
                continue
            if row.to_content_id in pending:
                pending.discard(row.to_content_id)
                continue
            remaining = row.kind_mask & ~int(kind)
            if remaining:
                table.update_kind_mask(row.id, remaining)  # type: ignore[arg-type]
                updated += 1
            else:
                table.delete_row(row.id)  # type: ignore[arg-type]
                deleted += 1

        by_target = {row.to_content_id: row for row in rows}
        for to_content_id in sorted(pending):
            existing = by_target.get(to_content_id)
            if existing is not None:
                table.update_kind_mask(existing.id, existing.kind_mask | int(kind))  # type: ignore[arg-type]
                updated += 1
            else:
                table.insert_row(
                    RelationRow(
                        from_content_id=from_content_id,
                        from_version=from_version,
                        to_content_id=to_content_id,
                        field_definition_id=0,
                        kind_mask=int(kind),
                    )
                )
                inserted += 1

    result = CommitResult(inserted=inserted, updated=updated, deleted=deleted)
    logger.debug({"message": "Committed input relations", "content_id": from_content_id, "version": from_version, **result.model_dump()})
    return result

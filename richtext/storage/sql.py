"""
SQL implementation of the relation table.
"""

from contextlib import contextmanager
from typing import Iterator, Optional

from sqlmodel import Field, Session, SQLModel, create_engine, select

from rtschema.relation import RelationRow
from rtschema.storage import RelationTableInterface


class ContentObjectLink(SQLModel, table=True):
    """
    One row of the legacy content relation table.
    """

    __tablename__ = "ezcontentobject_link"

    id: Optional[int] = Field(default=None, primary_key=True)
    from_contentobject_id: int = Field(index=True)
    from_contentobject_version: int = Field(index=True)
    to_contentobject_id: int = Field(index=True)
    contentclassattribute_id: int = Field(default=0)
    relation_type: int = Field(default=1, description="Bitmask of relation kinds")

    def to_row(self) -> RelationRow:
        return RelationRow(
            id=self.id,
            from_content_id=self.from_contentobject_id,
            from_version=self.from_contentobject_version,
            to_content_id=self.to_contentobject_id,
            field_definition_id=self.contentclassattribute_id,
            kind_mask=self.relation_type,
        )


class SqlRelationTable(RelationTableInterface):
    """
    Relation table backed by any SQLAlchemy database URL.

    Outside of `transaction()` every write is committed immediately. Inside,
    writes are flushed and committed when the outermost block exits; an
    exception rolls the whole block back and is re-raised.
    """

    def __init__(self, database_url: str = "sqlite:///:memory:"):
        connect_args = {}
        if database_url.startswith("sqlite://"):
            connect_args["check_same_thread"] = False
        self.engine = create_engine(database_url, connect_args=connect_args)
        SQLModel.metadata.create_all(self.engine)
        self._session = Session(self.engine)
        self._depth = 0

    def fetch_rows(self, from_content_id: int, from_version: int) -> list[RelationRow]:
        statement = (
            select(ContentObjectLink)
            .where(ContentObjectLink.from_contentobject_id == from_content_id)
            .where(ContentObjectLink.from_contentobject_version == from_version)
            .order_by(ContentObjectLink.id)
        )
        return [link.to_row() for link in self._session.exec(statement).all()]

    def insert_row(self, row: RelationRow) -> RelationRow:
        link = ContentObjectLink(
            from_contentobject_id=row.from_content_id,
            from_contentobject_version=row.from_version,
            to_contentobject_id=row.to_content_id,
            contentclassattribute_id=row.field_definition_id,
            relation_type=row.kind_mask,
        )
        self._session.add(link)
        self._session.flush()
        row_id = link.id
        self._commit()
        return row.model_copy(update={"id": row_id})

    def update_kind_mask(self, row_id: int, kind_mask: int) -> bool:
        link = self._session.get(ContentObjectLink, row_id)
        if link is None:
            return False
        link.relation_type = kind_mask
        self._session.add(link)
        self._session.flush()
        self._commit()
        return True

    def delete_row(self, row_id: int) -> bool:
        link = self._session.get(ContentObjectLink, row_id)
        if link is None:
            return False
        self._session.delete(link)
        self._session.flush()
        self._commit()
        return True

    @contextmanager
    def transaction(self) -> Iterator[None]:
        self._depth += 1
        try:
            yield
        except Exception:
            if self._depth == 1:
                self._session.rollback()
            raise
        else:
            if self._depth == 1:
                self._session.commit()
        finally:
            self._depth -= 1

    def _commit(self) -> None:
        if self._depth == 0:
            self._session.commit()

    def close(self) -> None:
        """
        Closes the session and disposes of the engine.
        """
        self._session.close()
        self.engine.dispose()

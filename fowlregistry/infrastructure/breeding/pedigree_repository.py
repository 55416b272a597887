"""
Adapter: Pedigree repository.

Implements PedigreeRepository port. Reads fowl display fields and
parent/offspring links for a set of ids in one query each.
"""

from sqlalchemy import bindparam, text
from sqlalchemy.engine import Engine

from fowlregistry.domain.breeding.entities import LineageLink, PedigreeRecord
from fowlregistry.domain.breeding.ports import PedigreeRepository


class PedigreeRepositoryAdapter(PedigreeRepository):
    def __init__(self, engine: Engine) -> None:
        self._engine = engine

    def get_records(self, fowl_ids: list[str]) -> list[PedigreeRecord]:
        if not fowl_ids:
            return []
        query = text(
            """
            SELECT id, owner_id, name, breed, gender, birth_date
            FROM fowls
            WHERE id IN :ids
            ORDER BY id
            """
        ).bindparams(bindparam("ids", expanding=True))
        with self._engine.connect() as conn:
            rows = conn.execute(query, {"ids": list(fowl_ids)}).fetchall()
        return [
            PedigreeRecord(
                id=row.id,
                name=row.name or "",
                breed=row.breed or "",
                gender=row.gender or "",
                birth_date=row.birth_date or "",
                owner_id=row.owner_id or "",
            )
            for row in rows
        ]

    def get_links(self, fowl_ids: list[str]) -> list[LineageLink]:
        if not fowl_ids:
            return []
        query = text(
            """
            SELECT parent_id, offspring_id
            FROM lineage_links
            WHERE parent_id IN :ids OR offspring_id IN :ids
            ORDER BY parent_id, offspring_id
            """
        ).bindparams(bindparam("ids", expanding=True))
        with self._engine.connect() as conn:
            rows = conn.execute(query, {"ids": list(fowl_ids)}).fetchall()
        return [LineageLink(parent_id=r.parent_id, offspring_id=r.offspring_id) for r in rows]

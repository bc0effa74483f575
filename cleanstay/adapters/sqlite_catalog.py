"""
SQLite adapter for PropertyCatalog.

The admin tooling owns this table; the core only reads it.  add() exists
for seeding local databases and tests.
"""

import sqlite3

from cleanstay.domain.catalog import Property, PropertyCatalog

_SCHEMA = """
CREATE TABLE IF NOT EXISTS properties (
    property_id TEXT PRIMARY KEY,
    tenant_id   TEXT NOT NULL,
    name        TEXT NOT NULL
);

CREATE INDEX IF NOT EXISTS properties_by_tenant ON properties (tenant_id);
"""


class SqlitePropertyCatalog(PropertyCatalog):

    def __init__(self, db_path: str = "cleanstay.db"):
        self._conn = sqlite3.connect(db_path, timeout=10.0)
        self._conn.row_factory = sqlite3.Row
        self._conn.executescript(_SCHEMA)

    def list_properties(self, tenant_id: str) -> list[Property]:
        rows = self._conn.execute(
            "SELECT * FROM properties WHERE tenant_id = ? ORDER BY name",
            (tenant_id,),
        ).fetchall()
        return [
            Property(property_id=r["property_id"], tenant_id=r["tenant_id"], name=r["name"])
            for r in rows
        ]

    def add(self, prop: Property) -> None:
        with self._conn:
            self._conn.execute(
                "INSERT OR REPLACE INTO properties (property_id, tenant_id, name)"
                " VALUES (?, ?, ?)",
                (prop.property_id, prop.tenant_id, prop.name),
            )

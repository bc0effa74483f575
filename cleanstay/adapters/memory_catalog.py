"""
In-memory PropertyCatalog for testing — no database required.
"""

from cleanstay.domain.catalog import Property, PropertyCatalog


class InMemoryPropertyCatalog(PropertyCatalog):

    def __init__(self, properties: list[Property] | None = None):
        self._by_tenant: dict[str, list[Property]] = {}
        for prop in properties or []:
            self.add(prop)

    def add(self, prop: Property) -> None:
        self._by_tenant.setdefault(prop.tenant_id, []).append(prop)

    def list_properties(self, tenant_id: str) -> list[Property]:
        return list(self._by_tenant.get(tenant_id, []))

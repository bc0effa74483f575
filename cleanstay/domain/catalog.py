"""
PropertyCatalog port — read-only view of a tenant's properties.

Properties are created and edited by admin tooling outside this core.
The resolver only ever lists them.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class Property:
    property_id: str
    tenant_id: str
    name: str          # display name, e.g. "Nikolajka 302"


class PropertyCatalog(ABC):
    """
    Port: list the properties owned by one tenant.

    Implementations must never return another tenant's properties.
    """

    @abstractmethod
    def list_properties(self, tenant_id: str) -> list[Property]:
        """Return every property of ``tenant_id`` (any order)."""
        ...

    def get(self, tenant_id: str, property_id: str) -> Property | None:
        """Look up one property of ``tenant_id`` by id."""
        for prop in self.list_properties(tenant_id):
            if prop.property_id == property_id:
                return prop
        return None

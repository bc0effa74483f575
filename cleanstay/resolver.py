"""
PropertyResolver — maps a worker's free-text hint to one property.

Matching is a case-insensitive substring test against the tenant's
property names.  No typo tolerance: results stay easy to explain
("302" matched "Nikolajka 302") and independent of call order.
"""

from cleanstay.domain.catalog import Property, PropertyCatalog
from cleanstay.domain.errors import PropertyAmbiguous, PropertyNotFound


class PropertyResolver:

    def __init__(self, catalog: PropertyCatalog):
        self._catalog = catalog

    def resolve_property(
        self, tenant_id: str, hint: str, language: str | None = None
    ) -> Property:
        """
        Return the single property whose name contains ``hint``.

        Raises PropertyNotFound for zero matches and PropertyAmbiguous
        (candidate names sorted) for several.
        """
        needle = hint.strip().casefold()
        if not needle:
            raise PropertyNotFound(hint, language)

        matches = [
            p for p in self._catalog.list_properties(tenant_id)
            if p.tenant_id == tenant_id and needle in p.name.casefold()
        ]
        if not matches:
            raise PropertyNotFound(hint.strip(), language)
        if len(matches) > 1:
            raise PropertyAmbiguous(sorted(p.name for p in matches), language)
        return matches[0]

    def resolve(self, tenant_id: str, hint: str, language: str | None = None) -> str:
        """Like resolve_property(), returning only the property id."""
        return self.resolve_property(tenant_id, hint, language).property_id

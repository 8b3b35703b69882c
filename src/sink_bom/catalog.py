"""
Catalog access for the BOM engine.

The engine reads the parts/assemblies catalog through the `CatalogRepository`
interface. This module provides:
- The repository interface and an in-memory implementation.
- Loading of the resource JSON catalog shape
  ({"assemblies": {...}, "parts": {...}}).
- The `CatalogFallbackProvider`, which owns the static generic-to-specific
  mapping table and the resource assembly table consulted when the primary
  repository misses.
"""

import json
import logging
import os
from abc import ABC, abstractmethod
from typing import Any, Mapping

from src.sink_bom import constants as C
from src.sink_bom.types import Assembly, ComponentLink, Part
from src.sink_bom.utils import clean_id, coerce_int

logger = logging.getLogger(__name__)


class CatalogRepository(ABC):
    """Read-only lookup of catalog records by identifier."""

    @abstractmethod
    def get_assembly_by_id(self, assembly_id: str) -> Assembly | None:
        """Get an assembly, including its component links, or None."""

    @abstractmethod
    def get_part_by_id(self, part_id: str) -> Part | None:
        """Get a part, or None."""


class InMemoryCatalog(CatalogRepository):
    """
    Dictionary-backed catalog.

    Component links in the resource shape reference children by id only, so
    each link is resolved at load time: an id present in the assemblies table
    becomes an assembly link, an id present in the parts table becomes a part
    link, anything else becomes a link with neither child set (surfaced by the
    expander as an unknown component).
    """

    def __init__(
        self,
        assemblies: Mapping[str, Assembly] | None = None,
        parts: Mapping[str, Part] | None = None,
    ):
        self.assemblies: dict[str, Assembly] = dict(assemblies or {})
        self.parts: dict[str, Part] = dict(parts or {})

    def get_assembly_by_id(self, assembly_id: str) -> Assembly | None:
        return self.assemblies.get(assembly_id)

    def get_part_by_id(self, part_id: str) -> Part | None:
        return self.parts.get(part_id)

    def add_part(self, part: Part) -> None:
        self.parts[part.id] = part

    def add_assembly(self, assembly: Assembly) -> None:
        self.assemblies[assembly.id] = assembly

    @classmethod
    def from_resources(cls, data: Mapping[str, Any]) -> "InMemoryCatalog":
        """
        Builds a catalog from the resource JSON shape.

        Args:
            data: Mapping with optional 'assemblies' and 'parts' tables keyed
                  by identifier.

        Returns:
            A populated InMemoryCatalog.
        """
        parts = {
            part_id: part_from_record(part_id, record)
            for part_id, record in (data.get("parts") or {}).items()
        }
        raw_assemblies = data.get("assemblies") or {}
        assemblies = {
            assembly_id: assembly_from_record(
                assembly_id, record, parts, set(raw_assemblies)
            )
            for assembly_id, record in raw_assemblies.items()
        }
        return cls(assemblies=assemblies, parts=parts)


def part_from_record(part_id: str, record: Mapping[str, Any]) -> Part:
    """Converts one resource 'parts' entry into a Part."""
    return Part(
        id=part_id,
        name=record.get("name") or part_id,
        type=record.get("type") or "COMPONENT",
        manufacturer_part_number=record.get("manufacturer_part_number"),
        manufacturer_info=record.get("manufacturer_info"),
        status=record.get("status") or "ACTIVE",
    )


def assembly_from_record(
    assembly_id: str,
    record: Mapping[str, Any],
    parts: Mapping[str, Part] | None = None,
    assembly_ids: set[str] | None = None,
) -> Assembly:
    """
    Converts one resource 'assemblies' entry into an Assembly.

    Args:
        assembly_id: The key of the entry.
        record: The entry itself.
        parts: Known parts, used to resolve part links.
        assembly_ids: Known assembly ids, used to resolve assembly links.
            When both lookups are None, every component is kept as an
            unresolved assembly reference for the expander to chase.
    """
    links = []
    for idx, component in enumerate(record.get("components") or []):
        child_id = clean_id(component.get("part_id") or component.get("id"))
        quantity = coerce_int(component.get("quantity"), default=1)
        link_id = f"{assembly_id}#{idx}"
        notes = component.get("notes")

        if child_id is None:
            links.append(ComponentLink(id=link_id, quantity=quantity, notes=notes))
        elif parts is None and assembly_ids is None:
            links.append(
                ComponentLink(
                    id=link_id, quantity=quantity, assembly_id=child_id, notes=notes
                )
            )
        elif assembly_ids and child_id in assembly_ids:
            links.append(
                ComponentLink(
                    id=link_id, quantity=quantity, assembly_id=child_id, notes=notes
                )
            )
        elif parts and child_id in parts:
            links.append(
                ComponentLink(
                    id=link_id, quantity=quantity, part=parts[child_id], notes=notes
                )
            )
        else:
            logger.warning(
                f"Component '{child_id}' of assembly '{assembly_id}' is neither "
                "a known part nor a known assembly"
            )
            links.append(ComponentLink(id=link_id, quantity=quantity, notes=notes))

    return Assembly(
        id=assembly_id,
        name=record.get("name") or assembly_id,
        type=record.get("type") or "ASSEMBLY",
        category_code=record.get("category_code"),
        subcategory_code=record.get("subcategory_code"),
        components=tuple(links),
        can_order=bool(record.get("can_order", True)),
        is_kit=bool(record.get("is_kit", False)),
        status=record.get("status") or "ACTIVE",
    )


def load_catalog(path: str) -> InMemoryCatalog:
    """
    Loads a catalog from a JSON file or a resources directory.

    A directory is expected to contain assemblies.json and parts.json (each
    wrapping its table under the matching key); a file holds both tables.

    Raises:
        FileNotFoundError: If the path does not exist.
    """
    if os.path.isdir(path):
        data: dict[str, Any] = {}
        for filename, key in (
            (C.ASSEMBLIES_FILENAME, "assemblies"),
            (C.PARTS_FILENAME, "parts"),
        ):
            file_path = os.path.join(path, filename)
            if os.path.exists(file_path):
                data[key] = _read_json(file_path).get(key, {})
        return InMemoryCatalog.from_resources(data)

    if not os.path.exists(path):
        raise FileNotFoundError(f"Missing catalog at {path}")
    return InMemoryCatalog.from_resources(_read_json(path))


def _read_json(path: str) -> dict[str, Any]:
    with open(path, encoding="utf-8") as f:
        return json.load(f)


def load_control_box_components(path: str) -> dict[str, list[tuple[str, int]]]:
    """
    Loads a control box component table from JSON.

    Accepted entry shapes per control box:
        [{"part_id": "HDR-150-24", "quantity": 1}, ...]
        [["HDR-150-24", 1], ...]

    Returns:
        { control_box_id: [(component_id, quantity), ...] }

    Raises:
        ValueError: If an entry has no id.
    """
    raw = _read_json(path)
    table: dict[str, list[tuple[str, int]]] = {}
    for box_id, entries in raw.items():
        components = []
        for entry in entries:
            if isinstance(entry, Mapping):
                child_id = clean_id(entry.get("part_id") or entry.get("id"))
                quantity = coerce_int(entry.get("quantity"), default=1)
            else:
                child_id = clean_id(entry[0])
                quantity = coerce_int(entry[1] if len(entry) > 1 else None, default=1)
            if child_id is None:
                raise ValueError(f"Control box '{box_id}' has an entry without an id")
            components.append((child_id, quantity))
        table[box_id] = components

    logger.info(f"Loaded component lists for {len(table)} control boxes from {path}")
    return table


class CatalogFallbackProvider:
    """
    Secondary source of truth consulted when the catalog repository misses.

    Owns two static tables, loaded once when the provider is constructed and
    kept for the provider's lifetime:
    - generic-to-specific mappings (e.g. HEIGHT-ADJUSTABLE -> T2-DL27-KIT),
    - resource assemblies keyed by id (components referenced by id only).
    """

    def __init__(
        self,
        mappings: Mapping[str, Mapping[str, Any]] | None = None,
        resource_assemblies: Mapping[str, Assembly] | None = None,
    ):
        self.mappings: dict[str, Mapping[str, Any]] = dict(
            C.DEFAULT_GENERIC_MAPPINGS if mappings is None else mappings
        )
        self.resource_assemblies: dict[str, Assembly] = dict(
            resource_assemblies or {}
        )

    @classmethod
    def from_directory(cls, resources_dir: str) -> "CatalogFallbackProvider":
        """
        Loads the mapping and resource assembly files from a directory.

        Missing or unreadable files are logged; the built-in default mappings
        and an empty resource table take their place.
        """
        mappings: Mapping[str, Mapping[str, Any]] | None = None
        mappings_path = os.path.join(resources_dir, C.MAPPINGS_FILENAME)
        try:
            mappings = _read_json(mappings_path)["generic_to_specific_mappings"]
        except (OSError, ValueError, KeyError) as e:
            logger.warning(
                f"Could not load assembly mappings from {mappings_path}: {e}; "
                "using built-in defaults"
            )

        resource_assemblies: dict[str, Assembly] = {}
        assemblies_path = os.path.join(resources_dir, C.ASSEMBLIES_FILENAME)
        try:
            raw = _read_json(assemblies_path).get("assemblies", {})
            resource_assemblies = {
                assembly_id: assembly_from_record(assembly_id, record)
                for assembly_id, record in raw.items()
            }
        except (OSError, ValueError) as e:
            logger.warning(
                f"Could not load resource assemblies from {assemblies_path}: {e}"
            )

        logger.info(
            f"Fallback provider loaded {len(mappings or C.DEFAULT_GENERIC_MAPPINGS)} "
            f"mappings and {len(resource_assemblies)} resource assemblies"
        )
        return cls(mappings=mappings, resource_assemblies=resource_assemblies)

    def get_mapping(self, identifier: str) -> Mapping[str, Any] | None:
        return self.mappings.get(identifier)

    def resolve_generic(self, identifier: str) -> str | None:
        """Returns the recommended specific id for a generic id, if mapped."""
        mapping = self.get_mapping(identifier)
        if not mapping:
            return None
        return clean_id(mapping.get("default_recommendation"))

    def get_resource_assembly(self, identifier: str) -> Assembly | None:
        return self.resource_assemblies.get(identifier)

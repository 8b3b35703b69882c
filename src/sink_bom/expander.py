"""
Recursive assembly expansion.

`AssemblyExpander.expand` turns one catalog identifier into one BOM line,
with every descendant expanded beneath it and quantities multiplied down the
tree. Catalog misses never raise: they are resolved through the fallback
chain or end up as placeholder lines. Only the depth ceiling, the deadline
and repository failures are fatal.
"""

import logging
import re
import time
from typing import Callable, Iterable

from src.sink_bom import constants as C
from src.sink_bom.catalog import CatalogFallbackProvider, CatalogRepository
from src.sink_bom.exceptions import (
    BomGenerationError,
    CatalogRepositoryError,
    ExpansionTimeoutError,
    RecursionDepthError,
)
from src.sink_bom.settings import EngineSettings
from src.sink_bom.types import Assembly, BOMItem, ComponentLink, Part

logger = logging.getLogger(__name__)

# Size-only pegboard kits that may only exist in colored variants.
_PEGBOARD_SIZE_KIT_PATTERN = re.compile(r"^T2-ADW-PB-(\d+)-(PERF|SOLID)-KIT$")


class ExpansionDeadline:
    """Wall-clock budget shared by every expansion step of one generate call."""

    def __init__(self, seconds: float, clock: Callable[[], float] = time.monotonic):
        self.seconds = seconds
        self._clock = clock
        self._started = clock()

    @property
    def elapsed(self) -> float:
        return self._clock() - self._started

    def expired(self) -> bool:
        return self.elapsed > self.seconds

    def check(self, identifier: str) -> None:
        if self.expired():
            raise ExpansionTimeoutError(identifier, self.elapsed)


class AssemblyExpander:
    """
    Expands catalog identifiers into BOMItem trees.

    Cycle protection is branch-local: each call copies its ancestors'
    identifiers, so the same assembly can appear under unrelated parents,
    but an assembly reached again below itself becomes a CIRCULAR_REFERENCE
    placeholder instead of recursing.
    """

    def __init__(
        self,
        catalog: CatalogRepository,
        fallback: CatalogFallbackProvider | None = None,
        settings: EngineSettings | None = None,
        deadline: ExpansionDeadline | None = None,
    ):
        self.catalog = catalog
        self.fallback = fallback
        self.settings = settings or EngineSettings()
        self.deadline = deadline

    # --- Public API ---

    def expand(
        self,
        identifier: str,
        quantity: int,
        category: str,
        bom_list: list[BOMItem],
        visited: Iterable[str] | None = None,
        depth: int = 0,
    ) -> BOMItem:
        """
        Expands an identifier and appends the resulting line to `bom_list`.

        Args:
            identifier: Assembly or part id to resolve.
            quantity: Quantity of this line (already multiplied by ancestors).
            category: Category tag for this line.
            bom_list: The parent's child list (or the top-level BOM).
            visited: Identifiers of the ancestors in this branch.
            depth: Nesting depth of this line.

        Returns:
            The appended BOMItem.

        Raises:
            RecursionDepthError: Nesting past the configured maximum.
            ExpansionTimeoutError: The deadline passed.
            CatalogRepositoryError: The repository itself failed.
        """
        item = self._resolve(identifier, quantity, category, visited, depth)
        bom_list.append(item)
        return item

    def expand_with_components(
        self,
        identifier: str,
        components: Iterable[tuple[str, int]],
        quantity: int,
        category: str,
        bom_list: list[BOMItem],
        visited: Iterable[str] | None = None,
        depth: int = 0,
    ) -> BOMItem:
        """
        Expands an assembly whose children come from `components` instead of
        the catalog. The catalog (or a placeholder) still supplies the line
        itself.
        """
        branch = self._enter(identifier, visited, depth)

        assembly = self._get_assembly(identifier)
        if assembly is None and self.fallback is not None:
            assembly = self.fallback.get_resource_assembly(identifier)

        if assembly is not None:
            item = self._assembly_item(assembly, quantity, category)
        else:
            item = self._placeholder(identifier, quantity, category)

        for child_id, child_qty in components:
            self._expand_by_id(
                child_id, child_qty * quantity, item.children, branch, depth
            )

        bom_list.append(item)
        return item

    def is_resolvable(self, identifier: str) -> bool:
        """True when expanding `identifier` would not produce a placeholder."""
        if self._directly_resolvable(identifier):
            return True
        if self._mapped_substitute(identifier) is not None:
            return True
        return self._colored_variant(identifier) is not None

    # --- Resolution ---

    def _enter(
        self, identifier: str, visited: Iterable[str] | None, depth: int
    ) -> set[str]:
        if depth > self.settings.max_depth:
            raise RecursionDepthError(identifier, depth)
        if depth > self.settings.warn_depth:
            logger.warning(
                f"Deep nesting while expanding '{identifier}' (depth {depth})"
            )
        if self.deadline is not None:
            self.deadline.check(identifier)

        branch = set(visited or ())
        branch.add(identifier)
        return branch

    def _resolve(
        self,
        identifier: str,
        quantity: int,
        category: str,
        visited: Iterable[str] | None,
        depth: int,
    ) -> BOMItem:
        if visited and identifier in visited:
            logger.warning(
                f"Circular reference: '{identifier}' already expanded in this "
                "branch; not expanding again"
            )
            return BOMItem(
                id=identifier,
                name=f"Circular Reference: {identifier}",
                quantity=quantity,
                category=C.CAT_CIRCULAR_REFERENCE,
                type=C.TYPE_UNKNOWN,
                is_placeholder=True,
            )

        branch = self._enter(identifier, visited, depth)

        assembly = self._get_assembly(identifier)
        if assembly is not None:
            item = self._assembly_item(assembly, quantity, category)
            for link in assembly.components:
                self._expand_link(link, quantity, assembly.id, item.children, branch, depth)
            return item

        part = self._get_part(identifier)
        if part is not None:
            return self._part_item(part, quantity, category)

        return self._resolve_fallback(identifier, quantity, category, branch, depth)

    def _resolve_fallback(
        self,
        identifier: str,
        quantity: int,
        category: str,
        branch: set[str],
        depth: int,
    ) -> BOMItem:
        if self.fallback is not None:
            resource = self.fallback.get_resource_assembly(identifier)
            if resource is not None:
                logger.info(f"Resolved '{identifier}' from resource assemblies")
                item = self._assembly_item(resource, quantity, category)
                for link in resource.components:
                    if link.assembly_id is None and link.part is None:
                        item.children.append(
                            self._unknown_component(link, quantity, resource.id)
                        )
                    elif link.part is not None:
                        self._expand_part_link(
                            link.part, quantity * link.quantity, item.children,
                            branch, depth,
                        )
                    else:
                        self._expand_by_id(
                            link.assembly_id, quantity * link.quantity,
                            item.children, branch, depth,
                        )
                return item

            substitute = self._mapped_substitute(identifier)
            if substitute is not None:
                logger.info(f"Substituting '{substitute}' for generic id '{identifier}'")
                return self._resolve(substitute, quantity, category, branch, depth)

        colored = self._colored_variant(identifier)
        if colored is not None:
            logger.info(f"Using colored pegboard variant '{colored}' for '{identifier}'")
            return self._resolve(colored, quantity, category, branch, depth)

        return self._placeholder(identifier, quantity, category)

    def _expand_link(
        self,
        link: ComponentLink,
        quantity: int,
        parent_id: str,
        children: list[BOMItem],
        branch: set[str],
        depth: int,
    ) -> None:
        child_qty = quantity * link.quantity
        if link.assembly_id is not None:
            self.expand(
                link.assembly_id, child_qty, C.CAT_SUB_ASSEMBLY, children,
                branch, depth + 1,
            )
        elif link.part is not None:
            self._expand_part_link(link.part, child_qty, children, branch, depth)
        else:
            children.append(self._unknown_component(link, quantity, parent_id))

    def _expand_part_link(
        self,
        part: Part,
        quantity: int,
        children: list[BOMItem],
        branch: set[str],
        depth: int,
    ) -> None:
        # Catalog convention: parts that are really sub-assemblies exist as
        # assemblies under the same id or the ASSY- prefixed id.
        for candidate in (part.id, f"{C.ASSEMBLY_ID_PREFIX}{part.id}"):
            if self._get_assembly(candidate) is not None:
                self.expand(
                    candidate, quantity, C.CAT_SUB_ASSEMBLY, children,
                    branch, depth + 1,
                )
                return
        children.append(self._part_item(part, quantity, C.CAT_PART))

    def _expand_by_id(
        self,
        child_id: str,
        quantity: int,
        children: list[BOMItem],
        branch: set[str],
        depth: int,
    ) -> None:
        """Resolves a child referenced by id only: assembly, then part, then chain."""
        part = None
        if self._get_assembly(child_id) is None:
            part = self._get_part(child_id)

        if part is not None:
            self._expand_part_link(part, quantity, children, branch, depth)
        else:
            self.expand(
                child_id, quantity, C.CAT_SUB_ASSEMBLY, children, branch, depth + 1
            )

    # --- Fallback helpers ---

    def _directly_resolvable(self, identifier: str) -> bool:
        if self._get_assembly(identifier) is not None:
            return True
        if self._get_part(identifier) is not None:
            return True
        return (
            self.fallback is not None
            and self.fallback.get_resource_assembly(identifier) is not None
        )

    def _mapped_substitute(self, identifier: str) -> str | None:
        if self.fallback is None:
            return None
        target = self.fallback.resolve_generic(identifier)
        if target and target != identifier and self._directly_resolvable(target):
            return target
        return None

    def _colored_variant(self, identifier: str) -> str | None:
        match = _PEGBOARD_SIZE_KIT_PATTERN.match(identifier)
        if not match:
            return None
        size, type_code = match.groups()
        for color in C.PEGBOARD_COLORS:
            candidate = f"T2-ADW-PB-{size}-{color}-{type_code}-KIT"
            if self._directly_resolvable(candidate):
                return candidate
        return None

    # --- Repository access ---

    def _get_assembly(self, identifier: str) -> Assembly | None:
        try:
            return self.catalog.get_assembly_by_id(identifier)
        except BomGenerationError:
            raise
        except Exception as e:
            raise CatalogRepositoryError(identifier, str(e)) from e

    def _get_part(self, identifier: str) -> Part | None:
        try:
            return self.catalog.get_part_by_id(identifier)
        except BomGenerationError:
            raise
        except Exception as e:
            raise CatalogRepositoryError(identifier, str(e)) from e

    # --- Item builders ---

    @staticmethod
    def _assembly_item(assembly: Assembly, quantity: int, category: str) -> BOMItem:
        return BOMItem(
            id=assembly.id,
            name=assembly.name,
            quantity=quantity,
            category=category or assembly.type,
            type=assembly.type,
            part_number=assembly.display_part_number,
        )

    @staticmethod
    def _part_item(part: Part, quantity: int, category: str) -> BOMItem:
        return BOMItem(
            id=part.id,
            name=part.name,
            quantity=quantity,
            category=category or C.CAT_PART,
            type=part.type,
            part_number=part.id,
            is_part=True,
        )

    @staticmethod
    def _unknown_component(link: ComponentLink, quantity: int, parent_id: str) -> BOMItem:
        logger.warning(
            f"No linked part or assembly found for component '{link.id}' "
            f"in assembly '{parent_id}'"
        )
        return BOMItem(
            id=f"UNKNOWN_COMPONENT_{link.id}",
            name="Unknown Component",
            quantity=quantity * link.quantity,
            category=C.CAT_UNKNOWN_COMPONENT,
            type=C.TYPE_UNKNOWN_COMPONENT,
            is_placeholder=True,
            is_part=True,
        )

    def _placeholder(self, identifier: str, quantity: int, category: str) -> BOMItem:
        mapping = self.fallback.get_mapping(identifier) if self.fallback else None
        description = mapping.get("description") if mapping else None
        suggestion = mapping.get("default_recommendation") if mapping else None

        logger.warning(
            f"'{identifier}' not found in catalog or fallback data; "
            "adding placeholder"
        )
        return BOMItem(
            id=identifier,
            name=(
                f"Unknown {description}: {identifier}"
                if description
                else f"Unknown Assembly: {identifier}"
            ),
            quantity=quantity,
            category=category or C.CAT_UNKNOWN,
            type=C.TYPE_UNKNOWN,
            is_placeholder=True,
            resolution_suggestion=suggestion,
        )

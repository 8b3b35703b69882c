"""
Custom part numbers for dimensionally custom pegboards and basins.

Formats:
    Pegboard: T2-ADW-PB-<width>x<length>
    Basin:    T2-ADW-BSN-<width>x<length>x<depth>

Order entry screens historically stored custom panels under the
'720.215.002 T2-ADW-PB-' and '720.215.001 T2-ADW-BASIN-' prefixes; those are
recognized as custom too.
"""

import logging
import re
from dataclasses import dataclass

from src.sink_bom import constants as C
from src.sink_bom.catalog import CatalogRepository
from src.sink_bom.exceptions import CatalogRepositoryError, CustomPartError
from src.sink_bom.types import BOMItem

logger = logging.getLogger(__name__)

PEGBOARD_PATTERN = re.compile(r"^T2-ADW-PB-(\d+)x(\d+)$")
BASIN_PATTERN = re.compile(r"^T2-ADW-BSN-(\d+)x(\d+)x(\d+)$")


@dataclass(frozen=True)
class CustomPartSpec:
    kind: str
    width: int
    length: int
    depth: int | None = None


@dataclass(frozen=True)
class GeneratedPartNumber:
    part_number: str
    spec: CustomPartSpec


class CustomPartSynthesizer:
    """
    Generates, parses and labels custom part numbers.

    A generated number must never shadow a real catalog entry, so generation
    checks the catalog for a collision when one is provided.
    """

    def __init__(self, catalog: CatalogRepository | None = None):
        self.catalog = catalog

    def generate(
        self,
        kind: str,
        width: int | None,
        length: int | None,
        depth: int | None = None,
    ) -> GeneratedPartNumber:
        """
        Builds the part number for a custom panel.

        Args:
            kind: 'pegboard' or 'basin'.
            width: Width in inches.
            length: Length in inches.
            depth: Depth in inches (basins only).

        Returns:
            The part number and the spec it was built from.

        Raises:
            CustomPartError: Unknown kind, missing/non-positive dimensions,
                a malformed result, or a collision with the catalog.
        """
        prefix = C.CUSTOM_PART_PREFIXES.get(kind)
        if prefix is None:
            raise CustomPartError(f"Invalid custom part type: {kind}")

        if kind == "pegboard":
            if not (_positive(width) and _positive(length)):
                raise CustomPartError(
                    "Pegboard requires width and length dimensions"
                )
            part_number = f"{prefix}-{width}x{length}"
            spec = CustomPartSpec(kind, width, length)
        else:
            if not (_positive(width) and _positive(length) and _positive(depth)):
                raise CustomPartError(
                    "Basin requires width, length, and depth dimensions"
                )
            part_number = f"{prefix}-{width}x{length}x{depth}"
            spec = CustomPartSpec(kind, width, length, depth)

        if not self.is_custom_part_number(part_number):
            raise CustomPartError(
                f"Generated part number has invalid format: {part_number}",
                part_number=part_number,
            )

        if self._exists_in_catalog(part_number):
            raise CustomPartError(
                f"Part number conflicts with existing standard part: {part_number}",
                part_number=part_number,
            )

        logger.info(f"Generated custom {kind} part number {part_number}")
        return GeneratedPartNumber(part_number=part_number, spec=spec)

    def _exists_in_catalog(self, part_number: str) -> bool:
        if self.catalog is None:
            return False
        try:
            return (
                self.catalog.get_part_by_id(part_number) is not None
                or self.catalog.get_assembly_by_id(part_number) is not None
            )
        except Exception as e:
            raise CatalogRepositoryError(part_number, str(e)) from e

    @staticmethod
    def parse(part_number: str) -> CustomPartSpec | None:
        """Inverse of `generate`; None for anything that is not custom."""
        match = PEGBOARD_PATTERN.match(part_number)
        if match:
            return CustomPartSpec("pegboard", int(match[1]), int(match[2]))

        match = BASIN_PATTERN.match(part_number)
        if match:
            return CustomPartSpec(
                "basin", int(match[1]), int(match[2]), int(match[3])
            )
        return None

    @staticmethod
    def is_custom_part_number(part_number: str) -> bool:
        return bool(
            PEGBOARD_PATTERN.match(part_number) or BASIN_PATTERN.match(part_number)
        )

    @staticmethod
    def legacy_kind(part_number: str) -> str | None:
        """'pegboard'/'basin' for a legacy stored custom number, else None."""
        if part_number.startswith(C.LEGACY_CUSTOM_PEGBOARD_PREFIX):
            return "pegboard"
        if part_number.startswith(C.LEGACY_CUSTOM_BASIN_PREFIX):
            return "basin"
        return None

    def is_custom(self, part_number: str) -> bool:
        """Matches both the current format and the legacy stored prefixes."""
        return (
            self.is_custom_part_number(part_number)
            or self.legacy_kind(part_number) is not None
        )

    @staticmethod
    def display_name(spec: CustomPartSpec) -> str:
        if spec.kind == "pegboard":
            return f'Custom Pegboard {spec.width}"x{spec.length}"'
        if spec.kind == "basin":
            return f'Custom Basin {spec.width}"x{spec.length}"x{spec.depth}"'
        return "Custom Part"

    def describe(self, part_number: str) -> str:
        """Display name for any custom number, legacy or current."""
        spec = self.parse(part_number)
        if spec is not None:
            return self.display_name(spec)

        kind = self.legacy_kind(part_number)
        if kind == "pegboard":
            suffix = part_number[len(C.LEGACY_CUSTOM_PEGBOARD_PREFIX):]
            return f"Custom Pegboard Panel {suffix}"
        if kind == "basin":
            suffix = part_number[len(C.LEGACY_CUSTOM_BASIN_PREFIX):]
            return f"Custom Basin {suffix}"
        return "Custom Part"

    def build_item(
        self, part_number: str, category: str, quantity: int = 1
    ) -> BOMItem:
        """
        Terminal BOM line for a custom panel.

        A catalog part stored under the custom number (legacy data) supplies
        the name and type; otherwise they are synthesized.
        """
        part = None
        if self.catalog is not None:
            try:
                part = self.catalog.get_part_by_id(part_number)
            except Exception as e:
                raise CatalogRepositoryError(part_number, str(e)) from e

        return BOMItem(
            id=part_number,
            name=part.name if part else self.describe(part_number),
            quantity=quantity,
            category=category,
            type=part.type if part else C.TYPE_CUSTOM,
            part_number=part_number,
            is_custom=True,
            is_part=True,
        )


def _positive(value: int | None) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value > 0

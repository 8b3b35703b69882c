"""
BOM generation for a whole order.

Walks every build number of an order in sequence, asks the rule tables which
catalog ids the configuration needs, and expands each of them through a
fresh `AssemblyExpander`. The result carries the hierarchical tree plus its
flattened projection.
"""

import logging
from contextlib import contextmanager
from typing import Any, Iterator, Mapping, Sequence

from src.sink_bom import constants as C
from src.sink_bom.catalog import (
    CatalogFallbackProvider,
    CatalogRepository,
    load_control_box_components,
)
from src.sink_bom.custom_parts import CustomPartSynthesizer
from src.sink_bom.exceptions import (
    BomGenerationError,
    BuildGenerationError,
    OrderLineGenerationError,
    OrderValidationError,
)
from src.sink_bom.expander import AssemblyExpander, ExpansionDeadline
from src.sink_bom.parser import parse_order_configuration
from src.sink_bom.projector import flatten_bom
from src.sink_bom.rules import (
    aggregate_basin_types,
    is_configuration_complete,
    pegboard_kit_candidates,
    select_auto_faucets,
    select_control_box,
    select_manual_kit,
    select_sink_body,
)
from src.sink_bom.settings import EngineSettings
from src.sink_bom.types import (
    BOMItem,
    BOMResult,
    OrderConfiguration,
    SinkConfiguration,
)

logger = logging.getLogger(__name__)


class BomGenerator:
    """
    Generates BOMs against one catalog.

    The generator itself holds configuration only; every `generate` call
    builds its own expander (and deadline), so nothing carries over between
    orders.

    Attributes:
        catalog: Primary catalog repository.
        fallback: Generic mappings and resource assemblies, or None.
        settings: Depth limits and deadline.
        control_box_components: Control box id -> [(component id, qty)] for
            boxes whose contents follow the basin mix. Read from
            `settings.control_box_table` when not passed explicitly.
    """

    def __init__(
        self,
        catalog: CatalogRepository,
        fallback: CatalogFallbackProvider | None = None,
        settings: EngineSettings | None = None,
        control_box_components: Mapping[str, Sequence[tuple[str, int]]] | None = None,
    ):
        self.catalog = catalog
        self.fallback = fallback
        self.settings = settings or EngineSettings()
        if control_box_components is None and self.settings.control_box_table:
            control_box_components = load_control_box_components(
                self.settings.control_box_table
            )
        self.control_box_components = dict(
            C.CONTROL_BOX_COMPONENTS
            if control_box_components is None
            else control_box_components
        )
        self.synthesizer = CustomPartSynthesizer(catalog)

    def _new_expander(self) -> AssemblyExpander:
        deadline = None
        if self.settings.deadline_seconds:
            deadline = ExpansionDeadline(self.settings.deadline_seconds)
        return AssemblyExpander(
            self.catalog, self.fallback, self.settings, deadline=deadline
        )

    def generate(self, order: OrderConfiguration | Mapping[str, Any]) -> BOMResult:
        """
        Generates the BOM for an order.

        Args:
            order: A parsed OrderConfiguration or the raw order payload.

        Returns:
            BOMResult with the hierarchical tree, the flattened rows and
            their counts.

        Raises:
            OrderValidationError: Missing order fields, a build without a
                configuration, or a sink length outside 48-120".
            BuildGenerationError: Any other fatal error inside a build,
                wrapping the original.
            OrderLineGenerationError: A fatal error on the manuals line.
        """
        order = parse_order_configuration(order)
        expander = self._new_expander()
        bom: list[BOMItem] = []

        # 1. Manuals, once per order
        manual_kit = select_manual_kit(order.language)
        logger.info(f"Adding manual kit {manual_kit}")
        with _order_line_context("manuals"):
            expander.expand(manual_kit, 1, C.CAT_SYSTEM, bom)

        # 2. Builds
        for build_number in order.build_numbers:
            config = order.configurations.get(build_number)
            if config is None:
                raise OrderValidationError(
                    "No configuration found for build number",
                    field="configurations",
                    build_number=build_number,
                )
            with _build_context(build_number):
                self._add_build(expander, build_number, config, bom)

        # 3. Accessories, after every build
        for build_number in order.build_numbers:
            with _build_context(build_number):
                for accessory in order.accessories.get(build_number, ()):
                    if accessory.quantity > 0:
                        expander.expand(
                            accessory.assembly_id,
                            accessory.quantity,
                            C.CAT_ACCESSORY,
                            bom,
                        )

        flattened = flatten_bom(bom)
        logger.info(
            f"Generated BOM with {len(bom)} top-level items "
            f"({len(flattened)} rows)"
        )
        return {
            "hierarchical": bom,
            "flattened": flattened,
            "total_items": len(flattened),
            "top_level_items": len(bom),
        }

    def _add_build(
        self,
        expander: AssemblyExpander,
        build_number: str,
        config: SinkConfiguration,
        bom: list[BOMItem],
    ) -> None:
        logger.info(f"Processing build number {build_number}")

        self._add_sink_body(expander, build_number, config, bom)

        if config.legs_type_id:
            expander.expand(config.legs_type_id, 1, C.CAT_LEGS, bom)
        if config.feet_type_id:
            expander.expand(config.feet_type_id, 1, C.CAT_FEET, bom)

        if config.pegboard:
            self._add_pegboard(expander, config, bom)

        for item_id in config.drawers_and_compartments:
            expander.expand(item_id, 1, C.CAT_DRAWER_COMPARTMENT, bom)

        self._add_basins(expander, build_number, config, bom)
        self._add_control_box(expander, build_number, config, bom)

        for faucet_id, count in select_auto_faucets(config.basins):
            expander.expand(faucet_id, count, C.CAT_FAUCET_AUTO, bom)
        for faucet in config.faucets:
            expander.expand(faucet.faucet_type_id, faucet.quantity, C.CAT_FAUCET_KIT, bom)

        for sprayer_id in config.sprayer_type_ids:
            expander.expand(sprayer_id, 1, C.CAT_SPRAYER_KIT, bom)

    def _add_sink_body(
        self,
        expander: AssemblyExpander,
        build_number: str,
        config: SinkConfiguration,
        bom: list[BOMItem],
    ) -> None:
        length = config.length
        if length is None:
            logger.info(
                f"Build {build_number}: no sink length given; sink body omitted"
            )
            return

        if length < C.MIN_SINK_LENGTH:
            raise OrderValidationError(
                f'Sink length must be at least {C.MIN_SINK_LENGTH}". '
                f'Current length: {length}"',
                field="length",
                build_number=build_number,
            )

        body_id = select_sink_body(length)
        if body_id is None:
            raise OrderValidationError(
                f'No sink body assembly available for length: {length}". '
                f'Supported range: {C.MIN_SINK_LENGTH}"-{C.MAX_SINK_LENGTH}"',
                field="length",
                build_number=build_number,
            )

        logger.info(f"Selected sink body {body_id} for length {length}")
        expander.expand(body_id, 1, C.CAT_SINK_BODY, bom)

    def _add_pegboard(
        self,
        expander: AssemblyExpander,
        config: SinkConfiguration,
        bom: list[BOMItem],
    ) -> None:
        expander.expand(C.OVERHEAD_LIGHT_KIT, 1, C.CAT_PEGBOARD_MANDATORY, bom)

        chosen_category = None
        candidates = pegboard_kit_candidates(config)
        if candidates:
            kit_id, chosen_category = next(
                (c for c in candidates if expander.is_resolvable(c[0])),
                candidates[0],
            )
            logger.info(f"Selected pegboard kit {kit_id} ({chosen_category})")
            expander.expand(kit_id, 1, chosen_category, bom)
        else:
            logger.info("Pegboard enabled but no type selected; only the light kit")

        kit_has_color = chosen_category in (
            C.CAT_PEGBOARD_SPECIFIC_KIT,
            C.CAT_PEGBOARD_COLORED_KIT,
        )
        if config.pegboard_color and not kit_has_color:
            expander.expand(C.PEGBOARD_COLOR_COMPONENT, 1, C.CAT_PEGBOARD_COLOR, bom)

        # The panel is part of any specific kit
        if config.specific_pegboard_kit_id:
            return

        size_part = config.pegboard_size_part_number
        if size_part:
            if self.synthesizer.is_custom(size_part):
                bom.append(self.synthesizer.build_item(size_part, C.CAT_PEGBOARD_PANEL))
            else:
                expander.expand(size_part, 1, C.CAT_PEGBOARD_SIZE, bom)
        elif config.custom_pegboard_width or config.custom_pegboard_length:
            generated = self.synthesizer.generate(
                "pegboard", config.custom_pegboard_width, config.custom_pegboard_length
            )
            bom.append(
                self.synthesizer.build_item(generated.part_number, C.CAT_PEGBOARD_PANEL)
            )

    def _add_basins(
        self,
        expander: AssemblyExpander,
        build_number: str,
        config: SinkConfiguration,
        bom: list[BOMItem],
    ) -> None:
        for idx, basin in enumerate(config.basins, start=1):
            if not basin.basin_type_id:
                raise OrderValidationError(
                    f"Basin {idx} is missing a basin type",
                    field="basins",
                    build_number=build_number,
                )

        # Type kits are aggregated; sizes and addons stay per basin.
        for basin_type_id, count in aggregate_basin_types(config.basins):
            expander.expand(basin_type_id, count, C.CAT_BASIN_TYPE_KIT, bom)

        for basin in config.basins:
            size_part = basin.basin_size_part_number
            if size_part:
                if self.synthesizer.is_custom(size_part):
                    bom.append(self.synthesizer.build_item(size_part, C.CAT_BASIN_PANEL))
                else:
                    expander.expand(size_part, 1, C.CAT_BASIN_SIZE_ASSEMBLY, bom)
            elif basin.custom_width or basin.custom_length or basin.custom_depth:
                generated = self.synthesizer.generate(
                    "basin", basin.custom_width, basin.custom_length, basin.custom_depth
                )
                bom.append(
                    self.synthesizer.build_item(generated.part_number, C.CAT_BASIN_PANEL)
                )

            for addon_id in basin.addon_ids:
                expander.expand(addon_id, 1, C.CAT_BASIN_ADDON, bom)

    def _add_control_box(
        self,
        expander: AssemblyExpander,
        build_number: str,
        config: SinkConfiguration,
        bom: list[BOMItem],
    ) -> None:
        if not is_configuration_complete(config):
            logger.info(
                f"Build {build_number}: configuration incomplete; "
                "control box not selected"
            )
            return

        control_box_id = config.control_box_id or select_control_box(config.basins)
        if not control_box_id:
            return

        components = self.control_box_components.get(control_box_id)
        if components is not None:
            expander.expand_with_components(
                control_box_id, components, 1, C.CAT_CONTROL_BOX, bom
            )
        else:
            expander.expand(control_box_id, 1, C.CAT_CONTROL_BOX, bom)


@contextmanager
def _build_context(build_number: str) -> Iterator[None]:
    """Re-raises fatal engine errors with the build number attached."""
    try:
        yield
    except (OrderValidationError, BuildGenerationError):
        # Already carry the build number
        raise
    except BomGenerationError as e:
        logger.error(f"BOM generation failed for build {build_number}: {e}")
        raise BuildGenerationError(build_number, e) from e


@contextmanager
def _order_line_context(line: str) -> Iterator[None]:
    """Re-raises fatal engine errors raised outside any build."""
    try:
        yield
    except OrderValidationError:
        raise
    except BomGenerationError as e:
        logger.error(f"BOM generation failed on the order-level {line} line: {e}")
        raise OrderLineGenerationError(line, e) from e


def generate_bom(
    order: OrderConfiguration | Mapping[str, Any],
    catalog: CatalogRepository,
    fallback: CatalogFallbackProvider | None = None,
    settings: EngineSettings | None = None,
    control_box_components: Mapping[str, Sequence[tuple[str, int]]] | None = None,
) -> BOMResult:
    """Convenience wrapper: one-off `BomGenerator(...).generate(order)`."""
    generator = BomGenerator(
        catalog,
        fallback=fallback,
        settings=settings,
        control_box_components=control_box_components,
    )
    return generator.generate(order)

import logging
from typing import Any

from blockforge.constants import (
    DEFAULT_EXTENSION_COLORS,
    SEPARATOR,
    SUPPORTED_BUTTON_CALLBACKS,
    BlockType,
)
from blockforge.conversion.argument_resolver import ArgumentResolver
from blockforge.conversion.block_json import BlockJsonBuilder
from blockforge.conversion.field_types import (
    FieldTypeRegistry,
    build_custom_field_type,
    field_type_registry,
)
from blockforge.conversion.menus import build_menu_definition
from blockforge.conversion.messages import format_message
from blockforge.conversion.options import ConversionOptions
from blockforge.conversion.template_parser import parse_template, placeholder_names
from blockforge.conversion.xml_builder import block_xml, button_xml, mutation_xml, separator_xml
from blockforge.entities import (
    BlockDescriptor,
    CategoryInfo,
    ConversionOutcome,
    ConversionResult,
    ExtensionMetadata,
    FieldTypeAdded,
)
from blockforge.errors import ConversionError, MissingFieldError, UnknownBlockTypeError

logger = logging.getLogger(__name__)


class ConversionDriver:
    """
    compiles an extension's block list, in declared order, into category info.

    conversion is all-or-nothing per extension: a structural error in any block
    propagates to the caller and nothing is registered. custom field types are
    offered to the registry only after every block converted.
    """

    def __init__(
        self,
        field_registry: FieldTypeRegistry | None = None,
        options: ConversionOptions | None = None,
    ):
        self.field_registry = field_registry if field_registry is not None else field_type_registry
        self.options = options or ConversionOptions.from_settings()

    def convert(self, extension_info: ExtensionMetadata | dict[str, Any]) -> ConversionOutcome:
        metadata = (
            extension_info
            if isinstance(extension_info, ExtensionMetadata)
            else ExtensionMetadata.model_validate(extension_info)
        )
        logger.info(f"converting extension {metadata.id} ({len(metadata.blocks)} entries)")

        try:
            category = self._build_category(metadata)
        except ConversionError as e:
            e.detail["extension_id"] = metadata.id
            logger.error(f"failed to convert menus of extension {metadata.id}: {e.message}")
            raise

        resolver = ArgumentResolver(metadata.id, category.custom_field_types, metadata.menus)
        json_builder = BlockJsonBuilder(category, self.options)

        for index, entry in enumerate(metadata.blocks):
            try:
                category.blocks.append(self._convert_entry(entry, category, resolver, json_builder))
            except ConversionError as e:
                e.detail.update({"extension_id": metadata.id, "block_index": index})
                if isinstance(entry, BlockDescriptor):
                    e.detail["opcode"] = entry.opcode
                logger.error(f"failed to convert block {index} of extension {metadata.id}: {e.message}")
                raise

        added: list[FieldTypeAdded] = []
        for type_name, field_type in category.custom_field_types.items():
            announcement = self.field_registry.ensure_registered(
                type_name, field_type.implementation, extension_id=metadata.id
            )
            if announcement is not None:
                added.append(announcement)

        logger.info(
            f"converted extension {metadata.id}: {len(category.blocks)} entries, "
            f"{len(added)} new field types"
        )
        return ConversionOutcome(category_info=category, field_types_added=added)

    def _build_category(self, metadata: ExtensionMetadata) -> CategoryInfo:
        colors = (metadata.color1, metadata.color2, metadata.color3)
        category = CategoryInfo(
            id=metadata.id,
            name=format_message(metadata.name) or metadata.id,
            color1=colors[0] or DEFAULT_EXTENSION_COLORS[0],
            color2=colors[1] or DEFAULT_EXTENSION_COLORS[1],
            color3=colors[2] or DEFAULT_EXTENSION_COLORS[2],
            block_icon_uri=metadata.block_icon_uri,
            menu_icon_uri=metadata.menu_icon_uri,
            show_status_button=metadata.show_status_button,
        )
        category.custom_field_types = {
            type_name: build_custom_field_type(type_name, field_type, category)
            for type_name, field_type in metadata.custom_field_types.items()
        }
        category.menus = [
            build_menu_definition(menu_name, menu, category)
            for menu_name, menu in metadata.menus.items()
        ]
        return category

    def _convert_entry(
        self,
        entry: BlockDescriptor | str,
        category: CategoryInfo,
        resolver: ArgumentResolver,
        json_builder: BlockJsonBuilder,
    ) -> ConversionResult:
        if entry == SEPARATOR:
            return ConversionResult(xml=separator_xml(), info=SEPARATOR)
        assert isinstance(entry, BlockDescriptor)

        block_type = parse_block_type(entry)
        if block_type is BlockType.BUTTON:
            return self._convert_button(entry)

        if not entry.opcode:
            raise MissingFieldError(
                f"{block_type.value} block is missing an opcode",
                detail={"block_type": block_type.value},
            )

        lines = parse_template(entry.text, entry.arguments, strict=self.options.strict_placeholders)
        names = placeholder_names(lines)
        unreferenced = [name for name in entry.arguments if name not in names]
        if unreferenced:
            logger.warning(
                f"block {category.id}_{entry.opcode} declares arguments not used in its text: "
                f"{unreferenced}"
            )

        resolved = {name: resolver.resolve(name, entry.arguments.get(name)) for name in names}
        block_json = json_builder.build(entry, block_type, lines, resolved)
        mutation = mutation_xml(entry) if entry.is_dynamic else ""

        return ConversionResult(
            block_json=block_json,
            xml=block_xml(block_json["type"], resolved.values(), mutation),
            info=entry,
        )

    @staticmethod
    def _convert_button(entry: BlockDescriptor) -> ConversionResult:
        if not entry.func:
            raise MissingFieldError("button is missing its callback key (func)")
        if entry.func not in SUPPORTED_BUTTON_CALLBACKS:
            logger.warning(f"custom button callbacks not supported yet: {entry.func}")

        text = " ".join(format_message(line) for line in entry.lines)
        return ConversionResult(xml=button_xml(text, entry.func), info=entry.func)


def parse_block_type(entry: BlockDescriptor) -> BlockType:
    try:
        return BlockType(entry.block_type)
    except ValueError:
        raise UnknownBlockTypeError(
            f"unknown block type {entry.block_type!r}",
            detail={"block_type": entry.block_type, "supported": [t.value for t in BlockType]},
        )

from typing import Any

from pydantic import BaseModel, Field

from blockforge.entities.extension import BlockDescriptor


class ConversionResult(BaseModel):
    """
    compiled form of one block list entry.

    block_json is the block factory definition (serialized as "json"), None for
    buttons and separators. info is the source descriptor, or the callback key
    for buttons and the separator sentinel for separators.
    """

    model_config = {"populate_by_name": True}

    block_json: dict[str, Any] | None = Field(None, alias="json")
    xml: str
    info: BlockDescriptor | str


class MenuDefinition(BaseModel):
    model_config = {"populate_by_name": True}

    name: str
    block_json: dict[str, Any] = Field(..., alias="json")


class ConvertedFieldType(BaseModel):
    """a custom field type bound to the extension that declared it"""

    model_config = {"populate_by_name": True}

    field_type: str = Field(..., alias="fieldType")
    extended_name: str = Field(..., alias="extendedName")
    shadow_type: str = Field(..., alias="shadowType")
    shadow_field_name: str = Field(..., alias="shadowFieldName")
    block_json: dict[str, Any] = Field(..., alias="json")
    implementation: Any = Field(None, exclude=True)


class CategoryInfo(BaseModel):
    """payload of EXTENSION_ADDED: the extension's category and its compiled blocks"""

    model_config = {"populate_by_name": True}

    id: str
    name: str
    color1: str
    color2: str
    color3: str
    block_icon_uri: str | None = Field(None, alias="blockIconURI")
    menu_icon_uri: str | None = Field(None, alias="menuIconURI")
    show_status_button: bool = Field(False, alias="showStatusButton")
    blocks: list[ConversionResult] = Field(default_factory=list)
    menus: list[MenuDefinition] = Field(default_factory=list)
    custom_field_types: dict[str, ConvertedFieldType] = Field(
        default_factory=dict, alias="customFieldTypes"
    )


class FieldTypeAdded(BaseModel):
    """payload of EXTENSION_FIELD_ADDED"""

    model_config = {"populate_by_name": True}

    name: str
    field_name: str = Field(..., alias="fieldName")
    extension_id: str = Field(..., alias="extensionId")
    implementation: Any = None


class HatInfo(BaseModel):
    edge_activated: bool = True
    restart_existing_threads: bool = False


class ConversionOutcome(BaseModel):
    category_info: CategoryInfo
    field_types_added: list[FieldTypeAdded] = Field(default_factory=list)

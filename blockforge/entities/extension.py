from typing import Any, Literal

from pydantic import BaseModel, Field, field_validator

from blockforge.constants import ArgumentType


class MessageDescriptor(BaseModel):
    """translatable text; only the default string is used by the compiler"""

    model_config = {"frozen": True}

    id: str | None = None
    default: str
    description: str | None = None


Message = str | MessageDescriptor


class ArgumentDescriptor(BaseModel):
    model_config = {"populate_by_name": True, "frozen": True, "extra": "allow"}

    type: str = ArgumentType.STRING.value
    default_value: Any = Field(None, alias="defaultValue")
    data_uri: str | None = Field(None, alias="dataURI")
    menu: str | None = None
    flip_rtl: bool = Field(False, alias="flipRTL")


class BlockDescriptor(BaseModel):
    """one entry of an extension's block list"""

    model_config = {"populate_by_name": True, "frozen": True, "extra": "allow"}

    block_type: str = Field(..., alias="blockType")
    opcode: str | None = None
    func: str | None = None
    text: Message | list[Message] = ""
    arguments: dict[str, ArgumentDescriptor] = Field(default_factory=dict)
    branch_count: int | None = Field(None, alias="branchCount", ge=0)
    is_terminal: bool = Field(False, alias="isTerminal")
    block_icon_uri: str | None = Field(None, alias="blockIconURI")
    disable_monitor: bool = Field(False, alias="disableMonitor")
    hide_from_palette: bool = Field(False, alias="hideFromPalette")
    is_dynamic: bool = Field(False, alias="isDynamic")
    is_edge_activated: bool = Field(True, alias="isEdgeActivated")
    should_restart_existing_threads: bool = Field(False, alias="shouldRestartExistingThreads")

    @property
    def lines(self) -> list[Message]:
        return list(self.text) if isinstance(self.text, list) else [self.text]


class MenuInfo(BaseModel):
    model_config = {"populate_by_name": True, "frozen": True}

    # strings or {"text": ..., "value": ...} objects, checked during conversion
    items: list[Any] = Field(default_factory=list)
    accept_reporters: bool = Field(False, alias="acceptReporters")


class CustomFieldType(BaseModel):
    model_config = {"populate_by_name": True, "frozen": True}

    output: str | None = None
    output_shape: int | None = Field(None, alias="outputShape")
    implementation: Any = None


class ExtensionMetadata(BaseModel):
    """
    declarative description of an extension as supplied by its loader.

    blocks keep their declared order; the string "---" separates groups.
    """

    model_config = {"populate_by_name": True, "frozen": True, "extra": "allow"}

    id: str = Field(..., min_length=1)
    name: Message = ""
    color1: str | None = None
    color2: str | None = None
    color3: str | None = None
    blocks: list[Literal["---"] | BlockDescriptor] = Field(default_factory=list)
    menus: dict[str, MenuInfo] = Field(default_factory=dict)
    custom_field_types: dict[str, CustomFieldType] = Field(
        default_factory=dict, alias="customFieldTypes"
    )
    block_icon_uri: str | None = Field(None, alias="blockIconURI")
    menu_icon_uri: str | None = Field(None, alias="menuIconURI")
    show_status_button: bool = Field(False, alias="showStatusButton")

    @field_validator("menus", mode="before")
    @classmethod
    def expand_menu_shorthand(cls, v: Any) -> Any:
        """a bare item list is shorthand for {"items": [...]}"""
        if not isinstance(v, dict):
            return v
        return {name: {"items": menu} if isinstance(menu, list) else menu for name, menu in v.items()}

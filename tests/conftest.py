"""
Test configuration and fixtures
"""

import os

import pytest

# keep tests independent of any local extensions directory
os.environ["BLOCKFORGE_EXTENSIONS_PATH"] = "data/test_extensions"
os.environ["BLOCKFORGE_HOT_RELOAD"] = "false"
os.environ["BLOCKFORGE_ICON_COMPAT"] = "always"
os.environ["BLOCKFORGE_STRICT_PLACEHOLDERS"] = "true"


@pytest.fixture(autouse=True)
def reset_field_type_registry():
    """the registry is process-wide; every test starts from an empty one"""
    from blockforge.conversion import field_type_registry

    field_type_registry.reset()
    yield
    field_type_registry.reset()


@pytest.fixture
def driver():
    from blockforge.conversion import ConversionDriver, ConversionOptions, FieldTypeRegistry

    return ConversionDriver(field_registry=FieldTypeRegistry(), options=ConversionOptions())


@pytest.fixture
def test_extension_info():
    """one entry of every shape, in a fixed order"""
    return {
        "id": "test",
        "name": "fake test extension",
        "color1": "#111111",
        "color2": "#222222",
        "color3": "#333333",
        "blocks": [
            {
                "func": "MAKE_A_VARIABLE",
                "blockType": "button",
                "text": "this is a button",
            },
            {
                "opcode": "reporter",
                "blockType": "reporter",
                "text": "simple text",
                "blockIconURI": "invalid icon URI",
            },
            {
                "opcode": "inlineImage",
                "blockType": "reporter",
                "text": "text and [IMAGE]",
                "arguments": {
                    "IMAGE": {"type": "image", "dataURI": "invalid image URI"},
                },
            },
            "---",
            {
                "opcode": "command",
                "blockType": "command",
                "text": "text with [ARG] [ARG_WITH_DEFAULT]",
                "arguments": {
                    "ARG": {"type": "string"},
                    "ARG_WITH_DEFAULT": {"type": "string", "defaultValue": "default text"},
                },
            },
            {
                "opcode": "ifElse",
                "blockType": "conditional",
                "branchCount": 2,
                "text": ["test if [THING] is spiffy and if so then", "or elsewise"],
                "arguments": {"THING": {"type": "Boolean"}},
            },
            {
                "opcode": "loop",
                "blockType": "loop",
                "isTerminal": True,
                "text": ["loopty [MANY] loops"],
                "arguments": {"MANY": {"type": "number"}},
            },
        ],
    }


@pytest.fixture
def custom_field_extension_info():
    return {
        "id": "test_custom_fieldType",
        "name": "fake test extension with customFieldTypes",
        "color1": "#111111",
        "color2": "#222222",
        "color3": "#333333",
        "blocks": [
            {
                "opcode": "motorTurnFor",
                "blockType": "command",
                "text": "[PORT] run [DIRECTION]",
                "arguments": {
                    "PORT": {"defaultValue": "A", "type": "single-port-selector"},
                    "DIRECTION": {"defaultValue": "clockwise", "type": "custom-direction"},
                },
            }
        ],
        "customFieldTypes": {
            "single-port-selector": {
                "output": "string",
                "outputShape": 2,
                "implementation": {"fromJson": "portSelector"},
            },
            "custom-direction": {
                "output": "string",
                "outputShape": 3,
                "implementation": {"fromJson": "direction"},
            },
        },
    }


@pytest.fixture(scope="function")
def client():
    """create test client with lifespan handling"""
    from fastapi.testclient import TestClient

    from app import app

    with TestClient(app) as client:
        yield client

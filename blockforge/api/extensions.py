from fastapi import APIRouter, HTTPException
from pydantic import ValidationError

from blockforge.entities import CategoryInfo, ExtensionMetadata
from blockforge.errors import ConversionError, DuplicateExtensionError, ExtensionNotFoundError
from blockforge.library import ExtensionLibrary
from blockforge.runtime import runtime

router = APIRouter(prefix="/extensions", tags=["extensions"])

_library: ExtensionLibrary | None = None


def get_library() -> ExtensionLibrary:
    global _library
    if _library is None:
        _library = ExtensionLibrary()
    return _library


@router.get("")
async def list_extensions() -> list[dict[str, str]]:
    return [{"id": c.id, "name": c.name} for c in runtime.list_categories()]


@router.post("", status_code=201, response_model=CategoryInfo)
async def register_extension(metadata: ExtensionMetadata) -> CategoryInfo:
    try:
        return runtime.register_extension_primitives(metadata)
    except DuplicateExtensionError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except ConversionError as e:
        raise HTTPException(status_code=422, detail=e.to_dict())


@router.get("/toolbox")
async def toolbox() -> list[dict[str, str]]:
    """toolbox category XML per registered extension"""
    return runtime.get_blocks_xml()


@router.get("/field-types")
async def field_types() -> list[str]:
    return runtime.registered_field_types()


@router.post("/reload")
async def reload_extensions() -> dict:
    """re-read the extensions directory and (re)register every extension in it"""
    library = get_library()
    library.reload()

    loaded: list[str] = []
    failed: dict[str, str] = {}
    for metadata in library.list_extensions():
        try:
            runtime.load_extension(metadata)
            loaded.append(metadata.id)
        except (ConversionError, ValidationError) as e:
            failed[metadata.id] = str(e)

    return {"status": "ok", "loaded": loaded, "failed": failed}


@router.get("/{extension_id}", response_model=CategoryInfo)
async def get_extension(extension_id: str) -> CategoryInfo:
    category = runtime.get_category(extension_id)
    if category is None:
        raise HTTPException(status_code=404, detail=f"Extension '{extension_id}' not found")
    return category


@router.put("/{extension_id}", response_model=CategoryInfo)
async def refresh_extension(extension_id: str, metadata: ExtensionMetadata) -> CategoryInfo:
    if metadata.id != extension_id:
        raise HTTPException(
            status_code=400,
            detail=f"Extension id '{metadata.id}' does not match path '{extension_id}'",
        )
    try:
        return runtime.refresh_extension_primitives(metadata)
    except ExtensionNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ConversionError as e:
        raise HTTPException(status_code=422, detail=e.to_dict())

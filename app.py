from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import APIRouter, FastAPI
from loguru import logger

from blockforge import __version__
from blockforge.api.extensions import get_library
from blockforge.api.extensions import router as extensions_router
from blockforge.errors import ConversionError
from blockforge.file_watcher import ExtensionFileWatcher
from blockforge.runtime import runtime
from config import settings


def load_extensions_on_startup() -> None:
    library = get_library()
    for metadata in library.list_extensions():
        try:
            runtime.load_extension(metadata)
            logger.info(f"registered extension {metadata.id} from {library.source_of(metadata.id)}")
        except ConversionError as e:
            logger.error(f"skipping extension {metadata.id}: {e.message} {e.detail}")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    load_extensions_on_startup()

    watcher = ExtensionFileWatcher(get_library(), runtime)
    if settings.HOT_RELOAD:
        watcher.start()
    yield
    watcher.stop()


app = FastAPI(title="BlockForge", version=__version__, lifespan=lifespan)
api_router = APIRouter()
api_router.include_router(extensions_router)


@app.get("/health")
async def health() -> dict[str, str]:
    return {"status": "healthy"}


app.include_router(api_router, prefix="/api")


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=settings.HOST, port=settings.PORT)

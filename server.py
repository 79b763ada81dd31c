import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
import uvicorn

from config import HOST, PORT
from database.database import init_db
import handlers.data as hand_data
import handlers.user as hand_user
from handlers.common import ApiError
from utils.limits import SnapshotRejected


@asynccontextmanager
async def lifespan(app: FastAPI):
    logging.info("Init db...")
    init_db()
    yield


app = FastAPI(title="SparkDeck Sync", version="1.0.0", lifespan=lifespan)

app.include_router(hand_user.router)
app.include_router(hand_data.router)


@app.get('/health')
async def health() -> dict:
    return {'status': 'ok'}


@app.exception_handler(ApiError)
async def api_error_handler(request: Request, error: ApiError):
    if error.status_code >= 500:
        logging.error(f"{request.method} {request.url.path} failed: {error.message}")
    else:
        logging.warning(f"{request.method} {request.url.path} -> {error.status_code}: {error.message}")
    return JSONResponse(status_code=error.status_code, content={'error': error.message})


@app.exception_handler(SnapshotRejected)
async def snapshot_rejected_handler(request: Request, error: SnapshotRejected):
    logging.warning(f"Snapshot rejected ({error.status_code}): {error.message}")
    return JSONResponse(status_code=error.status_code, content={'error': error.message})


@app.exception_handler(Exception)
async def error_handler(request: Request, error: Exception):
    """Global error handler: log and answer with a generic 500."""
    logging.error(f"{request.method} {request.url.path} caused error: {error}", exc_info=error)
    return JSONResponse(status_code=500, content={'error': 'Server error.'})


def main() -> None:
    logging.info("Starting sync service")
    uvicorn.run(app, host=HOST, port=PORT)


if __name__ == '__main__':
    main()

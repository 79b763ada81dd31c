import logging
import sqlite3

from fastapi import APIRouter, Depends, Request
from fastapi.concurrency import run_in_threadpool
from pydantic import ValidationError

from database import database as db
from handlers.common import ApiError, get_identity, require_user_id
from handlers.schemas import SnapshotModel, SuccessResponse
from utils.constants import MAX_PAYLOAD_BYTES, MAX_DECKS, MAX_FOLDERS
from utils.limits import parse_snapshot_body

router = APIRouter()


@router.get('/data')
async def get_data(identity: dict = Depends(get_identity)) -> dict:
    user_id = await run_in_threadpool(require_user_id, identity)
    try:
        return await run_in_threadpool(db.load_snapshot, user_id)
    except sqlite3.Error as e:
        logging.error(f"Loading snapshot for user {user_id} failed: {e}", exc_info=e)
        raise ApiError(500, 'Server error.')


@router.put('/data', response_model=SuccessResponse)
async def put_data(request: Request, identity: dict = Depends(get_identity)) -> SuccessResponse:
    """Full replace of the user's data. Size and count limits are checked first."""
    user_id = await run_in_threadpool(require_user_id, identity)

    body = await request.body()
    data = parse_snapshot_body(body, max_bytes=MAX_PAYLOAD_BYTES, max_decks=MAX_DECKS, max_folders=MAX_FOLDERS)

    try:
        snapshot = SnapshotModel.model_validate(data)
    except ValidationError as e:
        logging.info(f"Rejected snapshot for user {user_id}: {e.error_count()} validation errors")
        raise ApiError(400, 'Invalid data format.')

    try:
        await run_in_threadpool(db.save_snapshot, user_id, snapshot.model_dump())
    except sqlite3.Error as e:
        logging.error(f"Saving snapshot for user {user_id} failed, rolled back: {e}", exc_info=e)
        raise ApiError(500, 'Server error.')

    return SuccessResponse()

from fastapi import APIRouter, Depends
from fastapi.concurrency import run_in_threadpool

from database import database as db
from handlers.common import get_identity
from handlers.schemas import UserModel, UserResponse

router = APIRouter()


@router.post('/user', response_model=UserResponse)
async def ensure_user(identity: dict = Depends(get_identity)) -> UserResponse:
    """Find-or-create the user record for the token's subject."""
    row = await run_in_threadpool(db.find_or_create_user, identity['uid'], identity.get('email'))
    return UserResponse(user=UserModel(
        id=str(row['id']),
        firebase_uid=row['firebase_uid'],
        email=row['email'],
        created_at=str(row['created_at']) if row['created_at'] is not None else None,
    ))

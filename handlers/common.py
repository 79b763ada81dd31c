from fastapi import Depends, Header

from config import FIREBASE_PROJECT_ID
from database import database as db
from utils.auth import AuthError, FirebaseTokenVerifier, extract_token


class ApiError(Exception):
    """Raised by handlers; rendered as ``{"error": message}`` with ``status_code``."""

    def __init__(self, status_code: int, message: str):
        super().__init__(message)
        self.status_code = status_code
        self.message = message


_VERIFIER = FirebaseTokenVerifier(FIREBASE_PROJECT_ID)


def get_verifier() -> FirebaseTokenVerifier:
    return _VERIFIER


def get_identity(
    authorization: str | None = Header(None),
    verifier: FirebaseTokenVerifier = Depends(get_verifier),
) -> dict:
    token = extract_token(authorization)
    if not token:
        raise ApiError(401, 'Missing or invalid Authorization header.')
    try:
        return verifier.verify(token)
    except AuthError:
        raise ApiError(401, 'Invalid or expired token.')


def require_user_id(identity: dict) -> int:
    user_id = db.get_user_id(identity['uid'])
    if user_id is None:
        raise ApiError(404, 'User not found. Call POST /user first.')
    return user_id

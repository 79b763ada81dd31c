"""Pydantic models for the sync service payloads."""

from typing import List, Optional, Union

from pydantic import BaseModel, Field

from utils.constants import DEFAULT_SETTINGS, DEFAULT_VISIBILITY

Identifier = Union[str, int]


class CardModel(BaseModel):
    front: str
    back: str
    mediaUrl: Optional[str] = None


class FolderModel(BaseModel):
    id: Identifier
    name: str = Field(..., min_length=1)
    parentFolderId: Optional[Identifier] = None
    created: Optional[str] = None


class DeckModel(BaseModel):
    id: Optional[Identifier] = None
    name: str = Field(..., min_length=1)
    category: Optional[str] = ''
    visibility: str = DEFAULT_VISIBILITY
    folderId: Optional[Identifier] = None
    cards: List[CardModel] = Field(default_factory=list)
    created: Optional[str] = None


class SettingsModel(BaseModel):
    statsEnabled: bool = DEFAULT_SETTINGS['statsEnabled']
    darkMode: bool = DEFAULT_SETTINGS['darkMode']
    fontSize: str = DEFAULT_SETTINGS['fontSize']
    highContrast: bool = DEFAULT_SETTINGS['highContrast']
    reducedMotion: bool = DEFAULT_SETTINGS['reducedMotion']


class StudySessionModel(BaseModel):
    timestamp: Optional[str] = None
    deckName: Optional[str] = None
    cardsStudied: int = 0


class StatsModel(BaseModel):
    studySessions: List[StudySessionModel] = Field(default_factory=list)


class SnapshotModel(BaseModel):
    """The whole of a user's data, transferred as one unit."""

    folders: List[FolderModel] = Field(default_factory=list)
    decks: List[DeckModel] = Field(default_factory=list)
    settings: Optional[SettingsModel] = None
    stats: StatsModel = Field(default_factory=StatsModel)


class UserModel(BaseModel):
    id: str
    firebase_uid: str
    email: Optional[str] = None
    created_at: Optional[str] = None


class UserResponse(BaseModel):
    user: UserModel


class SuccessResponse(BaseModel):
    success: bool = True

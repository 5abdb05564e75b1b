"""
WordLog Backend — Word Observation Route Handlers
==================================================

What:  Handles GET /api/users (list) and POST /api/users (create).
Why:   The two operations the frontend needs to tally interview words.
How:   The get_word_store dependency makes sure the shared MongoDB connection
       is up, then the handlers delegate to WordObservationStore.
Who:   Called by the frontend word tally page.

The /users path is historical: the collection started life as a user list
and the route was kept when it became word observations.
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, status

from app.database import MongoConnection, get_connection
from app.schemas.word_observation import (
    ErrorResponse,
    WordObservationCreate,
    WordObservationResponse,
)
from app.services.word_store import WordObservationStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Word Observations"])


async def get_word_store(
    connection: MongoConnection = Depends(get_connection),
) -> WordObservationStore:
    """
    FastAPI dependency providing a record store bound to the shared connection.

    Raises:
        ConfigurationError: MONGODB_URI missing
        DatabaseConnectionError: MongoDB unreachable
    """
    await connection.ensure_connected()
    return WordObservationStore(connection.collection)


@router.get(
    "/users",
    response_model=List[WordObservationResponse],
    responses={
        200: {"description": "All word observations, newest first"},
        503: {"description": "Database unreachable", "model": ErrorResponse},
    },
    summary="List every word observation",
)
async def list_word_observations(
    store: WordObservationStore = Depends(get_word_store),
) -> List[WordObservationResponse]:
    return await store.list_all()


@router.post(
    "/users",
    response_model=WordObservationResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        201: {"description": "The stored word observation"},
        400: {"description": "Field rule violated", "model": ErrorResponse},
        503: {"description": "Database unreachable", "model": ErrorResponse},
    },
    summary="Record a word observation",
    description=(
        "Stores one word-frequency observation. interviewee, word and count are "
        "required; word is stored lower-cased and count must not be negative."
    ),
)
async def create_word_observation(
    payload: WordObservationCreate,
    store: WordObservationStore = Depends(get_word_store),
) -> WordObservationResponse:
    return await store.create(payload.to_candidate())

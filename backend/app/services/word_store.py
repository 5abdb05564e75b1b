"""
WordLog Backend — WordObservation Record Store
===============================================

What:  Create and list operations over the WordObservation collection.
Why:   Keeps MongoDB calls and the validation boundary out of the routes.
How:   Wraps one Motor collection handed in at construction. create() runs
       validate_word_observation() first, so nothing is written for an
       invalid record.
Who:   Built per request by app.routes.words.get_word_store.

Records are write-once: there is no update or delete path.

Error Handling Strategy:
    ValidationError propagates unchanged. Lost connections become
    DatabaseConnectionError; every other driver error is logged and wrapped
    in DatabaseError so driver details never reach the client.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Callable, List, Mapping

from motor.motor_asyncio import AsyncIOMotorCollection
from pymongo import DESCENDING
from pymongo import errors as mongo_errors

from app.exceptions import DatabaseConnectionError, DatabaseError
from app.models.word_observation import validate_word_observation
from app.schemas.word_observation import WordObservationResponse

logger = logging.getLogger(__name__)

# Newest first; _id breaks ties between records created in the same millisecond
NEWEST_FIRST = [("createdAt", DESCENDING), ("_id", DESCENDING)]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class WordObservationStore:
    """
    Record store for WordObservation documents.

    Args:
        collection: The Motor collection to read and write
        clock:      Source of createdAt/updatedAt timestamps (UTC)
    """

    def __init__(
        self,
        collection: AsyncIOMotorCollection,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self._collection = collection
        self._clock = clock

    async def list_all(self) -> List[WordObservationResponse]:
        """
        Return every record, most recently created first.

        An empty collection yields an empty list.

        Raises:
            DatabaseConnectionError: MongoDB became unreachable
            DatabaseError: Any other driver failure
        """
        try:
            cursor = self._collection.find({}).sort(NEWEST_FIRST)
            documents = [document async for document in cursor]
        except mongo_errors.ConnectionFailure as e:
            logger.error("Connection lost listing word observations: %s", str(e))
            raise DatabaseConnectionError(context={"error_type": type(e).__name__}) from e
        except mongo_errors.PyMongoError as e:
            logger.error("Database error listing word observations: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not retrieve word observations. Please try again.",
                context={"error_type": type(e).__name__},
            ) from e

        return [WordObservationResponse.from_document(document) for document in documents]

    async def create(self, candidate: Mapping[str, Any]) -> WordObservationResponse:
        """
        Validate, normalize and insert one record.

        Args:
            candidate: {interviewee, interviewTitle?, word, count, category?, date?}

        Returns:
            The stored record including id, createdAt and updatedAt

        Raises:
            ValidationError: The candidate breaks a field rule (nothing written)
            DatabaseConnectionError: MongoDB became unreachable
            DatabaseError: Any other driver failure
        """
        document = validate_word_observation(candidate)

        now = self._clock()
        document["createdAt"] = now
        document["updatedAt"] = now

        try:
            result = await self._collection.insert_one(document)
        except mongo_errors.ConnectionFailure as e:
            logger.error("Connection lost creating word observation: %s", str(e))
            raise DatabaseConnectionError(context={"error_type": type(e).__name__}) from e
        except mongo_errors.PyMongoError as e:
            logger.error("Database error creating word observation: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not save the word observation. Please try again.",
                context={"error_type": type(e).__name__},
            ) from e

        document["_id"] = result.inserted_id
        logger.info(
            "Word observation %s created (word=%r, count=%d)",
            result.inserted_id,
            document["word"],
            document["count"],
        )
        return WordObservationResponse.from_document(document)

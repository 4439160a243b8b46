"""Topic operations on top of the (optional) topic store.

Every method is blocking; route handlers run them in the thread pool. When
no database is configured the store is None and each operation degrades the
way its caller expects: reads return nothing, writes raise.
"""

import logging
from contextlib import contextmanager
from typing import Iterator, List, Optional

import psycopg2

from api.exceptions import (
    ConfigurationError,
    NotFound,
    ServiceUnavailable,
    StorageError,
)
from common.database import TopicStore
from common.model import CategoryCount, Topic, TopicWrite
from common.utils import DEFAULT_AUTHOR, join_keywords, make_preview, parse_limit

logger = logging.getLogger(__name__)


@contextmanager
def _storage_errors(operation: str) -> Iterator[None]:
    try:
        yield
    except psycopg2.Error as e:
        message = str(e).strip() or type(e).__name__
        logger.error("%s failed: %s", operation, message)
        raise StorageError(message, operation) from e


class TopicService:
    def __init__(self, store: Optional[TopicStore]) -> None:
        self.store = store

    def _writable_store(self) -> TopicStore:
        if self.store is None:
            raise ServiceUnavailable()
        return self.store

    def init_schema(self) -> None:
        if self.store is None:
            raise ConfigurationError("Database not configured for production")
        with _storage_errors("init_schema"):
            self.store.init_schema()

    def list_topics(
        self,
        search: Optional[str] = None,
        category: Optional[str] = None,
        limit: Optional[str] = None,
    ) -> List[Topic]:
        if self.store is None:
            return []
        with _storage_errors("list_topics"):
            return self.store.list_topics(search, category, parse_limit(limit))

    def get_topic(self, topic_id: int) -> Topic:
        if self.store is None:
            raise NotFound(topic_id=topic_id)
        with _storage_errors("get_topic"):
            topic = self.store.get_topic(topic_id)
        if topic is None:
            raise NotFound(topic_id=topic_id)
        return topic

    def create_topic(self, payload: TopicWrite) -> int:
        store = self._writable_store()
        with _storage_errors("create_topic"):
            topic_id = store.insert_topic(
                payload.title,
                payload.category,
                join_keywords(payload.keywords),
                make_preview(payload.content),
                payload.content,
                payload.author or DEFAULT_AUTHOR,
            )
        logger.info("Created topic %s", topic_id)
        return topic_id

    def update_topic(self, topic_id: int, payload: TopicWrite) -> int:
        """Apply an update request to a topic.

        A set incrementView flag bumps the view counter and nothing else; a
        set incrementHelpful flag does the same for the helpful counter.
        Otherwise every editable field is overwritten with what the payload
        carries, including fields it leaves out.

        Returns:
            Number of rows affected. Zero (unknown id) is not an error.
        """
        store = self._writable_store()
        with _storage_errors("update_topic"):
            if payload.increment_view:
                affected = store.increment_counter(topic_id, "views")
            elif payload.increment_helpful:
                affected = store.increment_counter(topic_id, "helpful")
            else:
                affected = store.update_topic(
                    topic_id,
                    payload.title,
                    payload.category,
                    join_keywords(payload.keywords),
                    make_preview(payload.content),
                    payload.content,
                    payload.author or DEFAULT_AUTHOR,
                )
        if not affected:
            logger.info("Update matched no topic with id %s", topic_id)
        return affected

    def delete_topic(self, topic_id: int) -> int:
        store = self._writable_store()
        with _storage_errors("delete_topic"):
            affected = store.delete_topic(topic_id)
        if not affected:
            logger.info("Delete matched no topic with id %s", topic_id)
        return affected

    def category_stats(self) -> List[CategoryCount]:
        if self.store is None:
            return []
        with _storage_errors("category_stats"):
            return self.store.category_counts()

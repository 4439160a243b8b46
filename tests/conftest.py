"""Shared fixtures: an in-memory stand-in for the topics table."""

import threading
from datetime import datetime, timedelta
from typing import List, Optional, Union

import psycopg2
import pytest
from fastapi.testclient import TestClient

from api.deps import get_topic_service
from api.main import create_app
from api.service import TopicService
from common.model import CategoryCount, Topic
from common.settings import Settings

BASE_TIME = datetime(2024, 3, 1, 9, 0, 0)


class FakeTopicStore:
    """Behaves like TopicStore against PostgreSQL, without a database.

    Rows are created one second apart so "newest first" is deterministic.
    """

    def __init__(self) -> None:
        self.rows = {}
        self.schema_ready = False
        self.closed = False
        self._next_id = 1
        self._lock = threading.Lock()

    def close(self) -> None:
        self.closed = True

    def init_schema(self) -> None:
        self.schema_ready = True

    def list_topics(
        self,
        search: Optional[str] = None,
        category: Optional[str] = None,
        limit: Union[int, str, None] = None,
    ) -> List[Topic]:
        rows = list(self.rows.values())
        if search:
            needle = search.lower()
            rows = [
                row
                for row in rows
                if any(
                    needle in (row[column] or "").lower()
                    for column in ("title", "keywords", "content")
                )
            ]
        if category and category != "all":
            rows = [row for row in rows if row["category"] == category]
        rows.sort(key=lambda row: row["created_date"], reverse=True)
        if limit is not None:
            if not isinstance(limit, int):
                raise psycopg2.DataError(
                    f'invalid input syntax for type bigint: "{limit}"'
                )
            if limit < 0:
                raise psycopg2.DataError("LIMIT must not be negative")
            rows = rows[:limit]
        return [Topic.from_db_row(dict(row)) for row in rows]

    def get_topic(self, topic_id: int) -> Optional[Topic]:
        row = self.rows.get(topic_id)
        return Topic.from_db_row(dict(row)) if row else None

    def insert_topic(self, title, category, keywords, preview, content, author) -> int:
        if title is None:
            raise psycopg2.IntegrityError(
                'null value in column "title" of relation "topics" violates '
                "not-null constraint"
            )
        with self._lock:
            topic_id = self._next_id
            self._next_id += 1
            self.rows[topic_id] = dict(
                id=topic_id,
                title=title,
                category=category,
                keywords=keywords,
                preview=preview,
                content=content,
                author=author,
                created_date=BASE_TIME + timedelta(seconds=topic_id),
                views=0,
                helpful=0,
            )
        return topic_id

    def update_topic(
        self, topic_id, title, category, keywords, preview, content, author
    ) -> int:
        row = self.rows.get(topic_id)
        if row is None:
            return 0
        if title is None:
            raise psycopg2.IntegrityError(
                'null value in column "title" of relation "topics" violates '
                "not-null constraint"
            )
        row.update(
            title=title,
            category=category,
            keywords=keywords,
            preview=preview,
            content=content,
            author=author,
        )
        return 1

    def increment_counter(self, topic_id: int, column: str) -> int:
        with self._lock:
            row = self.rows.get(topic_id)
            if row is None:
                return 0
            row[column] += 1
            return 1

    def delete_topic(self, topic_id: int) -> int:
        return 1 if self.rows.pop(topic_id, None) else 0

    def category_counts(self) -> List[CategoryCount]:
        counts = {}
        for row in self.rows.values():
            counts[row["category"]] = counts.get(row["category"], 0) + 1
        ordered = sorted(counts.items(), key=lambda item: (-item[1], item[0] or ""))
        return [CategoryCount(category=c, count=n) for c, n in ordered]


@pytest.fixture
def no_db_settings() -> Settings:
    return Settings(postgres_host=None, environment="development")


@pytest.fixture
def store() -> FakeTopicStore:
    return FakeTopicStore()


@pytest.fixture
def service(store) -> TopicService:
    return TopicService(store)


@pytest.fixture
def client(store, no_db_settings):
    app = create_app(no_db_settings)
    app.dependency_overrides[get_topic_service] = lambda: TopicService(store)
    return TestClient(app)


@pytest.fixture
def no_db_client(no_db_settings):
    with TestClient(create_app(no_db_settings)) as client:
        yield client

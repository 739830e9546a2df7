"""Tests for post lifecycle event publishing."""

import asyncio
import logging
from unittest.mock import AsyncMock

import pytest

from assistance_post_service.config import settings
from assistance_post_service.kafka_producer import KafkaProducerManager


@pytest.fixture
def manager() -> KafkaProducerManager:
    manager = KafkaProducerManager()
    manager.producer = AsyncMock()
    return manager


@pytest.mark.asyncio
async def test_publish_without_producer_is_skipped():
    assert await KafkaProducerManager().publish_post_deleted(1, 2) is False


@pytest.mark.asyncio
async def test_publish_post_created(manager):
    ok = await manager.publish_post_created(5, 1, {"title": "t", "created_at": "2024-05-01T09:00:00"})

    assert ok is True
    topic = manager.producer.send_and_wait.await_args.args[0]
    kwargs = manager.producer.send_and_wait.await_args.kwargs
    assert topic == settings.KAFKA_TOPIC_POST_CREATED
    assert kwargs["key"] == "5"
    assert kwargs["value"]["event_type"] == "post_created"
    assert kwargs["value"]["user_id"] == 1
    assert kwargs["value"]["timestamp"] == "2024-05-01T09:00:00"


@pytest.mark.asyncio
async def test_publish_post_updated(manager):
    await manager.publish_post_updated(5, 1, {"title": "t", "updated_at": None})

    kwargs = manager.producer.send_and_wait.await_args.kwargs
    assert manager.producer.send_and_wait.await_args.args[0] == settings.KAFKA_TOPIC_POST_UPDATED
    assert kwargs["value"]["event_type"] == "post_updated"
    assert kwargs["value"]["timestamp"]


@pytest.mark.asyncio
async def test_publish_post_deleted(manager):
    await manager.publish_post_deleted(5, 1)

    kwargs = manager.producer.send_and_wait.await_args.kwargs
    assert manager.producer.send_and_wait.await_args.args[0] == settings.KAFKA_TOPIC_POST_DELETED
    assert kwargs["value"] == {"event_type": "post_deleted", "post_id": 5, "user_id": 1}


@pytest.mark.asyncio
async def test_send_failure_returns_false(manager):
    manager.producer.send_and_wait.side_effect = RuntimeError("broker down")

    assert await manager.publish_post_deleted(5, 1) is False


class RejectingProducer:
    """Queues every message and then fails its delivery, as aiokafka reports broker errors"""

    async def send(self, topic, value=None, key=None):
        future = asyncio.get_running_loop().create_future()
        future.set_exception(RuntimeError("broker rejected message"))
        return future

    async def send_and_wait(self, topic, value=None, key=None):
        future = await self.send(topic, value=value, key=key)
        return await future


@pytest.mark.asyncio
async def test_delivery_failure_returns_false(caplog):
    manager = KafkaProducerManager()
    manager.producer = RejectingProducer()

    with caplog.at_level(logging.ERROR):
        ok = await manager.publish_post_deleted(5, 1)

    assert ok is False
    assert "broker rejected message" in caplog.text


@pytest.mark.asyncio
async def test_publish_waits_for_delivery(manager):
    await manager.publish_post_deleted(5, 1)

    manager.producer.send_and_wait.assert_awaited_once()
    manager.producer.send.assert_not_called()


@pytest.mark.asyncio
async def test_stop_clears_producer(manager):
    producer = manager.producer

    await manager.stop()

    producer.stop.assert_awaited_once()
    assert manager.producer is None

import asyncio
import json
from unittest.mock import AsyncMock

from sangraha import models
from sangraha.outbox_poller import publish_pending_events


def add_event(db_session, booking_id="b-1"):
    event = models.OutboxEvent(
        topic="booking_events",
        payload=json.dumps({"event": "booking.created", "booking_id": booking_id}),
        status="PENDING",
    )
    db_session.add(event)
    db_session.commit()
    return event


def test_publish_sends_and_deletes_events(db_session):
    add_event(db_session, "b-1")
    add_event(db_session, "b-2")
    producer = AsyncMock()

    processed = asyncio.run(publish_pending_events(db_session, producer))

    assert processed == 2
    assert producer.send_and_wait.await_count == 2
    first_call = producer.send_and_wait.await_args_list[0]
    assert first_call.kwargs["topic"] == "booking_events"
    assert json.loads(first_call.kwargs["value"].decode("utf-8"))["booking_id"] == "b-1"
    assert db_session.query(models.OutboxEvent).count() == 0


def test_failed_events_stay_for_the_next_pass(db_session):
    add_event(db_session, "b-1")
    add_event(db_session, "b-2")
    producer = AsyncMock()
    producer.send_and_wait.side_effect = [Exception("broker unavailable"), None]

    processed = asyncio.run(publish_pending_events(db_session, producer))

    assert processed == 1
    remaining = db_session.query(models.OutboxEvent).all()
    assert len(remaining) == 1
    assert json.loads(remaining[0].payload)["booking_id"] == "b-1"


def test_nothing_pending(db_session):
    producer = AsyncMock()
    assert asyncio.run(publish_pending_events(db_session, producer)) == 0
    producer.send_and_wait.assert_not_awaited()

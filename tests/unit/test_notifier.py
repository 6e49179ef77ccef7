import asyncio

from fieldservice.services.notifier import ChangeNotifier, Topics


async def test_events_reach_every_subscriber_in_order():
    n = ChangeNotifier()
    seen_a, seen_b = [], []
    n.subscribe(lambda e: seen_a.append(e.topic))

    async def async_sub(e):
        seen_b.append(e.topic)

    n.subscribe(async_sub)
    n.start()
    n.publish(Topics.WORK_ORDER_CREATED, {"id": "1"})
    n.publish(Topics.WORK_ORDER_ASSIGNED, {"id": "1"})
    await n.drain()
    await n.stop()

    assert seen_a == ["workorders.created", "workorders.assigned"]
    assert seen_b == seen_a


async def test_failing_subscriber_does_not_stop_delivery():
    n = ChangeNotifier()
    delivered = []

    def broken(event):
        raise RuntimeError("subscriber down")

    n.subscribe(broken)
    n.subscribe(lambda e: delivered.append(e.data["id"]))
    n.start()
    n.publish(Topics.WORK_ORDER_UPDATED, {"id": "a"})
    n.publish(Topics.WORK_ORDER_UPDATED, {"id": "b"})
    await n.drain()
    await n.stop()

    assert delivered == ["a", "b"]


async def test_publish_does_not_wait_for_slow_subscribers():
    n = ChangeNotifier()
    release = asyncio.Event()

    async def slow(event):
        await release.wait()

    n.subscribe(slow)
    n.start()
    # Returns immediately even though the subscriber is blocked.
    assert n.publish(Topics.WORK_ORDER_CREATED, {}) is True
    assert n.publish(Topics.WORK_ORDER_CREATED, {}) is True
    release.set()
    await n.drain()
    await n.stop()


async def test_full_queue_drops_instead_of_blocking():
    n = ChangeNotifier(maxsize=2)
    # Not started, so nothing drains the queue.
    assert n.publish("t", 1) is True
    assert n.publish("t", 2) is True
    assert n.publish("t", 3) is False


async def test_stop_flushes_queued_events():
    n = ChangeNotifier()
    seen = []
    n.subscribe(lambda e: seen.append(e.data))
    n.start()
    for i in range(5):
        n.publish("t", i)
    await n.stop()
    assert seen == [0, 1, 2, 3, 4]
    assert not n.running


def test_technician_topics():
    assert Topics.technician_assignments("t1") == "technicians.t1.assignments"
    assert Topics.technician_unassigned("t1") == "technicians.t1.unassigned"

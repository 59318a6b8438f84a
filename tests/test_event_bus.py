from ecs.events.bus import EventBus


def test_event_bus_emit_subscribe():
    bus = EventBus()
    received = {}

    def handler(sender, **kwargs):
        received.update(kwargs)

    bus.subscribe("test", handler)
    bus.emit("test", value=42, msg="hello")

    assert received["value"] == 42
    assert received["msg"] == "hello"


def test_event_bus_calls_every_subscriber_in_order():
    bus = EventBus()
    calls = []
    bus.subscribe("ping", lambda sender, **k: calls.append(("first", k["n"])))
    bus.subscribe("ping", lambda sender, **k: calls.append(("second", k["n"])))
    bus.emit("ping", n=1)
    assert calls == [("first", 1), ("second", 1)]


def test_emit_without_subscribers_is_silent():
    bus = EventBus()
    bus.emit("nobody_listens", value=1)

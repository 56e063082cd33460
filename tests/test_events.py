from events import EventBus, EventRecorder


class TestEventBus:
    def test_registration_order_and_filters(self):
        bus = EventBus()
        seen = []
        bus.subscribe(lambda ev: seen.append(("all", ev.kind)))
        bus.subscribe(lambda ev: seen.append(("moves", ev.kind)), "move")
        bus.emit("move", node_id="a")
        bus.emit("other")
        assert seen == [("all", "move"), ("moves", "move"), ("all", "other")]

    def test_unsubscribe(self):
        bus = EventBus()
        rec = EventRecorder(bus)
        bus.unsubscribe(rec.subscription)
        bus.emit("move")
        assert rec.events == []

    def test_emit_returns_the_event(self):
        bus = EventBus()
        ev = bus.emit("move", node_id="a", plan=["b"])
        assert ev.kind == "move"
        assert ev["plan"] == ["b"]

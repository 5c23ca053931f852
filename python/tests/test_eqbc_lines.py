import threading

from eqbc.lines import LineBus, LineSubscription


def test_line_bus_preserves_order_and_blank_lines():
    bus = LineBus()
    received = []
    bus.subscribe(LineSubscription(handler=lambda line: received.append(line.text)))
    for text in ["one", "", "two", "three"]:
        bus.publish(text)
    bus.pump()
    assert received == ["one", "", "two", "three"]


def test_line_bus_sequence_numbers_increase():
    bus = LineBus()
    lines = [bus.publish(str(idx)) for idx in range(5)]
    assert [line.seq for line in lines] == [1, 2, 3, 4, 5]


def test_line_bus_never_drops_under_load():
    bus = LineBus()
    received = []
    bus.subscribe(LineSubscription(handler=lambda line: received.append(line.text)))
    for idx in range(2000):
        bus.publish(f"line {idx}")
    bus.pump()
    assert len(received) == 2000
    assert received[0] == "line 0" and received[-1] == "line 1999"


def test_diagnostic_filtering():
    bus = LineBus()
    everything, text_only = [], []
    bus.subscribe(LineSubscription(handler=everything.append))
    bus.subscribe(LineSubscription(handler=text_only.append, include_diagnostics=False))
    bus.publish("hello")
    bus.publish("Error: boom", diagnostic=True)
    bus.pump()
    assert [line.text for line in everything] == ["hello", "Error: boom"]
    assert everything[1].diagnostic
    assert [line.text for line in text_only] == ["hello"]


def test_unsubscribe_stops_delivery():
    bus = LineBus()
    received = []
    token = bus.subscribe(LineSubscription(handler=received.append))
    bus.unsubscribe(token)
    bus.publish("x")
    bus.pump()
    assert received == []


def test_handler_failure_does_not_stop_dispatch():
    bus = LineBus()
    received = []

    def handler(line):
        if line.text == "bad":
            raise RuntimeError("display broke")
        received.append(line.text)

    bus.subscribe(LineSubscription(handler=handler))
    bus.publish("bad")
    bus.publish("good")
    bus.pump()
    assert received == ["good"]


def test_background_dispatcher():
    bus = LineBus()
    ready = threading.Event()
    bus.subscribe(LineSubscription(handler=lambda line: ready.set()))
    bus.start(interval=0.005)
    try:
        bus.publish("ping")
        assert ready.wait(1.0), "dispatcher never delivered the line"
    finally:
        bus.stop()

import threading

from app.services.connections import ConnectionRegistry


class FakeChannel:
    def __init__(self, accept=True, fail=False):
        self.closed = False
        self.accept = accept
        self.fail = fail
        self.payloads = []

    def offer(self, payload):
        if self.fail:
            raise RuntimeError("socket gone")
        if self.accept:
            self.payloads.append(payload)
        return self.accept


def test_notify_reaches_every_channel_of_the_user():
    registry = ConnectionRegistry()
    laptop, phone, other = FakeChannel(), FakeChannel(), FakeChannel()
    registry.register(1, laptop)
    registry.register(1, phone)
    registry.register(2, other)

    assert registry.notify(1, {"type": "ping"}) is True
    assert laptop.payloads == [{"type": "ping"}]
    assert phone.payloads == [{"type": "ping"}]
    assert other.payloads == []
    assert registry.channel_count(1) == 2
    assert registry.connected_users() == [1, 2]


def test_notify_without_channels_is_a_silent_drop():
    assert ConnectionRegistry().notify(5, {"type": "ping"}) is False


def test_unregister_stops_delivery():
    registry = ConnectionRegistry()
    channel = FakeChannel()
    registry.register(1, channel)

    assert registry.unregister(channel) == 1
    assert registry.unregister(channel) is None
    assert registry.notify(1, {"type": "ping"}) is False
    assert channel.payloads == []
    assert registry.connected_users() == []


def test_reregistering_a_channel_moves_it_to_the_new_user():
    registry = ConnectionRegistry()
    channel = FakeChannel()
    registry.register(1, channel)
    registry.register(2, channel)

    assert registry.channel_count(1) == 0
    assert registry.channel_count(2) == 1
    assert registry.notify(1, {"type": "ping"}) is False


def test_closed_and_failing_channels_are_skipped():
    registry = ConnectionRegistry()
    closed, broken, full, healthy = FakeChannel(), FakeChannel(fail=True), FakeChannel(accept=False), FakeChannel()
    for channel in (closed, broken, full, healthy):
        registry.register(1, channel)
    closed.closed = True

    assert registry.notify(1, {"type": "ping"}) is True
    assert healthy.payloads == [{"type": "ping"}]
    assert closed.payloads == []
    # Closed channels are pruned on the next notify.
    assert registry.channel_count(1) == 3


def test_concurrent_register_and_unregister_keep_state_consistent():
    registry = ConnectionRegistry()
    kept = [FakeChannel() for _ in range(50)]
    dropped = [FakeChannel() for _ in range(50)]
    for channel in dropped:
        registry.register(1, channel)

    def add():
        for channel in kept:
            registry.register(1, channel)
            registry.notify(1, {"type": "ping"})

    def remove():
        for channel in dropped:
            registry.unregister(channel)

    threads = [threading.Thread(target=add), threading.Thread(target=remove)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert registry.channel_count(1) == len(kept)
    assert registry.notify(1, {"type": "final"}) is True
    assert all(channel.payloads[-1] == {"type": "final"} for channel in kept)

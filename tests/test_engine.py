import random

import pytest

from Protocols.base import TransportEndpoint
from Simulator.config import SimConfig
from Simulator.engine import Engine
from Utils.errors import ConfigurationError, InternalInconsistencyError
from Utils.types import Event, EventType


class Recorder(TransportEndpoint):
    """Endpoint minimo que anota lo que el Engine le despacha."""

    def __init__(self, name, engine):
        super().__init__(name, engine)
        self.calls = []
        self.arrival_pending_on_send = []

    def initialize(self):
        self.calls.append("init")

    def handle_application_send(self, payload):
        self.calls.append(("send", payload))
        self.arrival_pending_on_send.append(any(
            ev.kind == EventType.APPLICATION_ARRIVAL for ev in self.engine.scheduler.peek_all()))

    def handle_network_receive(self, packet):
        self.calls.append(("recv", packet))

    def handle_timer_expiry(self):
        self.calls.append("timeout")


def _engine(**kwargs):
    kwargs.setdefault("seed", 99)
    eng = Engine(SimConfig(**kwargs))
    sender, receiver = Recorder("Sender", eng), Recorder("Receiver", eng)
    eng.set_sender(sender)
    eng.set_receiver(receiver)
    return eng, sender, receiver


def test_run_without_roles_is_a_configuration_error():
    eng = Engine(SimConfig(seed=1))
    eng.set_sender(Recorder("Sender", eng))
    with pytest.raises(ConfigurationError):
        eng.run()
    assert eng.logs_events == []


@pytest.mark.parametrize("kwargs", [
    dict(loss_prob=1.5),
    dict(corrupt_prob=-0.1),
    dict(num_messages=-1),
    dict(debug_level=4),
    dict(window_size=0),
    dict(sw_timeout=0),
    dict(receiver_keepalive=-5.0),
])
def test_invalid_config_is_rejected(kwargs):
    with pytest.raises(ConfigurationError):
        SimConfig(**kwargs)


def test_unknown_event_kind_is_fatal():
    eng, sender, _ = _engine(num_messages=0)
    eng.start()
    eng.scheduler.schedule(1.0, Event(1.0, "BOGUS", sender))
    with pytest.raises(InternalInconsistencyError):
        eng.step()


def test_generates_exactly_num_messages_arrivals():
    eng, sender, receiver = _engine(num_messages=5)
    eng.run()

    sends = [c for c in sender.calls if isinstance(c, tuple) and c[0] == "send"]
    assert len(sends) == 5
    assert sender.calls[0] == "init" and receiver.calls == ["init"]
    assert eng.messages_sent == 5
    assert all(len(payload) == 20 for _, payload in sends)


def test_next_arrival_is_scheduled_before_dispatch():
    eng, sender, _ = _engine(num_messages=3)
    eng.run()
    assert sender.arrival_pending_on_send == [True, True, False]


def test_events_run_in_time_order():
    eng, _, _ = _engine(num_messages=20)
    eng.run()
    times = [t for t, _, _ in eng.logs_events]
    assert times == sorted(times)


def test_unidirectional_arrivals_only_hit_sender():
    eng, _, _ = _engine(num_messages=30)
    eng.run()
    assert {name for _, name, _ in eng.logs_offered} == {"Sender"}


def test_bidirectional_arrivals_hit_both_ends():
    eng, _, _ = _engine(num_messages=60, bidirectional=True)
    eng.run()
    assert {name for _, name, _ in eng.logs_offered} == {"Sender", "Receiver"}


def test_dispatches_network_and_timer_events_to_their_endpoint():
    eng, sender, receiver = _engine(num_messages=0)
    eng.start()
    eng.start_timer(sender, 3.0)
    eng.scheduler.schedule(1.0, Event(1.0, EventType.NETWORK_DELIVERY, receiver, None))
    while eng.scheduler:
        eng.step()
    assert ("recv", None) in receiver.calls
    assert "timeout" in sender.calls
    assert eng.now == 3.0


def test_peer_of_pairs_the_roles():
    eng, sender, receiver = _engine()
    assert eng.peer_of(sender) is receiver
    assert eng.peer_of(receiver) is sender
    with pytest.raises(InternalInconsistencyError):
        eng.peer_of(object())


def test_same_seed_gives_same_run():
    a, _, _ = _engine(num_messages=10, seed=5)
    b, _, _ = _engine(num_messages=10, seed=5)
    a.run()
    b.run()
    assert a.snapshot() == b.snapshot()


def test_injected_rng_is_used():
    rng = random.Random(42)
    eng = Engine(SimConfig(num_messages=1), rng=rng)
    assert eng.rng is rng
    assert eng.chan.rng is rng


def test_run_bounds():
    eng, _, _ = _engine(num_messages=10)
    assert eng.run(max_events=4) == 4

    eng, _, _ = _engine(num_messages=10, lambda_=10.0)
    eng.run(until=30.0)
    assert all(t <= 30.0 for t, _, _ in eng.logs_events)
    assert eng.scheduler.next_time() > 30.0


def test_run_can_resume_without_reinitializing():
    eng, sender, receiver = _engine(num_messages=6)
    eng.run(max_events=3)
    eng.run()

    assert eng.arrivals_scheduled == 6
    assert sender.calls.count("init") == 1
    assert receiver.calls.count("init") == 1
    assert len([c for c in sender.calls if isinstance(c, tuple) and c[0] == "send"]) == 6

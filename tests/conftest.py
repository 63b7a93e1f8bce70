import pytest

from Simulator.config import SimConfig
from Simulator.cli import build_engine
from Utils.types import EventType


class FakeEngine:
    """Registra las llamadas de un endpoint a los servicios del simulador."""

    def __init__(self, cfg=None):
        self.cfg = cfg or SimConfig()
        self.now = 0.0
        self.sent = []
        self.delivered = []
        self.timer_calls = []

    def send_to_network(self, source, pkt):
        self.sent.append(pkt)

    def deliver_to_application(self, endpoint, payload):
        self.delivered.append(payload)

    def start_timer(self, endpoint, delay):
        self.timer_calls.append(("start", delay))
        return True

    def stop_timer(self, endpoint):
        self.timer_calls.append(("stop", None))
        return True


class ScriptedRandom:
    """Sustituto de random.Random con valores fijos para random()."""

    def __init__(self, randoms, randint_value=1, randrange_value=0):
        self.randoms = list(randoms)
        self.randint_value = randint_value
        self.randrange_value = randrange_value

    def random(self):
        return self.randoms.pop(0)

    def randint(self, a, b):
        return self.randint_value

    def randrange(self, n):
        return self.randrange_value % n


@pytest.fixture
def fake_engine():
    return FakeEngine()


@pytest.fixture
def make_engine():
    def _make(protocol="stop-and-wait", **kwargs):
        kwargs.setdefault("seed", 1234)
        return build_engine(protocol, SimConfig(**kwargs))
    return _make


def pending_timers(eng, endpoint):
    return [ev for ev in eng.scheduler.peek_all()
            if ev.kind == EventType.TIMER_EXPIRY and ev.endpoint is endpoint]


def payloads(snap, key, name):
    return [data for _, who, data in snap[key] if who == name]

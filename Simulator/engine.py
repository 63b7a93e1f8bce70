import logging
import random
from typing import Any, Optional

from Utils.types import Event, EventType
from Utils.errors import ConfigurationError, InternalInconsistencyError
from Utils.util import random_letters
from Simulator.config import SimConfig
from Simulator.channel import ChannelPolicy
from Simulator.network import NetworkMedium
from Simulator.scheduler import EventScheduler
from Simulator.timers import TimerService

logger = logging.getLogger(__name__)

class Engine:
    def __init__(self, cfg: Optional[SimConfig] = None, rng: Optional[random.Random] = None):
        self.cfg = cfg or SimConfig()
        self.rng = rng if rng is not None else random.Random(self.cfg.seed)

        self.scheduler = EventScheduler()
        self.timers = TimerService(self.scheduler, self.cfg.debug_level)
        self.chan = ChannelPolicy(self.cfg, self.rng)
        self.medium = NetworkMedium(self.scheduler, self.chan, self.peer_of, self.cfg.debug_level)

        self.sender: Any = None
        self.receiver: Any = None

        self.started = False
        self.arrivals_scheduled = 0
        self.messages_sent = 0

        self.logs_events = []
        self.logs_offered = []

    @property
    def now(self) -> float:
        return self.scheduler.now

    def set_sender(self, endpoint):
        self.sender = endpoint

    def set_receiver(self, endpoint):
        self.receiver = endpoint

    """
        Funcion que obtiene el otro extremo del par sender/receiver
        Args:
            endpoint (TransportEndpoint): Uno de los dos roles
        Returns:
            TransportEndpoint: El rol opuesto
    """
    def peer_of(self, endpoint):
        if endpoint is self.sender:
            return self.receiver
        if endpoint is self.receiver:
            return self.sender
        raise InternalInconsistencyError(f"{endpoint!r} no pertenece a esta simulacion")

    # ---------------- Servicios para los endpoints ----------------

    def send_to_network(self, source, pkt):
        return self.medium.send_to_network(source, pkt)

    def deliver_to_application(self, endpoint, payload: bytes):
        self.medium.deliver_to_application(endpoint, payload)

    def start_timer(self, endpoint, delay: float) -> bool:
        return self.timers.start_timer(endpoint, delay)

    def stop_timer(self, endpoint) -> bool:
        return self.timers.stop_timer(endpoint)

    # ---------------- Bucle principal ----------------

    """
        Funcion que agenda la siguiente llegada desde la capa de aplicacion
        Returns:
            Event: APPLICATION_ARRIVAL en now + lambda * U[0,1) * 2, dirigido al sender
                   o (si es bidireccional, con prob. ~0.5) al receiver
    """
    def _generate_next_arrival(self):
        if self.cfg.debug_level > 2:
            logger.info("(%.2f) generate_next_arrival()", self.now)
        x = self.cfg.lambda_ * self.rng.random() * 2
        target = self.sender
        if self.cfg.bidirectional and self.rng.random() > 0.5:
            target = self.receiver
        time = self.now + x
        ev = Event(time, EventType.APPLICATION_ARRIVAL, target)
        self.scheduler.schedule(time, ev)
        self.arrivals_scheduled += 1
        return ev

    # Solo la primera llamada inicializa los roles y agenda la primera llegada
    def start(self):
        if self.started:
            return
        if self.sender is None or self.receiver is None:
            raise ConfigurationError("sim run without sender or receiver.")
        self.started = True
        self.sender.initialize()
        self.receiver.initialize()
        if self.cfg.num_messages > 0:
            self._generate_next_arrival()

    """
        Funcion que procesa un unico evento de la cola
        Returns:
            Event: El evento despachado
        Detalles:
            - APPLICATION_ARRIVAL: agenda la proxima llegada (si faltan mensajes) antes de
              entregar el payload generado a handle_application_send.
            - NETWORK_DELIVERY: handle_network_receive del endpoint destino.
            - TIMER_EXPIRY: handle_timer_expiry del endpoint.
            - Cualquier otro tipo es un defecto interno y aborta la simulacion.
    """
    def step(self) -> Event:
        if self.cfg.debug_level > 2:
            self.print_event_queue()

        ev = self.scheduler.pop_earliest()
        self.logs_events.append((self.now, ev.kind.name if isinstance(ev.kind, EventType) else str(ev.kind),
                                 getattr(ev.endpoint, "name", None)))

        if ev.kind == EventType.APPLICATION_ARRIVAL:
            if self.arrivals_scheduled < self.cfg.num_messages:
                self._generate_next_arrival()
            msg = random_letters(self.rng, self.cfg.payload_size)
            self.messages_sent += 1
            self.logs_offered.append((self.now, ev.endpoint.name, msg))
            ev.endpoint.handle_application_send(msg)
        elif ev.kind == EventType.NETWORK_DELIVERY:
            ev.endpoint.handle_network_receive(ev.packet)
        elif ev.kind == EventType.TIMER_EXPIRY:
            ev.endpoint.handle_timer_expiry()
        else:
            raise InternalInconsistencyError(f"INTERNAL PANIC: unknown event type {ev.kind!r}")
        return ev

    """
        Funcion que corre la simulacion hasta vaciar la cola de eventos
        Args:
            max_events (int | None): Tope de eventos a procesar
            until (float | None): No procesa eventos con tiempo mayor a este valor
        Returns:
            int: Cantidad de eventos procesados
    """
    def run(self, max_events: Optional[int] = None, until: Optional[float] = None) -> int:
        self.start()
        processed = 0
        while self.scheduler:
            if max_events is not None and processed >= max_events:
                break
            if until is not None and self.scheduler.next_time() > until:
                break
            self.step()
            processed += 1
        return processed

    def print_event_queue(self):
        lines = ["Event Queue {"]
        lines += [f"        {ev}" for ev in self.scheduler.peek_all()]
        lines.append("}")
        logger.info("\n".join(lines))

    """
        Funcion que toma una captura del estado y los registros de la simulacion
        Returns:
            dict: Estructura con:
                - "time" (float): Tiempo simulado actual
                - "events" (list[tuple]): Historial (tiempo, tipo, endpoint)
                - "tx" (list[tuple]): Transmisiones (t, endpoint, seq, ack, payload)
                - "rx" (list[tuple]): Entregas a la aplicacion (t, endpoint, payload)
                - "offered" (list[tuple]): Mensajes generados (t, endpoint, payload)
                - contadores de perdidas, corrupciones, mensajes y conflictos de timers
    """
    def snapshot(self):
        return {
            "time": self.now,
            "events": list(self.logs_events),
            "tx": [(t, name, p.seq, p.ack, p.payload) for t, name, p in self.medium.logs_transmit],
            "rx": list(self.medium.logs_receive),
            "offered": list(self.logs_offered),
            "lost": self.medium.num_lost,
            "corrupt": self.medium.num_corrupt,
            "messages_sent": self.messages_sent,
            "timer_conflicts": self.timers.conflicts,
            "timer_misses": self.timers.misses,
        }

import logging

from Utils.types import Event, EventType

logger = logging.getLogger(__name__)


class NetworkMedium:
    """
    Medio no confiable entre los dos endpoints.
    Pierde, corrompe y retrasa paquetes segun la ChannelPolicy, sin reordenarlos:
    cada entrega se agenda despues de la ultima entrega/llegada ya pendiente.
    """

    def __init__(self, scheduler, policy, peer_of, debug_level: int = 0):
        self.scheduler = scheduler
        self.policy = policy
        self.peer_of = peer_of
        self.debug_level = debug_level

        self.num_lost = 0
        self.num_corrupt = 0
        self.logs_transmit = []
        self.logs_receive = []

    """
        Funcion que entrega un paquete al medio fisico
        Args:
            source (TransportEndpoint): Endpoint que transmite
            pkt (Packet): Paquete a transmitir
        Returns:
            Event | None: Evento NETWORK_DELIVERY agendado, o None si el paquete se perdio
    """
    def send_to_network(self, source, pkt):
        now = self.scheduler.now
        self.logs_transmit.append((now, source.name, pkt))

        if self.policy.will_drop():
            self.num_lost += 1
            if self.debug_level > 0:
                logger.info("(%.2f) %s losing packet: (%s)", now, source.name, pkt)
            return None

        copy = pkt
        if self.policy.will_corrupt():
            self.num_corrupt += 1
            field, copy = self.policy.corrupt(pkt)
            if self.debug_level > 0:
                logger.info("(%.2f) %s corrupting packet %s: (%s)", now, source.name, field, pkt)

        last = self.scheduler.latest_time(lambda ev: ev.kind != EventType.TIMER_EXPIRY)
        if last is None or last < now:
            last = now
        time = last + self.policy.sample_delay()

        if self.debug_level > 1:
            logger.info("(%.2f) send_to_network(%s, %s) -> %.2f", now, source.name, copy, time)
        ev = Event(time, EventType.NETWORK_DELIVERY, self.peer_of(source), copy)
        self.scheduler.schedule(time, ev)
        return ev

    def deliver_to_application(self, endpoint, payload: bytes):
        self.logs_receive.append((self.scheduler.now, endpoint.name, bytes(payload)))
        if self.debug_level > 0:
            logger.info("(%.2f) deliver_to_application(%s, %s)", self.scheduler.now, endpoint.name,
                        payload.decode("ascii", errors="replace"))

from __future__ import annotations
from collections import deque
from typing import Deque, Optional

from Utils.types import Packet
from Utils.util import inc
from Protocols.base import TransportEndpoint

ACK_PAYLOAD = b"OK"


#Clase emisor del protocolo Stop-and-Wait (bit alternante).
class StopWaitSender(TransportEndpoint):

    """
    Inicializa el emisor.
    Args:
        name (str): Nombre del endpoint.
        engine (Engine): Simulador que provee red y temporizadores.
        timeout (float | None): Retardo de retransmision; por defecto cfg.sw_timeout.
    Atributos:
        seq (int): Numero de secuencia actual (0 o 1).
        last_acknum (int): Ultimo ACK valido recibido, viaja en el campo ack.
        outstanding (Packet | None): Copia del paquete en vuelo.
        waiting_ack (bool): Hay data en camino sin confirmar.
        queue (deque[bytes]): Payloads esperando a que termine la espera.
    """
    def __init__(self, name, engine, timeout: Optional[float] = None):
        super().__init__(name, engine)
        self.timeout = timeout if timeout is not None else engine.cfg.sw_timeout
        self.seq = 0
        self.last_acknum = 0
        self.outstanding: Optional[Packet] = None
        self.waiting_ack = False
        self.queue: Deque[bytes] = deque()

    def initialize(self):
        self.log(None, "initialised")

    @property
    def expected_ack(self) -> int:
        return inc(self.seq, 1)

    """
    Arma el paquete con el seq actual, lo envia y arranca el temporizador.
    Args:
        data (bytes): Payload a enviar.
    Returns:
        None
    """
    def _send_data(self, data: bytes):
        pkt = Packet.build(self.seq, self.last_acknum, data)
        self.outstanding = pkt
        self.waiting_ack = True
        self.log(pkt, "Sending packet from sender.")
        self.engine.send_to_network(self, pkt)
        self.engine.start_timer(self, self.timeout)

    def _retransmit(self):
        self.engine.stop_timer(self)
        self.engine.start_timer(self, self.timeout)
        self.log(self.outstanding, "Retransmitting packet.")
        self.engine.send_to_network(self, self.outstanding)

    def handle_application_send(self, payload: bytes):
        if self.waiting_ack:
            self.log(None, f"New send request queued ({payload!r}), sender waiting for ACK.")
            self.queue.append(payload)
            return
        if self.queue:  # los pedidos viejos salen primero
            self.queue.append(payload)
            payload = self.queue.popleft()
        self._send_data(payload)

    """
    Procesa un ACK. Un ACK corrupto o con numero inesperado funciona como NAK.
    Args:
        packet (Packet): ACK recibido del receptor.
    Returns:
        None
    """
    def handle_network_receive(self, packet: Packet):
        if not self.waiting_ack:
            self.log(packet, "ACK received while idle, ignored.")
            return

        if self.is_corrupt(packet):
            self.log(packet, "Received packet is corrupt.")
            self._retransmit()
            return

        if packet.ack != self.expected_ack:
            self.log(packet, f"Invalid ACK: expected {self.expected_ack}.")
            self._retransmit()
            return

        self.log(packet, "ACK is correct.")
        self.seq = self.expected_ack
        self.last_acknum = packet.ack
        self.waiting_ack = False
        self.engine.stop_timer(self)

        if self.queue:
            self._send_data(self.queue.popleft())

    def handle_timer_expiry(self):
        if self.outstanding is None:
            return
        self.log(self.outstanding, "Timer interrupt, retransmitting packet.")
        self.engine.send_to_network(self, self.outstanding)
        self.engine.start_timer(self, self.timeout)


"""
    Clase receptor del protocolo Stop-and-Wait.
    Tiene su propio temporizador periodico que reenvia el ultimo ACK; solo se
    arma si se configura un keepalive, si no la cola de eventos nunca se vacia.
"""
class StopWaitReceiver(TransportEndpoint):

    def __init__(self, name, engine, keepalive: Optional[float] = None):
        super().__init__(name, engine)
        self.keepalive = keepalive if keepalive is not None else engine.cfg.receiver_keepalive
        self.expected_seqnum = 0
        self.last_acknum = 0
        self.last_ack: Optional[Packet] = None

    def initialize(self):
        self.log(None, "initialised")
        if self.keepalive:
            self.engine.start_timer(self, self.keepalive)

    def handle_application_send(self, payload: bytes):
        self.log(None, f"Receiver has no send path, dropping {payload!r}.")

    def _send_ack(self, seq: int, ack: int) -> Packet:
        reply = Packet.build(seq, ack, ACK_PAYLOAD)
        self.engine.send_to_network(self, reply)
        return reply

    """
    Entrega en orden y responde con ACK.
    Args:
        packet (Packet): Paquete de datos recibido.
    Returns:
        None
    """
    def handle_network_receive(self, packet: Packet):
        if packet.seq != self.expected_seqnum:
            self.log(packet, "Packet already received (or invalid seqnum). Returning ACK for last received packet.")
            self._send_ack(packet.seq, self.last_acknum)
            return

        if self.is_corrupt(packet):
            self.log(packet, "Packet is corrupt! Returning ACK for last received packet.")
            self._send_ack(packet.seq, self.last_acknum)
            return

        self.engine.deliver_to_application(self, packet.payload)
        ack = inc(self.expected_seqnum, 1)
        self.log(packet, "Packet O.K. Returning ACK to sender.")
        self.last_ack = self._send_ack(packet.seq, ack)
        self.last_acknum = ack
        self.expected_seqnum = ack

    def handle_timer_expiry(self):
        if self.last_ack is not None:
            self.log(self.last_ack, "Keepalive, retransmitting last ACK.")
            self.engine.send_to_network(self, self.last_ack)
        if self.keepalive:
            self.engine.start_timer(self, self.keepalive)

from collections import deque
from typing import Deque, Dict, Optional

from Utils.types import Packet
from Protocols.base import TransportEndpoint

ACK_PAYLOAD = b"OK"


"""
    Clase WindowSender: emisor de ventana deslizante con ACK acumulativo.
    La ventana en vuelo es [send_base, next_seq_num) y usa un unico temporizador.
"""
class WindowSender(TransportEndpoint):

    def __init__(self, name, engine, window_size: Optional[int] = None, timeout: Optional[float] = None):
        super().__init__(name, engine)
        self.window_size = window_size if window_size is not None else engine.cfg.window_size
        self.timeout = timeout if timeout is not None else engine.cfg.window_timeout

        self.send_base = 0
        self.next_seq_num = 0
        self.in_flight: Dict[int, Packet] = {}
        self.queue: Deque[bytes] = deque()

    def initialize(self):
        self.log(None, "initialised")

    """
        Funcion que verifica si hay espacio en la ventana de transmision
        Returns:
            bool: True si next_seq_num < send_base + window_size
    """
    def tx_window_has_space(self):
        return self.next_seq_num < self.send_base + self.window_size

    """
        Función que envía un paquete nuevo con el numero next_seq_num.
        Si es el primero en vuelo arranca el temporizador.
        Args:
            data (bytes): Payload a enviar
        Returns:
            None
    """
    def send_data(self, data: bytes):
        s = self.next_seq_num
        pkt = Packet.build(s, s, data)
        self.in_flight[s] = pkt
        self.log(pkt, "Sending packet from sender.")
        self.engine.send_to_network(self, pkt)

        if self.send_base == s:
            self.engine.start_timer(self, self.timeout)
        self.next_seq_num = s + 1

    def drain_queue(self):
        while self.queue and self.tx_window_has_space():
            self.send_data(self.queue.popleft())

    def handle_application_send(self, payload: bytes):
        self.queue.append(payload)
        if not self.tx_window_has_space():
            self.log(None, f"Window full, send request queued ({payload!r}).")
        self.drain_queue()

    """
         Función que maneja la llegada de un ACK acumulativo.
         Args:
             packet (Packet): ACK recibido; packet.seq identifica el paquete confirmado
                              y packet.ack es la nueva base de la ventana
         Returns:
             None
    """
    def handle_network_receive(self, packet: Packet):
        if self.is_corrupt(packet):
            self.log(packet, "Received packet is corrupt, waiting for timeout.")
            return

        ack = packet.ack
        if packet.seq not in self.in_flight or not self.send_base < ack <= self.next_seq_num:
            self.log(packet, "Stale or duplicate ACK, ignored.")
            return

        self.log(packet, "ACK is correct.")
        self.send_base = ack
        for seq in [k for k in self.in_flight if k < ack]:
            del self.in_flight[seq]

        self.engine.stop_timer(self)
        if self.in_flight:
            self.engine.start_timer(self, self.timeout)

        self.drain_queue()

    """
        Función que maneja el timeout: reenvia toda la ventana en vuelo.
        Returns:
            None
    """
    def handle_timer_expiry(self):
        if not self.in_flight:
            return
        self.log(None, f"Timer interrupt, retransmitting {len(self.in_flight)} packets in window.")
        for seq in sorted(self.in_flight):
            self.engine.send_to_network(self, self.in_flight[seq])
        self.engine.start_timer(self, self.timeout)


"""
    Clase WindowReceiver: entrega en orden, sin buffer de reordenamiento.
    Los paquetes que llegan mientras se procesa otro se encolan y se drenan en un bucle.
"""
class WindowReceiver(TransportEndpoint):

    def __init__(self, name, engine):
        super().__init__(name, engine)
        self.expected_seqnum = 0
        self.last_ack: Optional[Packet] = None
        self.backlog: Deque[Packet] = deque()
        self.busy = False

    def initialize(self):
        self.log(None, "initialised")

    def handle_application_send(self, payload: bytes):
        self.log(None, f"Receiver has no send path, dropping {payload!r}.")

    def handle_network_receive(self, packet: Packet):
        self.backlog.append(packet)
        if self.busy:
            return
        self.busy = True
        try:
            while self.backlog:
                self.rx_handle(self.backlog.popleft())
        finally:
            self.busy = False

    def resend_last_ack(self, packet: Packet, reason: str):
        if self.last_ack is None:
            self.log(packet, f"{reason} No ACK to retransmit.")
            return
        self.log(packet, f"{reason} Retransmitting ACK for last in-order packet.")
        self.engine.send_to_network(self, self.last_ack)

    """
       Función que procesa un paquete DATA.
       Args:
           packet (Packet): Paquete recibido
       Returns:
           None
    """
    def rx_handle(self, packet: Packet):
        if self.is_corrupt(packet):
            self.resend_last_ack(packet, "Packet is corrupted.")
            return

        if packet.seq != self.expected_seqnum:
            self.resend_last_ack(packet, "Packet is out of order.")
            return

        self.engine.deliver_to_application(self, packet.payload)
        reply = Packet.build(packet.seq, packet.seq + 1, ACK_PAYLOAD)
        self.log(reply, "Packet O.K. Returning ACK to sender.")
        self.engine.send_to_network(self, reply)
        self.last_ack = reply
        self.expected_seqnum += 1

    def handle_timer_expiry(self):
        pass

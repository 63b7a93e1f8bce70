from __future__ import annotations
from abc import ABC, abstractmethod
import logging

from Utils.types import Packet

logger = logging.getLogger(__name__)

"""
    Clase base para los roles de transporte.
    El Engine solo conoce estos cuatro metodos; cada protocolo implementa una
    subclase emisora y una receptora.
"""
class TransportEndpoint(ABC):

    def __init__(self, name: str, engine):
        self.name = name
        self.engine = engine

    @abstractmethod
    def initialize(self) -> None:

        raise NotImplementedError

    @abstractmethod
    def handle_application_send(self, payload: bytes) -> None:

        raise NotImplementedError

    @abstractmethod
    def handle_network_receive(self, packet: Packet) -> None:

        raise NotImplementedError

    @abstractmethod
    def handle_timer_expiry(self) -> None:

        raise NotImplementedError

    def is_corrupt(self, packet: Packet) -> bool:
        return packet.is_corrupt()

    """
        Funcion que traza un paquete junto a un mensaje del protocolo
        Args:
            packet (Packet | None): Paquete involucrado
            msg (str): Descripcion de lo ocurrido
        Returns:
            None
    """
    def log(self, packet, msg: str) -> None:
        if packet is None:
            logger.debug("(%.2f) %s: %s", self.engine.now, self.name, msg)
            return
        logger.debug("(%.2f) %s: [Data: %s; Seq: %s; Ack: %s] %s", self.engine.now, self.name,
                     packet.payload.decode("ascii", errors="replace"), packet.seq, packet.ack, msg)

    def __repr__(self):
        return f"{type(self).__name__}({self.name!r})"

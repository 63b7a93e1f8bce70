from __future__ import annotations
from dataclasses import dataclass, replace
from enum import Enum, auto
from typing import Any, Optional

# Valor invalido que el canal escribe en seq/ack al corromper un paquete
CORRUPT_SENTINEL = -99999

CHECKSUM_MASK = 0xFFFF


class EventType(Enum):
    APPLICATION_ARRIVAL = auto()
    NETWORK_DELIVERY    = auto()
    TIMER_EXPIRY        = auto()


"""
    Funcion que suma los campos protegidos por el checksum
    Args:
        seq (int): Numero de secuencia
        ack (int): Numero de ACK
        payload (bytes): Datos del paquete
    Returns:
        int: Suma en 16 bits de seq + ack + bytes del payload
"""
def raw_sum(seq: int, ack: int, payload: bytes) -> int:
    return (seq + ack + sum(payload)) & CHECKSUM_MASK


@dataclass(frozen=True)
class Packet:
    """
    Paquete de transporte. Es inmutable: el canal nunca modifica un paquete
    ya enviado, cualquier corrupcion produce un Packet nuevo.
    """
    seq: int
    ack: int
    checksum: int
    payload: bytes = b""

    """
        Funcion que construye un paquete calculando su checksum
        Args:
            seq (int): Numero de secuencia
            ack (int): Numero de ACK
            payload (bytes): Datos del paquete
        Returns:
            Packet: Paquete con checksum = complemento a uno de (seq + ack + payload)
    """
    @classmethod
    def build(cls, seq: int, ack: int, payload: bytes = b"") -> "Packet":
        payload = bytes(payload)
        return cls(seq, ack, CHECKSUM_MASK ^ raw_sum(seq, ack, payload), payload)

    def is_corrupt(self) -> bool:
        return self.checksum + raw_sum(self.seq, self.ack, self.payload) != CHECKSUM_MASK

    def with_seq(self, seq: int) -> "Packet":
        return replace(self, seq=seq)

    def with_ack(self, ack: int) -> "Packet":
        return replace(self, ack=ack)

    def with_payload(self, payload: bytes) -> "Packet":
        return replace(self, payload=bytes(payload))

    def __str__(self):
        data = self.payload.decode("ascii", errors="replace")
        return f"Packet(seq={self.seq}, ack={self.ack}, checksum={self.checksum}, payload={data!r})"


@dataclass
class Event:
    time: float
    kind: EventType
    endpoint: Any
    packet: Optional[Packet] = None

    def __str__(self):
        kind = self.kind.name if isinstance(self.kind, EventType) else str(self.kind)
        name = getattr(self.endpoint, "name", self.endpoint)
        pkt = str(self.packet) if self.packet is not None else "[no data]"
        return f"EVENT(time={self.time:.2f}, type={kind}, entity={name}, pkt={pkt})"

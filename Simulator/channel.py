from Utils.types import CORRUPT_SENTINEL
from Utils.util import LETTERS

# Reparto de la rama de corrupcion entre payload / seq / ack
PAYLOAD_SHARE = 0.75
SEQ_SHARE = 0.875

class ChannelPolicy:

    def __init__(self, cfg, rng):
        self.cfg = cfg
        self.rng = rng

    # Retardo de transito uniforme en [1, 3)
    def sample_delay(self):
        return 1.0 + 2.0 * self.rng.random()

    #Si el numero dado por el random es menor a la probabilidad dada para la perdida, devuelve true
    def will_drop(self):
        return self.rng.random() < self.cfg.loss_prob

    # Si el numero dado por el random es menor a la probabilidad dada para la corrupcion, devuelve true
    def will_corrupt(self):
        return self.rng.random() < self.cfg.corrupt_prob

    # Escribe en data[pos] una letra minuscula distinta de la actual
    def _replace_letter(self, data, pos):
        choices = [c for c in LETTERS if c != data[pos]]
        data[pos] = choices[self.rng.randrange(len(choices))]

    """
        Funcion que produce una copia corrupta de un paquete
        Args:
            pkt (Packet): Paquete limpio, no se modifica
        Returns:
            tuple[str, Packet]: Campo alterado ("payload", "seq" o "ack") y el paquete nuevo
    """
    def corrupt(self, pkt):
        x = self.rng.random()
        if x < PAYLOAD_SHARE and pkt.payload:
            data = bytearray(pkt.payload)
            pos = 0
            for _ in range(self.rng.randint(1, 5)):
                pos = self.rng.randrange(len(data))
                self._replace_letter(data, pos)
            # La suma del payload tiene que cambiar para que el checksum lo detecte
            while sum(data) == sum(pkt.payload):
                self._replace_letter(data, pos)
            return "payload", pkt.with_payload(data)
        if x < SEQ_SHARE:
            return "seq", pkt.with_seq(CORRUPT_SENTINEL)
        return "ack", pkt.with_ack(CORRUPT_SENTINEL)

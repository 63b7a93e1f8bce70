from dataclasses import dataclass
from typing import Optional

from Utils.errors import ConfigurationError

@dataclass
class SimConfig:
    num_messages: int = 10
    loss_prob: float = 0.0          # prob. de pérdida
    corrupt_prob: float = 0.0       # prob. de corrupción
    lambda_: float = 10.0           # escala del tiempo entre llegadas
    bidirectional: bool = False
    debug_level: int = 0            # 0..3, solo trazas
    seed: Optional[int] = None
    payload_size: int = 20
    sw_timeout: float = 100.0       # temporizador de Stop-and-Wait
    window_timeout: float = 1000.0  # temporizador unico de la ventana
    window_size: int = 2
    receiver_keepalive: Optional[float] = None  # periodo del timer propio del receptor S&W

    def __post_init__(self):
        for name in ("loss_prob", "corrupt_prob"):
            value = getattr(self, name)
            if not 0.0 <= value <= 1.0:
                raise ConfigurationError(f"{name} debe estar en [0, 1], se recibio {value}")
        if self.num_messages < 0:
            raise ConfigurationError(f"num_messages no puede ser negativo: {self.num_messages}")
        if self.lambda_ < 0:
            raise ConfigurationError(f"lambda_ no puede ser negativo: {self.lambda_}")
        if not 0 <= self.debug_level <= 3:
            raise ConfigurationError(f"debug_level debe estar entre 0 y 3: {self.debug_level}")
        if self.payload_size < 0:
            raise ConfigurationError(f"payload_size no puede ser negativo: {self.payload_size}")
        if self.window_size < 1:
            raise ConfigurationError(f"window_size debe ser >= 1: {self.window_size}")
        if self.sw_timeout <= 0 or self.window_timeout <= 0:
            raise ConfigurationError("los temporizadores deben ser positivos")
        if self.receiver_keepalive is not None and self.receiver_keepalive <= 0:
            raise ConfigurationError(f"receiver_keepalive debe ser positivo: {self.receiver_keepalive}")

import logging

from Utils.types import Event, EventType

logger = logging.getLogger(__name__)


def _endpoint_name(endpoint):
    return getattr(endpoint, "name", repr(endpoint))


class TimerService:
    """
    Un unico temporizador pendiente por endpoint, montado sobre el scheduler.
    Los conflictos (start con uno pendiente, stop sin ninguno) solo generan
    un warning y se cuentan.
    """

    def __init__(self, scheduler, debug_level: int = 0):
        self.scheduler = scheduler
        self.debug_level = debug_level
        self.conflicts = 0
        self.misses = 0

    def _is_timer_of(self, endpoint):
        return lambda ev: ev.kind == EventType.TIMER_EXPIRY and ev.endpoint is endpoint

    def has_timer(self, endpoint) -> bool:
        return self.scheduler.any_matching(self._is_timer_of(endpoint))

    """
        Funcion que inicia el temporizador de un endpoint
        Args:
            endpoint (TransportEndpoint): Dueno del temporizador
            delay (float): Tiempo hasta la expiracion, relativo al tiempo actual
        Returns:
            bool: True si se agendo el TIMER_EXPIRY, False si ya habia uno pendiente
    """
    def start_timer(self, endpoint, delay: float) -> bool:
        if self.debug_level > 2:
            logger.info("(%.2f) START TIMER for %s", self.scheduler.now, _endpoint_name(endpoint))
        if self.has_timer(endpoint):
            self.conflicts += 1
            logger.warning("Attempting to start timer for %s when one already exists.", _endpoint_name(endpoint))
            return False
        time = self.scheduler.now + delay
        self.scheduler.schedule(time, Event(time, EventType.TIMER_EXPIRY, endpoint))
        return True

    """
        Funcion que detiene el temporizador de un endpoint
        Args:
            endpoint (TransportEndpoint): Dueno del temporizador
        Returns:
            bool: True si habia al menos un TIMER_EXPIRY pendiente y se elimino
    """
    def stop_timer(self, endpoint) -> bool:
        if self.debug_level > 2:
            logger.info("(%.2f) STOP TIMER for %s", self.scheduler.now, _endpoint_name(endpoint))
        removed = self.scheduler.cancel_matching(self._is_timer_of(endpoint))
        if not removed:
            self.misses += 1
            logger.warning("Unable to cancel timer for %s as it doesn't seem to exist.", _endpoint_name(endpoint))
            return False
        return True

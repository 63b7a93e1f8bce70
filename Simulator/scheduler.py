import heapq, itertools
from typing import Callable, List, Optional

from Utils.types import Event


class EventScheduler:
    """
    Cola de eventos ordenada por tiempo simulado.
    Los empates se resuelven por orden de insercion (id creciente).
    """

    def __init__(self):
        self.now: float = 0.0
        self.queue = []
        self.ids = itertools.count()

    def __len__(self):
        return len(self.queue)

    """
        Funcion que agenda un evento en la cola temporal del simulador
        Args:
            time (float): Tiempo absoluto del evento
            ev (Event): Evento a programar
        Returns:
            tuple: Item insertado en el heap (time, eid, ev)
    """
    def schedule(self, time: float, ev: Event):
        item = (time, next(self.ids), ev)
        heapq.heappush(self.queue, item)
        return item

    """
        Funcion que extrae el evento mas temprano y avanza el reloj
        Returns:
            Event: Evento con el menor tiempo (el primero insertado si hay empate)
        Raises:
            IndexError: Si la cola esta vacia
    """
    def pop_earliest(self) -> Event:
        time, _, ev = heapq.heappop(self.queue)
        self.now = time
        return ev

    def next_time(self) -> Optional[float]:
        return self.queue[0][0] if self.queue else None

    def peek_all(self) -> List[Event]:
        return [ev for _, _, ev in sorted(self.queue)]

    """
        Funcion que elimina de la cola todos los eventos que cumplen un predicado
        Args:
            predicate (Callable[[Event], bool]): Criterio de eliminacion
        Returns:
            int: Cantidad de eventos eliminados
    """
    def cancel_matching(self, predicate: Callable[[Event], bool]) -> int:
        keep = [item for item in self.queue if not predicate(item[2])]
        removed = len(self.queue) - len(keep)
        if removed:
            heapq.heapify(keep)
            self.queue = keep
        return removed

    def any_matching(self, predicate: Callable[[Event], bool]) -> bool:
        return any(predicate(ev) for _, _, ev in self.queue)

    def latest_time(self, predicate: Callable[[Event], bool]) -> Optional[float]:
        times = [time for time, _, ev in self.queue if predicate(ev)]
        return max(times) if times else None

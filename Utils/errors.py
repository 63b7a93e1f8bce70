class SimulationError(Exception):
    """Error base del simulador."""


class ConfigurationError(SimulationError, ValueError):
    """Configuracion invalida o roles sin asignar antes de correr la simulacion."""


class InternalInconsistencyError(SimulationError, RuntimeError):
    """Estado interno imposible (por ejemplo un evento de tipo desconocido)."""

import string

LETTERS = string.ascii_lowercase.encode("ascii")


def inc(k: int, max_seq: int) -> int:
    """Incrementa k circularmente en el rango [0, max_seq]."""
    return (k + 1) % (max_seq + 1)


"""
    Funcion que genera un mensaje sintetico de la capa de aplicacion
    Args:
        rng (random.Random): Generador de la simulacion
        n (int): Cantidad de letras
    Returns:
        bytes: n letras minusculas aleatorias
"""
def random_letters(rng, n: int = 20) -> bytes:
    return bytes(LETTERS[rng.randrange(26)] for _ in range(n))

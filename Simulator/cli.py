import argparse
import logging

from rich import print
from rich.logging import RichHandler
from rich.table import Table

from Simulator.config import SimConfig
from Simulator.engine import Engine
from Utils.errors import SimulationError
from Protocols.Stop_and_wait.Stop_and_wait import StopWaitSender, StopWaitReceiver
from Protocols.Go_back_n.Go_back_n import WindowSender, WindowReceiver

PROTOCOLS = {
    "stop-and-wait": (StopWaitSender, StopWaitReceiver),
    "go-back-n": (WindowSender, WindowReceiver),
}


def build_parser(protocol: str) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description=f"Simulador RDT ({protocol})")
    parser.add_argument("-n", "--messages", type=int, default=10,
                        help="cantidad de mensajes de la capa de aplicacion")
    parser.add_argument("-l", "--loss", type=float, default=0.0,
                        help="probabilidad de perdida de un paquete")
    parser.add_argument("-c", "--corrupt", type=float, default=0.0,
                        help="probabilidad de corrupcion de un paquete")
    parser.add_argument("--lambda", dest="lambda_", type=float, default=10.0,
                        help="escala del tiempo entre llegadas")
    parser.add_argument("-b", "--bidirectional", action="store_true",
                        help="las llegadas se reparten entre ambos extremos")
    parser.add_argument("-s", "--seed", type=int, default=None,
                        help="semilla del generador aleatorio")
    if protocol == "go-back-n":
        parser.add_argument("-w", "--window", type=int, default=2,
                            help="tamano de la ventana de envio")
    parser.add_argument("-v", "--verbose", type=int, default=0, choices=range(4),
                        help="nivel de trazas (0..3)")
    parser.add_argument("--max-events", type=int, default=None,
                        help="tope de eventos a procesar")
    return parser


def config_from_args(args) -> SimConfig:
    return SimConfig(
        num_messages=args.messages,
        loss_prob=args.loss, corrupt_prob=args.corrupt,
        lambda_=args.lambda_,
        bidirectional=args.bidirectional,
        debug_level=args.verbose,
        seed=args.seed,
        window_size=getattr(args, "window", 2),
    )


"""
    Funcion que crea el Engine y asigna los roles de un protocolo
    Args:
        protocol (str): Clave de PROTOCOLS
        cfg (SimConfig): Configuracion de la simulacion
    Returns:
        Engine: Simulador listo para run()
"""
def build_engine(protocol: str, cfg: SimConfig) -> Engine:
    sender_cls, receiver_cls = PROTOCOLS[protocol]
    eng = Engine(cfg)
    eng.set_sender(sender_cls("Sender", eng))
    eng.set_receiver(receiver_cls("Receiver", eng))
    return eng


"""
    Funcion que verifica el flujo entregado al receptor
    Args:
        snap (dict): Resultado de Engine.snapshot()
    Returns:
        bool: True si lo entregado es un prefijo, en orden y sin duplicados,
              de lo que la aplicacion ofrecio al sender
"""
def delivered_in_order(snap) -> bool:
    offered = [data for _, name, data in snap["offered"] if name == "Sender"]
    delivered = [data for _, name, data in snap["rx"] if name == "Receiver"]
    return delivered == offered[:len(delivered)]


def print_summary(protocol: str, snap, ok: bool) -> None:
    tx_data = [t for t in snap["tx"] if t[1] == "Sender"]
    tx_ack = [t for t in snap["tx"] if t[1] == "Receiver"]

    table = Table(title=f"Simulacion {protocol}")
    table.add_column("Metrica")
    table.add_column("Valor", justify="right")
    table.add_row("Tiempo sim", f"{snap['time']:.2f}")
    table.add_row("Mensajes generados", str(snap["messages_sent"]))
    table.add_row("TX DATA", str(len(tx_data)))
    table.add_row("TX ACK", str(len(tx_ack)))
    table.add_row("RX", str(len(snap["rx"])))
    table.add_row("Perdidos", str(snap["lost"]))
    table.add_row("Corruptos", str(snap["corrupt"]))
    table.add_row("Conflictos de timer", str(snap["timer_conflicts"] + snap["timer_misses"]))
    table.add_row("Orden S->R", "OK" if ok else "X")
    print(table)


def main(argv=None, protocol: str = "stop-and-wait") -> int:
    args = build_parser(protocol).parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose > 0 else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(show_time=False, show_path=False)],
    )
    try:
        cfg = config_from_args(args)
        eng = build_engine(protocol, cfg)
        eng.run(max_events=args.max_events)
    except SimulationError as e:
        print(f"[red]Error:[/red] {e}")
        return 2

    snap = eng.snapshot()
    ok = delivered_in_order(snap)
    print_summary(protocol, snap, ok)
    return 0 if ok else 1

# Protocols/Stop_and_wait/run_stop_and_wait.py
import sys

from Simulator.cli import main as cli_main


def main(argv=None):
    return cli_main(argv, protocol="stop-and-wait")


if __name__ == "__main__":
    sys.exit(main())

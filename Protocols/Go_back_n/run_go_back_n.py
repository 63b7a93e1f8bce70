# Protocols/Go_back_n/run_go_back_n.py
import sys

from Simulator.cli import main as cli_main


def main(argv=None):
    return cli_main(argv, protocol="go-back-n")


if __name__ == "__main__":
    sys.exit(main())

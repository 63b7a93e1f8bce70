import pytest

from Protocols.Go_back_n import run_go_back_n
from Protocols.Stop_and_wait import run_stop_and_wait
from Simulator.cli import build_engine, build_parser, config_from_args, delivered_in_order
from Simulator.config import SimConfig


def test_stop_and_wait_entry_point(capsys):
    assert run_stop_and_wait.main(["-n", "5", "-s", "1"]) == 0
    out = capsys.readouterr().out
    assert "Simulacion stop-and-wait" in out
    assert "OK" in out


def test_go_back_n_entry_point_with_loss(capsys):
    assert run_go_back_n.main(["-n", "8", "-l", "0.2", "-w", "3", "-s", "2"]) == 0
    assert "Simulacion go-back-n" in capsys.readouterr().out


def test_invalid_probability_reports_error(capsys):
    assert run_stop_and_wait.main(["-c", "2.0"]) == 2
    assert "Error" in capsys.readouterr().out


def test_parser_maps_to_config():
    args = build_parser("go-back-n").parse_args(
        ["-n", "4", "-l", "0.1", "-c", "0.2", "--lambda", "5", "-b", "-w", "4", "-v", "2"])
    cfg = config_from_args(args)
    assert cfg == SimConfig(num_messages=4, loss_prob=0.1, corrupt_prob=0.2, lambda_=5.0,
                            bidirectional=True, window_size=4, debug_level=2)


def test_window_option_only_for_go_back_n():
    with pytest.raises(SystemExit):
        build_parser("stop-and-wait").parse_args(["-w", "3"])


def test_bidirectional_run_keeps_sender_stream_in_order():
    eng = build_engine("stop-and-wait", SimConfig(num_messages=30, bidirectional=True, seed=8))
    eng.run()
    snap = eng.snapshot()
    assert {name for _, name, _ in snap["offered"]} == {"Sender", "Receiver"}
    assert delivered_in_order(snap)

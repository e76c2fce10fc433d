import pytest

from experiments.run_opt import main


def test_cli_success(capsys):
    code = main(["--function", "booth", "--swarm-size", "20", "--iters", "20",
                 "--seed", "3", "--no-save", "--print-every", "10"])
    assert code == 0
    out = capsys.readouterr()
    assert "[Iter 10]" in out.out and "[Iter 20]" in out.out
    assert "Best: index=" in out.out
    assert "Solution:" in out.err


def test_cli_saves_records(tmp_path):
    code = main(["--function", "booth", "--swarm-size", "10", "--iters", "6", "--seed", "1",
                 "--trace_every", "3", "--print-every", "0", "--out", str(tmp_path)])
    assert code == 0
    run_dir = next((tmp_path / "booth" / "single").iterdir())
    names = {p.name for p in run_dir.iterdir()}
    assert {"metadata.json", "convergence.csv", "swarm_2d.csv", "swarm2d.png", "gbest_f_conv.png"} <= names


def test_cli_dimension_error_exit_code(capsys):
    code = main(["--function", "holder_table", "--dim", "3", "--iters", "1", "--no-save"])
    assert code == 1
    assert "dim=2" in capsys.readouterr().err


def test_cli_unknown_function_is_usage_error():
    with pytest.raises(SystemExit) as exc:
        main(["--function", "sphere"])
    assert exc.value.code == 2

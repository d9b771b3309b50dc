"""Tests for the command-line entry point."""

import re

import pytest

from trnbias import cli

MEAN_LINE = re.compile(r"Mean IS=(-?\d+\.\d{16})  OOS=(-?\d+\.\d{16})  Bias=(-?\d+\.\d{16})")


def _run(capsys, *argv):
    cli.main(list(argv))
    return capsys.readouterr().out


def test_reference_scenario_output(capsys):
    out = _run(capsys, "1", "1000", "0.2", "10")
    assert "which=1 ncases=1000 trend=0.200 nreps=10" in out
    match = MEAN_LINE.search(out)
    assert match is not None
    is_mean, oos_mean, bias = (float(v) for v in match.groups())
    assert is_mean == pytest.approx(0.1255696839612827, rel=1e-12)
    assert oos_mean == pytest.approx(0.1160638359355414, rel=1e-12)
    assert bias == pytest.approx(0.0095058480257413, rel=1e-9)


def test_output_is_repeatable(capsys):
    first = MEAN_LINE.search(_run(capsys, "0", "120", "0.0", "3")).group(0)
    second = MEAN_LINE.search(_run(capsys, "0", "120", "0.0", "3")).group(0)
    assert first == second


def test_negative_trend_is_a_positional(capsys):
    out = _run(capsys, "2", "120", "-0.2", "2")
    assert "trend=-0.200" in out


def test_verbose_prints_each_replication(capsys):
    out = _run(capsys, "0", "120", "0.1", "3", "--verbose")
    assert "Short" in out and "Long" in out
    rows = [line for line in out.splitlines() if re.match(r"^\s+[0-2]\s+\d+\s+\d+\s", line)]
    assert len(rows) == 3


def test_seed_option(capsys):
    default = MEAN_LINE.search(_run(capsys, "0", "120", "0.0", "2")).group(0)
    seeded = _run(capsys, "0", "120", "0.0", "2", "--seed", "5")
    assert "seed 5" in seeded
    assert MEAN_LINE.search(seeded).group(0) != default


def test_seed_from_environment(capsys, monkeypatch):
    monkeypatch.setenv("TRNBIAS_SEED", "5")
    from_env = _run(capsys, "0", "120", "0.0", "2")
    monkeypatch.delenv("TRNBIAS_SEED")
    explicit = _run(capsys, "0", "120", "0.0", "2", "--seed", "5")
    assert "seed 5" in from_env
    assert MEAN_LINE.search(from_env).group(0) == MEAN_LINE.search(explicit).group(0)


@pytest.mark.parametrize(
    "argv",
    [
        [],
        ["1", "1000", "0.2"],
        ["1", "1000", "0.2", "10", "extra"],
        ["3", "1000", "0.2", "10"],
        ["-1", "1000", "0.2", "10"],
        ["0", "1", "0.2", "10"],
        ["0", "1000", "0.2", "0"],
        ["x", "1000", "0.2", "10"],
        ["0", "1000", "flat", "10"],
    ],
)
def test_bad_arguments_print_usage_and_exit_1(capsys, monkeypatch, argv):
    def _fail(*args, **kwargs):
        raise AssertionError("core must not run on bad arguments")

    monkeypatch.setattr(cli, "run_replications", _fail)
    with pytest.raises(SystemExit) as exc:
        cli.main(argv)
    assert exc.value.code == 1
    captured = capsys.readouterr()
    assert "Usage: trnbias  which  ncases trend  nreps" in captured.err
    assert "Mean IS=" not in captured.out


def test_bad_seed_in_environment_prints_usage(capsys, monkeypatch):
    monkeypatch.setenv("TRNBIAS_SEED", "abc")
    monkeypatch.setattr(cli, "run_replications", lambda *a, **k: pytest.fail("core ran"))
    with pytest.raises(SystemExit) as exc:
        cli.main(["0", "120", "0.0", "2"])
    assert exc.value.code == 1
    err = capsys.readouterr().err
    assert "Usage: trnbias  which  ncases trend  nreps" in err
    assert "TRNBIAS_SEED" in err


def test_explicit_seed_ignores_bad_environment(capsys, monkeypatch):
    monkeypatch.setenv("TRNBIAS_SEED", "abc")
    assert "seed 5" in _run(capsys, "0", "120", "0.0", "2", "--seed", "5")

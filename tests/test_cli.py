from nsa2dna import cli
from nsa2dna.cli import main
from nsa2dna.tree import CapacityExceededError

GREEN_STEP = 'digraph NSA {\n\tq0 [label="*q0"]\n\tq1 [label="q1"]\n\tq0 -> q1 [label=a]\nR_0 \nG_0 1\n}\n'
EMPTY_GREEN = 'q0 [label="*q0"]\nq0 -> q0 [label=a]\nR_0\nG_0\n'


def _write(tmp_path, name, text):
    path = tmp_path / name
    path.write_text(text, encoding="utf-8")
    return str(path)


def test_prints_and_writes(tmp_path, capsys):
    src = _write(tmp_path, "in.gv", GREEN_STEP)
    out = tmp_path / "out.gv"

    assert main([src, str(out)]) == 0

    printed = capsys.readouterr().out
    written = out.read_text(encoding="utf-8")
    assert written.startswith('\t\tQ0 [label="[0 0 0],[0 $],[0]"]\n')
    assert written in printed


def test_no_echo_no_write(tmp_path, capsys):
    src = _write(tmp_path, "in.gv", GREEN_STEP)
    out = tmp_path / "out.gv"

    assert main([src, str(out), "--no-echo", "--no-write"]) == 0
    assert capsys.readouterr().out == ""
    assert not out.exists()


def test_table_from_config(tmp_path, capsys):
    src = _write(tmp_path, "in.gv", GREEN_STEP)
    cfg = _write(tmp_path, "cfg.toml", "[nsa2dna]\necho = false\ntable = true\n")

    assert main([src, str(tmp_path / "out.gv"), "--config", cfg]) == 0
    printed = capsys.readouterr().out
    assert printed.startswith("DNA: 3 states, 3 transitions")


def test_write_failure_is_not_fatal(tmp_path, capsys):
    src = _write(tmp_path, "in.gv", GREEN_STEP)
    out = tmp_path / "missing-dir" / "out.gv"

    assert main([src, str(out)]) == 0
    captured = capsys.readouterr()
    assert "Q0 -> Q2" in captured.out
    assert "WRITE ERROR" in captured.err


def test_bad_input(tmp_path, capsys):
    src = _write(tmp_path, "in.gv", 'q0 [label="*q0"]\nX_0 1\n')
    assert main([src, str(tmp_path / "out.gv")]) == 1
    assert "INPUT ERROR" in capsys.readouterr().err


def test_missing_input(tmp_path, capsys):
    assert main([str(tmp_path / "nope.gv"), str(tmp_path / "out.gv")]) == 1
    assert "INPUT ERROR" in capsys.readouterr().err


def test_bad_config(tmp_path, capsys):
    src = _write(tmp_path, "in.gv", GREEN_STEP)
    cfg = _write(tmp_path, "cfg.toml", "[nsa2dna]\necho = 1\n")
    assert main([src, str(tmp_path / "out.gv"), "--config", cfg]) == 1
    assert "CONFIG ERROR" in capsys.readouterr().err


def test_phi_chain_converts(tmp_path, capsys):
    src = _write(tmp_path, "in.gv", EMPTY_GREEN)
    out = tmp_path / "out.gv"

    assert main([src, str(out)]) == 0
    written = out.read_text(encoding="utf-8")
    assert '\t\t\t\tQ2 -> Q0 [label="a[1]"]\n' in written
    assert written in capsys.readouterr().out


def test_conversion_error(tmp_path, capsys, monkeypatch):
    def overflow(nsa):
        raise CapacityExceededError("Spawn slot 6 is beyond capacity 6", "[0],[2],[0 0 0]", "a")

    monkeypatch.setattr(cli, "determinize", overflow)
    src = _write(tmp_path, "in.gv", GREEN_STEP)
    out = tmp_path / "out.gv"

    assert main([src, str(out)]) == 2
    captured = capsys.readouterr()
    assert "CONVERSION ERROR: Spawn slot 6" in captured.err
    assert captured.out == ""
    assert not out.exists()

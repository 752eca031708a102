"""Tests for the interactive loop."""

import io
import sys

from sosh.config import Settings
from sosh.interpreter import BANNER, Interpreter, State
from sosh.output import make_console
from sosh.terminal import LineReader


def make(text, **settings):
    settings.setdefault("show_banner", False)
    s = Settings(**settings)
    console = make_console(file=io.StringIO())
    interp = Interpreter(
        s,
        reader=LineReader(io.StringIO(text), console=console, max_line_length=s.max_line_length),
        console=console,
        err_console=make_console(file=io.StringIO()),
        binary_out=io.BytesIO(),
    )
    return interp


def out(interp):
    return interp.console.file.getvalue()


def err(interp):
    return interp.err_console.file.getvalue()


class TestLoop:
    """Tests for Interpreter.run."""

    def test_banner_and_prompt(self):
        interp = make("", show_banner=True)
        assert interp.run() == 0
        assert out(interp) == BANNER + "\n% "

    def test_eof_terminates(self):
        interp = make("")
        assert interp.run() == 0
        assert interp.state is State.TERMINATED
        assert out(interp) == "% "

    def test_termina_stops_without_more_prompts(self, tmp_path):
        target = tmp_path / "f.txt"
        target.write_text("x")
        interp = make(f"termina\napaga {target}\n")
        assert interp.run() == 0
        assert out(interp) == "% "
        assert target.exists()

    def test_empty_lines_reprompt(self):
        interp = make("\n   \n")
        interp.run()
        assert out(interp) == "% % % "
        assert err(interp) == ""

    def test_custom_prompt(self):
        interp = make("\n", prompt="sosh> ")
        interp.run()
        assert out(interp) == "sosh> sosh> "

    def test_builtin_then_continue(self, tmp_path):
        f = tmp_path / "f.txt"
        f.write_text("a\nb\nc\n")
        interp = make(f"conta {f}\ntermina\n")
        interp.run()
        assert out(interp) == "% Número de linhas: 3\n% "

    def test_usage_error_does_not_stop(self):
        interp = make("copia\ntermina\n")
        interp.run()
        assert err(interp) == "Uso: copia ficheiro\n"
        assert out(interp) == "% % "

    def test_io_error_does_not_stop(self, tmp_path):
        interp = make(f"mostra {tmp_path / 'nope'}\ntermina\n")
        interp.run()
        assert err(interp).startswith("Erro ao abrir ficheiro: ")
        assert out(interp) == "% % "

    def test_mostra_writes_bytes(self, tmp_path):
        f = tmp_path / "f.txt"
        f.write_bytes(b"conteudo\n")
        interp = make(f"mostra {f}\n")
        interp.run()
        assert interp.ctx.binary_out.getvalue() == b"conteudo\n"


class TestExternal:
    """Tests for external command handling in the loop."""

    def test_unknown_command(self):
        interp = make("naoexiste\n")
        interp.run()
        assert "Erro ao executar comando" in err(interp)
        assert out(interp) == "% Terminou comando naoexiste com código 1\n% "

    def test_exit_code_reported(self):
        interp = make(f"{sys.executable} -c __import__('sys').exit(7)\ntermina\n")
        interp.run()
        assert f"Terminou comando {sys.executable} com código 7\n" in out(interp)

    def test_arguments_passed(self, capfd):
        interp = make(f"{sys.executable} -c print(__import__('sys').argv[1:]) a b\n")
        interp.run()
        assert capfd.readouterr().out == "['a', 'b']\n"
        assert "com código 0" in out(interp)

    def test_too_many_arguments_warns(self):
        interp = make(f"{sys.executable} -c pass a b c\n", max_args=3)
        interp.run()
        assert "Demasiados argumentos: 3 ignorado(s)" in err(interp)
        assert "com código 0" in out(interp)

    def test_builtins_take_precedence(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        (tmp_path / "f").write_text("x")
        interp = make("copia f\n")
        interp.run()
        assert "Terminou comando" not in out(interp)
        assert (tmp_path / "f.copia").read_text() == "x"


class TestStep:
    """Tests for single iterations."""

    def test_states(self):
        interp = make("\nconta\n")
        assert interp.step() is State.PROMPTING
        assert interp.step() is State.PROMPTING
        assert interp.step() is State.TERMINATED

    def test_long_line_truncated(self):
        interp = make("termina" + " x" * 10 + "\n", max_line_length=7)
        assert interp.step() is State.TERMINATED
        assert "Linha truncada a 7 caracteres" in err(interp)

    def test_nul_byte_in_builtin_line(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        interp = make("conta a\x00b\ntermina\n")
        assert interp.run() == 0
        assert "byte nulo" in err(interp)
        assert out(interp) == "% % "

    def test_nul_byte_in_external_line(self):
        interp = make("ls a\x00b\ntermina\n")
        assert interp.run() == 0
        assert "byte nulo" in err(interp)
        assert "Terminou comando" not in out(interp)

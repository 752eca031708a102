"""Tests for the external process runner."""

import io
import os
import sys

from sosh.output import make_console
from sosh.shell import (
    FAILURE_SENTINEL,
    MAX_ARGS,
    SPAWN_FAILURE,
    ProcessOutcome,
    build_argv,
    run_external,
)
from sosh.tokenizer import CommandLine


def err_console():
    return make_console(file=io.StringIO())


class TestProcessOutcome:
    """Tests for ProcessOutcome."""

    def test_ok(self):
        assert ProcessOutcome(0).ok is True
        assert ProcessOutcome(2).ok is False
        assert ProcessOutcome(FAILURE_SENTINEL, "boom").error == "boom"


class TestBuildArgv:
    """Tests for build_argv."""

    def test_command_first(self):
        argv, dropped = build_argv(CommandLine("ls", ("-l", "/tmp")))
        assert argv == ["ls", "-l", "/tmp"]
        assert dropped == 0

    def test_default_bound(self):
        cmd = CommandLine("echo", tuple(str(i) for i in range(100)))
        argv, dropped = build_argv(cmd)
        assert len(argv) == MAX_ARGS == 63
        assert argv[0] == "echo"
        assert argv[-1] == "61"
        assert dropped == 101 - 63

    def test_exactly_at_bound(self):
        cmd = CommandLine("echo", tuple("x" * 62))
        argv, dropped = build_argv(cmd)
        assert len(argv) == 63
        assert dropped == 0

    def test_custom_bound(self):
        argv, dropped = build_argv(CommandLine("echo", ("a", "b", "c")), max_args=2)
        assert argv == ["echo", "a"]
        assert dropped == 2


class TestRunExternal:
    """Tests for run_external."""

    def test_exit_code(self):
        outcome = run_external([sys.executable, "-c", "import sys; sys.exit(3)"], console=err_console())
        assert outcome.code == 3
        assert outcome.error is None

    def test_success(self):
        assert run_external([sys.executable, "-c", "pass"], console=err_console()).ok

    def test_child_inherits_stdout(self, capfd):
        run_external([sys.executable, "-c", "print('do filho')"], console=err_console())
        assert capfd.readouterr().out == "do filho\n"

    def test_not_found(self):
        console = err_console()
        outcome = run_external(["naoexiste-sosh-test"], console=console)
        assert outcome.code == SPAWN_FAILURE
        assert outcome.error.startswith("Erro ao executar comando: ")
        assert console.file.getvalue().startswith("Erro ao executar comando: ")

    def test_not_executable(self, tmp_path):
        script = tmp_path / "script.sh"
        script.write_text("#!/bin/sh\nexit 0\n")
        os.chmod(script, 0o644)
        outcome = run_external([str(script)], console=err_console())
        assert outcome.code == SPAWN_FAILURE

    def test_killed_by_signal(self):
        code = "import os, signal; os.kill(os.getpid(), signal.SIGKILL)"
        outcome = run_external([sys.executable, "-c", code], console=err_console())
        assert outcome.code == FAILURE_SENTINEL
        assert "signal" in outcome.error

    def test_fork_failure(self, monkeypatch):
        def boom(*args, **kwargs):
            raise BlockingIOError(11, "Resource temporarily unavailable")

        monkeypatch.setattr("sosh.shell.subprocess.run", boom)
        console = err_console()
        outcome = run_external(["ls"], console=console)
        assert outcome.code == FAILURE_SENTINEL
        assert console.file.getvalue().startswith("Erro ao criar processo filho")

# tests/test_shell.py
import os

import pytest

from myshell.context import ShellContext
from myshell.shell import main_loop, make_editor, run_line


@pytest.fixture
def scripted(tmp_path, monkeypatch):
    """
    Build a context reading `script` from a pipe (not a tty), with the
    children's output going to a temporary file.
    """
    monkeypatch.chdir(tmp_path)
    fds = []

    def make(script):
        r, w = os.pipe()
        os.write(w, script.encode())
        os.close(w)
        out_path = tmp_path / "terminal.out"
        out = os.open(out_path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o644)
        fds.extend([r, out])
        return ShellContext(stdin_fd=r, stdout_fd=out), out_path

    yield make
    for fd in fds:
        os.close(fd)


def test_runs_lines_until_eof(scripted):
    ctx, out_path = scripted("echo one\necho two | cat\n")
    assert main_loop(ctx) == 0
    assert out_path.read_text() == "one\ntwo\n"


def test_exit_ends_loop(scripted):
    ctx, out_path = scripted("echo before\nexit\necho after\n")
    assert main_loop(ctx) == 0
    assert out_path.read_text() == "before\n"
    assert ctx.running is False


def test_history_builtin_sees_recorded_lines(scripted, capsys):
    ctx, _ = scripted("\n   \ncd .\nhistory\n")
    main_loop(ctx)
    assert capsys.readouterr().out == "1\tcd .\n2\thistory\n"


def test_history_cleared_at_shutdown(scripted):
    ctx, _ = scripted("cd .\n")
    main_loop(ctx)
    assert len(ctx.history) == 0


def test_errors_do_not_stop_loop(scripted, capsys):
    ctx, out_path = scripted("no-such-command-xyz\ncd /no/such/dir\necho alive\n")
    assert main_loop(ctx) == 0
    assert out_path.read_text() == "alive\n"
    err = capsys.readouterr().err
    assert "command not found" in err
    assert "cd: " in err


def test_last_status_tracked(scripted):
    ctx, _ = scripted("false\n")
    main_loop(ctx)
    assert ctx.last_status == 1


def test_blank_line_keeps_status():
    ctx = ShellContext()
    ctx.last_status = 3
    assert run_line("   ", ctx) == 3


def test_background_job_reaped_between_prompts(scripted, capsys):
    ctx, _ = scripted("true &\nsleep 0.3\ncd .\n")
    main_loop(ctx)
    out = capsys.readouterr().out
    assert "started in background: true &" in out
    assert "finished: true &" in out
    assert len(ctx.jobs) == 0


def test_running_jobs_reported_at_shutdown(scripted, capsys):
    """Background jobs still alive at exit are listed, not killed."""
    ctx, _ = scripted("sleep 5 &\n")
    main_loop(ctx)
    job = ctx.jobs.jobs[0]
    out = capsys.readouterr().out
    try:
        assert "started in background: sleep 5 &" in out
        assert f"{job.pid:<8} sleep 5 &  [" in out
        assert job.procs[0].poll() is None
    finally:
        for p in job.procs:
            p.kill()
            p.wait()


def test_interrupt_outside_read_does_not_exit(scripted, monkeypatch):
    ctx, out_path = scripted("echo alive\n")
    calls = []
    real_reap = ctx.jobs.reap

    def interrupted_reap():
        calls.append(1)
        if len(calls) == 1:
            raise KeyboardInterrupt
        return real_reap()

    monkeypatch.setattr(ctx.jobs, "reap", interrupted_reap)
    assert main_loop(ctx) == 0
    assert out_path.read_text() == "alive\n"
    assert len(calls) == 3


def test_editor_writes_to_context_stdout(scripted):
    ctx, out_path = scripted("")
    editor = make_editor(ctx)
    assert editor.out.fileno() == ctx.stdout_fd
    assert editor.infd == ctx.stdin_fd
    editor.out.write(b"myshell> ")
    assert out_path.read_bytes() == b"myshell> "

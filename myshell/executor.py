import os
import subprocess
import sys

from myshell.config import SHELL_NAME
from myshell.parser import is_background


def redirect(stage):
    """
    Build the preexec hook applying a stage's file redirections inside the
    child, after the pipe fds are in place and before exec.
    """
    def apply():
        try:
            if stage.infile is not None:
                fd = os.open(stage.infile, os.O_RDONLY)
                os.dup2(fd, 0)
                os.close(fd)
            if stage.outfile is not None:
                flags = os.O_WRONLY | os.O_CREAT
                flags |= os.O_APPEND if stage.append else os.O_TRUNC
                fd = os.open(stage.outfile, flags, 0o644)
                os.dup2(fd, 1)
                os.close(fd)
        except OSError as e:
            # chỉ tiến trình này thất bại, các stage khác vẫn chạy
            os.write(2, f"{SHELL_NAME}: {e.filename}: {e.strerror}\n".encode())
            os._exit(1)

    return apply


def run_external(stage, stdin, stdout):
    """
    Chạy một stage với stdin/stdout cho trước.
    Returns: (Popen or None, status if the launch failed)
    """
    name = stage.argv[0]
    try:
        proc = subprocess.Popen(
            stage.argv,
            stdin=stdin,
            stdout=stdout,
            close_fds=True,
            preexec_fn=redirect(stage),
        )
        return proc, None
    except FileNotFoundError:
        print(f"{SHELL_NAME}: command not found: {name}", file=sys.stderr)
        return None, 127
    except PermissionError:
        print(f"{SHELL_NAME}: permission denied: {name}", file=sys.stderr)
        return None, 126
    except OSError as e:
        print(f"{SHELL_NAME}: failed to execute '{name}': {e}", file=sys.stderr)
        return None, 126


def open_pipes(count):
    """All pipes of a pipeline, or none at all."""
    pipes = []
    try:
        for _ in range(count):
            pipes.append(os.pipe())
    except OSError:
        for r, w in pipes:
            os.close(r)
            os.close(w)
        raise
    return pipes


def wait_all(procs):
    """Chờ mọi tiến trình foreground kết thúc."""
    for p in procs:
        while True:
            try:
                p.wait()
                break
            except KeyboardInterrupt:
                # the children got the same SIGINT; keep waiting for them
                print(flush=True)


def execute_pipeline(stages, ctx, cmdline=""):
    """
    Execute pipeline of stages.
    Returns: exit code of the last stage (0 for background pipelines)
    """
    background = is_background(stages)
    stages = [s for s in stages if s.argv]
    if not stages:
        return 0

    try:
        pipes = open_pipes(len(stages) - 1)
    except OSError as e:
        print(f"{SHELL_NAME}: pipe: {e}", file=sys.stderr)
        return 1

    # shell output must not interleave with the children's
    sys.stdout.flush()
    sys.stderr.flush()

    procs = []
    last_proc = None
    status = 0
    input_fd = ctx.stdin_fd

    for idx, stage in enumerate(stages):
        last = idx == len(stages) - 1
        output_fd = ctx.stdout_fd if last else pipes[idx][1]

        p, failed = run_external(stage, stdin=input_fd, stdout=output_fd)
        if p:
            procs.append(p)
        if last:
            last_proc = p
            status = failed or 0

        if input_fd != ctx.stdin_fd:
            os.close(input_fd)
        if not last:
            os.close(output_fd)
            input_fd = pipes[idx][0]

    if background:
        if procs:
            ctx.jobs.add(procs, cmdline)
        return 0

    wait_all(procs)
    if last_proc is not None:
        status = last_proc.returncode
    return status

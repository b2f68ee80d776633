import os
import sys

from myshell.builtin import execute_builtin, is_builtin
from myshell.context import ShellContext
from myshell.editor import LineEditor
from myshell.executor import execute_pipeline
from myshell.parser import parse_pipeline
from myshell.terminal import RawMode


def run_line(line, ctx):
    """
    Parse one line and run it as a builtin or a pipeline.
    Returns: exit_code
    """
    stages = parse_pipeline(line)
    runnable = [s for s in stages if s.argv]
    if not runnable:
        return ctx.last_status

    if is_builtin(runnable):
        return execute_builtin(runnable[0], ctx)
    return execute_pipeline(stages, ctx, cmdline=line.strip())


def make_editor(ctx):
    """Line editor bound to the context's terminal descriptors."""
    out = os.fdopen(ctx.stdout_fd, "wb", buffering=0, closefd=False)
    return LineEditor(ctx.history, infd=ctx.stdin_fd, out=out,
                      echo=os.isatty(ctx.stdin_fd))


def main_loop(ctx, editor=None):
    """Main shell loop"""
    interactive = os.isatty(ctx.stdin_fd)
    if editor is None:
        editor = make_editor(ctx)

    try:
        while ctx.running:
            try:
                ctx.jobs.reap()

                with RawMode(ctx.stdin_fd):
                    line = editor.read_line()

                if line is None:
                    if interactive:
                        print()
                    break

                ctx.last_status = run_line(line, ctx)
            except KeyboardInterrupt:
                # Ctrl+C ngoài lúc đọc input: không thoát shell
                print(flush=True)
                continue
    finally:
        ctx.history.clear()
        ctx.jobs.report_running()

    return 0


def main():
    ctx = ShellContext.from_stdio()
    if not os.isatty(ctx.stdin_fd):
        print("Warning: Not running in a real terminal. Line editing is disabled.",
              file=sys.stderr)
    sys.exit(main_loop(ctx))


if __name__ == "__main__":
    main()

import os
import sys

from myshell.config import SHELL_NAME


def builtin_help(ctx, args):
    """Print help message"""
    print(f"""{SHELL_NAME} help:
 Built-in commands:
  cd [dir]      : change directory
  exit          : exit shell
  help          : print this help
  history       : show command history

Features:
  Pipes using |
  Redirection using < > >>
  Background with & (run pipeline in background)
""")
    return 0


def builtin_cd(ctx, args):
    """Change directory"""
    path = args[0] if args else os.environ.get("HOME") or os.path.expanduser("~")
    try:
        os.chdir(path)
        return 0
    except OSError as e:
        print(f"cd: {e}", file=sys.stderr)
        return 1


def builtin_history(ctx, args):
    """Show command history"""
    ctx.history.show()
    return 0


def builtin_exit(ctx, args):
    ctx.running = False
    return 0


BUILTINS = {
    "cd": builtin_cd,
    "help": builtin_help,
    "history": builtin_history,
    "exit": builtin_exit,
}


def is_builtin(stages):
    """Only a single-stage pipeline can run a builtin."""
    return len(stages) == 1 and bool(stages[0].argv) and stages[0].argv[0] in BUILTINS


def execute_builtin(stage, ctx):
    """
    Execute built-in command in the shell process itself.
    Returns: exit_code
    """
    cmd, args = stage.argv[0], stage.argv[1:]
    return BUILTINS[cmd](ctx, args)

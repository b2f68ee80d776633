import sys
from dataclasses import dataclass, field

from myshell.config import MAX_ARGS, MAX_PIPES, SHELL_NAME


@dataclass
class Stage:
    argv: list = field(default_factory=list)
    infile: str = None
    outfile: str = None
    append: bool = False
    background: bool = False


def split_segments(line):
    """
    Split a line on every '|' outside double quotes.
    Returns: list of trimmed, non-empty segments
    """
    segments, cur = [], []
    quoted = False
    for ch in line:
        if ch == '"':
            quoted = not quoted
        if ch == "|" and not quoted:
            segments.append("".join(cur))
            cur = []
        else:
            cur.append(ch)
    segments.append("".join(cur))

    return [s.strip() for s in segments if s.strip()]


def tokenize(segment):
    """
    Whitespace-split a segment; double quotes bind whitespace.
    Returns: list of (text, literal) where literal means the token was quoted
    """
    tokens = []
    cur, literal, in_token = [], False, False
    quoted = False

    for ch in segment:
        if ch == '"':
            quoted = not quoted
            literal = in_token = True
        elif ch.isspace() and not quoted:
            if in_token:
                tokens.append(("".join(cur), literal))
            cur, literal, in_token = [], False, False
        else:
            cur.append(ch)
            in_token = True
    if in_token:
        tokens.append(("".join(cur), literal))

    return tokens


def parse_stage(segment):
    """Build one Stage from a pipe-free segment."""
    stage = Stage()
    tokens = iter(tokenize(segment))
    scanning = True

    for text, literal in tokens:
        if literal:
            if scanning:
                stage.argv.append(text)
            continue

        if text == "&":
            stage.background = True
        elif not scanning:
            continue
        elif text in ("<", ">", ">>"):
            target = next(tokens, None)
            if target is None:
                print(f"{SHELL_NAME}: syntax error near unexpected token {text}",
                      file=sys.stderr)
                continue
            if text == "<":
                stage.infile = target[0]
            else:
                stage.outfile = target[0]
                stage.append = text == ">>"
                scanning = False
        else:
            stage.argv.append(text)

    # one slot stays reserved, as exec argv is terminated
    del stage.argv[MAX_ARGS - 1:]
    return stage


def parse_pipeline(line, max_stages=MAX_PIPES):
    """
    Parse command line into pipeline stages.
    Returns: list of Stage (stages with empty argv are no-ops)
    """
    if not line or not line.strip():
        return []

    return [parse_stage(seg) for seg in split_segments(line)[:max_stages]]


def is_background(stages):
    return bool(stages) and stages[-1].background

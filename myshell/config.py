SHELL_NAME = "myshell"
PROMPT = f"{SHELL_NAME}> "

MAX_HISTORY = 100   # lines kept in memory
MAX_PIPES = 10      # stages per pipeline
MAX_ARGS = 64       # argv slots per stage, one reserved
MAX_LINE = 1024     # input line, one reserved

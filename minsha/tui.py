# Copyright (c) 2024 iiPython

# Modules
import sys
import threading
import typing

import click

from .search import NonceCandidate

if typing.TYPE_CHECKING:
    from .aggregator import Aggregator
    from .channel import Sender

# Initialization
ESCAPE = "\x1b"
PLACEHOLDER = "-" * 64

# Formatting
def format_digest(digest: bytes, styled: bool = True) -> str:
    """Hex digest grouped in blocks of eight, leading zeros magenta and the rest green."""
    chunks, leading = [], True
    for index, char in enumerate(digest.hex()):
        text = f" {char}" if index % 8 == 0 and index else char
        if not styled:
            chunks.append(text)
            continue

        leading = leading and char == "0"
        chunks.append(click.style(text, fg = "magenta" if leading else "green"))

    return "".join(chunks)

def format_row(worker: int, candidate: NonceCandidate | None, prefix: str, styled: bool = True) -> str:
    if candidate is None:
        return f"core {worker:>2} : {PLACEHOLDER}"

    return f"core {worker:>2} : {format_digest(candidate.digest, styled)} -> {prefix}/{candidate.nonce}"

# Display
class Display:
    def __init__(self, prefix: str, stream: typing.TextIO = sys.stdout) -> None:
        self.prefix = prefix
        self.stream = stream

    def __enter__(self) -> "Display":
        self.stream.write("\033[?1049h\033[?25l")  # Alternate screen, hide cursor
        self.stream.flush()
        return self

    def __exit__(self, *args) -> None:
        self.stream.write("\033[?25h\033[?1049l")
        self.stream.flush()

    def render(self, aggregator: "Aggregator") -> None:
        # Rows are placed by absolute position, the listener keeps the tty in raw mode
        rows = "".join(
            f"\033[{worker + 1};1H{format_row(worker, candidate, self.prefix)}\033[K"
            for worker, candidate in enumerate(aggregator.latest)
        )
        self.stream.write(rows + "\033[J")
        self.stream.flush()

# Key listener
def wait_for_escape(cancel: "Sender") -> None:
    while True:
        try:
            if click.getchar() != ESCAPE:
                continue

        except (KeyboardInterrupt, EOFError):
            pass

        except Exception as e:
            cancel.send(e)  # Raised again by the aggregator
            return

        cancel.send(True)
        return

def listen(cancel: "Sender") -> threading.Thread:
    thread = threading.Thread(target = wait_for_escape, args = (cancel,), daemon = True)
    thread.start()
    return thread

# Copyright (c) 2024 iiPython

# Modules
import queue
import typing

# Initialization
REPORT = "report"
CANCEL = "cancel"

# Mailbox
class Mailbox:
    """Unbounded inbox with any number of producers and exactly one consumer.

    Every producer writes through a `Sender` tagged with the stream it feeds, so the
    consumer waits for "whichever stream speaks first" with one blocking `receive`."""
    def __init__(self) -> None:
        self._queue: queue.SimpleQueue[tuple[str, typing.Any]] = queue.SimpleQueue()
        self.closed = False

    def __repr__(self) -> str:
        return f"<Mailbox pending={self._queue.qsize()} closed={self.closed} />"

    def sender(self, stream: str) -> "Sender":
        return Sender(self, stream)

    def receive(self) -> tuple[str, typing.Any]:
        return self._queue.get()

    def empty(self) -> bool:
        return self._queue.empty()

    def close(self) -> None:
        self.closed = True

class Sender:
    def __init__(self, mailbox: Mailbox, stream: str) -> None:
        self.mailbox = mailbox
        self.stream = stream

    def send(self, item: typing.Any) -> bool:
        if self.mailbox.closed:
            return False  # Consumer is gone

        self.mailbox._queue.put((self.stream, item))
        return True

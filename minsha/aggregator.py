# Copyright (c) 2024 iiPython

# Modules
import typing

from .channel import CANCEL, Mailbox
from .search import MAXIMUM, Exhausted, Improved, NonceCandidate, Report

# Aggregator
class Aggregator:
    """Sole consumer of worker reports, tracking the global minimum.

    `render` is called with the aggregator once before the first event and again
    after every processed report; it runs on the consumer's thread, so workers
    never wait on it."""
    def __init__(
        self,
        workers: int,
        render: typing.Callable[["Aggregator"], None] | None = None
    ) -> None:
        self.minimum: NonceCandidate = MAXIMUM
        self.latest: list[NonceCandidate | None] = [None] * workers
        self.finished: set[int] = set()
        self.render = render

    def __repr__(self) -> str:
        return f"<Aggregator workers={len(self.latest)} finished={len(self.finished)} minimum={self.minimum.digest.hex()} />"

    def process(self, report: Report) -> None:
        if isinstance(report, Improved):
            self.latest[report.worker] = report.candidate
            if report.candidate.digest < self.minimum.digest:
                self.minimum = report.candidate

        elif isinstance(report, Exhausted):
            self.finished.add(report.worker)

    def run(self, mailbox: Mailbox) -> NonceCandidate:
        if self.render is not None:
            self.render(self)

        while True:
            stream, item = mailbox.receive()
            if stream == CANCEL:
                mailbox.close()
                if isinstance(item, BaseException):
                    raise item  # Listener failed, nothing left to stop the loop

                break

            self.process(item)
            if self.render is not None:
                self.render(self)

        # Mailbox is closed, workers keep running and their remaining sends get dropped
        return self.minimum

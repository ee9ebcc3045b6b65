# Copyright (c) 2024 iiPython

# Modules
import threading
import typing

import click
from pydantic import BaseModel, Field, field_validator

from .aggregator import Aggregator
from .channel import CANCEL, REPORT, Mailbox, Sender
from .cores import get_core_ids, pin
from .search import NonceCandidate, build_prefix, nonce_capacity, search
from .tui import listen

# Initialization
MAX_MESSAGE_LENGTH = 64

class Renderer(typing.Protocol):
    def render(self, aggregator: Aggregator) -> None: ...

# Models
class SearchOptions(BaseModel):
    username:   str
    message:    str | None = None
    iterations: int | None = Field(default = None, ge = 0)

    @field_validator("message")
    @classmethod
    def check_message(cls, message: str | None) -> str | None:
        if message is not None and len(message.encode()) > MAX_MESSAGE_LENGTH:
            raise ValueError(f"message cannot be more than {MAX_MESSAGE_LENGTH} characters")

        return message

    @property
    def prefix(self) -> bytes:
        return build_prefix(self.username, self.message)

    @property
    def capacity(self) -> int:
        return nonce_capacity(self.message)

# Search controller
class Searcher:
    def __init__(self, options: SearchOptions, cores: list[int] | None = None, pin_cores: bool = True) -> None:
        self.options = options
        self.cores = get_core_ids() if cores is None else cores
        self.pin_cores = pin_cores

    def _work(self, worker: int, core: int, reports: Sender) -> None:
        if self.pin_cores and not pin(core):
            click.secho(f"could not set core affinity for {core}", fg = "yellow", err = True)

        search(
            worker,
            len(self.cores),
            self.options.prefix,
            self.options.iterations,
            reports,
            self.options.capacity
        )

    def bench(self) -> NonceCandidate:
        return search(0, 1, self.options.prefix, self.options.iterations, capacity = self.options.capacity)

    def spawn(self, reports: Sender) -> None:
        for worker, core in enumerate(self.cores):
            threading.Thread(
                target = self._work,
                args = (worker, core, reports),
                daemon = True
            ).start()

    def run(
        self,
        display: Renderer,
        mailbox: Mailbox | None = None,
        listener: typing.Callable[[Sender], typing.Any] = listen
    ) -> NonceCandidate:
        mailbox = mailbox or Mailbox()
        self.spawn(mailbox.sender(REPORT))
        listener(mailbox.sender(CANCEL))

        # Threads are never joined, the aggregator returns as soon as it is cancelled
        return Aggregator(len(self.cores), render = display.render).run(mailbox)

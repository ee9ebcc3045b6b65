# Copyright (c) 2024 iiPython

# Modules
import hashlib
import itertools
import typing

if typing.TYPE_CHECKING:
    from .channel import Sender

# Initialization
NONCE_CAPACITY = 64

# RFC 4648 section 4 alphabet, no padding
BASE64 = b"ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789+/"
DIGITS = {symbol: value for value, symbol in enumerate(BASE64.decode())}

# Results
class NonceCandidate(typing.NamedTuple):
    digest: bytes
    nonce:  str

class Improved(typing.NamedTuple):
    worker:     int
    candidate:  NonceCandidate

class Exhausted(typing.NamedTuple):
    worker: int

Report = Improved | Exhausted

MAXIMUM = NonceCandidate(b"\xff" * 32, "")

# Prefix
def build_prefix(username: str, message: str | None = None) -> bytes:
    if message is None:
        return username.encode()

    return f"{username}/{message}".encode()

def nonce_capacity(message: str | None = None) -> int:
    return NONCE_CAPACITY - len(message.encode()) if message is not None else NONCE_CAPACITY

# Partitioning
def nonce(worker: int, iteration: int, count: int) -> int:
    return worker + iteration * count

def partition(worker: int, count: int, iterations: int | None = None) -> typing.Iterator[int]:
    """Yield this worker's share of the integers, capped at `iterations` values if given."""
    indexes = itertools.count() if iterations is None else range(iterations)
    for iteration in indexes:
        yield nonce(worker, iteration, count)

# Encoding
def encode_into(value: int, buffer: bytearray, capacity: int = NONCE_CAPACITY) -> bool:
    """Append `value` to `buffer` least significant digit first.

    Returns False when the value needs more than `capacity` symbols, in which case
    the buffer holds a partial encoding and must be discarded."""
    for _ in range(capacity):
        value, remainder = divmod(value, 64)
        buffer.append(BASE64[remainder])
        if value == 0:
            return True

    return False

def encode(value: int, capacity: int = NONCE_CAPACITY) -> str | None:
    buffer = bytearray()
    return buffer.decode() if encode_into(value, buffer, capacity) else None

def decode(text: str) -> int:
    return sum(DIGITS[symbol] * 64 ** position for position, symbol in enumerate(text))

# Worker
def search(
    worker: int,
    count: int,
    prefix: bytes,
    iterations: int | None = None,
    reports: typing.Optional["Sender"] = None,
    capacity: int = NONCE_CAPACITY
) -> NonceCandidate:
    minimum = MAXIMUM

    # Both buffers live for the whole search, only the nonce tail gets rewritten
    head = len(prefix) + 1
    preimage, buffer = bytearray(prefix + b"/"), bytearray()

    for value in partition(worker, count, iterations):
        buffer.clear()
        if not encode_into(value, buffer, capacity):
            break

        del preimage[head:]
        preimage += buffer

        digest = hashlib.sha256(preimage).digest()
        if digest < minimum.digest:
            minimum = NonceCandidate(digest, buffer.decode())
            if reports is not None:
                reports.send(Improved(worker, minimum))

    if reports is not None:
        reports.send(Exhausted(worker))

    return minimum

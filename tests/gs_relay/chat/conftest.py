"""Fixtures for the terminal chat surface."""

import os
from collections.abc import Callable, Iterator
from pathlib import Path

import pytest

from gs_relay.chat.console import ConsoleInput
from gs_relay.output import Output


@pytest.fixture
def make_console() -> Iterator[Callable[[bytes], ConsoleInput]]:
    """Factory for a ConsoleInput reading the given bytes from a closed pipe."""
    read_fds: list[int] = []

    def make(data: bytes) -> ConsoleInput:
        read_fd, write_fd = os.pipe()
        os.write(write_fd, data)
        os.close(write_fd)
        read_fds.append(read_fd)
        return ConsoleInput(read_fd)

    yield make
    for fd in read_fds:
        os.close(fd)


@pytest.fixture
def make_file_console(tmp_path: Path) -> Iterator[Callable[[bytes | None], ConsoleInput]]:
    """Factory for a ConsoleInput over a regular file holding data, or over /dev/null when data is None."""
    fds: list[int] = []

    def make(data: bytes | None) -> ConsoleInput:
        if data is None:
            fd = os.open(os.devnull, os.O_RDONLY)
        else:
            path = tmp_path / f"stdin-{len(fds)}.txt"
            path.write_bytes(data)
            fd = os.open(path, os.O_RDONLY)
        fds.append(fd)
        return ConsoleInput(fd)

    yield make
    for fd in fds:
        os.close(fd)


@pytest.fixture
def out() -> Output:
    return Output(json_mode=False)

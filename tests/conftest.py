"""Shared pytest fixtures: fakes for the command runner and access check."""

import asyncio
from typing import Iterable, Optional

import pytest


class FakeRunner:
    """Async command runner returning canned lsregister output."""

    def __init__(self, stdout: str = "", error: Optional[Exception] = None):
        self.stdout = stdout
        self.error = error
        self.commands: list[str] = []
        self.release: Optional[asyncio.Event] = None

    @property
    def calls(self) -> int:
        return len(self.commands)

    async def __call__(self, command: str) -> str:
        self.commands.append(command)
        if self.release is not None:
            await self.release.wait()
        if self.error is not None:
            raise self.error
        return self.stdout


class FakeAccess:
    """Async access check that accepts only the given paths."""

    def __init__(self, accessible: Iterable[str] = ()):
        self.accessible = set(accessible)
        self.checked: list[str] = []

    async def __call__(self, path: str) -> bool:
        self.checked.append(path)
        return path in self.accessible


@pytest.fixture
def runner():
    return FakeRunner()


@pytest.fixture
def access():
    return FakeAccess()

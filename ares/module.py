"""
Compilation unit descriptor.

A Module names one source unit. The front end only uses the name, verbatim,
as the first field of every diagnostic it produces.
"""

import os
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Module:
    """A named compilation unit."""
    name: str
    path: Optional[str] = None

    @property
    def filename(self) -> str:
        return self.name

    @classmethod
    def from_path(cls, path: str) -> "Module":
        """Create a module named after the file it is read from."""
        return cls(name=os.fspath(path), path=os.fspath(path))

    def __str__(self) -> str:
        return self.name


UNKNOWN_MODULE = Module("<unknown>")

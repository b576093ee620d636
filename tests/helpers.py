"""File helpers shared by the test modules."""

import os


def touch(directory: str, name: str, content: bytes = b"") -> str:
    path = os.path.join(directory, name)
    with open(path, "wb") as f:
        f.write(content)
    return path


def read(directory: str, name: str) -> bytes:
    with open(os.path.join(directory, name), "rb") as f:
        return f.read()

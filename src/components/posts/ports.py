"""Post component port definitions - protocols for dependencies."""

from src.ports.clock import ClockPort
from src.ports.repo import (
    CategoryRepoPort,
    PostRepoPort,
    SlugTakenError,
    StorageError,
    TagRepoPort,
)

__all__ = [
    "PostRepoPort",
    "CategoryRepoPort",
    "TagRepoPort",
    "ClockPort",
    "StorageError",
    "SlugTakenError",
]

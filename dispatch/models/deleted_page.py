"""
Deleted pages and the log entries of their deletion.
"""

from dataclasses import dataclass
from typing import Any, Literal

from .log import LogEntry, api_flag

__all__ = ["PageDeletionInfo", "DeletedPage"]


@dataclass(frozen=True, kw_only=True)
class PageDeletionInfo(LogEntry):
    # True when the entry was picked heuristically among several candidates
    guessed: bool = False

    @classmethod
    def from_api(cls, entry: dict[str, Any]) -> "PageDeletionInfo":
        kwargs = cls._api_kwargs(entry)
        kwargs["guessed"] = api_flag(entry, "guessed")
        return cls(**kwargs)

    def to_api(self) -> dict[str, Any]:
        api_entry = super().to_api()
        api_entry["guessed"] = self.guessed
        return api_entry


@dataclass(frozen=True, kw_only=True)
class DeletedPage:
    # None if the page ID was not preserved in the archive
    pageid: int | None
    ns: int
    title: str
    # timestamp of the first archived revision
    created: str
    length: int
    # the deletion log entry, or True when it could not be found
    deleted: Literal[True] | PageDeletionInfo = True

    @classmethod
    def from_api(cls, entry: dict[str, Any]) -> "DeletedPage":
        deleted = entry.get("deleted", True)
        if isinstance(deleted, dict):
            deleted = PageDeletionInfo.from_api(deleted)
        elif deleted is not True:
            raise ValueError(f"unexpected value of 'deleted' for page {entry.get('title')!r}: {deleted!r}")
        return cls(
            pageid=entry.get("pageid") or None,
            ns=entry["ns"],
            title=entry["title"],
            created=entry["created"],
            length=entry["length"],
            deleted=deleted,
        )

    def to_api(self) -> dict[str, Any]:
        return {
            "pageid": self.pageid,
            "ns": self.ns,
            "title": self.title,
            "created": self.created,
            "length": self.length,
            "deleted": True if self.deleted is True else self.deleted.to_api(),
        }

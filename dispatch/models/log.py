"""
Log entries as returned by ``list=logevents``.
"""

from dataclasses import dataclass, field
from typing import Any, Literal

from .deletion import ChangeDeletionFlags

__all__ = ["LogEntry", "RevisionDeletionParams", "RevisionDeletionInfo", "log_entry_from_api", "api_flag"]


def api_flag(entry: dict[str, Any], key: str) -> bool:
    """
    Read a boolean flag from an API result.

    With ``formatversion=1`` the API marks a true flag by the presence of the
    key with an empty string value, with ``formatversion=2`` the value is a
    real boolean.
    """
    value = entry.get(key, False)
    if value == "":
        return True
    return bool(value)


@dataclass(frozen=True, kw_only=True)
class LogEntry:
    logid: int
    # action-specific payload, left as returned by the API
    params: Any
    comment: str | None
    user: str | None
    timestamp: str
    tags: list[str] = field(default_factory=list)

    commenthidden: bool = False
    actionhidden: bool = False
    userhidden: bool = False

    @staticmethod
    def _api_kwargs(entry: dict[str, Any]) -> dict[str, Any]:
        return {
            "logid": entry["logid"],
            "params": entry.get("params"),
            "comment": entry.get("comment"),
            "user": entry.get("user"),
            "timestamp": entry["timestamp"],
            "tags": list(entry.get("tags", [])),
            "commenthidden": api_flag(entry, "commenthidden"),
            "actionhidden": api_flag(entry, "actionhidden"),
            "userhidden": api_flag(entry, "userhidden"),
        }

    @classmethod
    def from_api(cls, entry: dict[str, Any]):
        return cls(**cls._api_kwargs(entry))

    def _params_to_api(self) -> Any:
        return self.params

    def to_api(self) -> dict[str, Any]:
        api_entry: dict[str, Any] = {
            "logid": self.logid,
            "params": self._params_to_api(),
        }
        # hidden values are omitted, like the API does
        if self.comment is not None:
            api_entry["comment"] = self.comment
        if self.user is not None:
            api_entry["user"] = self.user
        api_entry["timestamp"] = self.timestamp
        api_entry["tags"] = list(self.tags)
        for flag in ("commenthidden", "actionhidden", "userhidden"):
            if getattr(self, flag):
                api_entry[flag] = True
        return api_entry


@dataclass(frozen=True)
class RevisionDeletionParams:
    type: Literal["revision"]
    # the affected revision IDs
    ids: list[int]
    # visibility before and after the action, None when it cannot be determined
    old: ChangeDeletionFlags | None
    new: ChangeDeletionFlags | None

    @classmethod
    def from_api(cls, params: dict[str, Any]) -> "RevisionDeletionParams":
        if params.get("type") != "revision":
            raise ValueError(f"not a revision deletion: {params!r}")
        return cls(
            type="revision",
            ids=[int(revid) for revid in params.get("ids", [])],
            old=ChangeDeletionFlags.from_api(params.get("old")),
            new=ChangeDeletionFlags.from_api(params.get("new")),
        )

    def to_api(self) -> dict[str, Any]:
        return {
            "type": self.type,
            "ids": list(self.ids),
            "old": self.old.to_api() if self.old is not None else None,
            "new": self.new.to_api() if self.new is not None else None,
        }


@dataclass(frozen=True, kw_only=True)
class RevisionDeletionInfo(LogEntry):
    """
    A log entry describing a single revision deletion (``delete/revision``)
    action.
    """

    params: RevisionDeletionParams

    @property
    def flags(self) -> ChangeDeletionFlags | None:
        """
        The visibility set by this action, i.e. the ``new`` flags.
        """
        return self.params.new

    @classmethod
    def from_api(cls, entry: dict[str, Any]) -> "RevisionDeletionInfo":
        kwargs = cls._api_kwargs(entry)
        kwargs["params"] = RevisionDeletionParams.from_api(entry.get("params") or {})
        return cls(**kwargs)

    def _params_to_api(self) -> dict[str, Any]:
        return self.params.to_api()


def log_entry_from_api(entry: dict[str, Any]) -> LogEntry:
    """
    Create the most specific log entry record for an API log event.
    """
    params = entry.get("params")
    if isinstance(params, dict) and params.get("type") == "revision":
        return RevisionDeletionInfo.from_api(entry)
    return LogEntry.from_api(entry)

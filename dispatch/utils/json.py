import json
from typing import Any

__all__ = ["RecordEncoder", "dumps"]


class RecordEncoder(json.JSONEncoder):
    """
    JSON encoder for the records from :py:mod:`dispatch.models`. Any object
    with a ``to_api()`` method is serialized as the dict it returns; sets and
    frozensets are serialized as sorted lists.
    """

    def default(self, o: Any) -> Any:
        to_api = getattr(o, "to_api", None)
        if callable(to_api):
            return to_api()
        elif isinstance(o, set | frozenset):
            return sorted(o)
        else:
            return super().default(o)


def dumps(obj: Any, **kwargs: Any) -> str:
    kwargs.setdefault("cls", RecordEncoder)
    kwargs.setdefault("ensure_ascii", False)
    return json.dumps(obj, **kwargs)

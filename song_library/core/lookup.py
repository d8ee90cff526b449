"""Lookup-key checks shared by the store and cache adapters."""

from .errors import InvalidKeyError
from .models import SongInfo


def validate_lookup_key(key: SongInfo, op: str) -> None:
    """Raise InvalidKeyError unless ``key`` carries an id or both name and group."""
    if key.by_id:
        return
    if not key.name or not key.group:
        raise InvalidKeyError(
            f"{op}: lookup key needs an id or both name and group",
            data={"op": op, "song_name": key.name, "group_name": key.group},
        )

"""CBOR encoding of cached collections.

Ids, entities and languages are written as CBOR semantic tags so a cache file
decodes back into the same Python objects that were stored. Tuples are not
preserved by CBOR; cached values use lists except inside tagged entities.
"""

from pathlib import Path
from typing import Any, Callable, Dict, Type

import cbor2

from ..exceptions import CacheCorruptError, CacheIOError
from ..objects import (
    Change,
    Commit,
    CommitId,
    Head,
    Language,
    Path as PathEntity,
    PathId,
    Project,
    ProjectId,
    User,
    UserId,
    SnapshotId,
)

# Private-use range, see the IANA CBOR tags registry.
_ID_TAGS: Dict[Type, int] = {
    ProjectId: 40001,
    CommitId: 40002,
    UserId: 40003,
    PathId: 40004,
    SnapshotId: 40005,
}
_PROJECT_TAG = 40010
_COMMIT_TAG = 40011
_USER_TAG = 40012
_PATH_TAG = 40013
_HEAD_TAG = 40014
_CHANGE_TAG = 40015
_LANGUAGE_TAG = 40016

_ID_TYPES = {tag: kind for kind, tag in _ID_TAGS.items()}


def _encode(encoder: cbor2.CBOREncoder, value: Any) -> None:
    tag = _ID_TAGS.get(type(value))
    if tag is not None:
        encoder.encode(cbor2.CBORTag(tag, value.value))
    elif isinstance(value, Project):
        encoder.encode(cbor2.CBORTag(_PROJECT_TAG, [value.id, value.url]))
    elif isinstance(value, Commit):
        encoder.encode(
            cbor2.CBORTag(
                _COMMIT_TAG,
                [value.id, value.hash, value.committer_id, value.author_id, list(value.parents)],
            )
        )
    elif isinstance(value, User):
        encoder.encode(cbor2.CBORTag(_USER_TAG, [value.id, value.email]))
    elif isinstance(value, PathEntity):
        encoder.encode(cbor2.CBORTag(_PATH_TAG, [value.id, value.location]))
    elif isinstance(value, Head):
        encoder.encode(cbor2.CBORTag(_HEAD_TAG, [value.name, value.commit_id]))
    elif isinstance(value, Change):
        encoder.encode(cbor2.CBORTag(_CHANGE_TAG, [value.path_id, value.snapshot_id]))
    elif isinstance(value, Language):
        encoder.encode(cbor2.CBORTag(_LANGUAGE_TAG, value.value))
    else:
        raise cbor2.CBOREncodeError(f"cannot serialize type {type(value).__name__}")


def _project(v):
    return Project(v[0], v[1])


def _commit(v):
    return Commit(v[0], v[1], v[2], v[3], tuple(v[4]))


_ENTITY_DECODERS: Dict[int, Callable[[Any], Any]] = {
    _PROJECT_TAG: _project,
    _COMMIT_TAG: _commit,
    _USER_TAG: lambda v: User(v[0], v[1]),
    _PATH_TAG: lambda v: PathEntity(v[0], v[1]),
    _HEAD_TAG: lambda v: Head(v[0], v[1]),
    _CHANGE_TAG: lambda v: Change(v[0], v[1]),
    _LANGUAGE_TAG: Language,
}


def _decode(first: Any, second: Any) -> Any:
    # cbor2 releases disagree on the hook's argument order: (decoder, tag)
    # in the documented form, (tag, immutable) in the type stubs.
    tag = first if isinstance(first, cbor2.CBORTag) else second
    kind = _ID_TYPES.get(tag.tag)
    if kind is not None:
        return kind(tag.value)
    build = _ENTITY_DECODERS.get(tag.tag)
    if build is not None:
        return build(tag.value)
    return tag


def dumps(value: Any) -> bytes:
    return cbor2.dumps(value, default=_encode)


def loads(payload: bytes) -> Any:
    return cbor2.loads(payload, tag_hook=_decode)


def write_file(path: Path, value: Any) -> None:
    """Serialize `value` to `path`, creating parent directories.

    The file is written under a temporary name and renamed into place, so an
    interrupted write never leaves a truncated cache behind.

    Raises:
        CacheIOError: If the directory or file cannot be written
    """
    try:
        payload = dumps(value)
    except (cbor2.CBOREncodeError, TypeError, ValueError) as e:
        raise CacheIOError(path, f"cannot encode: {e}")

    tmp = path.with_name(path.name + ".tmp")
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        tmp.write_bytes(payload)
        tmp.replace(path)
    except OSError as e:
        raise CacheIOError(path, str(e))


def read_file(path: Path) -> Any:
    """Deserialize the cache file at `path`.

    Raises:
        CacheIOError: If the file cannot be read
        CacheCorruptError: If its contents are not valid CBOR
    """
    try:
        payload = path.read_bytes()
    except OSError as e:
        raise CacheIOError(path, str(e))

    try:
        return loads(payload)
    except (cbor2.CBORDecodeError, EOFError, TypeError, ValueError, IndexError) as e:
        raise CacheCorruptError(path, str(e))

"""Redis commands: parsing from RESP arrays and execution against a backend."""

from __future__ import annotations

from dataclasses import dataclass

from ferrolab.resp.frames import (
    BulkString,
    RespArray,
    RespFrame,
    RespNull,
    SimpleString,
)

from .backend import Backend

RESP_OK: RespFrame = SimpleString("OK")


class CommandError(Exception):
    """Base class of errors raised while turning a frame into a command."""


class InvalidCommand(CommandError):
    """The frame does not name a valid command."""

    def __init__(self, detail: str) -> None:
        super().__init__(f"Invalid command: {detail}")
        self.detail = detail


class InvalidArgument(CommandError):
    """The command's arguments are wrong."""

    def __init__(self, detail: str) -> None:
        super().__init__(f"Invalid arguments: {detail}")
        self.detail = detail


def _utf8(data: BulkString) -> str:
    try:
        return data.data.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise CommandError(f"From utf8 error: {exc}") from exc


def validate_command(value: RespArray, names, n_args: int) -> None:
    """Check that ``value`` starts with ``names`` and has ``n_args`` arguments."""
    names = list(names)
    if len(value) != n_args + len(names):
        raise InvalidArgument(
            f"{' '.join(names)} command must have exactly {n_args} argument"
        )
    for name, frame in zip(names, value):
        if not isinstance(frame, BulkString):
            raise InvalidCommand(
                "GET command must have a BulkString as the first argument"
            )
        if frame.data.lower() != name.encode():
            got = frame.data.decode("utf-8", errors="replace")
            raise InvalidCommand(f"Invalid command: expected {name}, got {got}")


def extract_args(value: RespArray, start: int) -> list[RespFrame]:
    """Return the frames of ``value`` from position ``start`` on."""
    return list(value)[start:]


@dataclass
class GetCommand:
    """GET key."""

    key: str

    @classmethod
    def from_array(cls, array: RespArray) -> GetCommand:
        validate_command(array, ["get"], 1)
        (key,) = extract_args(array, 1)
        if not isinstance(key, BulkString):
            raise InvalidArgument("Invalid key")
        return cls(key=_utf8(key))

    def execute(self, backend: Backend) -> RespFrame:
        value = backend.get(self.key)
        return RespNull() if value is None else value


@dataclass
class SetCommand:
    """SET key value."""

    key: str
    value: RespFrame

    @classmethod
    def from_array(cls, array: RespArray) -> SetCommand:
        validate_command(array, ["set"], 2)
        key, value = extract_args(array, 1)
        if not isinstance(key, BulkString):
            raise InvalidArgument("Invalid key")
        return cls(key=_utf8(key), value=value)

    def execute(self, backend: Backend) -> RespFrame:
        backend.set(self.key, self.value)
        return RESP_OK


@dataclass
class HGetCommand:
    """HGET key field."""

    key: str
    field: str

    @classmethod
    def from_array(cls, array: RespArray) -> HGetCommand:
        validate_command(array, ["hget"], 2)
        key, field = extract_args(array, 1)
        if not (isinstance(key, BulkString) and isinstance(field, BulkString)):
            raise InvalidArgument("Invalid key or field")
        return cls(key=_utf8(key), field=_utf8(field))

    def execute(self, backend: Backend) -> RespFrame:
        value = backend.hget(self.key, self.field)
        return RespNull() if value is None else value


@dataclass
class HSetCommand:
    """HSET key field value."""

    key: str
    field: str
    value: RespFrame

    @classmethod
    def from_array(cls, array: RespArray) -> HSetCommand:
        validate_command(array, ["hset"], 3)
        key, field, value = extract_args(array, 1)
        if not (isinstance(key, BulkString) and isinstance(field, BulkString)):
            raise InvalidArgument("Invalid key, field or value")
        return cls(key=_utf8(key), field=_utf8(field), value=value)

    def execute(self, backend: Backend) -> RespFrame:
        backend.hset(self.key, self.field, self.value)
        return RESP_OK


@dataclass
class HGetAllCommand:
    """HGETALL key; ``sort`` orders the fields by name."""

    key: str
    sort: bool = False

    @classmethod
    def from_array(cls, array: RespArray) -> HGetAllCommand:
        validate_command(array, ["hgetall"], 1)
        (key,) = extract_args(array, 1)
        if not isinstance(key, BulkString):
            raise InvalidArgument("Invalid key")
        return cls(key=_utf8(key), sort=False)

    def execute(self, backend: Backend) -> RespFrame:
        fields = backend.hgetall(self.key)
        if fields is None:
            return RespArray([])
        entries = list(fields.items())
        if self.sort:
            entries.sort(key=lambda entry: entry[0])
        flat: list[RespFrame] = []
        for name, value in entries:
            flat.extend((BulkString(name), value))
        return RespArray(flat)


@dataclass
class UnrecognizedCommand:
    """Any command the server does not know; it answers OK."""

    def execute(self, backend: Backend) -> RespFrame:
        return RESP_OK


Command = (
    GetCommand
    | SetCommand
    | HGetCommand
    | HSetCommand
    | HGetAllCommand
    | UnrecognizedCommand
)

_COMMANDS = {
    b"get": GetCommand,
    b"set": SetCommand,
    b"hget": HGetCommand,
    b"hset": HSetCommand,
    b"hgetall": HGetAllCommand,
}


def parse_command(frame: RespFrame) -> Command:
    """Turn a request frame into a command object."""
    if not isinstance(frame, RespArray):
        raise InvalidCommand("Command must be an Array")
    if len(frame) == 0 or not isinstance(frame[0], BulkString):
        raise InvalidCommand("Command must have a BulkString as the first argument")
    command_type = _COMMANDS.get(frame[0].data)
    if command_type is None:
        return UnrecognizedCommand()
    return command_type.from_array(frame)
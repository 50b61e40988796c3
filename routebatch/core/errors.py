# routebatch/core/errors.py
from typing import Any, List, Optional


class RouteBatchError(Exception):
    """
    Base class for every error raised by the batch pipeline.
    """


# ---------------------------------------------------------------------- #
# Field-level parse / validation errors
# ---------------------------------------------------------------------- #


class ParseError(RouteBatchError):
    """
    A single field of a raw record could not be turned into a typed value.

    `value` is the offending raw (or parsed) value.
    """

    message = "invalid value ({value})"

    def __init__(self, value: Any = None, message: Optional[str] = None) -> None:
        self.value = value
        super().__init__(message or self.message.format(value=value))


class InvalidInt(ParseError):
    message = "integer expected, found {value} instead"


class InvalidFloat(ParseError):
    message = "float expected, found {value} instead"


class InvalidTime(ParseError):
    message = "invalid UNIX timestamp supplied ({value})"


class UnknownMode(ParseError):
    message = "unrecognised mode of transport ({value})"


class UnknownAvoidance(ParseError):
    message = "unrecognised avoidance type ({value})"


class UnknownTrafficModel(ParseError):
    message = "unrecognised traffic model ({value})"


class _OutOfBounds(ParseError):
    axis = "coordinate"

    def __init__(self, value: float, lower: float, upper: float) -> None:
        self.lower = lower
        self.upper = upper
        # NaN fails both comparisons; report it against the lower bound
        bound = "upper" if value > upper else "lower"
        super().__init__(
            value,
            f"invalid {self.axis} coordinate supplied ({value}), "
            f"{bound} bound of [{lower}, {upper}] violated",
        )


class InvalidLatitude(_OutOfBounds):
    axis = "latitude"


class InvalidLongitude(_OutOfBounds):
    axis = "longitude"


class MissingTrafficModel(ParseError):
    message = "traffic model not supplied, this must be provided when driving is selected"

    def __init__(self) -> None:
        super().__init__(None)


# ---------------------------------------------------------------------- #
# Input / record errors
# ---------------------------------------------------------------------- #


class RecordError(RouteBatchError):
    """
    Raised (from the field-level error) when a record on a given line is invalid.
    """

    def __init__(self, line: int) -> None:
        self.line = line
        super().__init__(f"invalid contents on line {line}")


class InputError(RouteBatchError):
    pass


class OutputError(RouteBatchError):
    pass


class ConfigError(RouteBatchError):
    pass


# ---------------------------------------------------------------------- #
# URL / signing errors
# ---------------------------------------------------------------------- #


class UrlError(RouteBatchError):
    pass


class SigningError(UrlError):
    pass


class InvalidUrlError(UrlError):
    def __init__(self, url: str) -> None:
        self.url = url
        super().__init__(f"could not parse given URL string ({url})")


# ---------------------------------------------------------------------- #
# Dispatch errors
# ---------------------------------------------------------------------- #


class DispatchError(RouteBatchError):
    """
    A transport failure aborted the batch.

    `completed` holds the bodies of every chunk that fully finished before
    the failure, in input order.
    """

    def __init__(self, request_id: str, completed: Optional[List[Any]] = None) -> None:
        self.request_id = request_id
        self.completed = list(completed or [])
        super().__init__(f"request for id {request_id} failed, batch aborted")


def format_error(exc: BaseException) -> str:
    """
    Render an exception and every underlying cause, one per line:

        Error occurred: invalid contents on line 3
         -> unrecognised mode of transport (flying)
    """
    out = f"Error occurred: {exc}"
    seen = {id(exc)}
    cause = _next_cause(exc)
    while cause is not None and id(cause) not in seen:
        seen.add(id(cause))
        out += f"\n -> {cause}"
        cause = _next_cause(cause)
    return out


def _next_cause(exc: BaseException) -> Optional[BaseException]:
    if exc.__cause__ is not None:
        return exc.__cause__
    if exc.__suppress_context__:
        return None
    return exc.__context__

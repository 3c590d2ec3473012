from typing import Any, Dict, Iterable, List

from fastapi import HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

FieldErrors = Dict[str, List[str]]

# Leading request locations that are not part of the field name
_LOCATIONS = ('body', 'query', 'path', 'header')


def _field_name(loc: Iterable[Any]) -> str:
    parts = [str(p) for p in loc]
    if parts and parts[0] in _LOCATIONS:
        parts = parts[1:]
    return '.'.join(parts) or 'message'


def flatten_errors(errors: Iterable[dict]) -> FieldErrors:
    """Group pydantic error entries by field name."""
    field_errors: FieldErrors = {}
    for error in errors:
        msg = error.get('msg', 'Invalid value')
        if msg.startswith('Value error, '):
            msg = msg[len('Value error, ') :]
        field_errors.setdefault(_field_name(error.get('loc', ())), []).append(msg)
    return field_errors


class FieldValidationError(HTTPException):
    def __init__(self, errors: FieldErrors):
        self.errors = errors
        super().__init__(status.HTTP_422_UNPROCESSABLE_ENTITY, errors, None)


async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={'detail': flatten_errors(exc.errors())},
    )

# utils/request.py
from typing import Type, TypeVar

import pydantic
from flask import current_app, request

from utils.errors import ValidationError

T = TypeVar("T", bound=pydantic.BaseModel)


def _first_error(exc: pydantic.ValidationError) -> str:
    err = exc.errors()[0]
    msg = err.get("msg", "Data tidak valid")
    # pesan dari validator custom: "Value error, <pesan>"
    if msg.startswith("Value error, "):
        return msg[len("Value error, "):]
    loc = ".".join(str(p) for p in err.get("loc", ()))
    return f"{loc}: {msg}" if loc else msg


def parse_body(model: Type[T]) -> T:
    data = request.get_json(silent=True)
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ValidationError("Body harus berupa objek JSON")
    try:
        return model.model_validate(data)
    except pydantic.ValidationError as e:
        raise ValidationError(_first_error(e))


def parse_args(model: Type[T]) -> T:
    data = {k: v for k, v in request.args.items() if v != ""}
    try:
        return model.model_validate(data)
    except pydantic.ValidationError as e:
        raise ValidationError(_first_error(e))


def page_params(page: int | None, limit: int | None) -> tuple[int, int]:
    cfg = current_app.config
    page = max(page or 1, 1)
    limit = limit or cfg["DEFAULT_PAGE_SIZE"]
    return page, max(1, min(limit, cfg["MAX_PAGE_SIZE"]))


def pagination_json(p) -> dict:
    """Bentuk blok pagination dari flask_sqlalchemy Pagination."""
    return {
        "page": p.page,
        "limit": p.per_page,
        "total": p.total,
        "totalPages": p.pages,
        "hasNext": p.has_next,
        "hasPrev": p.has_prev,
    }


def iso(dt):
    return dt.isoformat() if dt else None

"""Request body validation decorator.

Endpoints declare the expected body by annotating a `data` parameter with a
Pydantic model:

    @users_bp.post("")
    @validate_request
    def create_user(data: User):
        ...

Path parameters are passed through untouched.
"""

import typing
from functools import wraps

from flask import request
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from ..exceptions import ValidationError


def _body_model(f) -> type[BaseModel] | None:
    model = typing.get_type_hints(f).get("data")
    if isinstance(model, type) and issubclass(model, BaseModel):
        return model
    return None


def validate_request(f):
    """
    Parse the JSON request body into the model annotated on `data`.

    Raises:
        ValidationError: If the body is missing, not a JSON object, or does
            not match the model. Input values are never echoed back, so a
            submitted password cannot leak into the error response.
    """
    model = _body_model(f)

    @wraps(f)
    def wrapper(*args, **kwargs):
        if model is not None:
            payload = request.get_json(silent=True)
            if not isinstance(payload, dict):
                raise ValidationError("Request body must be a JSON object")

            try:
                kwargs["data"] = model.model_validate(payload)
            except PydanticValidationError as e:
                raise ValidationError(
                    "Invalid request data",
                    {"errors": e.errors(include_url=False, include_context=False, include_input=False)}
                )

        return f(*args, **kwargs)

    return wrapper

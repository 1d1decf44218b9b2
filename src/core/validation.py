from typing import Any, List, Type, TypeVar

from pydantic import BaseModel, ValidationError

from src.core.errors import ContractValidationError, GatewayError

ModelT = TypeVar("ModelT", bound=BaseModel)

_VALUE_ERROR_PREFIX = "Value error, "


def _format_location(loc: tuple) -> str:
    if not loc:
        return "payload"
    return ".".join(str(part) for part in loc)


def collect_violations(exc: ValidationError) -> List[str]:
    violations: List[str] = []
    for error in exc.errors():
        message = str(error.get("msg", "validation failed"))
        if message.startswith(_VALUE_ERROR_PREFIX):
            message = message[len(_VALUE_ERROR_PREFIX) :]
        violations.append(f"{_format_location(tuple(error.get('loc', ())))}: {message}")
    return violations


def validate_contract(
    model: Type[ModelT],
    payload: Any,
    *,
    error_type: Type[GatewayError] = ContractValidationError,
    message: str = "Invalid payload",
) -> ModelT:
    try:
        return model.model_validate(payload)
    except ValidationError as exc:
        raise error_type(message, details=collect_violations(exc)) from exc

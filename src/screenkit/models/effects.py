"""Values exchanged with external effect collaborators."""

from typing import Any

from pydantic import BaseModel, Field


class Session(BaseModel):
    """Authenticated session returned by a successful login."""

    user_id: str | None = None
    token: str | None = None
    data: dict[str, Any] = Field(default_factory=dict)


class AuthError(BaseModel):
    message: str
    code: str | None = None


class Response(BaseModel):
    """Successful network response."""

    status_code: int = 200
    data: Any = None
    headers: dict[str, str] = Field(default_factory=dict)


class NetworkError(BaseModel):
    message: str
    status_code: int | None = None
    data: Any = None


class ValidationResult(BaseModel):
    """Outcome of validating one field or a whole form."""

    valid: bool = True
    errors: dict[str, str] = Field(default_factory=dict)

    @classmethod
    def ok(cls) -> "ValidationResult":
        return cls()

    @classmethod
    def failed(cls, field_id: str, message: str) -> "ValidationResult":
        return cls(valid=False, errors={field_id: message})

    def merge(self, other: "ValidationResult") -> "ValidationResult":
        return ValidationResult(
            valid=self.valid and other.valid,
            errors={**self.errors, **other.errors},
        )

"""
API request and response models.

Pydantic models for FastAPI endpoint validation and OpenAPI schema generation.
Field contents (name pattern, email shape, password length, date format) are
validated by the domain so each failure gets its own user-facing message;
these models only enforce presence and type.
"""

from datetime import date

from pydantic import BaseModel, ConfigDict, Field

from emailgate.domain.ports import AccountProfile


class SignupRequest(BaseModel):
    """Request model for user registration."""

    model_config = ConfigDict(populate_by_name=True)

    name: str
    email: str
    password: str = Field(..., description="User password (min 8 characters)")
    date_of_birth: str = Field(..., alias="dateOfBirth", description="ISO date, e.g. 1990-01-01")


class SignupResponse(BaseModel):
    """Response model for successful registration."""

    status: str = "PENDING"
    message: str
    account_id: str = Field(..., serialization_alias="accountId")


class SigninRequest(BaseModel):
    """Request model for sign-in."""

    email: str
    password: str


class ProfileModel(BaseModel):
    """Non-sensitive account fields returned after sign-in."""

    id: str
    name: str
    email: str
    date_of_birth: date = Field(..., serialization_alias="dateOfBirth")
    verified: bool

    @classmethod
    def from_profile(cls, profile: AccountProfile) -> "ProfileModel":
        return cls(
            id=profile.id,
            name=profile.name,
            email=profile.email,
            date_of_birth=profile.date_of_birth,
            verified=profile.verified,
        )


class SigninResponse(BaseModel):
    """Response model for successful sign-in."""

    status: str = "SUCCESS"
    message: str
    data: ProfileModel


class FailureResponse(BaseModel):
    """Standard failure response model."""

    status: str = "FAILED"
    message: str

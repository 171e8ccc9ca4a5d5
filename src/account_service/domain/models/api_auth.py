"""Account API Models

Purpose: Request/response models for the sign-in and sign-up endpoints

Field names on the wire are camelCase (``fullName``, ``universityId``,
``universityCard``) to match the web client; Python code uses snake_case.

Key Components:
- SignInRequest: Email/password credentials
- SignUpRequest: New library member registration input
- ActionResult: Boolean outcome plus optional user-facing message
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class SignInRequest(BaseModel):
    """Request model for credentials sign-in"""

    email: str = Field(..., description="Account email address", examples=["jane@university.edu"])
    password: str = Field(..., description="Account password")


class SignUpRequest(BaseModel):
    """Request model for new account registration

    universityId and universityCard are optional at the schema level; the
    sign-up action reports their absence as a regular failed result.
    """

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "examples": [
                {
                    "fullName": "Jane Doe",
                    "email": "jane@university.edu",
                    "universityId": 20240117,
                    "password": "correct-horse-battery",
                    "universityCard": "/ids/jane-card.png",
                }
            ]
        },
    )

    full_name: str = Field(..., alias="fullName", description="Member full name")
    email: str = Field(..., description="Account email address")
    university_id: Optional[int] = Field(None, alias="universityId", description="University ID number")
    password: str = Field(..., description="Account password (stored hashed)")
    university_card: Optional[str] = Field(
        None, alias="universityCard", description="Reference to the uploaded university card image"
    )

    @field_validator("university_id", "university_card", mode="before")
    @classmethod
    def blank_to_none(cls, v):
        """Treat empty form values as missing"""
        if isinstance(v, str) and not v.strip():
            return None
        return v


class ActionResult(BaseModel):
    """Outcome of an account action

    Only ``success`` and ``error`` cross the API boundary. The session token
    is handed to the route layer, which turns it into a cookie.
    """

    success: bool
    error: Optional[str] = None
    session_token: Optional[str] = Field(default=None, exclude=True)

    @classmethod
    def ok(cls, session_token: Optional[str] = None) -> "ActionResult":
        return cls(success=True, session_token=session_token)

    @classmethod
    def fail(cls, error: str) -> "ActionResult":
        return cls(success=False, error=error)

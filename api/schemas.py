from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field, HttpUrl, TypeAdapter, ValidationError, field_validator
from pydantic.alias_generators import to_camel

from models.models_tracker import CompareMode

_http_url = TypeAdapter(HttpUrl)


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel)


class SignupIn(CamelModel):
    full_name: str = Field(min_length=1)
    email: EmailStr
    password: str = Field(min_length=6)


class LoginIn(CamelModel):
    email: EmailStr
    password: str


class TokenOut(CamelModel):
    token: str


class ProfileOut(CamelModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    full_name: str
    email: str


class ProbeDraft(CamelModel):
    website_url: str = Field(max_length=255)
    selector: str = Field(min_length=1, max_length=255)
    compare_mode: CompareMode

    @field_validator("website_url")
    @classmethod
    def _absolute_http_url(cls, v: str) -> str:
        # validate only, keep the caller's exact string
        try:
            _http_url.validate_python(v)
        except ValidationError:
            raise ValueError("must be an absolute http(s) URL")
        return v


class TrackerIn(ProbeDraft):
    name: str = Field(min_length=1, max_length=255)
    cron_expr: str = Field(min_length=1, max_length=255)


class TrackerOut(CamelModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)

    id: int
    user_id: int
    name: str
    cron_expr: str
    compare_mode: CompareMode
    website_url: str
    selector: str
    created_at: datetime
    updated_at: datetime


class ProbeResult(CamelModel):
    result: str | None


class MessageOut(CamelModel):
    message: str

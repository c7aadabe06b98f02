from typing import Any, Optional
from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

def _coerce_str(v):
    if v is None: return ""
    if isinstance(v, (int, float, bool)): return str(v)  # ex.: jobId numérico
    return v

class JobBoardPayload(BaseModel):
    model_config = ConfigDict(frozen=True)

    # o job board original envia "jobid"; aceitamos as duas grafias
    jobId: str = Field("", validation_alias=AliasChoices("jobId", "jobid"))
    # campos ausentes degradam para "" em vez de barrar a submissão
    name: str = ""
    email: str = ""
    phone: str = ""
    city: str = ""
    motivation: str = ""
    cv: str = ""

    @field_validator("jobId","name","email","phone","city","motivation","cv", mode="before")
    @classmethod
    def _clean(cls, v): return _coerce_str(v)

class ContactPayload(BaseModel):
    firstName: str
    lastName: str
    email: str
    phone: str
    city: str
    motivation: str
    cv: str

class ApplicationPayload(BaseModel):
    jobId: str
    timestamp: int
    contactId: str

class ApplyResponse(BaseModel):
    message: str
    data: Optional[Any] = None

class ErrorResponse(BaseModel):
    message: str
    error: str

class UnauthorizedResponse(BaseModel):
    message: str = "Unauthorized"

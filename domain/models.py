from datetime import datetime
from enum import Enum
from typing import Optional, List

from pydantic import BaseModel, Field


class StatementType(str, Enum):
    REBALANCEAMENTO = "Rebalanceamento"
    BATEDOR = "Batedor"
    PERFORMANCE = "Performance"


class SubmissionStatus(str, Enum):
    PENDING = "pending"
    SUCCESS = "success"
    ERROR = "error"


class Role(str, Enum):
    ADMIN = "admin"
    USER = "user"


class UploadedFile(BaseModel):
    name: str
    content_type: str = ""
    data: bytes = b""

    @property
    def size(self) -> int:
        return len(self.data)


class DraftSubmission(BaseModel):
    """The single in-memory draft owned by a form session."""

    files: List[UploadedFile] = Field(default_factory=list)
    client: str = ""
    # selection order is kept; the form never appends a type twice
    statement_types: List[StatementType] = Field(default_factory=list)
    institution: str = ""
    competence: str = ""


class Submission(BaseModel):
    id: Optional[str] = None
    user_id: Optional[str] = None
    created_at: datetime = Field(default_factory=datetime.utcnow)
    cliente: str
    nome_conta: Optional[str] = None
    instituicao: str
    moeda: str = "BRL"
    competencia: str = ""
    tipos: List[str] = Field(default_factory=list)
    status: str = SubmissionStatus.PENDING.value


class UserProfile(BaseModel):
    id: str
    email: str
    full_name: Optional[str] = None
    created_at: datetime = Field(default_factory=datetime.utcnow)
    roles: List[str] = Field(default_factory=list)

    @property
    def is_admin(self) -> bool:
        return Role.ADMIN.value in self.roles


class Institution(BaseModel):
    id: Optional[str] = None
    name: str
    created_at: Optional[datetime] = None

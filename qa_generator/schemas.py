from enum import Enum
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator

class Difficulty(str, Enum):
    easy = "easy"
    medium = "medium"
    hard = "hard"

class QAItem(BaseModel):
    model_config = ConfigDict(frozen=True)

    question: str = Field(min_length=1)
    answer: str = Field(min_length=1)

    @field_validator("question", "answer", mode="before")
    @classmethod
    def _strip(cls, v):
        return v.strip() if isinstance(v, str) else v

class Source(BaseModel):
    model_config = ConfigDict(frozen=True)

    uri: str
    title: str
    summary: Optional[str] = None

class SourceSummary(BaseModel):
    uri: str
    summary: str

class GenerationRequest(BaseModel):
    model_config = ConfigDict(frozen=True)

    topic: str
    difficulty: Difficulty = Difficulty.medium
    num_questions: int = 5

class GenerationResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    qa_list: List[QAItem]
    sources: List[Source] = Field(default_factory=list)

# ---------- HTTP bodies ----------
class GenerateBody(BaseModel):
    topic: str = ""
    difficulty: Difficulty = Difficulty.medium
    num_questions: int = 5
    session_id: Optional[str] = None

class GenerateResponse(BaseModel):
    session_id: str
    topic: str
    difficulty: Difficulty
    num_questions: int
    qa_list: List[QAItem]
    sources: List[Source]

class SessionView(BaseModel):
    session_id: str
    is_generating: bool
    error: Optional[str] = None
    request: Optional[GenerationRequest] = None
    result: Optional[GenerationResult] = None

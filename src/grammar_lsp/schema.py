from __future__ import annotations

from typing import Annotated, List, Literal

from pydantic import BaseModel, ConfigDict, Field, StrictStr

# The model is free to invent extra keys ("severity", "suggestion", ...);
# only line/column/message are part of the contract.
_TOLERANT = ConfigDict(extra="ignore")

# LSP positions are uint32 values capped at 2**31 - 1; the end column is
# column + 1 and the editor line is line - 1.
_MAX_POSITION = 2**31 - 1


class GrammarIssue(BaseModel):
    """One finding reported by the model.

    ``line`` is 1-based and ``column`` 0-based, as the prompt instructs.
    Lines of 0 or below are accepted and land on the first editor line;
    a negative column, or a position no editor can address, fails validation.
    """

    model_config = _TOLERANT

    line: Annotated[int, Field(strict=True, le=_MAX_POSITION + 1)]
    column: Annotated[int, Field(strict=True, ge=0, le=_MAX_POSITION - 1)]
    message: StrictStr


class IssueEnvelope(BaseModel):
    model_config = _TOLERANT

    issues: List[GrammarIssue]


class OllamaRequest(BaseModel):
    model: str
    prompt: str
    format: Literal["json"] = "json"
    stream: bool = False


class OllamaApiResponse(BaseModel):
    model_config = _TOLERANT

    response: StrictStr

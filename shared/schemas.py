"""
Request Orchestrator - Schemas

Pydantic models for call descriptors, transport responses and request outcomes.
"""

from pydantic import BaseModel, Field, ConfigDict
from typing import Optional, Dict, Any, Literal


class OrchestratorBaseModel(BaseModel):
    """Base class for orchestrator models"""
    model_config = ConfigDict(
        populate_by_name=True,
        arbitrary_types_allowed=True,
        frozen=True
    )


# ============================================
# Call Descriptors
# ============================================

class CallDescriptor(OrchestratorBaseModel):
    """Normalized description of a single HTTP call"""
    method: str
    url: str
    query: Any = None
    body: Any = None
    success_type: Optional[str] = Field(default=None, alias="successType")
    error_type: Optional[str] = Field(default=None, alias="errorType")
    # Hooks are only invoked when callable, so any value is accepted here
    after_success: Any = Field(default=None, alias="afterSuccess")
    after_error: Any = Field(default=None, alias="afterError")


# ============================================
# Transport Messages
# ============================================

class TransportResponse(OrchestratorBaseModel):
    """Status code and decoded body returned by the HTTP transport"""
    status: int
    data: Any = None
    headers: Dict[str, str] = {}


# ============================================
# Outcomes
# ============================================

class Outcome(OrchestratorBaseModel):
    """
    Settled result of one request.

    Exactly one of ``result`` (the response body) or ``error`` (the error
    value) is meaningful, selected by ``status``.
    """
    status: Literal["success", "error"]
    result: Any = None
    error: Any = None

    @classmethod
    def success(cls, result: Any) -> "Outcome":
        return cls(status="success", result=result)

    @classmethod
    def failure(cls, error: Any) -> "Outcome":
        return cls(status="error", error=error)

    @property
    def ok(self) -> bool:
        return self.status == "success"

    def to_dict(self) -> Dict[str, Any]:
        """Return ``{"result": ...}`` or ``{"error": ...}``"""
        if self.ok:
            return {"result": self.result}
        return {"error": self.error}

    def __getitem__(self, key: str) -> Any:
        """Key access into ``to_dict()``, so ``previous["result"]`` works"""
        return self.to_dict()[key]

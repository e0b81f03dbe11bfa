"""
Models for the outcome of a verification pass.
"""
from typing import List
from pydantic import BaseModel, Field
from enum import Enum


class VerificationOutcome(str, Enum):
    """
    Overall verdict of a verification pass.
    """
    PASS = "pass"
    PARTIAL = "partial"
    FAIL = "fail"


class VerificationResult(BaseModel):
    """
    Transient summary produced by one verification pass. Never persisted.
    """
    expected_count: int = 3
    running_count: int = Field(default=0, ge=0, le=3)
    running_names: List[str] = []
    health_ok: bool = False
    root_ok: bool = False
    public_address: str = "localhost"

    @property
    def outcome(self) -> VerificationOutcome:
        if self.running_count == 0:
            return VerificationOutcome.FAIL
        if self.running_count == self.expected_count and self.health_ok and self.root_ok:
            return VerificationOutcome.PASS
        return VerificationOutcome.PARTIAL

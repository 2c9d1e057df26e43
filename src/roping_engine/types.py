# Area: Core
"""
roping_engine.types — Request payloads and result records
=========================================================

Request payloads are pydantic models: they validate ranges and enum
values on the way in. Result records are plain dataclasses built by the
store and the engine on the way out.

Import from here:

    from roping_engine.types import RunResult, NewTeam, Standing
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Set, Type, TypeVar

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic import ValidationError as PydanticValidationError

from .enums import Level, RuleStatus, RunStatus, Specialty, TeamStatus
from .errors import ValidationError

M = TypeVar("M", bound=BaseModel)


# ══════════════════════════════════════════════════════════════
# REQUEST PAYLOADS
# ══════════════════════════════════════════════════════════════

class _Payload(BaseModel):
    model_config = ConfigDict(extra="forbid")


class NewEvent(_Payload):
    name: str = Field(min_length=1)
    date: str
    rounds: int = Field(default=1, ge=1)
    status: str = "upcoming"
    location: Optional[str] = None
    entry_fee: Optional[float] = Field(default=None, ge=0)
    prize_pool: Optional[float] = Field(default=None, ge=0)


class NewRoper(_Payload):
    first_name: str = Field(min_length=1)
    last_name: str = Field(min_length=1)
    specialty: Specialty
    rating: int = Field(default=0, ge=0)
    phone: Optional[str] = None
    email: Optional[str] = None
    level: Level = Level.AMATEUR

    @field_validator("specialty", "level", mode="before")
    @classmethod
    def _lowercase(cls, value: Any) -> Any:
        return value.strip().lower() if isinstance(value, str) else value


class RoperChanges(_Payload):
    """Fields to change on a roper; only fields explicitly set are written."""
    first_name: Optional[str] = Field(default=None, min_length=1)
    last_name: Optional[str] = Field(default=None, min_length=1)
    specialty: Optional[Specialty] = None
    rating: Optional[int] = Field(default=None, ge=0)
    phone: Optional[str] = None
    email: Optional[str] = None
    level: Optional[Level] = None

    @field_validator("specialty", "level", mode="before")
    @classmethod
    def _lowercase(cls, value: Any) -> Any:
        return value.strip().lower() if isinstance(value, str) else value

    def changed_fields(self) -> Set[str]:
        return set(self.model_fields_set)


class NewTeam(_Payload):
    event_id: int
    header_id: int
    heeler_id: int
    rating: float = 0.0


class TeamChanges(_Payload):
    """Fields to change on a team; only fields explicitly set are written."""
    rating: Optional[float] = None
    status: Optional[TeamStatus] = None

    @field_validator("status", mode="before")
    @classmethod
    def _lowercase(cls, value: Any) -> Any:
        return value.strip().lower() if isinstance(value, str) else value

    def changed_fields(self) -> Set[str]:
        return set(self.model_fields_set)


class RunResult(_Payload):
    """A captured result for one team in one round."""
    event_id: int
    team_id: int
    round: int = Field(ge=1)
    position: int = Field(ge=1)
    time_sec: Optional[float] = Field(default=None, ge=0)
    penalty: float = Field(default=0.0, ge=0)
    no_time: bool = False
    dq: bool = False

    @property
    def is_elimination(self) -> bool:
        return self.no_time or self.dq

    @property
    def total_sec(self) -> Optional[float]:
        if self.is_elimination or self.time_sec is None:
            return None
        return self.time_sec + self.penalty


class NewPayoffRule(_Payload):
    event_id: int
    position: int = Field(ge=1)
    percentage: float = Field(ge=0.0, le=1.0)


def parse_payload(model_cls: Type[M], data: Any) -> M:
    """
    Build a payload model, converting pydantic failures to ValidationError.

    Args:
        model_cls: Payload model class
        data: Model instance or mapping of raw values

    Returns:
        Validated model instance

    Raises:
        ValidationError: If any field fails validation
    """
    if isinstance(data, model_cls):
        return data
    try:
        return model_cls.model_validate(data)
    except PydanticValidationError as e:
        errors = e.errors()
        first = errors[0]
        loc = ".".join(str(p) for p in first.get("loc", ())) or model_cls.__name__
        messages = [
            f"{'.'.join(str(p) for p in err.get('loc', ()))}: {err.get('msg')}"
            for err in errors
        ]
        raise ValidationError(loc, first.get("msg", "invalid value"), messages) from e


# ══════════════════════════════════════════════════════════════
# RESULT RECORDS
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class TeamRef:
    """Team identity plus its two ropers, as used by the draw."""
    id: int
    header_id: int
    heeler_id: int

    def shares_roper_with(self, other: "TeamRef") -> bool:
        mine = (self.header_id, self.heeler_id)
        return other.header_id in mine or other.heeler_id in mine


@dataclass(frozen=True)
class DrawEntry:
    position: int
    team_id: int


@dataclass
class RunRecord:
    id: int
    event_id: int
    team_id: int
    round: int
    position: int
    time_sec: Optional[float]
    penalty: float
    total_sec: Optional[float]
    no_time: bool
    dq: bool
    status: RunStatus
    header_name: str = ""
    heeler_name: str = ""

    @property
    def is_valid_completed(self) -> bool:
        return (
            self.status is RunStatus.COMPLETED
            and not self.no_time
            and not self.dq
        )


@dataclass
class PayoffRule:
    id: int
    event_id: int
    position: int
    percentage: float
    status: RuleStatus = RuleStatus.ACTIVE


@dataclass
class EventFinancials:
    entry_fee: float = 0.0
    prize_pool: float = 0.0


@dataclass
class Standing:
    """One ranked row of the standings table."""
    rank: int
    team_id: int
    header_name: str
    heeler_name: str
    total_time: Optional[float]
    completed_runs: int
    nt_count: int
    dq_count: int
    avg_time: Optional[float]
    best_time: Optional[float]


@dataclass
class PayoutAllocation:
    place: int
    percentage: float
    amount: float


@dataclass
class PayoutBreakdown:
    total_pot: float
    deductions: float
    net_pot: float
    payouts: List[PayoutAllocation] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total_pot": self.total_pot,
            "deductions": self.deductions,
            "net_pot": self.net_pot,
            "payouts": [
                {"place": p.place, "percentage": p.percentage, "amount": p.amount}
                for p in self.payouts
            ],
        }

"""Tagged result type for settlement operations"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Generic, TypeVar, Union

from credit_settlement.domain.exceptions import SettlementError

T = TypeVar("T")


class ErrorKind(str, Enum):
    """Every way a settlement request can be refused"""

    DAY0_RESTRICTION = "day0_restriction"
    INVALID_AMOUNT = "invalid_amount"
    AMOUNT_EXCEEDS_PAYABLE = "amount_exceeds_payable"
    BELOW_MINIMUM_PARTIAL_PAYMENT = "below_minimum_partial_payment"
    CONFIGURATION_ERROR = "configuration_error"
    INVALID_EVALUATION_DATE = "invalid_evaluation_date"


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T

    @property
    def ok(self) -> bool:
        return True

    def unwrap(self) -> T:
        return self.value


@dataclass(frozen=True)
class Err:
    """Refusal carrying a kind, a display message and the computed values behind it"""

    kind: ErrorKind
    message: str
    detail: Dict[str, Any] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return False

    def unwrap(self):
        raise SettlementError(self.kind, self.message, self.detail)


Result = Union[Ok[T], Err]

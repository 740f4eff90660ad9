from __future__ import annotations

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------

class Level(str, Enum):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"


class BucketStatus(str, Enum):
    IN_PROGRESS = "In Progress"
    COMPLETED = "Completed"


# ---------------------------------------------------------------------------
# Wire models (camelCase on the wire, snake_case in Python)
# ---------------------------------------------------------------------------

class WireModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_wire(self) -> dict:
        return self.model_dump(by_alias=True, mode="json")


class UserProfile(WireModel):
    id: int
    name: str = ""
    email: str = ""


class AuthResponse(WireModel):
    id: int
    name: str
    email: str
    token: str

    def profile(self) -> UserProfile:
        return UserProfile(id=self.id, name=self.name, email=self.email)


class Bucket(WireModel):
    id: int
    user_id: int
    name: str
    target_amount: float
    current_saved_amount: float = 0.0
    priority_score: float = 0.5
    deadline: str                        # ISO-8601 timestamp
    status: str = BucketStatus.IN_PROGRESS.value


class Transaction(WireModel):
    id: int
    user_id: int
    amount: float                        # negative = expense, positive = income
    description: str
    category: Optional[str] = None
    transaction_date: str
    reference: Optional[str] = None
    notes: Optional[str] = None
    is_reconciled: bool = False


class Recommendation(WireModel):
    id: int
    category: str
    title: str
    description: str
    potential_impact: Level
    difficulty: Level


class Income(WireModel):
    id: int = 0
    salary: float = 0.0
    investments: float = 0.0
    business_income: float = 0.0
    financial_summary_id: int = 0


class Expenses(WireModel):
    id: int = 0
    rent_mortgage: float = 0.0
    utilities: float = 0.0
    insurance: float = 0.0
    loan_payments: float = 0.0
    groceries: float = 0.0
    transportation: float = 0.0
    subscriptions: float = 0.0
    entertainment: float = 0.0
    financial_summary_id: int = 0


EXPENSE_CATEGORIES: List[str] = [
    "rent_mortgage",
    "utilities",
    "insurance",
    "loan_payments",
    "groceries",
    "transportation",
    "subscriptions",
    "entertainment",
]


class FinancialSummary(WireModel):
    id: int
    savings_balance: float = 0.0
    investment_balance: float = 0.0
    debt_balance: float = 0.0
    user_id: int
    income: Income
    expenses: Expenses

    @property
    def total_income(self) -> float:
        return self.income.salary + self.income.investments + self.income.business_income

    @property
    def total_expenses(self) -> float:
        return sum(getattr(self.expenses, name) for name in EXPENSE_CATEGORIES)


class ChatRequest(WireModel):
    question: str


class ChatResponse(WireModel):
    response: str


class IncomeAnalysis(WireModel):
    summary: str = ""
    diversification: str = ""


class ExpenseAnalysis(WireModel):
    summary: str = ""
    potential_savings: str = ""


class AnalysisSummary(WireModel):
    savings_rate: str = ""
    savings_goals: str = ""

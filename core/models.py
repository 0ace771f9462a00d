from __future__ import annotations

from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

Program = Literal["Conventional", "FHA", "VA", "USDA", "Jumbo"]
PmiType = Literal["BPMI", "SPMI", "LPMI", "None"]


class _Model(BaseModel):
    # camelCase on the wire, snake_case in Python
    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, frozen=True, allow_inf_nan=False
    )


class ScenarioInput(_Model):
    name: Optional[str] = None
    price: float = Field(ge=0)
    ltv: Optional[float] = Field(default=None, ge=0, le=1.5)
    loan_amount: Optional[float] = Field(default=None, ge=0)
    program: Program = "Conventional"
    term_months: int = Field(default=360, gt=0)
    note_rate: float
    discount_points_pct: float = 0.0
    closing_costs: float = Field(default=0.0, ge=0)
    seller_credit: float = Field(default=0.0, ge=0)
    pmi_type: Optional[PmiType] = None
    pmi_annual_factor: Optional[float] = Field(default=None, ge=0)
    taxes_monthly: Optional[float] = Field(default=None, ge=0)
    insurance_monthly: Optional[float] = Field(default=None, ge=0)
    hoa_monthly: Optional[float] = Field(default=None, ge=0)
    lock_rate: bool = False


class AllocationStep(_Model):
    rate: float
    points_cost: float
    monthly_save: float
    break_even: int


class ScenarioOutput(_Model):
    loan_amount: float
    points_cost: float
    applied_seller_credit: float
    applied_to_points: float
    applied_to_costs: float
    final_rate: float
    p_and_i: float
    pmi_monthly: float
    piti_monthly: float
    cash_to_close: float
    apr_estimate: float
    break_even_months_on_points: Optional[int] = None
    warnings: List[str] = Field(default_factory=list)
    allocation_steps: List[AllocationStep] = Field(default_factory=list)


class LoanTemplate(_Model):
    """A saved scenario preset. Carries every scenario field except ``name``."""

    id: str
    title: str = Field(min_length=1, max_length=80)
    program: Program
    term_months: int
    price: float
    ltv: Optional[float] = None
    loan_amount: Optional[float] = None
    note_rate: float
    discount_points_pct: float
    closing_costs: float
    seller_credit: float
    pmi_type: Optional[PmiType] = None
    pmi_annual_factor: Optional[float] = None
    taxes_monthly: Optional[float] = None
    insurance_monthly: Optional[float] = None
    hoa_monthly: Optional[float] = None
    lock_rate: Optional[bool] = False
    created_at: datetime
    updated_at: datetime

from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, Field, StrictInt, model_validator


class SplitIn(BaseModel):
    user_id: str
    amount_cents: Optional[StrictInt] = Field(None, ge=0)  # Required for custom splits


class ExpenseCreate(BaseModel):
    group_id: str
    description: str = Field(..., min_length=1, max_length=200)
    amount_cents: StrictInt = Field(..., gt=0)
    paid_by: str
    split_type: str = Field("equal", pattern="^(equal|custom)$")
    splits: List[SplitIn] = Field(..., min_length=1)

    @model_validator(mode="after")
    def custom_splits_have_amounts(self):
        if self.split_type == "custom":
            missing = [split.user_id for split in self.splits if split.amount_cents is None]
            if missing:
                raise ValueError(f"Custom split missing amount for: {', '.join(missing)}")
        return self


class ExpenseUpdate(BaseModel):
    """Partial edit; fields left out keep their stored values."""
    description: Optional[str] = Field(None, min_length=1, max_length=200)
    amount_cents: Optional[StrictInt] = Field(None, gt=0)
    paid_by: Optional[str] = None
    split_type: Optional[str] = Field(None, pattern="^(equal|custom)$")
    splits: Optional[List[SplitIn]] = Field(None, min_length=1)


class SplitResponse(BaseModel):
    user_id: str
    amount_cents: int

    model_config = {"from_attributes": True}


class ExpenseResponse(BaseModel):
    id: str
    group_id: str
    description: str
    amount_cents: int
    paid_by: str
    split_type: str
    splits: List[SplitResponse]
    created_by: str
    created_at: datetime

    @classmethod
    def from_expense(cls, expense) -> "ExpenseResponse":
        return cls(
            id=str(expense.id),
            group_id=str(expense.group_id),
            description=expense.description,
            amount_cents=expense.amount_cents,
            paid_by=expense.paid_by,
            split_type=expense.split_type,
            splits=[SplitResponse.model_validate(split) for split in expense.splits],
            created_by=expense.created_by,
            created_at=expense.created_at
        )


class Pagination(BaseModel):
    page: int
    limit: int
    total: int
    has_more: bool
    total_pages: int


class ExpenseListResponse(BaseModel):
    expenses: List[ExpenseResponse]
    pagination: Pagination

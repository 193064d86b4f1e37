from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Query, status
from groupledger.core.auth import CurrentUser, get_current_user
from groupledger.schemas.expense import ExpenseCreate, ExpenseUpdate, ExpenseResponse, ExpenseListResponse
from groupledger.services.expense_service import ExpenseService
from groupledger.services.group_service import GroupService
from groupledger.utils.ledger_validation import InvalidLedgerEvent

router = APIRouter()

@router.post("/", response_model=ExpenseResponse, status_code=status.HTTP_201_CREATED)
async def create_expense(
    expense_in: ExpenseCreate,
    current_user: CurrentUser = Depends(get_current_user)
):
    """Record an expense split equally or by custom amounts"""
    group = await GroupService.get_for_member(expense_in.group_id, current_user.id)
    try:
        expense = await ExpenseService.create(expense_in, group, current_user.id)
    except InvalidLedgerEvent as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=exc.to_detail()
        )
    return ExpenseResponse.from_expense(expense)

@router.get("/group/{group_id}", response_model=ExpenseListResponse)
async def list_group_expenses(
    group_id: str,
    page: int = Query(1, ge=1),
    limit: Optional[int] = Query(None, ge=1),
    current_user: CurrentUser = Depends(get_current_user)
):
    """Expenses for a group, newest first, paginated"""
    group = await GroupService.get_for_member(group_id, current_user.id)
    return await ExpenseService.list_for_group(group, page=page, limit=limit)

@router.get("/{expense_id}", response_model=ExpenseResponse)
async def get_expense(
    expense_id: str,
    current_user: CurrentUser = Depends(get_current_user)
):
    expense = await ExpenseService.get(expense_id)
    await GroupService.get_for_member(str(expense.group_id), current_user.id)
    return ExpenseResponse.from_expense(expense)

@router.put("/{expense_id}", response_model=ExpenseResponse)
async def update_expense(
    expense_id: str,
    expense_update: ExpenseUpdate,
    current_user: CurrentUser = Depends(get_current_user)
):
    """Edit an expense; the result must still balance against its splits"""
    expense = await ExpenseService.get(expense_id)
    group = await GroupService.get_for_member(str(expense.group_id), current_user.id)
    try:
        expense = await ExpenseService.update(expense, expense_update, group)
    except InvalidLedgerEvent as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=exc.to_detail()
        )
    return ExpenseResponse.from_expense(expense)

@router.delete("/{expense_id}")
async def delete_expense(
    expense_id: str,
    current_user: CurrentUser = Depends(get_current_user)
):
    expense = await ExpenseService.get(expense_id)
    await GroupService.get_for_member(str(expense.group_id), current_user.id)
    await ExpenseService.delete(expense)
    return {"message": "Expense deleted successfully"}

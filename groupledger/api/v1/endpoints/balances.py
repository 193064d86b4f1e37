from typing import List
from fastapi import APIRouter, Depends, HTTPException, status
from groupledger.core.auth import CurrentUser, get_current_user
from groupledger.schemas.balance import GroupBalancesResponse, NetBalanceResponse, FriendBalance
from groupledger.services.balance_service import BalanceService
from groupledger.services.group_service import GroupService
from groupledger.utils.ledger_validation import InvalidLedgerEvent

router = APIRouter()

def _ledger_error(exc: InvalidLedgerEvent) -> HTTPException:
    # Stored history is inconsistent; nothing partial is returned
    return HTTPException(
        status_code=status.HTTP_400_BAD_REQUEST,
        detail=exc.to_detail()
    )

@router.get("/group/{group_id}", response_model=GroupBalancesResponse)
async def get_group_balances(
    group_id: str,
    current_user: CurrentUser = Depends(get_current_user)
):
    """Who owes whom, plus the simplified settle-up plan"""
    group = await GroupService.get_for_member(group_id, current_user.id)
    try:
        return await BalanceService.group_balances(group)
    except InvalidLedgerEvent as exc:
        raise _ledger_error(exc)

@router.get("/group/{group_id}/user", response_model=NetBalanceResponse)
async def get_my_group_balance(
    group_id: str,
    current_user: CurrentUser = Depends(get_current_user)
):
    """Current user's net balance in a group"""
    group = await GroupService.get_for_member(group_id, current_user.id)
    try:
        return await BalanceService.user_balance(group, current_user.id)
    except InvalidLedgerEvent as exc:
        raise _ledger_error(exc)

@router.get("/friends", response_model=List[FriendBalance])
async def get_friend_balances(current_user: CurrentUser = Depends(get_current_user)):
    """Net balance with each person across all shared groups"""
    try:
        return await BalanceService.friend_balances(current_user.id)
    except InvalidLedgerEvent as exc:
        raise _ledger_error(exc)

from typing import List
from fastapi import APIRouter, Depends, HTTPException, status
from groupledger.core.auth import CurrentUser, get_current_user
from groupledger.schemas.settlement import SettlementCreate, SettlementResponse
from groupledger.services.group_service import GroupService
from groupledger.services.settlement_service import SettlementService
from groupledger.utils.ledger_validation import InvalidLedgerEvent

router = APIRouter()

@router.post("/", response_model=SettlementResponse, status_code=status.HTTP_201_CREATED)
async def create_settlement(
    settlement_in: SettlementCreate,
    current_user: CurrentUser = Depends(get_current_user)
):
    """Record a direct repayment between two members"""
    group = await GroupService.get_for_member(settlement_in.group_id, current_user.id)
    try:
        settlement = await SettlementService.create(settlement_in, group, current_user.id)
    except InvalidLedgerEvent as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=exc.to_detail()
        )
    return SettlementResponse.from_settlement(settlement)

@router.get("/group/{group_id}", response_model=List[SettlementResponse])
async def list_group_settlements(
    group_id: str,
    current_user: CurrentUser = Depends(get_current_user)
):
    group = await GroupService.get_for_member(group_id, current_user.id)
    settlements = await SettlementService.list_for_group(group)
    return [SettlementResponse.from_settlement(settlement) for settlement in settlements]

@router.delete("/{settlement_id}")
async def delete_settlement(
    settlement_id: str,
    current_user: CurrentUser = Depends(get_current_user)
):
    settlement = await SettlementService.get(settlement_id)
    await GroupService.get_for_member(str(settlement.group_id), current_user.id)
    await SettlementService.delete(settlement)
    return {"message": "Settlement deleted successfully"}

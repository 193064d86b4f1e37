import logging
from typing import List

from fastapi import HTTPException, status

from groupledger.db.session import get_database
from groupledger.models.group import Group
from groupledger.models.settlement import Settlement
from groupledger.repositories.settlement_repo import SettlementRepository
from groupledger.schemas.settlement import SettlementCreate
from groupledger.utils.ledger_validation import validate_settlement_event

logger = logging.getLogger(__name__)


class SettlementService:
    @staticmethod
    def build_settlement(settlement_in: SettlementCreate, group: Group, user_id: str) -> Settlement:
        """Settlement document for the request; raises InvalidLedgerEvent if it can't apply."""
        settlement = Settlement(
            group_id=group.id,
            from_user=settlement_in.from_user,
            to_user=settlement_in.to_user,
            amount_cents=settlement_in.amount_cents,
            settled_by=user_id,
            notes=settlement_in.notes
        )
        validate_settlement_event(settlement.to_event(), str(group.id), set(group.member_ids()))
        return settlement

    @staticmethod
    async def create(settlement_in: SettlementCreate, group: Group, user_id: str) -> Settlement:
        # A settlement does not have to match an existing debt; overpaying
        # simply flips the direction of the pair's balance.
        settlement = SettlementService.build_settlement(settlement_in, group, user_id)

        db = await get_database()
        settlement = await SettlementRepository(db).insert_settlement(settlement)
        logger.info(
            "Settlement %s: %s paid %s %d cents in group %s",
            settlement.id, settlement.from_user, settlement.to_user,
            settlement.amount_cents, group.id
        )
        return settlement

    @staticmethod
    async def list_for_group(group: Group) -> List[Settlement]:
        db = await get_database()
        return await SettlementRepository(db).list_for_group(str(group.id))

    @staticmethod
    async def get(settlement_id: str) -> Settlement:
        db = await get_database()
        settlement = await SettlementRepository(db).get_settlement(settlement_id)
        if not settlement:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Settlement not found")
        return settlement

    @staticmethod
    async def delete(settlement: Settlement) -> None:
        db = await get_database()
        await SettlementRepository(db).delete_settlement(str(settlement.id))
        logger.info("Settlement %s deleted from group %s", settlement.id, settlement.group_id)

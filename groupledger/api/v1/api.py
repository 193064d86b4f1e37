from fastapi import APIRouter
from groupledger.api.v1.endpoints import groups, expenses, settlements, balances

api_router = APIRouter()

api_router.include_router(groups.router, prefix="/groups", tags=["groups"])
api_router.include_router(expenses.router, prefix="/expenses", tags=["expenses"])
api_router.include_router(settlements.router, prefix="/settlements", tags=["settlements"])
api_router.include_router(balances.router, prefix="/balances", tags=["balances"])

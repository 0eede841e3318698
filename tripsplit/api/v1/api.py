from fastapi import APIRouter
from tripsplit.api.v1.endpoints import auth, trips, expenses

api_router = APIRouter()

api_router.include_router(auth.router, prefix="/auth", tags=["authentication"])
api_router.include_router(trips.router, prefix="/trips", tags=["trips"])
api_router.include_router(expenses.router, prefix="/expenses", tags=["expenses"])

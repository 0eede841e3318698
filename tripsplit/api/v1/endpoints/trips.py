from typing import List
from fastapi import APIRouter, Depends, status
from tripsplit.api.v1.endpoints.auth import get_current_user
from tripsplit.models.user import User
from tripsplit.schemas.expense import ExpenseCreate, ExpenseResponse
from tripsplit.schemas.trip import ParticipantAdd, TripCreate, TripResponse, TripUpdate
from tripsplit.services.expense_service import ExpenseService
from tripsplit.services.trip_service import TripService
from tripsplit.utils.balances import BalanceSheet

router = APIRouter()

@router.get("/", response_model=List[TripResponse])
async def list_trips(current_user: User = Depends(get_current_user)):
    """List trips the current user owns or participates in"""
    trips = await TripService.list_for_user(str(current_user.id))
    return [TripResponse.from_model(trip) for trip in trips]

@router.post("/", response_model=TripResponse, status_code=status.HTTP_201_CREATED)
async def create_trip(
    trip_in: TripCreate,
    current_user: User = Depends(get_current_user)
):
    """Create a trip owned by the current user"""
    trip = await TripService.create(trip_in, current_user)
    return TripResponse.from_model(trip)

@router.get("/{trip_id}", response_model=TripResponse)
async def get_trip(
    trip_id: str,
    current_user: User = Depends(get_current_user)
):
    trip = await TripService.get_for_member(trip_id, str(current_user.id))
    return TripResponse.from_model(trip)

@router.patch("/{trip_id}", response_model=TripResponse)
async def update_trip(
    trip_id: str,
    trip_in: TripUpdate,
    current_user: User = Depends(get_current_user)
):
    trip = await TripService.update(trip_id, trip_in, str(current_user.id))
    return TripResponse.from_model(trip)

@router.delete("/{trip_id}")
async def delete_trip(
    trip_id: str,
    current_user: User = Depends(get_current_user)
):
    success = await TripService.delete(trip_id, str(current_user.id))
    return {"success": success}

@router.post("/{trip_id}/participants", response_model=TripResponse, status_code=status.HTTP_201_CREATED)
async def add_participant(
    trip_id: str,
    participant_in: ParticipantAdd,
    current_user: User = Depends(get_current_user)
):
    """Add a registered user (email or username) or a placeholder name"""
    trip = await TripService.add_participant(trip_id, participant_in, str(current_user.id))
    return TripResponse.from_model(trip)

@router.get("/{trip_id}/expenses", response_model=List[ExpenseResponse])
async def list_expenses(
    trip_id: str,
    current_user: User = Depends(get_current_user)
):
    expenses = await ExpenseService.list_for_trip(trip_id, str(current_user.id))
    return [ExpenseResponse.from_model(expense) for expense in expenses]

@router.post("/{trip_id}/expenses", response_model=ExpenseResponse, status_code=status.HTTP_201_CREATED)
async def create_expense(
    trip_id: str,
    expense_in: ExpenseCreate,
    current_user: User = Depends(get_current_user)
):
    """Record an expense and its percentage split"""
    expense = await ExpenseService.create(trip_id, expense_in, str(current_user.id))
    return ExpenseResponse.from_model(expense)

@router.get("/{trip_id}/balances", response_model=BalanceSheet)
async def get_balances(
    trip_id: str,
    current_user: User = Depends(get_current_user)
):
    """Paid, owed and net balance per participant"""
    return await TripService.get_balances(trip_id, str(current_user.id))

from fastapi import APIRouter, Depends
from tripsplit.api.v1.endpoints.auth import get_current_user
from tripsplit.models.user import User
from tripsplit.schemas.expense import ExpenseResponse, ExpenseUpdate
from tripsplit.services.expense_service import ExpenseService

router = APIRouter()

@router.get("/{expense_id}", response_model=ExpenseResponse)
async def get_expense(
    expense_id: str,
    current_user: User = Depends(get_current_user)
):
    expense = await ExpenseService.get_for_member(expense_id, str(current_user.id))
    return ExpenseResponse.from_model(expense)

@router.patch("/{expense_id}", response_model=ExpenseResponse)
async def update_expense(
    expense_id: str,
    expense_in: ExpenseUpdate,
    current_user: User = Depends(get_current_user)
):
    """Update an expense; a sent share list replaces the old one"""
    expense = await ExpenseService.update(expense_id, expense_in, str(current_user.id))
    return ExpenseResponse.from_model(expense)

@router.delete("/{expense_id}")
async def delete_expense(
    expense_id: str,
    current_user: User = Depends(get_current_user)
):
    success = await ExpenseService.delete(expense_id, str(current_user.id))
    return {"success": success}

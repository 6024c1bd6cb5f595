"""Signup endpoints - public endpoint for event signups."""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from api.deps import get_db
from models.signup import SignupCreate, SignupCreateResponse
from services import signups_service

router = APIRouter()


@router.post(
    "/event-signups",
    response_model=SignupCreateResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_event_signup(
    signup_data: SignupCreate,
    db: AsyncSession = Depends(get_db),
):
    """
    Submit an event signup.

    This is a public endpoint - no authentication required.
    Creates a signup with status 'pending' that waits for an admin decision.

    Args:
        signup_data: Signup submission
        db: Database session

    Returns:
        SignupCreateResponse: Created signup id, email and status

    Raises:
        ValidationError (422) for invalid fields, ConflictError (409) if the
        email already has an active signup or account
    """
    # TODO: Add basic rate limiting here (e.g., per IP address)
    signup = await signups_service.submit(db, signup_data)
    return SignupCreateResponse(
        id=signup.id,
        email=signup.email,
        status=signup.status,
        created_at=signup.created_at,
    )

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from tripsplit.core.auth import (
    create_access_token,
    decode_access_token,
    get_password_hash,
    verify_password,
)
from tripsplit.db.session import get_database
from tripsplit.models.user import User
from tripsplit.repositories.user_repo import UserRepository
from tripsplit.schemas.auth import TokenResponse, UserLogin, UserSignup
from tripsplit.schemas.user import UserResponse

router = APIRouter()
security = HTTPBearer()


async def get_current_user(credentials: HTTPAuthorizationCredentials = Depends(security)) -> User:
    """Get current authenticated user from JWT token"""
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    user_id = decode_access_token(credentials.credentials)
    if user_id is None:
        raise credentials_exception

    db = await get_database()
    user = await UserRepository(db).get_user_by_id(user_id)
    if user is None:
        raise credentials_exception
    return user


@router.post("/signup", response_model=TokenResponse, status_code=status.HTTP_201_CREATED)
async def signup(user_data: UserSignup):
    """Register a new user"""
    db = await get_database()
    user_repo = UserRepository(db)

    if await user_repo.get_user_by_email(user_data.email):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Email already registered"
        )
    if await user_repo.get_user_by_username(user_data.username):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Username already taken"
        )

    user = await user_repo.create_user(User(
        name=user_data.name,
        username=user_data.username,
        email=user_data.email,
        hashed_password=get_password_hash(user_data.password)
    ))

    return TokenResponse(
        access_token=create_access_token(str(user.id)),
        user=UserResponse.from_model(user)
    )


@router.post("/login", response_model=TokenResponse)
async def login(credentials: UserLogin):
    """Login with email and password"""
    db = await get_database()
    user = await UserRepository(db).get_user_by_email(credentials.email)

    if user is None or not verify_password(credentials.password, user.hashed_password):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect email or password"
        )

    return TokenResponse(
        access_token=create_access_token(str(user.id)),
        user=UserResponse.from_model(user)
    )


@router.get("/me", response_model=UserResponse)
async def get_current_user_info(current_user: User = Depends(get_current_user)):
    """Get current user information"""
    return UserResponse.from_model(current_user)

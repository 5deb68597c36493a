"""FastAPI routes for the Identity domain: registration, login and profile."""

from fastapi import APIRouter, Depends, File, HTTPException, Request, UploadFile
from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from identity.api.schemas import (
    LoginRequest,
    RegisterRequest,
    StatusResponse,
    UpdateProfileRequest,
    UserEnvelope,
    UserResponse,
)
from identity.user.authentication import authenticate
from identity.user.profile import UpdateProfile
from identity.user.registration import RegisterUser
from identity.user.user import User
from shared.auth import current_user, login_session, logout_session
from shared.uploads import save_upload

router = APIRouter(prefix="/auth", tags=["auth"])


def _to_response(user: User) -> UserResponse:
    return UserResponse(
        id=str(user.id),
        name=user.name,
        email=user.email,
        role=user.role,
        address=user.address,
        profile_image=user.profile_image,
    )


def _load_session_user(session_user: dict) -> User:
    try:
        return current_domain.repository_for(User).get(session_user["id"])
    except ObjectNotFoundError:
        raise HTTPException(status_code=404, detail="User not found") from None


@router.post("/register", status_code=201, response_model=UserEnvelope)
async def register(request: Request, body: RegisterRequest) -> UserEnvelope:
    command = RegisterUser(name=body.name, email=body.email, password=body.password)
    user_id = current_domain.process(command, asynchronous=False)

    user = current_domain.repository_for(User).get(user_id)
    login_session(request, user)
    return UserEnvelope(message="User registered", user=_to_response(user))


@router.post("/login", response_model=UserEnvelope)
async def login(request: Request, body: LoginRequest) -> UserEnvelope:
    user = authenticate(body.email, body.password)
    if user is None:
        raise HTTPException(status_code=401, detail="Invalid credentials")

    login_session(request, user)
    return UserEnvelope(message="Login successful", user=_to_response(user))


@router.post("/logout", response_model=StatusResponse)
async def logout(request: Request) -> StatusResponse:
    logout_session(request)
    return StatusResponse(message="Logged out successfully")


@router.get("/me", response_model=UserEnvelope)
async def me(session_user: dict = Depends(current_user)) -> UserEnvelope:
    user = _load_session_user(session_user)
    return UserEnvelope(user=_to_response(user))


@router.put("/me", response_model=UserEnvelope)
async def update_me(
    request: Request,
    body: UpdateProfileRequest,
    session_user: dict = Depends(current_user),
) -> UserEnvelope:
    user = _load_session_user(session_user)
    command = UpdateProfile(user_id=str(user.id), name=body.name, address=body.address)
    current_domain.process(command, asynchronous=False)

    user = current_domain.repository_for(User).get(str(user.id))
    login_session(request, user)
    return UserEnvelope(user=_to_response(user))


@router.post("/me/image", response_model=UserEnvelope)
async def upload_profile_image(
    request: Request,
    image: UploadFile = File(...),
    session_user: dict = Depends(current_user),
) -> UserEnvelope:
    user = _load_session_user(session_user)
    url = await save_upload(image, "profiles")
    current_domain.process(UpdateProfile(user_id=str(user.id), profile_image=url), asynchronous=False)

    user = current_domain.repository_for(User).get(str(user.id))
    return UserEnvelope(user=_to_response(user))

# backend_api/routers/auth.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from backend_api.db import get_db
from backend_api.policy import Identity, authorize
from backend_api.schemas import LoginRequest, SignupRequest, SignupResponse, TokenResponse, UserResponse
from backend_api.security import token_service
from backend_api.services.auth import AuthService

router = APIRouter(prefix="/auth", tags=["Auth"])


# -----------------------------
#   REGISTRO
# -----------------------------
@router.post("/signup", response_model=SignupResponse)
def signup(
    payload: SignupRequest,
    db: Session = Depends(get_db),
    _=Depends(authorize("auth.signup")),
):
    return AuthService(db, token_service).sign_up(payload)


# -----------------------------
#   LOGIN
# -----------------------------
@router.post("/signin", response_model=TokenResponse)
def signin(
    payload: LoginRequest,
    db: Session = Depends(get_db),
    _=Depends(authorize("auth.signin")),
):
    return AuthService(db, token_service).sign_in(payload.username, payload.password)


# -----------------------------
#   USUARIO ACTUAL
# -----------------------------
@router.get("/me", response_model=UserResponse)
def me(
    db: Session = Depends(get_db),
    identity: Identity = Depends(authorize("auth.me")),
):
    return AuthService(db, token_service).current_user(identity)

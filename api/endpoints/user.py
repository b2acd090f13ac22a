from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from api.schemas import LoginIn, ProfileOut, SignupIn, TokenOut
from core.auth import RequestContext, get_request_context, get_settings
from core.config import Settings
from core.db import get_session
from services import users

router = APIRouter()

@router.post("/signup", response_model=TokenOut)
def signup(body: SignupIn, s: Session = Depends(get_session), settings: Settings = Depends(get_settings)):
    token = users.signup(s, settings, body.full_name, body.email, body.password)
    return TokenOut(token=token)

@router.post("/login", response_model=TokenOut)
def login(body: LoginIn, s: Session = Depends(get_session), settings: Settings = Depends(get_settings)):
    return TokenOut(token=users.login(s, settings, body.email, body.password))

@router.get("/me", response_model=ProfileOut)
def me(ctx: RequestContext = Depends(get_request_context)):
    return ProfileOut(full_name=ctx.user.full_name, email=ctx.user.email)

# backend/routes/auth.py
from fastapi import APIRouter, Depends, Query, Request

from errors import AppError, server_errors
from schemas import user as schemas
from services import auth as auth_service
from storage import RecordStore, get_store
from utils.audit import write_log

router = APIRouter(prefix="/api/auth", tags=["Auth"])


def _ip(request: Request):
    return request.client.host if request.client else None


# Register a new user
@router.post("/signup", response_model=schemas.UserResponse)
def signup(payload: schemas.UserCreate, request: Request, store: RecordStore = Depends(get_store)):
    try:
        with server_errors("Server error during signup. Please try again."):
            user = auth_service.sign_up(store, payload.model_dump(by_alias=True))
    except AppError as e:
        write_log(store, user_id=None, action="REGISTER", resource="auth", status="FAIL",
                  ip=_ip(request), meta={"email": payload.email, "reason": e.message})
        raise

    write_log(store, user_id=user["id"], action="REGISTER", resource="auth",
              status="SUCCESS", ip=_ip(request), meta={"email": user["email"]})
    return {"user": user}


# Check credentials and return the public user record
@router.post("/login", response_model=schemas.UserResponse)
def login(payload: schemas.UserLogin, request: Request, store: RecordStore = Depends(get_store)):
    try:
        with server_errors("Server error during login. Please try again."):
            user = auth_service.login(store, payload.email, payload.password)
    except AppError as e:
        write_log(store, user_id=None, action="LOGIN", resource="auth", status="FAIL",
                  ip=_ip(request), meta={"email": payload.email, "reason": e.message})
        raise

    write_log(store, user_id=user["id"], action="LOGIN", resource="auth",
              status="SUCCESS", ip=_ip(request), meta={"email": user["email"]})
    return {"user": user}


# Profile details for one user
@router.get("/user", response_model=schemas.UserProfileResponse)
def get_user_info(user_id: str = Query(None, alias="userId"), store: RecordStore = Depends(get_store)):
    with server_errors("Server error while fetching user"):
        user = auth_service.get_user_info(store, user_id)
    return {"user": user}


# Issue an OTP for a password reset
@router.post("/forgot-password", response_model=schemas.ForgotPasswordResponse)
def forgot_password(payload: schemas.ForgotPasswordRequest, request: Request,
                    store: RecordStore = Depends(get_store)):
    with server_errors("Server error. Please try again."):
        email = auth_service.request_password_reset(store, payload.email)

    write_log(store, user_id=None, action="PASSWORD_OTP", resource="auth",
              status="SUCCESS", ip=_ip(request), meta={"email": email})
    return {"message": "OTP has been sent to your email", "email": email}


# Exchange a valid OTP for a reset token
@router.post("/verify-otp", response_model=schemas.TokenResponse)
def verify_otp(payload: schemas.VerifyOTPRequest, store: RecordStore = Depends(get_store)):
    with server_errors("Server error. Please try again."):
        token = auth_service.verify_otp(store, payload.email, payload.otp)
    return {"message": "OTP verified successfully", "token": token}


# Set a new password using the reset token
@router.post("/reset-password", response_model=schemas.SuccessResponse)
def reset_password(payload: schemas.ResetPasswordRequest, request: Request,
                   store: RecordStore = Depends(get_store)):
    try:
        with server_errors("Server error. Please try again."):
            auth_service.reset_password(store, payload.email, payload.token, payload.new_password)
    except AppError as e:
        write_log(store, user_id=None, action="PASSWORD_RESET", resource="auth", status="FAIL",
                  ip=_ip(request), meta={"email": payload.email, "reason": e.message})
        raise

    write_log(store, user_id=None, action="PASSWORD_RESET", resource="auth",
              status="SUCCESS", ip=_ip(request), meta={"email": payload.email})
    return {"message": "Password has been reset successfully"}

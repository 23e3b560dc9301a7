from typing import Optional, Union

from schemas.base import CamelModel, SuccessResponse

# Schema for user registration requests; name, email and password are checked by the auth service
class UserCreate(CamelModel):
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    address_line1: Optional[str] = None
    address_line2: Optional[str] = None
    district: Optional[str] = None
    state: Optional[str] = None
    pincode: Optional[str] = None
    password: Optional[str] = None

# Schema for user authentication credentials
class UserLogin(CamelModel):
    email: Optional[str] = None
    password: Optional[str] = None

class ForgotPasswordRequest(CamelModel):
    email: Optional[str] = None

class VerifyOTPRequest(CamelModel):
    email: Optional[str] = None
    otp: Optional[Union[str, int]] = None

class ResetPasswordRequest(CamelModel):
    email: Optional[str] = None
    token: Optional[str] = None
    new_password: Optional[str] = None

# Public part of a user record
class UserPublic(CamelModel):
    id: str
    name: str
    email: str

# Output schema for user profile details
class UserProfile(UserPublic):
    phone: Optional[str] = None
    address_line1: Optional[str] = None
    address_line2: Optional[str] = None
    district: Optional[str] = None
    state: Optional[str] = None
    pincode: Optional[str] = None

class UserResponse(SuccessResponse):
    user: UserPublic

class UserProfileResponse(SuccessResponse):
    user: UserProfile

class ForgotPasswordResponse(SuccessResponse):
    email: str

# Schema for the reset token issued after OTP verification
class TokenResponse(SuccessResponse):
    token: str

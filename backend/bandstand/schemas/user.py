"""Pydantic schemas for Users and authentication."""
from __future__ import annotations
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, EmailStr, Field

from bandstand.models.user import UserRole


class UserCreate(BaseModel):
    role: UserRole
    first_name: str = Field(min_length=1)
    last_name: str = Field(min_length=1)
    email: EmailStr
    password: str = Field(min_length=1)
    phone: str
    address: str
    country: str
    state: str
    description: str = ""


class UserUpdate(BaseModel):
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[EmailStr] = None
    password: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    country: Optional[str] = None
    state: Optional[str] = None
    description: Optional[str] = None


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class TokenOut(BaseModel):
    success: bool = True
    token: str
    token_type: str = "bearer"


class UserOut(BaseModel):
    user_id: str
    role: UserRole
    first_name: str
    last_name: str
    email: str
    phone: str
    address: str
    country: str
    state: str
    description: str
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class UserEnvelope(BaseModel):
    success: bool = True
    message: Optional[str] = None
    user: UserOut


class BookedUserOut(BaseModel):
    user_id: str
    first_name: str
    last_name: str
    email: str
    phone: str

    model_config = {"from_attributes": True}

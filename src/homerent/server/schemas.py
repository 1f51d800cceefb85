from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class ApplianceIn(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str
    price: Any = 0
    details: str = ""
    available: bool = True
    img_url: Optional[str] = Field(default="", alias="imgUrl")


class ApplianceUpdate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: Optional[str] = None
    price: Any = None
    details: Optional[str] = None
    available: Optional[bool] = None
    img_url: Optional[str] = Field(default=None, alias="imgUrl")


class ApplianceOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str = Field(serialization_alias="_id")
    name: str
    price: float
    details: str = ""
    available: bool
    img_url: Optional[str] = Field(default="", serialization_alias="imgUrl")


class UserCreate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    user: str
    password: str
    email: str
    gender: str = ""
    img_url: Optional[str] = Field(default="", alias="imgUrl")
    is_admin: bool = Field(default=False, alias="isAdmin")


class LoginIn(BaseModel):
    user: str
    password: str


class UserUpdate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    password: Optional[str] = None
    img_url: Optional[str] = Field(default=None, alias="imgUrl")
    gender: Optional[str] = None
    new_username: Optional[str] = Field(default=None, alias="newUsername")
    email: Optional[str] = None


class UserOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str = Field(serialization_alias="_id")
    user: str
    email: str
    gender: str = ""
    img_url: Optional[str] = Field(default="", serialization_alias="imgUrl")
    is_admin: bool = Field(default=False, serialization_alias="isAdmin")
    updated_at: Optional[datetime] = Field(default=None, serialization_alias="updatedAt")


class ProfileOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    user: str
    email: str
    gender: str = ""
    img_url: Optional[str] = Field(default="", serialization_alias="imgUrl")
    is_admin: bool = Field(default=False, serialization_alias="isAdmin")


class FeedbackIn(BaseModel):
    user: str = "Anonymous"
    email: str = ""
    message: str
    rating: int


class FeedbackOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str = Field(serialization_alias="_id")
    user: str
    email: str = ""
    message: str
    rating: int
    created_at: datetime = Field(serialization_alias="createdAt")


class EmailIn(BaseModel):
    email: str


class OtpIn(BaseModel):
    email: str
    otp: str


class PasswordResetIn(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    email: str
    otp: str
    new_password: str = Field(alias="newPassword")

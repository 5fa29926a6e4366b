"""Pydantic request/response schemas for the Identity API."""

from __future__ import annotations

from pydantic import BaseModel, Field


class CreateProfileRequest(BaseModel):
    name: str | None = Field(None, max_length=100)
    email: str | None = Field(None, max_length=254)
    phone: str | None = Field(None, max_length=20)


class UpdateProfileRequest(BaseModel):
    name: str | None = Field(None, max_length=100)
    email: str | None = Field(None, max_length=254)
    phone: str | None = Field(None, max_length=20)


class AddressRequest(BaseModel):
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "name": "Asha Rao",
                    "house_number": "12B",
                    "street": "Temple Road",
                    "area": "Malleshwaram",
                    "city": "Bengaluru",
                    "state": "Karnataka",
                    "postal_code": "560003",
                    "country": "India",
                    "primary_phone": "+91 98450 12345",
                    "is_default": True,
                }
            ]
        }
    }

    name: str | None = Field(None, max_length=100)
    house_number: str | None = Field(None, max_length=50)
    street: str | None = Field(None, max_length=255)
    area: str | None = Field(None, max_length=255)
    city: str | None = Field(None, max_length=100)
    state: str | None = Field(None, max_length=100)
    postal_code: str | None = Field(None, max_length=20)
    country: str | None = Field(None, max_length=100)
    primary_phone: str | None = Field(None, max_length=20)
    secondary_phone: str | None = Field(None, max_length=20)
    is_default: bool = False
    latitude: float | None = None
    longitude: float | None = None


class AddressResponse(BaseModel):
    address_id: str
    name: str | None = None
    house_number: str
    street: str
    area: str
    city: str
    state: str
    postal_code: str
    country: str
    primary_phone: str
    secondary_phone: str | None = None
    is_default: bool
    latitude: float | None = None
    longitude: float | None = None


class ProfileResponse(BaseModel):
    user_id: str
    name: str | None = None
    email: str | None = None
    phone: str | None = None
    addresses: list[AddressResponse]


class UserIdResponse(BaseModel):
    user_id: str


class AddressIdResponse(BaseModel):
    address_id: str


class StatusResponse(BaseModel):
    status: str = "ok"

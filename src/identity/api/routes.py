"""FastAPI endpoints for the Identity domain."""

from fastapi import APIRouter, Depends
from protean.utils.globals import current_domain

from identity.api.schemas import (
    AddressIdResponse,
    AddressRequest,
    AddressResponse,
    CreateProfileRequest,
    ProfileResponse,
    StatusResponse,
    UpdateProfileRequest,
    UserIdResponse,
)
from identity.profile.addresses import RemoveAddress, UpsertAddress
from identity.profile.profile import UserProfile
from identity.profile.registration import CreateProfile, UpdateProfileDetails
from shared.auth import CurrentUser, current_user

router = APIRouter(prefix="/profiles", tags=["profiles"])


def _addresses(profile: UserProfile) -> list[AddressResponse]:
    return [AddressResponse(is_default=bool(a.is_default), **a.snapshot()) for a in profile.addresses]


@router.post("", status_code=201, response_model=UserIdResponse)
async def create_profile(body: CreateProfileRequest, user: CurrentUser = Depends(current_user)) -> UserIdResponse:
    command = CreateProfile(user_id=user.user_id, name=body.name, email=body.email, phone=body.phone)
    result = current_domain.process(command, asynchronous=False)
    return UserIdResponse(user_id=result)


@router.get("/me", response_model=ProfileResponse)
async def get_profile(user: CurrentUser = Depends(current_user)) -> ProfileResponse:
    profile = current_domain.repository_for(UserProfile).get(user.user_id)
    return ProfileResponse(
        user_id=str(profile.user_id),
        name=profile.name,
        email=profile.email,
        phone=profile.phone,
        addresses=_addresses(profile),
    )


@router.put("/me", response_model=StatusResponse)
async def update_profile(body: UpdateProfileRequest, user: CurrentUser = Depends(current_user)) -> StatusResponse:
    command = UpdateProfileDetails(user_id=user.user_id, name=body.name, email=body.email, phone=body.phone)
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@router.get("/me/addresses", response_model=list[AddressResponse])
async def list_addresses(user: CurrentUser = Depends(current_user)) -> list[AddressResponse]:
    return _addresses(current_domain.repository_for(UserProfile).get(user.user_id))


@router.post("/me/addresses", status_code=201, response_model=AddressIdResponse)
async def add_address(body: AddressRequest, user: CurrentUser = Depends(current_user)) -> AddressIdResponse:
    result = current_domain.process(UpsertAddress(user_id=user.user_id, **body.model_dump()), asynchronous=False)
    return AddressIdResponse(address_id=result)


@router.put("/me/addresses/{address_id}", response_model=AddressIdResponse)
async def replace_address(
    address_id: str, body: AddressRequest, user: CurrentUser = Depends(current_user)
) -> AddressIdResponse:
    command = UpsertAddress(user_id=user.user_id, address_id=address_id, **body.model_dump())
    result = current_domain.process(command, asynchronous=False)
    return AddressIdResponse(address_id=result)


@router.delete("/me/addresses/{address_id}", response_model=StatusResponse)
async def remove_address(address_id: str, user: CurrentUser = Depends(current_user)) -> StatusResponse:
    current_domain.process(RemoveAddress(user_id=user.user_id, address_id=address_id), asynchronous=False)
    return StatusResponse()

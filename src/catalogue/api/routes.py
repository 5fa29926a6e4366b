"""FastAPI endpoints for the Catalogue domain."""

import base64
import binascii
import json

from fastapi import APIRouter, Depends
from protean.exceptions import ValidationError
from protean.utils.globals import current_domain

from catalogue.api.schemas import (
    AddFavoriteRequest,
    CompanyIdResponse,
    CreateProductRequest,
    FavoriteIdResponse,
    FavoriteResponse,
    InventorySummaryResponse,
    ListedProductResponse,
    MediaIdResponse,
    MediaResponse,
    ProductDetailResponse,
    ProductIdResponse,
    RegisterCompanyRequest,
    StatusResponse,
    UpdateProductDetailsRequest,
    UpdateProductPricingRequest,
    UpdateProductStockRequest,
    UploadProductMediaRequest,
)
from catalogue.company.inventory import inventory_summary
from catalogue.company.registration import ApproveCompany, RegisterCompany
from catalogue.favorite.favorite import Favorite
from catalogue.favorite.management import AddFavorite, RemoveFavorite
from catalogue.product.creation import CreateProduct
from catalogue.product.details import UpdateProductDetails, UpdateProductPricing, UpdateProductStock
from catalogue.product.listing import shop_listing
from catalogue.product.media import RemoveProductMedia, upload_product_media
from catalogue.product.moderation import ApproveProduct, RevokeProductApproval
from catalogue.product.product import Product
from shared.auth import CurrentUser, current_operator, current_user, current_vendor

product_router = APIRouter(prefix="/products", tags=["products"])
company_router = APIRouter(prefix="/companies", tags=["companies"])
favorite_router = APIRouter(prefix="/favorites", tags=["favorites"])


def _json_or_none(value):
    return json.dumps(value) if value is not None else None


def _detail(product: Product) -> ProductDetailResponse:
    return ProductDetailResponse(
        product_id=str(product.id),
        company_id=str(product.company_id),
        name=product.name,
        description=product.description,
        original_price=product.original_price,
        discount_price=product.discount_price,
        effective_price=product.effective_price(),
        stock_quantity=product.stock_quantity or 0,
        categories=product.category_list,
        nutrients=product.nutrient_map,
        media=[
            MediaResponse(media_id=str(m.id), url=m.url, kind=m.kind, display_order=m.display_order or 0)
            for m in sorted(product.media, key=lambda m: m.display_order or 0)
        ],
        is_approved=product.is_approved,
    )


# --- Product endpoints ---


@product_router.get("", response_model=list[ListedProductResponse])
async def list_products(search: str | None = None, category: str | None = None) -> list[ListedProductResponse]:
    return [ListedProductResponse(**vars(item)) for item in shop_listing(search=search, category=category)]


@product_router.get("/{product_id}", response_model=ProductDetailResponse)
async def get_product(product_id: str) -> ProductDetailResponse:
    return _detail(current_domain.repository_for(Product).get(product_id))


@product_router.post("", status_code=201, response_model=ProductIdResponse)
async def create_product(body: CreateProductRequest, user: CurrentUser = Depends(current_vendor)) -> ProductIdResponse:
    command = CreateProduct(
        company_id=user.company_id,
        name=body.name,
        description=body.description,
        original_price=body.original_price,
        discount_price=body.discount_price,
        stock_quantity=body.stock_quantity,
        categories=json.dumps(body.categories),
        nutrients=json.dumps(body.nutrients),
    )
    result = current_domain.process(command, asynchronous=False)
    return ProductIdResponse(product_id=result)


@product_router.put("/{product_id}/details", response_model=StatusResponse)
async def update_product_details(
    product_id: str, body: UpdateProductDetailsRequest, user: CurrentUser = Depends(current_vendor)
) -> StatusResponse:
    command = UpdateProductDetails(
        product_id=product_id,
        company_id=user.company_id,
        name=body.name,
        description=body.description,
        categories=_json_or_none(body.categories),
        nutrients=_json_or_none(body.nutrients),
    )
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@product_router.put("/{product_id}/pricing", response_model=StatusResponse)
async def update_product_pricing(
    product_id: str, body: UpdateProductPricingRequest, user: CurrentUser = Depends(current_vendor)
) -> StatusResponse:
    command = UpdateProductPricing(
        product_id=product_id,
        company_id=user.company_id,
        original_price=body.original_price,
        discount_price=body.discount_price,
        clear_discount=body.clear_discount,
    )
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@product_router.put("/{product_id}/stock", response_model=StatusResponse)
async def update_product_stock(
    product_id: str, body: UpdateProductStockRequest, user: CurrentUser = Depends(current_vendor)
) -> StatusResponse:
    command = UpdateProductStock(
        product_id=product_id,
        company_id=user.company_id,
        stock_quantity=body.stock_quantity,
    )
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@product_router.post("/{product_id}/media", status_code=201, response_model=MediaIdResponse)
async def upload_media(
    product_id: str, body: UploadProductMediaRequest, user: CurrentUser = Depends(current_vendor)
) -> MediaIdResponse:
    try:
        data = base64.b64decode(body.content_base64, validate=True)
    except (binascii.Error, ValueError):
        raise ValidationError({"content_base64": ["File content is not valid base64"]}) from None

    media_id = upload_product_media(product_id, user.company_id, data, body.filename, kind=body.kind)
    return MediaIdResponse(media_id=media_id)


@product_router.delete("/{product_id}/media/{media_id}", response_model=StatusResponse)
async def remove_media(product_id: str, media_id: str, user: CurrentUser = Depends(current_vendor)) -> StatusResponse:
    command = RemoveProductMedia(product_id=product_id, company_id=user.company_id, media_id=media_id)
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@product_router.put("/{product_id}/approve", response_model=StatusResponse)
async def approve_product(product_id: str, user: CurrentUser = Depends(current_operator)) -> StatusResponse:
    current_domain.process(ApproveProduct(product_id=product_id), asynchronous=False)
    return StatusResponse()


@product_router.put("/{product_id}/revoke", response_model=StatusResponse)
async def revoke_product(product_id: str, user: CurrentUser = Depends(current_operator)) -> StatusResponse:
    current_domain.process(RevokeProductApproval(product_id=product_id), asynchronous=False)
    return StatusResponse()


# --- Company endpoints ---


@company_router.post("", status_code=201, response_model=CompanyIdResponse)
async def register_company(
    body: RegisterCompanyRequest, user: CurrentUser = Depends(current_user)
) -> CompanyIdResponse:
    command = RegisterCompany(
        owner_id=user.user_id,
        name=body.name,
        gst_number=body.gst_number,
        certificate_url=body.certificate_url,
        logo_url=body.logo_url,
    )
    result = current_domain.process(command, asynchronous=False)
    return CompanyIdResponse(company_id=result)


@company_router.get("/me/inventory", response_model=InventorySummaryResponse)
async def my_inventory(user: CurrentUser = Depends(current_vendor)) -> InventorySummaryResponse:
    return InventorySummaryResponse(**vars(inventory_summary(user.company_id)))


@company_router.get("/me/products", response_model=list[ProductDetailResponse])
async def my_products(user: CurrentUser = Depends(current_vendor)) -> list[ProductDetailResponse]:
    products = current_domain.repository_for(Product).for_company(user.company_id)
    return [_detail(p) for p in products]


@company_router.put("/{company_id}/approve", response_model=StatusResponse)
async def approve_company(company_id: str, user: CurrentUser = Depends(current_operator)) -> StatusResponse:
    current_domain.process(ApproveCompany(company_id=company_id), asynchronous=False)
    return StatusResponse()


# --- Favorite endpoints ---


@favorite_router.get("", response_model=list[FavoriteResponse])
async def list_favorites(user: CurrentUser = Depends(current_user)) -> list[FavoriteResponse]:
    favorites = current_domain.repository_for(Favorite).for_customer(user.user_id)
    return [FavoriteResponse(favorite_id=str(f.id), product_id=str(f.product_id)) for f in favorites]


@favorite_router.post("", status_code=201, response_model=FavoriteIdResponse)
async def add_favorite(body: AddFavoriteRequest, user: CurrentUser = Depends(current_user)) -> FavoriteIdResponse:
    result = current_domain.process(
        AddFavorite(customer_id=user.user_id, product_id=body.product_id),
        asynchronous=False,
    )
    return FavoriteIdResponse(favorite_id=result)


@favorite_router.delete("/{product_id}", response_model=StatusResponse)
async def remove_favorite(product_id: str, user: CurrentUser = Depends(current_user)) -> StatusResponse:
    current_domain.process(RemoveFavorite(customer_id=user.user_id, product_id=product_id), asynchronous=False)
    return StatusResponse()

"""Pydantic request/response schemas for the Catalogue API."""

from __future__ import annotations

from pydantic import BaseModel, Field

# --- Product Request Schemas ---


class CreateProductRequest(BaseModel):
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "name": "Cold-pressed Groundnut Oil",
                    "description": "Wood-pressed from organic groundnuts.",
                    "original_price": 450.0,
                    "discount_price": 399.0,
                    "stock_quantity": 40,
                    "categories": ["oils/cold-pressed"],
                    "nutrients": {"energy": "884 kcal", "fat": "100 g"},
                }
            ]
        }
    }

    name: str = Field(..., max_length=255)
    description: str | None = None
    original_price: float = Field(..., gt=0)
    discount_price: float | None = Field(None, ge=0)
    stock_quantity: int = Field(0, ge=0)
    categories: list[str] = Field(default_factory=list)
    nutrients: dict[str, str] = Field(default_factory=dict)


class UpdateProductDetailsRequest(BaseModel):
    name: str | None = Field(None, max_length=255)
    description: str | None = None
    categories: list[str] | None = None
    nutrients: dict[str, str] | None = None


class UpdateProductPricingRequest(BaseModel):
    original_price: float | None = Field(None, gt=0)
    discount_price: float | None = Field(None, ge=0)
    clear_discount: bool = False


class UpdateProductStockRequest(BaseModel):
    stock_quantity: int = Field(..., ge=0)


class UploadProductMediaRequest(BaseModel):
    filename: str = Field(..., max_length=255)
    content_base64: str
    kind: str = Field("photo", pattern="^(photo|video)$")


# --- Company / Favorite Request Schemas ---


class RegisterCompanyRequest(BaseModel):
    name: str = Field(..., max_length=255)
    gst_number: str | None = Field(None, max_length=15)
    certificate_url: str | None = Field(None, max_length=500)
    logo_url: str | None = Field(None, max_length=500)


class AddFavoriteRequest(BaseModel):
    product_id: str


# --- Response Schemas ---


class ProductIdResponse(BaseModel):
    product_id: str


class MediaIdResponse(BaseModel):
    media_id: str


class CompanyIdResponse(BaseModel):
    company_id: str


class FavoriteIdResponse(BaseModel):
    favorite_id: str


class StatusResponse(BaseModel):
    status: str = "ok"


class MediaResponse(BaseModel):
    media_id: str
    url: str
    kind: str
    display_order: int


class ListedProductResponse(BaseModel):
    product_id: str
    company_id: str
    name: str
    original_price: float
    discount_price: float | None = None
    effective_price: float
    stock_quantity: int
    categories: list[str]
    thumbnail_url: str | None = None


class ProductDetailResponse(BaseModel):
    product_id: str
    company_id: str
    name: str
    description: str | None = None
    original_price: float
    discount_price: float | None = None
    effective_price: float
    stock_quantity: int
    categories: list[str]
    nutrients: dict[str, str]
    media: list[MediaResponse]
    is_approved: bool


class InventorySummaryResponse(BaseModel):
    total_products: int
    approved_listings: int
    out_of_stock: int
    low_stock: int


class FavoriteResponse(BaseModel):
    favorite_id: str
    product_id: str

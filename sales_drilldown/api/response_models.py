"""
Pydantic request/response schemas for the API.
"""
from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    status: str
    rows: int
    skipped_rows: int
    undated_rows: int
    cities: int
    products: int
    periods: int
    source: Optional[str] = None
    error: Optional[str] = None


class CitiesResponse(BaseModel):
    cities: list[str]


class ProductsResponse(BaseModel):
    city: Optional[str] = None
    products: list[str]


class PurchaseTypesResponse(BaseModel):
    purchase_types: list[str]


class PeriodsResponse(BaseModel):
    periods: list[dict]


class SkippedRow(BaseModel):
    row_number: int
    reason: str


class SkippedRowsResponse(BaseModel):
    count: int
    rows: list[SkippedRow]


class DrillCityRequest(BaseModel):
    city: str = Field(..., min_length=1)


class DrillProductRequest(BaseModel):
    city: str = Field(..., min_length=1)
    product: str = Field(..., min_length=1)

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel


class ResourceCreate(BaseModel):
    name: str
    description: str
    category: str
    price: float
    quantity: int


class ResourceUpdate(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    category: Optional[str] = None
    price: Optional[float] = None
    quantity: Optional[int] = None


class ResourceFilters(BaseModel):
    name: Optional[str] = None
    category: Optional[str] = None
    min_price: Optional[float] = None
    max_price: Optional[float] = None
    limit: Optional[int] = None
    offset: Optional[int] = None


class Resource(BaseModel):
    id: int
    name: str
    description: str
    category: str
    price: float
    quantity: int
    created_at: str
    updated_at: str

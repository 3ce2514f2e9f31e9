# app/api/api_service.py

import logging
from decimal import Decimal
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from ..crud import crud_service_category
from ..crud.crud_service import service as crud_service
from ..database import get_db
from ..models import User
from ..schemas.common import ApiResponse, Pagination
from ..schemas.service import ServiceCreate, ServiceResponse, ServiceUpdate
from ..schemas.service_category import ServiceCategoryResponse
from ..utils import error_response
from .dependencies import PageParams, get_current_provider, get_page_params

logger = logging.getLogger(__name__)

router = APIRouter(
    # Note: NO prefix here, because main.py already does `prefix="/api/v1/services"`
    tags=["Services"],
)


def _resolve_category_id(
    db: Session, category_id: Optional[int], category_slug: Optional[str]
) -> Optional[int]:
    """Return a valid category id from either the id or the slug."""
    if category_slug:
        category = crud_service_category.get_category_by_slug(db, category_slug)
        if category is None:
            raise error_response(
                "Category not found",
                {"categorySlug": "not_found"},
                status.HTTP_404_NOT_FOUND,
            )
        return category.id
    if category_id is not None:
        if crud_service_category.get_category(db, category_id) is None:
            raise error_response(
                "Category not found",
                {"categoryId": "not_found"},
                status.HTTP_404_NOT_FOUND,
            )
        return category_id
    return None


def _get_owned_service(db: Session, service_id: int, owner: User):
    db_service = crud_service.get_service(db, service_id)
    if db_service is None:
        raise error_response(
            "Service not found",
            {"service_id": "not_found"},
            status.HTTP_404_NOT_FOUND,
        )
    if db_service.provider_id != owner.id:
        raise error_response(
            "You can only manage your own services",
            {},
            status.HTTP_403_FORBIDDEN,
        )
    return db_service


@router.get("", response_model=ApiResponse[List[ServiceResponse]])
def list_services(
    category_id: Optional[int] = Query(None, alias="categoryId"),
    category: Optional[str] = Query(None, description="Category slug"),
    search: Optional[str] = None,
    min_price: Optional[Decimal] = Query(None, alias="minPrice", ge=0),
    max_price: Optional[Decimal] = Query(None, alias="maxPrice", ge=0),
    min_rating: Optional[float] = Query(None, alias="minRating", ge=0, le=5),
    city: Optional[str] = None,
    params: PageParams = Depends(get_page_params),
    db: Session = Depends(get_db),
):
    """List active services, featured first (public)."""
    if category:
        category_id = _resolve_category_id(db, None, category)
    items, total = crud_service.list_services(
        db,
        category_id=category_id,
        search=search,
        min_price=min_price,
        max_price=max_price,
        min_rating=min_rating,
        city=city,
        skip=params.skip,
        limit=params.limit,
    )
    return ApiResponse(
        data=[ServiceResponse.model_validate(s) for s in items],
        pagination=Pagination.build(params.page, params.limit, total),
    )


@router.get("/categories", response_model=ApiResponse[List[ServiceCategoryResponse]])
def list_categories(db: Session = Depends(get_db)):
    categories = crud_service_category.list_categories(db)
    return ApiResponse(data=[ServiceCategoryResponse.model_validate(c) for c in categories])


@router.get("/{service_id}", response_model=ApiResponse[ServiceResponse])
def read_service(service_id: int, db: Session = Depends(get_db)):
    """Read a single active service by ID (public)."""
    db_service = crud_service.get_service(db, service_id)
    if db_service is None or not db_service.is_active:
        raise error_response(
            "Service not found",
            {"service_id": "not_found"},
            status.HTTP_404_NOT_FOUND,
        )
    return ApiResponse(data=ServiceResponse.model_validate(db_service))


@router.post("", response_model=ApiResponse[ServiceResponse], status_code=status.HTTP_201_CREATED)
def create_service(
    service_in: ServiceCreate,
    db: Session = Depends(get_db),
    current_provider: User = Depends(get_current_provider),
):
    category_id = _resolve_category_id(db, service_in.category_id, service_in.category_slug)
    db_service = crud_service.create_service(db, service_in, current_provider.id, category_id)
    logger.info(
        "service.created",
        extra={"service_id": db_service.id, "provider_id": current_provider.id},
    )
    return ApiResponse(
        message="Service created successfully",
        data=ServiceResponse.model_validate(db_service),
    )


@router.put("/{service_id}", response_model=ApiResponse[ServiceResponse])
def update_service(
    service_id: int,
    service_in: ServiceUpdate,
    db: Session = Depends(get_db),
    current_provider: User = Depends(get_current_provider),
):
    db_service = _get_owned_service(db, service_id, current_provider)
    category_id = _resolve_category_id(db, service_in.category_id, service_in.category_slug)
    db_service = crud_service.update_service(db, db_service, service_in, category_id)
    return ApiResponse(
        message="Service updated successfully",
        data=ServiceResponse.model_validate(db_service),
    )


@router.delete("/{service_id}", response_model=ApiResponse)
def delete_service(
    service_id: int,
    db: Session = Depends(get_db),
    current_provider: User = Depends(get_current_provider),
):
    db_service = _get_owned_service(db, service_id, current_provider)
    crud_service.delete_service(db, db_service)
    logger.info(
        "service.deleted",
        extra={"service_id": service_id, "provider_id": current_provider.id},
    )
    return ApiResponse(message="Service deleted successfully")

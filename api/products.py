"""Products and categories API router.

Products are visible when public or created by the caller (admins see all).
Only the creator or an admin may change or delete a product; seeded catalog
products have no creator and are admin-managed.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy import or_
from sqlalchemy.orm import Session

from core.auth import CurrentUser, ensure_owner_or_admin, get_current_user
from core.exceptions import ConflictError, NotFoundError, ValidationError
from core.logger import get_logger
from core.repository import delete, save
from database import models
from database.deps import get_db_read, get_db_write
from schemas import CategoryResponse, ProductCreateRequest, ProductResponse, ProductUpdateRequest

logger = get_logger("api.products")
router = APIRouter(prefix="/api", tags=["products"])


def product_response(product: models.Product) -> ProductResponse:
    return ProductResponse(
        id=product.id,
        name=product.name,
        calories=product.calories,
        protein=product.protein,
        fat=product.fat,
        carbs=product.carbs,
        category_id=product.category_id,
        category_name=product.category.name if product.category else None,
        is_public=product.is_public,
        created_by=product.created_by,
    )


def visible_product(db: Session, product_id: int, current: CurrentUser) -> models.Product:
    product = db.get(models.Product, product_id)
    if product is None or not (product.is_public or product.created_by == current.id or current.is_admin):
        raise NotFoundError("Product", product_id)
    return product


def _check_category(db: Session, category_id: Optional[int]) -> None:
    if category_id is not None and db.get(models.Category, category_id) is None:
        raise ValidationError(f"Unknown category {category_id}", field="category_id")


@router.get("/products", response_model=List[ProductResponse])
def list_products(
    search: Optional[str] = None,
    category_id: Optional[int] = None,
    limit: int = Query(50, ge=1, le=200),
    skip: int = Query(0, ge=0),
    db: Session = Depends(get_db_read),
    current: CurrentUser = Depends(get_current_user),
):
    """Return visible products, optionally filtered by name and category."""
    query = db.query(models.Product)
    if not current.is_admin:
        query = query.filter(or_(models.Product.is_public.is_(True), models.Product.created_by == current.id))
    if search:
        query = query.filter(models.Product.name.ilike(f"%{search}%"))
    if category_id is not None:
        query = query.filter(models.Product.category_id == category_id)
    products = query.order_by(models.Product.name).offset(skip).limit(limit).all()
    return [product_response(p) for p in products]


@router.post("/products", response_model=ProductResponse, status_code=201)
def create_product(
    payload: ProductCreateRequest,
    db: Session = Depends(get_db_write),
    current: CurrentUser = Depends(get_current_user),
):
    _check_category(db, payload.category_id)
    product = save(db, models.Product(**payload.model_dump(), created_by=current.id))
    logger.info("Product %s created by user %s", product.id, current.id)
    return product_response(product)


@router.get("/products/{product_id}", response_model=ProductResponse)
def get_product(product_id: int, db: Session = Depends(get_db_read), current: CurrentUser = Depends(get_current_user)):
    return product_response(visible_product(db, product_id, current))


@router.put("/products/{product_id}", response_model=ProductResponse)
def update_product(
    product_id: int,
    payload: ProductUpdateRequest,
    db: Session = Depends(get_db_write),
    current: CurrentUser = Depends(get_current_user),
):
    product = visible_product(db, product_id, current)
    ensure_owner_or_admin(current, product.created_by, "Product")
    changes = payload.model_dump(exclude_unset=True)
    if "category_id" in changes:
        _check_category(db, changes["category_id"])
    for field, value in changes.items():
        if value is None and field != "category_id":
            continue
        setattr(product, field, value)
    product = save(db, product)
    logger.info("Product %s updated by user %s", product.id, current.id)
    return product_response(product)


@router.delete("/products/{product_id}")
def delete_product(product_id: int, db: Session = Depends(get_db_write), current: CurrentUser = Depends(get_current_user)):
    """Delete a product that no recipe uses.

    Diary items that referenced it are left in place and skipped when totals
    are computed.

    Raises:
        ConflictError: If the product is an ingredient of a recipe.
    """
    product = visible_product(db, product_id, current)
    ensure_owner_or_admin(current, product.created_by, "Product")
    in_recipes = db.query(models.RecipeIngredient.id).filter(models.RecipeIngredient.product_id == product_id).first()
    if in_recipes:
        raise ConflictError("Product is used as a recipe ingredient and cannot be deleted", field="product_id")
    delete(db, product)
    logger.info("Product %s deleted by user %s", product_id, current.id)
    return {"message": "Product deleted", "id": product_id}


@router.get("/categories", response_model=List[CategoryResponse])
def list_categories(db: Session = Depends(get_db_read), current: CurrentUser = Depends(get_current_user)):
    categories = db.query(models.Category).order_by(models.Category.label).all()
    return [CategoryResponse(id=c.id, name=c.name, label=c.label) for c in categories]

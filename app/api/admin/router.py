"""Admin back-office endpoints"""

from typing import List
from fastapi import APIRouter, BackgroundTasks, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession
import uuid

from app.core.database import get_db
from app.core.exceptions import NotFoundException, ResourceNotFoundException
from app.core.security import require_admin
from app.models import User
from app.api.auth.services import AuthService
from app.api.categories import crud as category_crud
from app.api.products import crud as product_crud
from app.api.orders.services import OrderService
from app.api.reviews.services import ReviewService
from app.schemas.category import CategoryCreate, CategoryUpdate, CategoryResponse
from app.schemas.order import OrderResponse, OrderStatusUpdate, OrderWithItemsResponse
from app.schemas.product import (
    AddOnCreate,
    AddOnResponse,
    AddOnUpdate,
    ProductAddOnCreate,
    ProductAddOnResponse,
    ProductAddOnsReplace,
    ProductCreate,
    ProductDetailResponse,
    ProductImageCreate,
    ProductImageResponse,
    ProductImageUpdate,
    ProductResponse,
    ProductUpdate,
)
from app.schemas.review import ReviewWithUserResponse
from app.schemas.user import UserResponse
from app.services.notification_dispatcher import (
    NotificationDispatcher,
    get_notification_dispatcher,
    notify_status_changed,
)

router = APIRouter(dependencies=[Depends(require_admin)])

def _no_content() -> Response:
    return Response(status_code=status.HTTP_204_NO_CONTENT)

@router.get("/status")
async def admin_status(current_user: User = Depends(require_admin)):
    """Lets the dashboard confirm the session is an admin one"""
    return {"isAdmin": True, "user": UserResponse.model_validate(current_user)}

# Users

@router.get("/users", response_model=List[UserResponse])
async def list_users(db: AsyncSession = Depends(get_db)):
    return await AuthService(db).list_users()

# Categories

@router.get("/categories", response_model=List[CategoryResponse])
async def list_categories(db: AsyncSession = Depends(get_db)):
    return await category_crud.get_categories(db)

@router.post("/categories", response_model=CategoryResponse, status_code=status.HTTP_201_CREATED)
async def create_category(data: CategoryCreate, db: AsyncSession = Depends(get_db)):
    return await category_crud.create_category(db, data)

@router.put("/categories/{category_id}", response_model=CategoryResponse)
async def update_category(category_id: uuid.UUID, data: CategoryUpdate, db: AsyncSession = Depends(get_db)):
    category = await category_crud.get_category_by_id(db, category_id)
    if not category:
        raise ResourceNotFoundException("Category", category_id)
    return await category_crud.update_category(db, category, data)

@router.delete("/categories/{category_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_category(category_id: uuid.UUID, db: AsyncSession = Depends(get_db)):
    category = await category_crud.get_category_by_id(db, category_id)
    if not category:
        raise ResourceNotFoundException("Category", category_id)
    await category_crud.delete_category(db, category)
    return _no_content()

# Products

@router.get("/products", response_model=List[ProductResponse])
async def list_products(db: AsyncSession = Depends(get_db)):
    return await product_crud.get_products(db)

@router.get("/products/{product_id}", response_model=ProductDetailResponse)
async def get_product(product_id: uuid.UUID, db: AsyncSession = Depends(get_db)):
    return await product_crud.get_product_or_404(db, product_id, with_details=True)

@router.post("/products", response_model=ProductDetailResponse, status_code=status.HTTP_201_CREATED)
async def create_product(data: ProductCreate, db: AsyncSession = Depends(get_db)):
    return await product_crud.create_product(db, data)

@router.put("/products/{product_id}", response_model=ProductDetailResponse)
async def update_product(product_id: uuid.UUID, data: ProductUpdate, db: AsyncSession = Depends(get_db)):
    product = await product_crud.get_product_or_404(db, product_id)
    return await product_crud.update_product(db, product, data)

@router.delete("/products/{product_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_product(product_id: uuid.UUID, db: AsyncSession = Depends(get_db)):
    product = await product_crud.get_product_or_404(db, product_id)
    await product_crud.delete_product(db, product)
    return _no_content()

@router.put("/products/{product_id}/addons", response_model=List[ProductAddOnResponse])
async def replace_product_add_ons(
    product_id: uuid.UUID,
    data: ProductAddOnsReplace,
    db: AsyncSession = Depends(get_db),
):
    return await product_crud.set_product_add_ons(db, product_id, data.add_on_ids)

# Product images

@router.get("/product-images", response_model=List[ProductImageResponse])
async def list_product_images(
    product_id: uuid.UUID = Query(..., alias="productId"),
    db: AsyncSession = Depends(get_db),
):
    return await product_crud.get_product_images(db, product_id)

@router.post("/product-images", response_model=ProductImageResponse, status_code=status.HTTP_201_CREATED)
async def create_product_image(data: ProductImageCreate, db: AsyncSession = Depends(get_db)):
    return await product_crud.create_product_image(db, data)

@router.put("/product-images/{image_id}", response_model=ProductImageResponse)
async def update_product_image(image_id: uuid.UUID, data: ProductImageUpdate, db: AsyncSession = Depends(get_db)):
    return await product_crud.update_product_image(db, image_id, data)

@router.delete("/product-images/{image_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_product_image(image_id: uuid.UUID, db: AsyncSession = Depends(get_db)):
    if not await product_crud.delete_product_image(db, image_id):
        raise ResourceNotFoundException("Product image", image_id)
    return _no_content()

# Add-ons

@router.get("/addons", response_model=List[AddOnResponse])
async def list_add_ons(db: AsyncSession = Depends(get_db)):
    return await product_crud.get_add_ons(db)

@router.post("/addons", response_model=AddOnResponse, status_code=status.HTTP_201_CREATED)
async def create_add_on(data: AddOnCreate, db: AsyncSession = Depends(get_db)):
    return await product_crud.create_add_on(db, data)

@router.put("/addons/{add_on_id}", response_model=AddOnResponse)
async def update_add_on(add_on_id: uuid.UUID, data: AddOnUpdate, db: AsyncSession = Depends(get_db)):
    return await product_crud.update_add_on(db, add_on_id, data)

@router.delete("/addons/{add_on_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_add_on(add_on_id: uuid.UUID, db: AsyncSession = Depends(get_db)):
    if not await product_crud.delete_add_on(db, add_on_id):
        raise ResourceNotFoundException("Add-on", add_on_id)
    return _no_content()

# Product <-> add-on links

@router.get("/product-addons", response_model=List[ProductAddOnResponse])
async def list_product_add_ons(
    product_id: uuid.UUID = Query(..., alias="productId"),
    db: AsyncSession = Depends(get_db),
):
    return await product_crud.get_product_add_ons(db, product_id)

@router.post("/product-addons", response_model=ProductAddOnResponse, status_code=status.HTTP_201_CREATED)
async def create_product_add_on(data: ProductAddOnCreate, db: AsyncSession = Depends(get_db)):
    return await product_crud.add_product_add_on(db, data.product_id, data.add_on_id)

@router.delete("/product-addons/{link_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_product_add_on(link_id: uuid.UUID, db: AsyncSession = Depends(get_db)):
    if not await product_crud.delete_product_add_on(db, link_id):
        raise NotFoundException("Product add-on association not found")
    return _no_content()

# Orders

@router.get("/orders", response_model=List[OrderWithItemsResponse])
async def list_orders(db: AsyncSession = Depends(get_db)):
    return await OrderService(db).get_orders()

@router.get("/orders/{order_id}", response_model=OrderWithItemsResponse)
async def get_order(order_id: uuid.UUID, db: AsyncSession = Depends(get_db)):
    order = await OrderService(db).get_order(order_id)
    if not order:
        raise ResourceNotFoundException("Order", order_id)
    return order

@router.put("/orders/{order_id}/status", response_model=OrderResponse)
async def update_order_status(
    order_id: uuid.UUID,
    data: OrderStatusUpdate,
    background_tasks: BackgroundTasks,
    dispatcher: NotificationDispatcher = Depends(get_notification_dispatcher),
    db: AsyncSession = Depends(get_db),
):
    order = await OrderService(db).update_status(order_id, data.status)
    background_tasks.add_task(notify_status_changed, dispatcher, order.id)
    return order

@router.delete("/orders/{order_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_order(order_id: uuid.UUID, db: AsyncSession = Depends(get_db)):
    if not await OrderService(db).delete_order(order_id):
        raise ResourceNotFoundException("Order", order_id)
    return _no_content()

# Reviews

@router.get("/reviews", response_model=List[ReviewWithUserResponse])
async def list_reviews(db: AsyncSession = Depends(get_db)):
    return await ReviewService(db).get_all_reviews()

@router.delete("/reviews/{review_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_review(
    review_id: uuid.UUID,
    current_user: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    await ReviewService(db).delete_review(current_user, review_id)
    return _no_content()

"""API routes aggregation"""

from fastapi import APIRouter

from .auth.router import router as auth_router
from .categories.router import router as categories_router
from .products.router import router as products_router
from .cart.router import router as cart_router
from .orders.router import router as orders_router
from .reviews.router import router as reviews_router
from .wishlist.router import router as wishlist_router
from .contact.router import router as contact_router
from .admin.router import router as admin_router

api_router = APIRouter()

# Include all routers
api_router.include_router(auth_router, tags=["Authentication"])
api_router.include_router(categories_router, prefix="/categories", tags=["Categories"])
api_router.include_router(products_router, prefix="/products", tags=["Products"])
api_router.include_router(reviews_router)
api_router.include_router(cart_router, prefix="/cart", tags=["Cart"])
api_router.include_router(orders_router, prefix="/orders", tags=["Orders"])
api_router.include_router(wishlist_router, prefix="/wishlist", tags=["Wishlist"])
api_router.include_router(contact_router, prefix="/contact", tags=["Contact"])
api_router.include_router(admin_router, prefix="/admin", tags=["Admin"])

from fastapi import APIRouter

from rental_api.api.v1.health import router as health_router
from rental_api.api.v1.auth.router import router as auth_router
from rental_api.api.v1.account.router import router as account_router
from rental_api.api.v1.vehicles.public_router import router as vehicles_router
from rental_api.api.v1.orders.public_router import router as orders_router
from rental_api.api.v1.users.router import router as admin_users_router
from rental_api.api.v1.vehicles.router import router as admin_vehicles_router
from rental_api.api.v1.orders.router import router as admin_orders_router

api_router = APIRouter()
api_router.include_router(health_router, prefix="/health", tags=["health"])
api_router.include_router(auth_router, prefix="/auth", tags=["auth"])
api_router.include_router(account_router, prefix="/user", tags=["account"])
api_router.include_router(vehicles_router, prefix="/vehicles", tags=["vehicles"])
api_router.include_router(orders_router, prefix="/orders", tags=["orders"])

# Admin surface: ADMIN or OWNER role required
api_router.include_router(admin_users_router, prefix="/admin/users", tags=["admin-users"])
api_router.include_router(admin_vehicles_router, prefix="/admin/vehicles", tags=["admin-vehicles"])
api_router.include_router(admin_orders_router, prefix="/admin/orders", tags=["admin-orders"])

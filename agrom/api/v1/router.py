from fastapi import APIRouter

from agrom.api.v1.auth import router as auth_router
from agrom.api.v1.prices import router as prices_router
from agrom.api.v1.profiles import router as profiles_router
from agrom.api.v1.ratings import router as ratings_router
from agrom.api.v1.requests import router as requests_router
from agrom.api.v1.services import router as services_router

v1_router = APIRouter()

v1_router.include_router(auth_router)
v1_router.include_router(profiles_router)
v1_router.include_router(services_router)
v1_router.include_router(requests_router)
v1_router.include_router(ratings_router)
v1_router.include_router(prices_router)

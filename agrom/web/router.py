from fastapi import APIRouter

from agrom.web.auth import router as auth_router
from agrom.web.home import router as home_router
from agrom.web.listings import router as listings_router
from agrom.web.prices import router as prices_router
from agrom.web.profiles import router as profiles_router

web_router = APIRouter(include_in_schema=False)

web_router.include_router(home_router)
web_router.include_router(auth_router)
web_router.include_router(profiles_router)
web_router.include_router(listings_router)
web_router.include_router(prices_router)

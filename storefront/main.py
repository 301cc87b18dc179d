from contextlib import asynccontextmanager

from fastapi import FastAPI

from storefront.config import Settings, get_settings
from storefront.core.logging import setup_logging
from storefront.database import Base, engine
from storefront.models import import_all_models
from storefront.routers import (
    catalog_router,
    checkout_router,
    delivery_router,
    godowns_router,
    health_router,
    orders_router,
    stock_router,
)

setup_logging()
settings: Settings = get_settings()


@asynccontextmanager
async def lifespan(_app: FastAPI):
    import_all_models()
    Base.metadata.create_all(bind=engine)
    yield


app = FastAPI(title=settings.APP_NAME, lifespan=lifespan)

app.include_router(health_router)
app.include_router(catalog_router)
app.include_router(checkout_router)
app.include_router(orders_router)
app.include_router(delivery_router)
app.include_router(godowns_router)
app.include_router(stock_router)


__all__ = ["app"]

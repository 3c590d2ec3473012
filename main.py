from contextlib import asynccontextmanager

from fastapi import FastAPI, Response
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from app.api.categories.routes import router as categories_router
from app.api.coupons.routes import router as coupons_router
from app.api.networks.routes import router as networks_router
from app.api.seo.routes import router as seo_router
from app.api.stores.routes import router as stores_router
from app.core.config import Environment, settings
from app.core.database import create_db
from app.core.exceptions.validation_exceptions import request_validation_handler


@asynccontextmanager
async def lifespan(app: FastAPI):
    if settings.ENVIRONMENT != Environment.TEST:
        create_db()
    yield


app = FastAPI(lifespan=lifespan)
app.add_exception_handler(RequestValidationError, request_validation_handler)

# Include routers
app.include_router(categories_router, prefix='/categories', tags=['Categories'])
app.include_router(coupons_router, prefix='/coupons', tags=['Coupons'])
app.include_router(networks_router, prefix='/networks', tags=['Networks'])
app.include_router(seo_router, prefix='/seo', tags=['SEO'])
app.include_router(stores_router, prefix='/stores', tags=['Stores'])

origins = ['*']
app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=['*'],
    allow_headers=['*'],
)


@app.get('/', include_in_schema=False)
def ping():
    return Response(status_code=200)

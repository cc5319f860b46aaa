from fastapi import FastAPI, APIRouter
from fastapi.middleware.cors import CORSMiddleware
from authors_api.core.config import settings
from authors_api.core.middleware_correlation import CorrelationIdMiddleware
from authors_api.core.logging import setup_logging
from authors_api.core.errors import register_exception_handlers

# Routers
from authors_api.api.routes.authors import router as authors_router


setup_logging()

app = FastAPI(
    title=settings.PROJECT_NAME,
    description="Authors API - authors and their books, with administrator-gated writes.",
    version="1.0.0",
    openapi_url=f"{settings.API_V1_STR}/openapi.json",
)

# CORS middleware - allow docs UI to make API requests
app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:8000", "http://127.0.0.1:8000"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["Location", "X-Request-ID"],
)

app.add_middleware(CorrelationIdMiddleware)

# Root endpoint
@app.get("/")
async def root():
    """API root endpoint with basic information."""
    return {
        "message": "Welcome to Authors API",
        "version": "1.0.0",
        "docs_url": "/docs",
        "redoc_url": "/redoc",
        "api_v1_str": settings.API_V1_STR,
        "endpoints": {
            "authors": f"{settings.API_V1_STR}/authors",
        },
        "authentication": {
            "type": "Bearer JWT issued by the login service",
            "anonymous": [f"GET {settings.API_V1_STR}/authors/{{id}}"],
            "links_header": settings.HATEOAS_HEADER,
        },
    }

register_exception_handlers(app)

# Mount routers
api = APIRouter(prefix=settings.API_V1_STR)
api.include_router(authors_router)
app.include_router(api)

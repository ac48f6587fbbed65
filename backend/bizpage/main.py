# FILE: backend/bizpage/main.py
# PHOENIX PROTOCOL - ROUTER REGISTRATION
# 1. Business profiles + asset upload URLs under /api/v1.

from fastapi import FastAPI, status, APIRouter
from fastapi.middleware.cors import CORSMiddleware
import logging

from .core.config import settings
from .core.lifespan import lifespan

from .api.endpoints.business import router as business_router
from .api.endpoints.assets import router as assets_router

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

app = FastAPI(title="Business Pages API", lifespan=lifespan)

origins = [
    "http://localhost:3000",
    "http://localhost:5173",
]
origins.extend(settings.BACKEND_CORS_ORIGINS)

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# --- V1 ROUTER ASSEMBLY ---
api_v1_router = APIRouter(prefix=settings.API_V1_STR)

api_v1_router.include_router(business_router, prefix="/business", tags=["Business"])
api_v1_router.include_router(assets_router, prefix="/assets", tags=["Assets"])

app.include_router(api_v1_router)

@app.get("/health", status_code=status.HTTP_200_OK, tags=["Health Check"])
def health_check():
    return {"status": "ok", "version": "0.1.0"}

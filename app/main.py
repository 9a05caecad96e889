import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.httpsredirect import HTTPSRedirectMiddleware
from app.config import get_settings
from app.database import engine, Base
from app.middleware.audit import RequestResponseLoggingMiddleware
from app.routers import patients, medical_orders
from app.routers import auth as auth_router
from app import models  # noqa: F401  registers tables on Base.metadata

settings = get_settings()

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup: create tables
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database schema ready")
    yield
    # Shutdown
    await engine.dispose()


app = FastAPI(
    title="Order Backend",
    description="Patients and medical orders with JWT authentication and request auditing",
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

if settings.https_redirect:
    app.add_middleware(HTTPSRedirectMiddleware)

# Added last so it is outermost and sees every request and response.
app.add_middleware(RequestResponseLoggingMiddleware)

app.include_router(auth_router.router, prefix="/api/auth", tags=["Auth"])
app.include_router(patients.router, prefix="/api/patients", tags=["Patients"])
app.include_router(medical_orders.router, prefix="/api/medicalorders", tags=["MedicalOrders"])


@app.get("/api/health")
async def health_check():
    return {"status": "healthy", "service": "order-backend"}

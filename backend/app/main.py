from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from core.config import get_settings
from core.exceptions import register_exception_handlers
from app.startup import configure_logging, run_startup_checks

# ========== Orders Management ==========
from modules.orders.routes.order_routes import router as order_router

# ========== Kitchen ==========
from modules.kitchen.routes.kitchen_routes import router as kitchen_router

settings = get_settings()
configure_logging(settings.LOG_LEVEL)


@asynccontextmanager
async def lifespan(app: FastAPI):
    run_startup_checks()
    yield


app = FastAPI(
    title="Comandera - Restaurant POS API",
    description="""
    Order entry for the floor and dish assignment for the kitchen line.

    * **Orders** - create, edit and finish table orders
    * **Kitchen** - cook roster, per-cook queues and accept / reject / ready actions
    """,
    version="1.0.0",
    lifespan=lifespan,
)

# Register exception handlers for consistent error responses
register_exception_handlers(app)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(order_router)
app.include_router(kitchen_router)


@app.get("/")
def read_root():
    return {"message": "Comandera backend is running", "environment": settings.ENVIRONMENT}

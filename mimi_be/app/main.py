from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError
import logging
from app.config import get_settings
from app.routers import products, orders, revenue, categories
from app.routers import user as user_router
from app.utils.errors import describe_integrity_error, constraint_name
from app.utils.storage import IMAGE_ROOT

settings = get_settings()

logging.basicConfig(level=settings.LOG_LEVEL, format="%(asctime)s [%(levelname)s] %(name)s: %(message)s")
logger = logging.getLogger(__name__)

app = FastAPI(title="Mimi marketplace API")


@app.on_event("startup")
def on_startup():
    # Ensure all DB tables exist after all models are imported
    from app.models.user import Base, engine, SessionLocal  # Base/engine single source
    import app.models.product  # register Category/Product/ProductImage models
    import app.models.order  # register Order/OrderItem models
    Base.metadata.create_all(bind=engine)

    IMAGE_ROOT.mkdir(parents=True, exist_ok=True)

    if settings.SEED_DEFAULT_DATA:
        from app.utils.seed import seed_default_data
        db = SessionLocal()
        try:
            seed_default_data(db)
        finally:
            db.close()


@app.exception_handler(IntegrityError)
async def integrity_error_handler(request: Request, exc: IntegrityError):
    logger.warning("Integrity violation on %s %s (constraint=%s)", request.method, request.url.path, constraint_name(exc))
    return JSONResponse(status_code=409, content={"detail": describe_integrity_error(exc)})


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"detail": "Lỗi server"})


# CORS configuration for frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(products.router, prefix="/api/products", tags=["products"])
app.include_router(orders.router, prefix="/api/orders", tags=["orders"])
app.include_router(revenue.router, prefix="/api/revenue", tags=["revenue"])
app.include_router(categories.router, prefix="/api/categories", tags=["categories"])
app.include_router(user_router.router, prefix="/api/users", tags=["users"])


# --- Entry point for local runs ---
if __name__ == "__main__":
    import uvicorn, os
    port = int(os.environ.get("PORT", 8081))
    uvicorn.run("app.main:app", host="0.0.0.0", port=port, reload=False)

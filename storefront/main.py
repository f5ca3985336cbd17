# storefront/main.py
from fastapi import FastAPI
import uvicorn

from storefront.api.errors import setup_error_handlers
from storefront.api.routers import health, orders, products
from storefront.data.database import engine, init_db
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


def create_app() -> FastAPI:
    app = FastAPI(
        title="Storefront Service",
        version="1.0.0",
    )

    setup_error_handlers(app)

    # Include routers
    app.include_router(health.router)
    app.include_router(products.router)
    app.include_router(orders.router)

    return app


try:
    init_db()
    logger.info(f"Database tables ready on {engine.url.render_as_string(hide_password=True)}")
except Exception as e:
    logger.error(f"Failed to create tables: {e}")
    raise

app = create_app()

if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=8000)

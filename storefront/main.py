# storefront/main.py
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
import structlog
import uvicorn

from . import cart, checkout, config, pages, shop
from .database import Base, async_session_maker, engine
from .errors import register_exception_handlers
from .logging import configure_logging
from .seed import seed_products

configure_logging()
logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    if config.SEED_CATALOG:
        async with async_session_maker() as session:
            await seed_products(session)
    logger.info("Storefront started", database=engine.url.render_as_string(hide_password=True))
    yield
    await engine.dispose()


app = FastAPI(
    title="Vibe Commerce",
    description="Product catalog, shared shopping cart and mock checkout",
    version="1.0.0",
    lifespan=lifespan,
)

STATIC_DIR = Path(__file__).resolve().parent / "static"
app.mount("/static", StaticFiles(directory=str(STATIC_DIR)), name="static")

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

app.include_router(pages.router)
app.include_router(shop.router)
app.include_router(cart.router)
app.include_router(checkout.router)


@app.get("/health")
async def health():
    return {"status": "ok"}


if __name__ == "__main__":
    uvicorn.run("storefront.main:app", host=config.HOST, port=config.PORT, reload=True)

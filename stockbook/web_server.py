"""FastAPI JSON API over the inventory service.

The service instance lives on ``app.state.inventory``. It is created in the
lifespan handler unless one was attached beforehand (tests do this).
"""

from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import List, Optional

from fastapi import Depends, FastAPI, HTTPException, Query, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from .services.catalog_search import recent_sales, search_categories, search_products, search_sales
from .services.inventory_service import InventoryService
from .utils.config import get_config
from .utils.exceptions import (
    InsufficientStockError,
    InvalidInputError,
    ProductNotFoundError,
    StorageError,
)
from .utils.logger import get_api_logger

config = get_config()
logger = get_api_logger()


# ------------------------------------------------------------------
# Request bodies
# ------------------------------------------------------------------

class ProductCreate(BaseModel):
    name: str = Field(..., min_length=1)
    category: str = ""
    unit: str = "piece"
    price: float = Field(..., ge=0)


class ProductUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1)
    category: Optional[str] = None
    unit: Optional[str] = None
    price: Optional[float] = Field(default=None, ge=0)


class CategoryCreate(BaseModel):
    name: str = Field(..., min_length=1)
    description: Optional[str] = None


class CategoryUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = None


class StockIn(BaseModel):
    product_id: str
    quantity: int = Field(..., gt=0)
    purchase_price: float = Field(..., ge=0)


class SaleIn(BaseModel):
    product_id: str
    quantity: int = Field(..., gt=0)
    selling_price: float = Field(..., ge=0)


# ------------------------------------------------------------------
# Lifespan
# ------------------------------------------------------------------

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create the inventory service on startup if none is attached."""
    logger.info("=" * 60)
    logger.info("Stockbook API Starting")
    logger.info("=" * 60)
    logger.info(f"Environment:          {config.env.environment}")
    logger.info(f"Storage backend:      {config.storage.backend}")
    logger.info(f"Data dir:             {config.storage.data_dir}")
    logger.info("=" * 60)

    if getattr(app.state, "inventory", None) is None:
        app.state.inventory = InventoryService()

    yield

    app.state.inventory.store.close()
    logger.info("Stockbook API shut down.")


app = FastAPI(
    title=config.server.title,
    description="Products, categories, stock intake and sales",
    version="1.0.0",
    lifespan=lifespan,
)


def get_inventory(request: Request) -> InventoryService:
    service = getattr(request.app.state, "inventory", None)
    if service is None:
        raise HTTPException(status_code=503, detail="Inventory not initialised")
    return service


@app.get("/")
def root():
    """Root endpoint."""
    return {
        "service": config.server.title,
        "version": "1.0.0",
        "status": "running"
    }


@app.get("/health")
def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "environment": config.env.environment
    }


# ------------------------------------------------------------------
# Products
# ------------------------------------------------------------------

@app.get("/products")
def list_products(q: str = "", category: str = "", inventory: InventoryService = Depends(get_inventory)) -> List[dict]:
    return [p.to_dict() for p in search_products(inventory.products, q, category)]


@app.post("/products", status_code=201)
def create_product(body: ProductCreate, inventory: InventoryService = Depends(get_inventory)) -> dict:
    product = inventory.create_product(body.name, body.category, body.unit, body.price)
    return product.to_dict()


@app.get("/products/{product_id}")
def get_product(product_id: str, inventory: InventoryService = Depends(get_inventory)) -> dict:
    product = inventory.get_product(product_id)
    if product is None:
        raise HTTPException(status_code=404, detail=f"Product not found: {product_id}")
    return product.to_dict()


@app.patch("/products/{product_id}")
def update_product(product_id: str, body: ProductUpdate, inventory: InventoryService = Depends(get_inventory)) -> dict:
    updates = body.model_dump(exclude_unset=True, exclude_none=True)
    product = inventory.update_product(product_id, **updates)
    if product is None:
        raise HTTPException(status_code=404, detail=f"Product not found: {product_id}")
    return product.to_dict()


@app.delete("/products/{product_id}", status_code=204)
def delete_product(product_id: str, inventory: InventoryService = Depends(get_inventory)):
    if not inventory.delete_product(product_id):
        raise HTTPException(status_code=404, detail=f"Product not found: {product_id}")


# ------------------------------------------------------------------
# Categories
# ------------------------------------------------------------------

@app.get("/categories")
def list_categories(q: str = "", inventory: InventoryService = Depends(get_inventory)) -> List[dict]:
    return [c.to_dict() for c in search_categories(inventory.categories, q)]


@app.post("/categories", status_code=201)
def create_category(body: CategoryCreate, inventory: InventoryService = Depends(get_inventory)) -> dict:
    return inventory.create_category(body.name, body.description).to_dict()


@app.patch("/categories/{category_id}")
def update_category(category_id: str, body: CategoryUpdate, inventory: InventoryService = Depends(get_inventory)) -> dict:
    category = inventory.update_category(category_id, **body.model_dump(exclude_unset=True))
    if category is None:
        raise HTTPException(status_code=404, detail=f"Category not found: {category_id}")
    return category.to_dict()


@app.delete("/categories/{category_id}", status_code=204)
def delete_category(category_id: str, inventory: InventoryService = Depends(get_inventory)):
    if not inventory.delete_category(category_id):
        raise HTTPException(status_code=404, detail=f"Category not found: {category_id}")


# ------------------------------------------------------------------
# Stock and sales
# ------------------------------------------------------------------

@app.get("/stock-entries")
def list_stock_entries(product_id: Optional[str] = None, inventory: InventoryService = Depends(get_inventory)) -> List[dict]:
    return [
        e.to_dict() for e in inventory.stock_entries
        if product_id is None or e.product_id == product_id
    ]


@app.post("/stock-entries", status_code=201)
def add_stock(body: StockIn, inventory: InventoryService = Depends(get_inventory)) -> dict:
    entry = inventory.add_stock(body.product_id, body.quantity, body.purchase_price)
    return entry.to_dict()


@app.get("/sales")
def list_sales(q: str = "", category: str = "", inventory: InventoryService = Depends(get_inventory)) -> List[dict]:
    return [s.to_dict() for s in search_sales(inventory.sales, inventory.products, q, category)]


@app.get("/sales/recent")
def list_recent_sales(
    limit: Optional[int] = Query(default=None, ge=0),
    inventory: InventoryService = Depends(get_inventory)
) -> List[dict]:
    limit = limit if limit is not None else config.dashboard.recent_sales_limit
    return [s.to_dict() for s in recent_sales(inventory.sales, limit)]


@app.post("/sales", status_code=201)
def record_sale(body: SaleIn, inventory: InventoryService = Depends(get_inventory)) -> dict:
    sale = inventory.record_sale(body.product_id, body.quantity, body.selling_price)
    return sale.to_dict()


@app.get("/summary")
def get_summary(inventory: InventoryService = Depends(get_inventory)) -> dict:
    return inventory.get_summary().to_dict()


# ------------------------------------------------------------------
# Exception handlers
# ------------------------------------------------------------------

def _error_response(status_code: int, message: str, details: Optional[dict] = None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={
            "error": message,
            "status_code": status_code,
            "details": details or {}
        }
    )


@app.exception_handler(ProductNotFoundError)
async def product_not_found_handler(request: Request, exc: ProductNotFoundError):
    logger.warning(f"Product not found: {exc.details}")
    return _error_response(404, exc.message, exc.details)


@app.exception_handler(InsufficientStockError)
async def insufficient_stock_handler(request: Request, exc: InsufficientStockError):
    logger.warning(f"Insufficient stock: {exc.details}")
    return _error_response(409, exc.message, exc.details)


@app.exception_handler(InvalidInputError)
async def invalid_input_handler(request: Request, exc: InvalidInputError):
    return _error_response(422, exc.message, exc.details)


@app.exception_handler(StorageError)
async def storage_error_handler(request: Request, exc: StorageError):
    logger.error(f"Storage failure: {exc.message}")
    return _error_response(503, exc.message)


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):
    """Custom HTTP exception handler."""
    logger.warning(f"HTTP {exc.status_code}: {exc.detail}")
    return _error_response(exc.status_code, exc.detail)


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    """General exception handler for unexpected errors."""
    logger.error(f"Unhandled exception: {str(exc)}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content={
            "error": "Internal server error",
            "message": str(exc) if not config.is_production else "An error occurred"
        }
    )


def main():
    import uvicorn

    uvicorn.run(
        "stockbook.web_server:app",
        host=config.server.host,
        port=config.server.port,
        reload=not config.is_production
    )


if __name__ == "__main__":
    main()

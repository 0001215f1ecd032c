from fastapi import Depends, FastAPI, HTTPException
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel
from typing import Any, Dict, Optional

from benefit_pricing import __version__
from benefit_pricing.engine import (
    Employee,
    PricingEngine,
    PricingError,
    ProductNotFoundError,
    QuoteRequest,
    SelectedOptions,
    UnknownProductType,
    price_product,
)

app = FastAPI(
    title="Benefit Pricing API",
    description="Premium calculation for voluntary life, long-term disability and commuter benefits",
    version=__version__
)

# Enable CORS for frontend development
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

_engine: Optional[PricingEngine] = None


def get_engine() -> PricingEngine:
    """Engine shared by all requests, loaded on first use."""
    global _engine
    if _engine is None:
        _engine = PricingEngine()
    return _engine


class CalcRequest(BaseModel):
    """Price either a catalog product (product_id) or an inline product."""
    product_id: Optional[str] = None
    product: Optional[Dict[str, Any]] = None
    employee: Dict[str, Any] = {}
    selected_options: Dict[str, Any] = {}
    request_date: Optional[str] = None


@app.get("/")
async def root():
    return {"status": "online", "message": "Benefit Pricing API Active"}


@app.post("/calculate")
async def calculate(req: CalcRequest, engine: PricingEngine = Depends(get_engine)):
    if req.product is None and not req.product_id:
        raise HTTPException(status_code=400, detail="Either product_id or product is required")

    try:
        if req.product is not None:
            result = price_product(req.product, req.employee, req.selected_options)
        else:
            result = engine.calculate(QuoteRequest(
                product_id=req.product_id,
                employee=Employee.coerce(req.employee),
                selected_options=SelectedOptions.coerce(req.selected_options),
                request_date=req.request_date,
                channel="api",
            ))
    except UnknownProductType as e:
        raise HTTPException(status_code=400, detail=str(e))
    except ProductNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except PricingError as e:
        raise HTTPException(status_code=422, detail=str(e))

    return jsonable_encoder(result)


@app.get("/products")
async def list_products(engine: PricingEngine = Depends(get_engine)):
    return [product.to_dict() for product in engine.catalog]


@app.get("/products/{product_id}")
async def get_product(product_id: str, engine: PricingEngine = Depends(get_engine)):
    try:
        return engine.get_product(product_id).to_dict()
    except ProductNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@app.get("/system/status")
async def get_status(engine: PricingEngine = Depends(get_engine)):
    catalog = engine.catalog
    return {
        "engine_active": True,
        "version": __version__,
        "product_count": len(catalog),
        "product_ids": catalog.list_ids(),
        "catalog_path": str(catalog.source_path) if catalog.source_path else None,
        "catalog_hash": catalog.catalog_hash,
    }

"""
FastAPI Capacity Estimation Server.

Provides REST API endpoints for estimating WiFi link capacity from signal
observations.

Endpoints:
- POST /estimate - Estimate capacity for a single BSS
- POST /estimate/batch - Estimate and rank several BSSs
- POST /compare - Compare capacity of two BSSs
- GET /health - Health check with estimator settings
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from linkcap import __version__
from linkcap.capacity.estimator import CapacityEstimator
from linkcap.capacity.models import CapacityEstimate, compare_capacity
from linkcap.config.loader import format_validation_errors
from linkcap.config.schema import CandidateConfig, EstimatorConfig

logger = logging.getLogger(__name__)

# Active estimator settings, replaced by configure()
_config = EstimatorConfig()
_estimator = _config.build_estimator()


def configure(config: EstimatorConfig) -> None:
    """Replace the server-wide estimator settings."""
    global _config, _estimator
    estimator = config.build_estimator()
    _config, _estimator = config, estimator
    logger.info(
        f"Estimator configured: noise preset '{config.noise_preset.value}', "
        f"margin {config.min_link_margin_db} dB, uplink ratio {config.uplink_ratio}"
    )


def get_estimator() -> CapacityEstimator:
    return _estimator


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    logger.info("Capacity estimation server started")
    yield
    logger.info("Capacity estimation server shutting down")


app = FastAPI(
    title="linkcap Capacity Estimation Server",
    description="Estimate WiFi link capacity from RSSI, band, standard, width and streams",
    version=__version__,
    lifespan=lifespan,
)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Report request validation errors in the same form as survey files."""
    detail = format_validation_errors(exc.errors())
    logger.debug(f"Rejected {request.url.path}:\n{detail}")
    return JSONResponse(status_code=422, content={"detail": detail})


# ============================================================================
# Request/Response Models
# ============================================================================


class CapacityRequest(CandidateConfig):
    """Request to estimate capacity for a single BSS."""

    uplink_ratio: float | None = Field(default=None, ge=0.0, le=1.0)
    min_link_margin_db: float | None = Field(default=None, ge=0.0)


class CapacityResponse(BaseModel):
    """Capacity estimate for one BSS."""

    bssid: str
    band: str
    standard: str
    channel_width: int
    nss: int
    snr_db: float
    max_mcs: int | None
    link_margin_db: float | None
    max_phy_rate_mbps: float | None
    estimated_effective_downlink_mbps: float | None
    estimated_effective_uplink_mbps: float | None
    utilization_adjusted_downlink_mbps: float | None
    capacity_category: str
    is_gigabit_capable: bool
    is_multi_gigabit_capable: bool

    @classmethod
    def from_estimate(cls, estimate: CapacityEstimate) -> "CapacityResponse":
        return cls(**estimate.to_dict())


class BatchCapacityRequest(BaseModel):
    """Request to rank several BSSs."""

    candidates: list[CandidateConfig] = Field(..., min_length=1)


class BatchCapacityResponse(BaseModel):
    """Ranked estimates, best first."""

    results: list[CapacityResponse]
    best_bssid: str


class CompareRequest(BaseModel):
    """Request to compare two BSSs."""

    bss1: CandidateConfig
    bss2: CandidateConfig


class CompareResponse(BaseModel):
    """Capacity comparison result."""

    preferred_bssid: str
    capacity_difference_mbps: float
    capacity_difference_pct: float
    is_significant_difference: bool
    bss1: CapacityResponse
    bss2: CapacityResponse


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    version: str
    noise_preset: str
    min_link_margin_db: float
    uplink_ratio: float


# ============================================================================
# API Endpoints
# ============================================================================


@app.get("/health", response_model=HealthResponse)
async def health_check():
    """Check server health and active settings."""
    return HealthResponse(
        status="healthy",
        version=__version__,
        noise_preset=_config.noise_preset.value,
        min_link_margin_db=_config.min_link_margin_db,
        uplink_ratio=_config.uplink_ratio,
    )


@app.post("/estimate", response_model=CapacityResponse)
async def estimate(request: CapacityRequest) -> CapacityResponse:
    """Estimate capacity for a single BSS."""
    try:
        result = get_estimator().estimate_capacity(
            bssid=request.bssid,
            rssi_dbm=request.rssi_dbm,
            band=request.band,
            standard=request.standard,
            channel_width=request.channel_width,
            nss=request.nss,
            channel_utilization_pct=request.channel_utilization_pct,
            uplink_ratio=request.uplink_ratio,
            min_link_margin_db=request.min_link_margin_db,
        )
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
    return CapacityResponse.from_estimate(result)


@app.post("/estimate/batch", response_model=BatchCapacityResponse)
async def estimate_batch(request: BatchCapacityRequest) -> BatchCapacityResponse:
    """Estimate capacity for several BSSs, ranked by effective downlink."""
    try:
        ranked = get_estimator().estimate_capacity_for_multiple_bss(
            [c.to_bss_data() for c in request.candidates]
        )
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
    return BatchCapacityResponse(
        results=[CapacityResponse.from_estimate(e) for e in ranked],
        best_bssid=ranked[0].bssid,
    )


@app.post("/compare", response_model=CompareResponse)
async def compare(request: CompareRequest) -> CompareResponse:
    """Compare capacity of two BSSs."""
    estimator = get_estimator()
    try:
        bss1 = estimator.estimate_bss(request.bss1.to_bss_data())
        bss2 = estimator.estimate_bss(request.bss2.to_bss_data())
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))

    comparison = compare_capacity(bss1, bss2)
    return CompareResponse(
        preferred_bssid=comparison.preferred_bssid,
        capacity_difference_mbps=comparison.capacity_difference_mbps,
        capacity_difference_pct=comparison.capacity_difference_pct,
        is_significant_difference=comparison.is_significant_difference,
        bss1=CapacityResponse.from_estimate(bss1),
        bss2=CapacityResponse.from_estimate(bss2),
    )

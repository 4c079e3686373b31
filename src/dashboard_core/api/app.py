"""FastAPI application for the portfolio and risk-management dashboard."""

from datetime import datetime, timezone
from decimal import Decimal
from typing import Annotated, Any, Literal, Optional

from fastapi import Depends, FastAPI, HTTPException, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from dashboard_core.config.schema import AppConfig
from dashboard_core.logging import get_logger
from dashboard_core.models import NewPosition, PositionUpdate, RiskLimitsUpdate
from dashboard_core.models.position import CAMEL_INPUT
from dashboard_core.models.risk import AlertType, Severity
from dashboard_core.risk.sizing import InvalidSizingInput
from dashboard_core.store import DashboardStore

logger = get_logger("api")


class ClosePositionRequest(BaseModel):
    model_config = CAMEL_INPUT

    exit_price: Decimal = Field(gt=0)


class UpdatePricesRequest(BaseModel):
    prices: dict[str, Annotated[Decimal, Field(gt=0)]]


class GenerateAlertRequest(BaseModel):
    model_config = CAMEL_INPUT

    type: AlertType
    severity: Severity
    message: Optional[str] = None
    affected_positions: list[str] = Field(default_factory=list)


# ═══════════════════════════════════════════════════════════════
# Serialization
# ═══════════════════════════════════════════════════════════════


def _camel(key: str) -> str:
    head, *rest = key.split("_")
    return head + "".join(part.title() for part in rest)


def _jsonable(value: Any) -> Any:
    """camelCase keys, Decimals as floats, datetimes as ISO strings."""
    if isinstance(value, BaseModel):
        value = value.model_dump()
    if isinstance(value, dict):
        return {_camel(k) if isinstance(k, str) else k: _jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_jsonable(v) for v in value]
    if isinstance(value, Decimal):
        return float(value)
    if isinstance(value, datetime):
        return value.isoformat()
    return value


def get_store(request: Request) -> DashboardStore:
    """Dependency returning the store attached to the running app."""
    return request.app.state.store


def create_app(store: DashboardStore | None = None, config: AppConfig | None = None) -> FastAPI:
    """Build the API around *store* (a fresh store from *config* if omitted)."""
    app = FastAPI(
        title="Trading Dashboard API",
        description="Portfolio tracking and risk-management backend for the trading dashboard",
        version="0.1.0",
    )

    # CORS middleware - the dashboard is served from a separate origin
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.state.store = store or DashboardStore(config)

    @app.get("/api/health")
    async def health_check():
        """Health check endpoint."""
        return {"status": "healthy", "timestamp": datetime.now(timezone.utc).isoformat()}

    # ═══════════════════════════════════════════════════════════
    # Portfolio
    # ═══════════════════════════════════════════════════════════

    @app.get("/api/portfolio/positions")
    async def list_positions(
        status: Optional[Literal["open", "closed"]] = None,
        store: DashboardStore = Depends(get_store),
    ):
        """List positions, optionally only open or closed ones."""
        return {"positions": _jsonable(store.get_positions(status))}

    @app.get("/api/portfolio/positions/{position_id}")
    async def get_position(position_id: str, store: DashboardStore = Depends(get_store)):
        position = store.get_position(position_id)
        if position is None:
            raise HTTPException(status_code=404, detail="Position not found")
        return _jsonable(position)

    @app.post("/api/portfolio/positions", status_code=201)
    async def add_position(req: NewPosition, store: DashboardStore = Depends(get_store)):
        """Open (or record) a position."""
        return _jsonable(store.add_position(req))

    @app.post("/api/portfolio/positions/{position_id}/close")
    async def close_position(
        position_id: str,
        req: ClosePositionRequest,
        store: DashboardStore = Depends(get_store),
    ):
        """Close a position at the given exit price."""
        position = store.close_position(position_id, req.exit_price)
        if position is None:
            raise HTTPException(status_code=404, detail="Position not found")
        return _jsonable(position)

    @app.patch("/api/portfolio/positions/{position_id}")
    async def update_position(
        position_id: str,
        req: PositionUpdate,
        store: DashboardStore = Depends(get_store),
    ):
        """Edit stop loss and/or take profit."""
        position = store.update_position(position_id, req)
        if position is None:
            raise HTTPException(status_code=404, detail="Position not found")
        return _jsonable(position)

    @app.post("/api/portfolio/prices")
    async def update_prices(req: UpdatePricesRequest, store: DashboardStore = Depends(get_store)):
        """Mark open positions to new prices keyed by pair."""
        return {"updated": _jsonable(store.update_prices(req.prices))}

    @app.get("/api/portfolio/metrics")
    async def portfolio_metrics(store: DashboardStore = Depends(get_store)):
        return _jsonable(store.get_portfolio_metrics())

    @app.get("/api/portfolio/allocation")
    async def portfolio_allocation(store: DashboardStore = Depends(get_store)):
        return {"allocation": _jsonable(store.get_portfolio_allocation())}

    @app.get("/api/portfolio/history")
    async def performance_history(
        days: Optional[int] = Query(default=None, ge=0),
        store: DashboardStore = Depends(get_store),
    ):
        """Simulated daily equity curve, oldest first."""
        return {"data": _jsonable(store.get_performance_history(days))}

    # ═══════════════════════════════════════════════════════════
    # Risk management
    # ═══════════════════════════════════════════════════════════

    @app.get("/api/risk/metrics")
    async def risk_metrics(store: DashboardStore = Depends(get_store)):
        """Portfolio risk figures over the open positions."""
        return _jsonable(store.get_risk_metrics())

    @app.get("/api/risk/positions/{position_id}")
    async def position_risk(position_id: str, store: DashboardStore = Depends(get_store)):
        try:
            risk = store.get_position_risk(position_id)
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))
        if risk is None:
            raise HTTPException(status_code=404, detail="Position not found")
        return _jsonable(risk)

    @app.get("/api/risk/positions/{position_id}/violations")
    async def position_violations(position_id: str, store: DashboardStore = Depends(get_store)):
        """Advisory risk-limit violations for one position."""
        try:
            violations = store.get_position_violations(position_id)
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))
        if violations is None:
            raise HTTPException(status_code=404, detail="Position not found")
        return {"positionId": position_id, "violations": violations}

    @app.get("/api/risk/exposure")
    async def exposure(store: DashboardStore = Depends(get_store)):
        return _jsonable(store.get_exposure())

    @app.get("/api/risk/position-sizing")
    async def position_sizing(
        account_balance: Decimal,
        entry_price: Decimal,
        stop_loss: Decimal,
        risk_percent: Decimal = Decimal("2"),
        leverage: Decimal = Decimal("1"),
        store: DashboardStore = Depends(get_store),
    ):
        """Recommended size for a trade risking *risk_percent* of the account."""
        try:
            sizing = store.calculate_position_sizing(
                account_balance, risk_percent, entry_price, stop_loss, leverage,
            )
        except InvalidSizingInput as e:
            raise HTTPException(status_code=400, detail=str(e))
        return _jsonable(sizing)

    @app.get("/api/risk/alerts")
    async def list_alerts(
        severity: Optional[Severity] = None,
        store: DashboardStore = Depends(get_store),
    ):
        """Alerts, newest first."""
        return {"alerts": _jsonable(store.get_risk_alerts(severity))}

    @app.post("/api/risk/alerts", status_code=201)
    async def generate_alert(req: GenerateAlertRequest, store: DashboardStore = Depends(get_store)):
        alert = store.generate_risk_alert(
            req.type, req.severity, req.message, req.affected_positions,
        )
        return _jsonable(alert)

    @app.post("/api/risk/alerts/{alert_id}/acknowledge")
    async def acknowledge_alert(alert_id: str, store: DashboardStore = Depends(get_store)):
        if not store.acknowledge_alert(alert_id):
            raise HTTPException(status_code=404, detail="Alert not found")
        return {"ok": True, "id": alert_id}

    @app.get("/api/risk/limits")
    async def get_limits(store: DashboardStore = Depends(get_store)):
        return _jsonable(store.get_risk_limits())

    @app.patch("/api/risk/limits")
    async def update_limits(req: RiskLimitsUpdate, store: DashboardStore = Depends(get_store)):
        """Merge the supplied limit fields; omitted fields keep their value."""
        return _jsonable(store.update_risk_limits(req))

    logger.info("api_created", routes=len(app.routes))
    return app

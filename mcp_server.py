"""Lightweight MCP-aligned server exposing the dashboard engine over FastAPI."""

import datetime as dt
from contextlib import asynccontextmanager
from functools import lru_cache
from typing import List, Optional

from fastapi import Depends, FastAPI
from pydantic import BaseModel, Field

from config import DashboardConfig, load_settings
from dashboard import build_dashboard
from loans import PayoffInputs, estimate_payoff_for
from logging_setup import get_logger
from models import Transaction

logger = get_logger("flofi.mcp_server")


@lru_cache(maxsize=1)
def get_config() -> DashboardConfig:
    return load_settings().dashboard_config()


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Raises on a malformed rules file, so the server never starts with one.
    config = get_config()
    logger.info("Classifying into %d buckets", len(config.rules.bucket_names()))
    yield


app = FastAPI(title="Flo-Fi Dashboard Tools", version="0.1.0", lifespan=lifespan)


class TransactionIn(BaseModel):
    date: Optional[dt.date] = None
    merchant: str = ""
    category: str = ""
    amount: float
    account: str = ""

    def to_record(self) -> Transaction:
        return Transaction(
            date=self.date,
            merchant=self.merchant,
            category=self.category,
            amount=self.amount,
            account=self.account,
        )


class DashboardRequest(BaseModel):
    transactions: List[TransactionIn] = Field(default_factory=list)


class MonthlyRow(BaseModel):
    month: str
    income: float
    spend: float


class BucketRow(BaseModel):
    bucket: str
    total_spend: float


class MonthTotal(BaseModel):
    month: str
    total: float


class RecurringCost(BaseModel):
    series: List[MonthTotal]
    total: float
    count: int


class MonthCount(BaseModel):
    month: str
    count: int


class DayCount(BaseModel):
    day: int
    count: int


class DashboardResponse(BaseModel):
    monthly: List[MonthlyRow]
    categories: List[BucketRow]
    recurring_cost: RecurringCost
    spikes: List[MonthCount]
    day_pattern: List[DayCount]


@app.post("/tools/build_dashboard", response_model=DashboardResponse)
async def build_dashboard_tool(req: DashboardRequest, config: DashboardConfig = Depends(get_config)):
    records = [t.to_record() for t in req.transactions]
    logger.info("Building dashboard for %d transactions", len(records))
    return build_dashboard(records, config)


class PayoffRequest(BaseModel):
    balance: float = Field(PayoffInputs.balance, ge=0)
    apr_percent: float = Field(PayoffInputs.apr_percent, ge=0, description="Annual rate in percent, e.g. 20")
    min_payment: float = Field(PayoffInputs.min_payment, ge=0)
    extra_payment: float = Field(PayoffInputs.extra_payment, ge=0)


class PayoffResponse(BaseModel):
    months: int
    total_interest: float


@app.post("/tools/simulate_payoff", response_model=PayoffResponse)
async def simulate_payoff_tool(req: PayoffRequest):
    return estimate_payoff_for(PayoffInputs(**req.model_dump()))


class ClassifyRequest(BaseModel):
    merchant: str = ""
    category: str = ""


class ClassifyResponse(BaseModel):
    bucket: str


@app.post("/tools/classify_transaction", response_model=ClassifyResponse)
async def classify_transaction(req: ClassifyRequest, config: DashboardConfig = Depends(get_config)):
    return ClassifyResponse(bucket=config.rules.classify(req.merchant, req.category))


@app.get("/health")
async def health():
    return {"status": "ok"}


if __name__ == "__main__":
    import uvicorn

    from logging_setup import configure_logging

    settings = load_settings()
    configure_logging(settings.log_level)
    uvicorn.run("mcp_server:app", host=settings.host, port=settings.port, reload=True)

"""FastAPI application exposing the trading endpoints.

Endpoints:
* ``GET /`` - resource index
* ``GET /ping`` - liveness
* ``POST /buy`` - buy tokens on the bonding curve
* ``POST /sell`` - sell tokens back to the bonding curve
* ``GET /coin/{mint}`` - raw coin data
* ``GET /analyze/{mint}`` - liquidity, volatility and trend scores

Trade parameters are read from the query string and the JSON body; body
fields win when both are present.
"""

import json
import logging
from decimal import Decimal
from typing import Any, Callable, Dict, Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ValidationError
from starlette.concurrency import run_in_threadpool

from .analysis import analyze_coin
from .config import ProgramConfig, ServiceConfig
from .errors import NetworkError, NotFound, PumpApiError, UnconfirmedTransaction
from .http_client import HttpClient
from .models import TransactionMode
from .price_client import PumpPriceClient
from .submitter import RpcSubmitter
from .trader import PumpTrader

logger = logging.getLogger(__name__)


class BuyRequest(BaseModel):
    privateKey: str
    mintAddress: str
    solIn: Decimal
    priorityFeeInSol: Optional[Decimal] = None
    slippageDecimal: Optional[Decimal] = None


class SellRequest(BaseModel):
    privateKey: str
    mintAddress: str
    tokenBalance: Decimal
    priorityFeeInSol: Optional[Decimal] = None
    slippageDecimal: Optional[Decimal] = None


class BadRequestBody(ValueError):
    pass


async def read_params(request: Request) -> Dict[str, Any]:
    params: Dict[str, Any] = dict(request.query_params)
    body = await request.body()
    if body:
        try:
            payload = json.loads(body)
        except ValueError:
            raise BadRequestBody("request body is not valid JSON") from None
        if not isinstance(payload, dict):
            raise BadRequestBody("request body must be a JSON object")
        params.update(payload)
    return params


def failure(status: int, error: str, details: Optional[str] = None, signature: Optional[str] = None) -> JSONResponse:
    content: Dict[str, Any] = {"success": False, "error": error}
    if details is not None:
        content["details"] = details
    if signature is not None:
        content["signature"] = signature
    return JSONResponse(status_code=status, content=content)


async def run_trade(operation: str, request: Request, model, call: Callable[[Any], Any]) -> JSONResponse:
    try:
        params = await read_params(request)
        trade = model(**params)
        result = await run_in_threadpool(call, trade)
    except (BadRequestBody, ValidationError) as exc:
        logger.warning("%s request rejected: %s", operation, exc)
        return failure(400, f"{operation.capitalize()} operation failed", str(exc))
    except UnconfirmedTransaction as exc:
        # outcome unknown: the client must check the signature before trading again
        logger.warning("%s transaction unconfirmed: %s", operation, exc)
        return failure(202, "Transaction not confirmed; it may still land", exc.message, exc.signature)
    except PumpApiError as exc:
        logger.warning("%s operation failed: %s", operation, exc)
        return failure(400, f"{operation.capitalize()} operation failed", exc.message, exc.signature)
    except Exception:
        logger.exception("unexpected error in %s operation", operation)
        return failure(500, f"An unexpected error occurred during the {operation} operation")
    return JSONResponse(content={"success": True, "result": result})


def create_app(trader: PumpTrader, price_client: PumpPriceClient) -> FastAPI:
    app = FastAPI(title="pumpfun-api", description="Trade pump.fun bonding-curve tokens", version="1.0")

    @app.get("/")
    def index() -> Dict[str, Any]:
        return {
            "message": "Welcome to the Solana PumpFun API",
            "endpoints": {
                "/buy": "POST - Buy PumpFun tokens",
                "/sell": "POST - Sell PumpFun tokens",
                "/coin/{mintAddress}": "GET - Fetch coin data for a specific mint address",
                "/analyze/{mintAddress}": "GET - Analyze coin data for a specific mint address",
                "/ping": "GET - Liveness check",
            },
        }

    @app.get("/ping")
    def ping() -> Dict[str, str]:
        return {"status": "ok"}

    @app.post("/buy")
    async def buy(request: Request) -> JSONResponse:
        return await run_trade(
            "buy",
            request,
            BuyRequest,
            lambda trade: trader.buy(
                trade.privateKey, trade.mintAddress, trade.solIn, trade.priorityFeeInSol, trade.slippageDecimal
            ),
        )

    @app.post("/sell")
    async def sell(request: Request) -> JSONResponse:
        return await run_trade(
            "sell",
            request,
            SellRequest,
            lambda trade: trader.sell(
                trade.privateKey, trade.mintAddress, trade.tokenBalance, trade.priorityFeeInSol, trade.slippageDecimal
            ),
        )

    @app.get("/coin/{mint_address}")
    def coin(mint_address: str) -> JSONResponse:
        try:
            data = price_client.fetch_coin(mint_address)
        except NotFound:
            return JSONResponse(status_code=404, content={"error": "Coin data not found for the given mint address"})
        except NetworkError as exc:
            logger.warning("coin fetch failed for %s: %s", mint_address, exc)
            return JSONResponse(status_code=502, content={"error": "Failed to fetch coin data", "details": exc.message})
        return JSONResponse(content=data)

    @app.get("/analyze/{mint_address}")
    def analyze(mint_address: str) -> JSONResponse:
        try:
            data = price_client.fetch_coin(mint_address)
        except NotFound:
            return JSONResponse(
                status_code=404, content={"error": "Unable to analyze coin data for the given mint address"}
            )
        except NetworkError as exc:
            logger.warning("analysis fetch failed for %s: %s", mint_address, exc)
            return JSONResponse(status_code=502, content={"error": "Failed to analyze coin data", "details": exc.message})
        analysis = analyze_coin(mint_address, data)
        logger.info("analysis completed for %s: %s", mint_address, analysis["trendIndicator"])
        return JSONResponse(content=analysis)

    return app


def create_app_from_config(
    program_config: ProgramConfig, service_config: ServiceConfig, mode: Optional[TransactionMode] = None
) -> FastAPI:
    http = HttpClient(
        timeout=service_config.request_timeout,
        max_retries=service_config.retries,
        user_agent=service_config.user_agent,
    )
    price_client = PumpPriceClient(service_config.price_api_base_url, http)
    submitter = RpcSubmitter(
        service_config.rpc_endpoint,
        commitment=service_config.commitment,
        timeout=service_config.request_timeout,
    )
    trader = PumpTrader(program_config, price_client, submitter, mode=mode or service_config.transaction_mode)
    return create_app(trader, price_client)

from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from . import __version__
from .config import GatewayConfig, load_config
from .errors import GatewayError, InvalidRequest
from .gateway import GasGateway
from .log import configure_logging, get_logger
from .models import ErrorResponse, GasEstimateRequest, GasEstimateResponse

logger = get_logger(__name__)

# Loaded once at import; readers receive it explicitly
CONFIG = load_config()
configure_logging(CONFIG.log_level, CONFIG.log_color)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Log the stack and the configured endpoints on startup"""
    import web3 as web3_pkg
    logger.info(f"Using web3.py version: {web3_pkg.__version__}")

    if CONFIG.rpc_url:
        logger.info(f"JSON-RPC endpoint configured for chain {CONFIG.chain_id}")
    else:
        logger.warning("ETH_RPC_URL is not set; chain-backed requests will fail")
    logger.info(f"Price index: {CONFIG.price_api_url} ({CONFIG.price_asset}/{CONFIG.price_currency})")
    yield


app = FastAPI(
    title="Ethereum Gas Gateway",
    version=__version__,
    description="Block, price, gas price and contract call gateway with gas estimation",
    docs_url="/docs",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CONFIG.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(GatewayError)
async def gateway_error_handler(request: Request, exc: GatewayError):
    return JSONResponse(status_code=exc.status_code, content=jsonable_encoder(exc.to_dict()))


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    error = InvalidRequest("Invalid request body.", details=jsonable_encoder(exc.errors()))
    return JSONResponse(status_code=error.status_code, content=error.to_dict())


def get_config() -> GatewayConfig:
    return CONFIG


def get_gateway(config: GatewayConfig = Depends(get_config)) -> GasGateway:
    return GasGateway(config)


# API Endpoints
@app.get("/", summary="Service Status", tags=["Health Check"])
async def health_check(config: GatewayConfig = Depends(get_config)):
    """Service health check endpoint"""
    return {
        "status": "online",
        "version": app.version,
        "services": {
            "chain_id": config.chain_id,
            "rpc_configured": bool(config.rpc_url),
            "price_asset": config.price_asset,
        },
    }


@app.get("/health")
def render_health_check():
    """Simplified health check for load balancers"""
    return {"status": "ok"}


@app.post(
    "/api/gas/estimate",
    response_model=GasEstimateResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
    summary="Blocks, prices, gas price, contract reads and gas estimates",
    tags=["Gas"],
)
def estimate(body: GasEstimateRequest, gateway: GasGateway = Depends(get_gateway)):
    """Dispatch one request to the matching chain or price lookup"""
    try:
        response = gateway.handle(body)
    except GatewayError:
        raise
    except Exception as e:
        logger.exception(f"Unexpected failure handling {body.functionName}")
        raise GatewayError(str(e)) from e
    return JSONResponse(content=jsonable_encoder(response.to_body()))


def run():
    import uvicorn
    uvicorn.run("gas_gateway.main:app", host=CONFIG.host, port=CONFIG.port)


if __name__ == "__main__":
    run()

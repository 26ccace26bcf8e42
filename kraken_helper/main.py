from __future__ import annotations
import logging
from typing import Any, Callable, Dict

from fastapi import Depends, FastAPI, Request
from fastapi.responses import JSONResponse, PlainTextResponse

from .actions import buy_bitcoin, withdraw_bitcoin
from .config import Settings, load_environment
from .errors import KrakenHelperError
from .kraken_client import KrakenClient, KrakenCredentials
from .notifier import Notifier, SlackNotifier

logger = logging.getLogger(__name__)

# also served directly as `uvicorn kraken_helper.main:app`
load_environment()

app = FastAPI(title="Kraken Helper")

STATUS_TEXT = "Kraken Helper service is running and ready."


@app.exception_handler(KrakenHelperError)
def helper_error_handler(request: Request, exc: KrakenHelperError) -> JSONResponse:
    # failures raised while building dependencies, e.g. a malformed EUR_BUY_AMOUNT
    logger.error("%s %s failed: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=500, content={"status": "error", "message": str(exc)})


def get_settings() -> Settings:
    return Settings.from_env()

def get_kraken_client(settings: Settings = Depends(get_settings)) -> KrakenClient:
    creds = KrakenCredentials(api_key=settings.kraken_api_key, api_secret=settings.kraken_api_secret)
    return KrakenClient(creds, settings.kraken_base_url, timeout=settings.request_timeout)

def get_notifier(settings: Settings = Depends(get_settings)) -> Notifier:
    return SlackNotifier(settings.slack_webhook_url, timeout=settings.request_timeout)


def _run(action: str, flow: Callable[..., Dict[str, Any]], *args: Any) -> JSONResponse:
    logger.info("Received POST request to /%s endpoint.", action)
    try:
        return JSONResponse(status_code=200, content=flow(*args))
    except KrakenHelperError as e:
        return JSONResponse(status_code=500, content={"status": "error", "message": str(e)})
    except Exception:
        logger.exception("Unhandled error in /%s route", action)
        return JSONResponse(
            status_code=500,
            content={"status": "error", "message": f"An unexpected error occurred in the {action} endpoint."},
        )


@app.get("/", response_class=PlainTextResponse)
def status():
    return STATUS_TEXT

@app.post("/buy")
def buy(
    settings: Settings = Depends(get_settings),
    kraken: KrakenClient = Depends(get_kraken_client),
    notifier: Notifier = Depends(get_notifier),
):
    return _run("buy", buy_bitcoin, settings, kraken, notifier)

@app.post("/withdraw")
def withdraw(
    settings: Settings = Depends(get_settings),
    kraken: KrakenClient = Depends(get_kraken_client),
    notifier: Notifier = Depends(get_notifier),
):
    return _run("withdraw", withdraw_bitcoin, settings, kraken, notifier)

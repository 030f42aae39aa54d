"""HTTP surface.

POST /checkout          -> {"checkoutUrl", "url"} or {"error", "code"}
POST /payment-webhook   -> plain "ok" (200) or 400 on a bad signature
GET  /inventory-status  -> {item_id: "available" | "sold"}
GET  /products          -> catalog with availability
"""

from __future__ import annotations

import logging
from dataclasses import asdict

from fastapi import FastAPI, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from pydantic import AliasChoices, BaseModel, Field

from onedrop.domain.exceptions import (
    AlreadySoldError,
    DomainException,
    EntityNotFoundError,
    InvalidSignatureError,
    UpstreamProviderError,
)
from onedrop.infrastructure.bootstrap import Services, build_services
from onedrop.infrastructure.config import Settings
from onedrop.infrastructure.logging_setup import configure_logging

logger = logging.getLogger(__name__)

SIGNATURE_HEADER = "stripe-signature"


class CheckoutRequest(BaseModel):
    item_id: str = Field(validation_alias=AliasChoices("item_id", "itemId", "productId"))
    size: str


def _status_for(exc: DomainException) -> int:
    if isinstance(exc, EntityNotFoundError):
        return 404
    if isinstance(exc, AlreadySoldError):
        return 409
    if isinstance(exc, UpstreamProviderError):
        return 502
    return 400


def create_app(services: Services | None = None, settings: Settings | None = None) -> FastAPI:
    if services is None:
        settings = settings or Settings()
        configure_logging(settings.log_level)
        services = build_services(settings)

    app = FastAPI(title="One Drop")
    app.state.services = services
    if settings is not None and settings.cors_origins:
        # Only the browser-facing checkout call needs cross-origin access.
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.cors_origins,
            allow_methods=["POST"],
            allow_headers=["Content-Type"],
        )

    @app.exception_handler(DomainException)
    async def domain_error(request: Request, exc: DomainException) -> JSONResponse:
        return JSONResponse({"error": str(exc), "code": exc.code}, status_code=_status_for(exc))

    @app.exception_handler(RequestValidationError)
    async def bad_request(request: Request, exc: RequestValidationError) -> JSONResponse:
        return JSONResponse(
            {"error": "Missing item id or size", "code": "validation_error"},
            status_code=400,
        )

    @app.post("/checkout")
    def checkout(body: CheckoutRequest, request: Request) -> dict:
        handler = services.initiate_checkout()
        dto = handler.handle(body.item_id, body.size, origin=str(request.base_url))
        # ``url`` is the key older storefront scripts read.
        return {"checkoutUrl": dto.checkout_url, "url": dto.checkout_url}

    @app.post("/payment-webhook")
    async def payment_webhook(request: Request) -> PlainTextResponse:
        payload = await request.body()
        handler = services.handle_payment_event()
        try:
            ack = await run_in_threadpool(
                handler.handle, payload, request.headers.get(SIGNATURE_HEADER)
            )
        except InvalidSignatureError as exc:
            logger.warning("Rejected webhook delivery: %s", exc)
            return PlainTextResponse(f"Webhook Error: {exc}", status_code=400)
        logger.info("Webhook %s handled: %s", ack.event_id, ack.outcome.value)
        return PlainTextResponse("ok")

    @app.get("/inventory-status")
    def inventory_status() -> dict[str, str]:
        return services.show_inventory().handle()

    @app.get("/products")
    def products() -> list[dict]:
        return [asdict(p) for p in services.list_products().handle()]

    @app.get("/health")
    def health() -> dict[str, str]:
        return {"status": "ok"}

    return app

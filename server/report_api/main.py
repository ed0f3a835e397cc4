from __future__ import annotations
import logging
from typing import Any
from fastapi import FastAPI, Request, Response
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse
from starlette.requests import ClientDisconnect
from report_api.config import Settings, settings as default_settings
from report_api.connectors.openai_client import ClientFactory, build_client
from report_api.services.modes import DESCRIPTORS
from report_api.services.report import INVALID_BODY, ReportError, generate_report, parse_body
from report_api.utils.logging import configure_logging

log = logging.getLogger("app")

CORS_ORIGIN = {"Access-Control-Allow-Origin": "*"}
CORS_PREFLIGHT = {
    **CORS_ORIGIN,
    "Access-Control-Allow-Methods": "POST, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type",
}
ALL_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]


def _json(status_code: int, body: Any) -> JSONResponse:
    return JSONResponse(body, status_code=status_code, headers=CORS_ORIGIN)


def create_app(settings: Settings | None = None, client_factory: ClientFactory | None = None) -> FastAPI:
    settings = settings or default_settings
    client_factory = client_factory or build_client
    app = FastAPI(title="Lilly MX – Social Media Reports")

    @app.get("/")
    def health():
        return {"ok": True}

    @app.get("/debug")
    def debug():
        return {
            "log_level": settings.LOG_LEVEL,
            "debug": settings.DEBUG,
            "model": settings.OPENAI_MODEL,
            "api_key_configured": bool(settings.OPENAI_API_KEY),
            "default_mode": settings.DEFAULT_MODE,
            "max_tokens": {m.value: d.max_tokens(settings) for m, d in DESCRIPTORS.items()},
        }

    # methods are gated here, not by the router, so every reply carries CORS
    @app.api_route("/api/chat", methods=ALL_METHODS)
    async def chat(request: Request):
        if request.method == "OPTIONS":
            return Response(status_code=204, headers=CORS_PREFLIGHT)
        if request.method != "POST":
            return _json(405, {"error": "Method not allowed"})

        try:
            try:
                body = await request.body()
            except ClientDisconnect as e:
                log.warning("Body read error: %s", e)
                return _json(400, {"error": INVALID_BODY})
            payload = parse_body(body)
            out = await run_in_threadpool(generate_report, payload, settings, client_factory)
            return _json(200, out)
        except ReportError as e:
            return _json(e.status_code, e.body)
        except Exception as e:
            log.exception("Handler error: %s", e)
            return _json(500, {"error": str(e)})

    return app


configure_logging()
app = create_app()

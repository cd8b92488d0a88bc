"""
HTTP layer
==========

Four GET endpoints, each a thin call into `Cove.query`:

    /api/all        every metric
    /api/confirmed  confirmed cases only
    /api/deaths     deaths only
    /api/recovered  recoveries only

Parameters `country`, `region` and `date` default to `all`. Rejected
queries come back as 400 with `{"error": <message>}`.

The engine is passed in and kept on `app.state`; there is no module-level index.
"""

from __future__ import annotations
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from . import __version__
from .engine import Cove, ResultTree
from .errors import QueryError
from .models import Metric


def create_app(engine: Cove) -> FastAPI:
    app = FastAPI(title="COVE", version=__version__)
    app.state.engine = engine

    @app.exception_handler(QueryError)
    async def _query_error(request: Request, exc: QueryError) -> JSONResponse:
        return JSONResponse(status_code=400, content={"error": str(exc)})

    def _run(request: Request, metric: Optional[Metric], country: str, region: str, date: str) -> ResultTree:
        return request.app.state.engine.query(country=country, region=region, date=date, metric=metric)

    @app.get("/api/all")
    def all_metrics(request: Request, date: str = "all", country: str = "all", region: str = "all") -> ResultTree:
        return _run(request, None, country, region, date)

    @app.get("/api/confirmed")
    def confirmed(request: Request, date: str = "all", country: str = "all", region: str = "all") -> ResultTree:
        return _run(request, Metric.CONFIRMED, country, region, date)

    @app.get("/api/deaths")
    def deaths(request: Request, date: str = "all", country: str = "all", region: str = "all") -> ResultTree:
        return _run(request, Metric.DEATHS, country, region, date)

    @app.get("/api/recovered")
    def recovered(request: Request, date: str = "all", country: str = "all", region: str = "all") -> ResultTree:
        return _run(request, Metric.RECOVERED, country, region, date)

    return app

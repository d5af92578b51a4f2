"""FastAPI application serving the press room pages and JSON API."""

from __future__ import annotations

import asyncio
import logging
from datetime import date, datetime
from pathlib import Path
from typing import Any, Dict, List, Optional

from fastapi import Depends, FastAPI, HTTPException, Query, Request
from fastapi.exception_handlers import http_exception_handler
from fastapi.responses import HTMLResponse, RedirectResponse, Response
from fastapi.templating import Jinja2Templates
from starlette.exceptions import HTTPException as StarletteHTTPException

from .config import PressRoomConfig
from .contentful import ContentfulClient
from .filtering import apply_filters, has_active_filters
from .i18n import (
    DEFAULT_LOCALE,
    LOCALE_COOKIE,
    LOCALE_NAMES,
    LOCALES,
    Translator,
    is_supported,
    resolve_locale,
    switch_locale_path,
)
from .models import ErrorKind, FetchResult
from .rich_text import render_document
from .schemas import FilterParams, PressReleaseListResponse, PressReleaseResponse, TagsResponse
from .views import VIEW_MODES, filters_url, group_assets, release_card, results_label, sidebar

LOGGER = logging.getLogger(__name__)

TEMPLATES_DIR = Path(__file__).resolve().parent / "templates"
LOCALE_COOKIE_MAX_AGE = 365 * 24 * 60 * 60
RELATED_LIMIT = 3

templates = Jinja2Templates(directory=str(TEMPLATES_DIR))


def _status_for(result: FetchResult[Any]) -> int:
    if result.kind is ErrorKind.NOT_FOUND:
        return 404
    if result.kind is ErrorKind.CONFIGURATION:
        return 503
    return 502


def create_app(client: ContentfulClient, config: PressRoomConfig) -> FastAPI:
    app = FastAPI(title="Press Room", version="1.0.0")

    def get_client() -> ContentfulClient:
        return client

    def render(
        request: Request,
        template: str,
        translator: Translator,
        context: Dict[str, Any],
        status_code: int = 200,
        cache: bool = True,
    ) -> Response:
        query = request.url.query
        switch_paths = {}
        for code in LOCALES:
            path = switch_locale_path(request.url.path, code)
            switch_paths[code] = f"{path}?{query}" if query else path
        response = templates.TemplateResponse(
            request,
            template,
            {
                "t": translator,
                "locale": translator.locale,
                "locales": LOCALES,
                "locale_names": LOCALE_NAMES,
                "switch_paths": switch_paths,
                "site_name": config.site_name,
                "year": datetime.now().year,
                **context,
            },
            status_code=status_code,
        )
        response.set_cookie(
            LOCALE_COOKIE, translator.locale, max_age=LOCALE_COOKIE_MAX_AGE, samesite="lax"
        )
        if cache and status_code == 200:
            response.headers["Cache-Control"] = config.cache_control
        return response

    def not_found(request: Request, translator: Translator) -> Response:
        return render(request, "not_found.html", translator, {}, status_code=404, cache=False)

    def error_page(
        request: Request, translator: Translator, message: Optional[str], fallback: str, **context: Any
    ) -> Response:
        LOGGER.warning("Rendering error panel for %s: %s", request.url.path, message or fallback)
        return render(
            request,
            "error.html",
            translator,
            {"message": message or fallback, **context},
            cache=False,
        )

    def redirect_to_locale(request: Request, suffix: str) -> RedirectResponse:
        locale = resolve_locale(None, request.cookies.get(LOCALE_COOKIE))
        target = f"/{locale}{suffix}"
        if request.url.query:
            target = f"{target}?{request.url.query}"
        return RedirectResponse(target, status_code=307)

    @app.exception_handler(StarletteHTTPException)
    async def html_not_found(request: Request, exc: StarletteHTTPException) -> Response:
        if exc.status_code != 404 or request.url.path.startswith("/api/"):
            return await http_exception_handler(request, exc)
        locale = resolve_locale(None, request.cookies.get(LOCALE_COOKIE))
        return not_found(request, Translator.for_locale(locale))

    @app.get("/healthz", summary="Health check")
    async def health_check() -> dict[str, str]:
        """Return a simple health indicator."""

        return {"status": "ok"}

    @app.get("/api/press-releases", response_model=PressReleaseListResponse)
    async def api_press_releases(
        q: Optional[str] = Query(None),
        category: Optional[str] = Query(None),
        date_from: Optional[date] = Query(None),
        date_to: Optional[date] = Query(None),
        tag: List[str] = Query(default=[]),
        locale: str = Query(DEFAULT_LOCALE),
        service: ContentfulClient = Depends(get_client),
    ) -> PressReleaseListResponse:
        if not is_supported(locale):
            raise HTTPException(status_code=400, detail=f"Unsupported locale: {locale}")
        result = await service.list_press_releases(locale=locale)
        if not result.ok or result.data is None:
            raise HTTPException(status_code=_status_for(result), detail=result.error)
        filters = FilterParams(
            q=q, category=category, date_from=date_from, date_to=date_to, tag=tag
        ).to_filters()
        filtered = apply_filters(result.data, filters)
        return PressReleaseListResponse(
            total=len(result.data),
            count=len(filtered),
            items=[PressReleaseResponse.from_release(release) for release in filtered],
        )

    @app.get("/api/tags", response_model=TagsResponse)
    async def api_tags(service: ContentfulClient = Depends(get_client)) -> TagsResponse:
        result = await service.list_distinct_tags()
        if not result.ok or result.data is None:
            raise HTTPException(status_code=_status_for(result), detail=result.error)
        return TagsResponse(tags=result.data)

    @app.get("/", include_in_schema=False)
    async def root(request: Request) -> RedirectResponse:
        return redirect_to_locale(request, "")

    @app.get("/press-kit", include_in_schema=False)
    async def press_kit_redirect(request: Request) -> RedirectResponse:
        return redirect_to_locale(request, "/press-kit")

    @app.get("/press/{slug}", include_in_schema=False)
    async def press_release_redirect(request: Request, slug: str) -> RedirectResponse:
        return redirect_to_locale(request, f"/press/{slug}")

    @app.get("/{locale}", response_class=HTMLResponse)
    async def home(
        request: Request,
        locale: str,
        service: ContentfulClient = Depends(get_client),
    ) -> Response:
        if not is_supported(locale):
            return not_found(request, Translator.for_locale(resolve_locale(None, None)))
        translator = Translator.for_locale(locale)

        releases_result, tags_result = await asyncio.gather(
            service.list_press_releases(locale=locale),
            service.list_distinct_tags(),
        )
        if not releases_result.ok or releases_result.data is None:
            return error_page(
                request, translator, releases_result.error, "Could not fetch press releases."
            )
        available_tags = tags_result.data if tags_result.ok and tags_result.data else []

        params = request.query_params
        filters = FilterParams.from_query(params, params.getlist("tag")).to_filters()
        view = params.get("view") if params.get("view") in VIEW_MODES else "grid"
        releases = releases_result.data
        filtered = apply_filters(releases, filters)
        path = request.url.path
        LOGGER.debug("Showing %d of %d press releases", len(filtered), len(releases))

        return render(
            request,
            "home.html",
            translator,
            {
                "cards": [release_card(release, translator) for release in filtered],
                "filters": filters,
                "view": view,
                "results_label": results_label(translator, len(filtered), len(releases)),
                "has_filters": bool(filters.query) or has_active_filters(filters),
                "show_filters": params.get("filters") == "open" or has_active_filters(filters),
                "sidebar": sidebar(
                    path,
                    filters,
                    available_tags,
                    view,
                    show_all_categories=params.get("all_categories") == "1",
                    show_all_tags=params.get("all_tags") == "1",
                ),
                "more_categories_href": filters_url(
                    path, filters, view, filters="open", all_categories="1",
                    all_tags=params.get("all_tags", ""),
                ),
                "more_tags_href": filters_url(
                    path, filters, view, filters="open", all_tags="1",
                    all_categories=params.get("all_categories", ""),
                ),
                "less_href": filters_url(path, filters, view, filters="open"),
                "grid_href": filters_url(path, filters, "grid"),
                "list_href": filters_url(path, filters, "list"),
                "clear_href": path,
                "toggle_filters_href": filters_url(
                    path, filters, view, filters="" if params.get("filters") == "open" else "open"
                ),
            },
        )

    @app.get("/{locale}/press/{slug}", response_class=HTMLResponse)
    async def press_release(
        request: Request,
        locale: str,
        slug: str,
        service: ContentfulClient = Depends(get_client),
    ) -> Response:
        if not is_supported(locale):
            return not_found(request, Translator.for_locale(resolve_locale(None, None)))
        translator = Translator.for_locale(locale)

        result = await service.get_press_release_by_slug(slug, locale=locale)
        if result.not_found:
            return not_found(request, translator)
        if not result.ok or result.data is None:
            return error_page(request, translator, result.error, "Could not fetch this press release.")
        release = result.data

        related_result = await service.list_related(
            release.slug, release.category, release.tags, RELATED_LIMIT, locale=locale
        )
        related = related_result.data if related_result.ok and related_result.data else []

        return render(
            request,
            "press_release.html",
            translator,
            {
                "release": release,
                "card": release_card(release, translator),
                "body_html": render_document(release.content),
                "related": [release_card(item, translator) for item in related],
            },
        )

    @app.get("/{locale}/press-kit", response_class=HTMLResponse)
    async def press_kit(
        request: Request,
        locale: str,
        category: Optional[str] = Query(None),
        service: ContentfulClient = Depends(get_client),
    ) -> Response:
        if not is_supported(locale):
            return not_found(request, Translator.for_locale(resolve_locale(None, None)))
        translator = Translator.for_locale(locale)

        result = await service.list_press_kit_assets(category or None, locale=locale)
        if not result.ok or result.data is None:
            return error_page(
                request,
                translator,
                result.error,
                "Could not fetch press kit assets.",
                heading=translator.t("pressKit.title"),
            )
        return render(
            request,
            "press_kit.html",
            translator,
            {"groups": group_assets(result.data, translator), "category": category},
        )

    return app


__all__ = ["create_app", "templates"]

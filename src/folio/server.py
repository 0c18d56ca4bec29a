"""FastAPI server for folio.

This module provides the application factory that:
- Exposes POST /api/adaptive for ranked, optionally AI-enriched recommendations
- Exposes GET /api/adaptive/profiles for the company/persona selector
- Exposes POST /api/contact for contact form submissions
- Exposes GET /health as a liveness check
- Owns one FixedWindowRateLimiter per app (``app.state.limiter``)
- Logs one structured access-log event per request

Per-request flow for /api/adaptive:
    RECEIVED -> RATE_CHECKED -> VALIDATED -> BUNDLE_BUILT
    -> (AI_ENRICHED | DETERMINISTIC) -> RESPONDED

Example:
    >>> from folio.server import create_app
    >>> app = create_app()
    >>>
    >>> # Run with: uvicorn folio.server:create_app --factory --port 8000
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from folio import __version__
from folio.adaptive.models import AdaptiveMode, AdaptiveRequest, AdaptiveResponse, ProviderName, RecommendationItem
from folio.adaptive.profiles import SUPPORTED_COMPANY_IDS, get_company_profiles, get_persona
from folio.adaptive.recommendations import get_recommendation_bundle, narrative_from_bundle
from folio.config import AppConfig
from folio.contact.delivery import ContactDelivery
from folio.contact.models import (
    CAPTCHA_FAILED_MESSAGE,
    CAPTCHA_REQUIRED_MESSAGE,
    REQUIRED_FIELDS_MESSAGE,
    ContactRequest,
    validate_contact_request,
)
from folio.contact.turnstile import TurnstileVerifier
from folio.enrichment.narrative import enrich_narrative
from folio.enrichment.providers import TextGenerator, create_generator, select_provider
from folio.errors import (
    BundleNotFoundError,
    CaptchaVerificationError,
    ContactDeliveryError,
    FolioError,
    InvalidRequestError,
    RateLimitExceededError,
)
from folio.observability import configure_logging, get_logger
from folio.transport.context import ApiRequestContext, HEADER_REQUEST_ID, build_api_request_context
from folio.transport.http import json_response, parse_json_request
from folio.transport.middleware import AccessLogMiddleware, get_request_id
from folio.transport.rate_limit import FixedWindowRateLimiter, RateLimitConfig

logger = get_logger(__name__)

ADAPTIVE_NAMESPACE = "adaptive"
CONTACT_NAMESPACE = "contact"

INVALID_IDS_MESSAGE = "Invalid companyId or personaId."
CONTACT_RATE_LIMIT_MESSAGE = "Too many submissions. Please try again later."
CONTACT_DELIVERY_FAILED_MESSAGE = "Message could not be delivered. Please try again later."
CONTACT_SUCCESS_MESSAGE = "Thank you! Your message has been received."

GeneratorFactory = Callable[[ProviderName, AppConfig], TextGenerator]


def error_response(error: FolioError, headers: dict[str, str]) -> JSONResponse:
    """Map a folio error onto its single-line ``{error}`` payload."""
    return json_response({"error": error.message}, error.status_code, headers)


def _rate_limited_response(
    ctx: ApiRequestContext, namespace: str, message: str | None = None
) -> JSONResponse:
    error = (
        RateLimitExceededError(ctx.rate_limit_exceeded_reset_in_seconds, message)
        if message
        else RateLimitExceededError(ctx.rate_limit_exceeded_reset_in_seconds)
    )
    logger.warning(
        "folio.rate_limit.exceeded",
        namespace=namespace,
        ip=ctx.ip,
        retry_after=error.retry_after,
    )
    return error_response(error, ctx.exceeded_headers)


def _request_id_headers(request: Request) -> dict[str, str]:
    request_id = get_request_id(request)
    return {HEADER_REQUEST_ID: request_id} if request_id else {}


def _profiles_payload() -> dict[str, Any]:
    return {
        "companies": [
            {
                "id": company.id,
                "name": company.name,
                "website": company.website,
                "summary": company.summary,
                "defaultPersonaId": company.default_persona.id,
                "theme": company.theme.model_dump(mode="json"),
                "personas": [
                    {
                        "id": persona.id,
                        "name": persona.name,
                        "role": persona.role,
                        "recommendationGoal": persona.recommendation_goal,
                        "focusPresets": list(persona.focus_presets),
                    }
                    for persona in company.personas
                ],
            }
            for company in get_company_profiles()
        ]
    }


def create_app(
    config: AppConfig | None = None,
    limiter: FixedWindowRateLimiter | None = None,
    generator_factory: GeneratorFactory | None = None,
    contact_delivery: ContactDelivery | None = None,
    turnstile_verifier: TurnstileVerifier | None = None,
) -> FastAPI:
    """Create and configure the folio FastAPI application.

    Args:
        config: Resolved settings. Defaults to ``AppConfig.from_env()``.
        limiter: Rate-limit store shared by all routes of this app. A fresh
            in-memory limiter is created when omitted, so every app (and
            every test) starts with empty counters.
        generator_factory: Builds the text generator for a selected
            provider. Defaults to the HTTP providers in
            ``folio.enrichment.providers``.
        contact_delivery: Delivery backend for /api/contact. Defaults to
            the Resend relay built from *config*.
        turnstile_verifier: CAPTCHA check for /api/contact. Defaults to
            Cloudflare siteverify, active only when *config* has a
            Turnstile secret.

    Returns:
        Configured FastAPI application

    Raises:
        ConfigurationError: If *config* is omitted and the environment is malformed
    """
    configure_logging()
    if config is None:
        config = AppConfig.from_env()
    if limiter is None:
        limiter = FixedWindowRateLimiter()
    generator_factory = generator_factory or create_generator
    contact_delivery = contact_delivery or ContactDelivery(config)
    turnstile_verifier = turnstile_verifier or TurnstileVerifier(config)

    adaptive_limit = RateLimitConfig(config.adaptive_rate_limit, config.rate_limit_window_ms)
    contact_limit = RateLimitConfig(config.contact_rate_limit, config.rate_limit_window_ms)

    app = FastAPI(
        title="folio",
        description="Adaptive portfolio personalization API",
        version=__version__,
    )
    app.state.config = config
    app.state.limiter = limiter
    app.add_middleware(AccessLogMiddleware)

    logger.info(
        "folio.server.configured",
        adaptive_rate_limit=config.adaptive_rate_limit,
        contact_rate_limit=config.contact_rate_limit,
        window_ms=config.rate_limit_window_ms,
        enrichment_enabled=config.enrichment_enabled,
        contact_delivery_enabled=config.contact_delivery_enabled,
        turnstile_enabled=config.turnstile_enabled,
    )

    @app.get("/health")
    async def health(request: Request) -> JSONResponse:
        """Liveness check: always OK if the process is running."""
        return json_response(
            {"status": "ok", "version": __version__},
            headers=_request_id_headers(request),
        )

    @app.get("/api/adaptive/profiles")
    async def adaptive_profiles(request: Request) -> JSONResponse:
        """List companies, personas and theme tokens for the selector UI."""
        return json_response(
            _profiles_payload(),
            headers=_request_id_headers(request),
        )

    @app.post("/api/adaptive")
    async def adaptive(request: Request) -> JSONResponse:
        """Rank the catalog for a company/persona and optionally enrich the narrative."""
        ctx = build_api_request_context(
            headers=request.headers,
            rate_limit_namespace=ADAPTIVE_NAMESPACE,
            rate_limit_config=adaptive_limit,
            limiter=app.state.limiter,
            request_id=get_request_id(request),
        )
        if not ctx.allowed:
            return _rate_limited_response(ctx, ADAPTIVE_NAMESPACE)

        try:
            body = await parse_json_request(
                request,
                AdaptiveRequest,
                max_chars=config.max_body_chars,
                invalid_message=INVALID_IDS_MESSAGE,
                body_errors_as_invalid_json=True,
            )
            if body.company_id not in SUPPORTED_COMPANY_IDS or get_persona(
                body.company_id, body.persona_id
            ) is None:
                raise InvalidRequestError(INVALID_IDS_MESSAGE)
        except InvalidRequestError as e:
            logger.info("folio.adaptive.rejected", status_code=e.status_code, reason=e.message)
            return error_response(e, ctx.response_headers)

        bundle = get_recommendation_bundle(body.company_id, body.persona_id)
        if bundle is None:
            return error_response(
                BundleNotFoundError(body.company_id, body.persona_id), ctx.response_headers
            )
        deterministic_narrative = narrative_from_bundle(bundle)

        provider = select_provider(body.provider, config)
        generator = generator_factory(provider, config) if provider else None
        result = await enrich_narrative(
            bundle,
            deterministic_narrative,
            generator,
            timeout=config.enrichment_timeout_seconds,
        )

        logger.info(
            "folio.adaptive.responded",
            company_id=body.company_id,
            persona_id=body.persona_id,
            provider=provider,
            narrative_source=result.source,
            top_count=len(bundle.top_recommendations),
        )
        response = AdaptiveResponse(
            mode=AdaptiveMode(company_id=body.company_id, persona_id=body.persona_id),
            company_name=bundle.company.name,
            persona_name=bundle.persona.name,
            persona_role=bundle.persona.role,
            deterministic_narrative=deterministic_narrative,
            ai_narrative=result.ai_narrative,
            narrative_source=result.source,
            recommendations=tuple(
                RecommendationItem.from_ranked(entry) for entry in bundle.top_recommendations
            ),
            supporting_recommendations=tuple(
                RecommendationItem.from_ranked(entry) for entry in bundle.supporting_recommendations
            ),
            highlights=bundle.highlights,
        )
        return json_response(response.to_payload(), 200, ctx.response_headers)

    @app.post("/api/contact")
    async def contact(request: Request) -> JSONResponse:
        """Check the CAPTCHA, then validate and deliver a contact form submission."""
        ctx = build_api_request_context(
            headers=request.headers,
            rate_limit_namespace=CONTACT_NAMESPACE,
            rate_limit_config=contact_limit,
            limiter=app.state.limiter,
            request_id=get_request_id(request),
        )
        if not ctx.allowed:
            return _rate_limited_response(ctx, CONTACT_NAMESPACE, CONTACT_RATE_LIMIT_MESSAGE)

        try:
            body = await parse_json_request(
                request,
                ContactRequest,
                max_chars=config.max_body_chars,
                invalid_message=REQUIRED_FIELDS_MESSAGE,
            )
            if body.is_bot:
                logger.info("folio.contact.honeypot", ip=ctx.ip)
                return json_response({"success": True}, 200, ctx.response_headers)
            if turnstile_verifier.enabled:
                if not body.turnstile_token:
                    raise InvalidRequestError(CAPTCHA_REQUIRED_MESSAGE)
                if not await turnstile_verifier.verify(body.turnstile_token, ctx.ip):
                    logger.info("folio.contact.captcha_rejected", ip=ctx.ip)
                    return error_response(
                        CaptchaVerificationError(CAPTCHA_FAILED_MESSAGE), ctx.response_headers
                    )
            submission = validate_contact_request(body)
        except InvalidRequestError as e:
            return error_response(e, ctx.response_headers)

        result = await contact_delivery.deliver(submission)
        if result.attempted and not result.delivered:
            return error_response(
                ContactDeliveryError(CONTACT_DELIVERY_FAILED_MESSAGE), ctx.response_headers
            )
        return json_response(
            {"success": True, "message": CONTACT_SUCCESS_MESSAGE}, 200, ctx.response_headers
        )

    return app


__all__ = ["create_app", "error_response"]

import logging
import traceback

import stripe
from fastapi import APIRouter, HTTPException, Depends, Query, Request, status
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from gigboard.core.config import Settings, get_settings
from gigboard.models.schemas import PaymentSessionRequest, Project
from gigboard.dependencies import get_store
from gigboard.store import ProjectStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/payments", tags=["Payments"])

def _error(status_code: int, message: str, **extra) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message, **extra})

@router.post("/create-checkout-session")
async def create_checkout_session(request: Request, settings: Settings = Depends(get_settings)):
    """
    Create a hosted Stripe Checkout session for an accepted bid and return
    its id. The client hands the id to Stripe's browser library, which
    redirects to the hosted page; on success Stripe sends the user back to
    ``<origin>/payment-success?projectId=...``.

    Errors come back as ``{"error": ...}``: 400 for a malformed body, 500 for
    missing credentials or anything Stripe raises.
    """
    if not settings.stripe_secret_key:
        logger.error("Missing STRIPE_SECRET_KEY environment variable")
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Configuration error: Missing Stripe API key")

    try:
        body = await request.json()
    except ValueError:
        return _error(status.HTTP_400_BAD_REQUEST, "Invalid request body")

    try:
        payment_in = PaymentSessionRequest.model_validate(body)
    except ValidationError:
        return _error(status.HTTP_400_BAD_REQUEST, "Missing required parameters (amount, projectId, bidId)")

    origin = request.headers.get("origin") or settings.public_url
    logger.info(
        "Creating checkout session with amount=%s projectId=%s bidId=%s",
        payment_in.amount, payment_in.project_id, payment_in.bid_id,
    )

    try:
        session = stripe.checkout.Session.create(
            api_key=settings.stripe_secret_key,
            payment_method_types=["card"],
            line_items=[
                {
                    "price_data": {
                        "currency": settings.currency,
                        "product_data": {
                            "name": "Project Payment",
                            "description": f"Payment for project ID: {payment_in.project_id}",
                        },
                        "unit_amount": payment_in.amount,
                    },
                    "quantity": 1,
                },
            ],
            mode="payment",
            success_url=f"{origin}/payment-success?projectId={payment_in.project_id}",
            cancel_url=f"{origin}/?canceled=true",
            metadata={
                "projectId": payment_in.project_id,
                "bidId": payment_in.bid_id,
            },
        )
    except Exception as e:
        logger.exception("Error creating checkout session")
        extra = {"type": type(e).__name__}
        if settings.environment == "development":
            extra["stack"] = traceback.format_exc()
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, str(e), **extra)

    logger.info("Checkout session created: %s", session.id)
    return {"sessionId": session.id}

@router.get("/success", response_model=Project)
async def payment_success(
    project_id: str = Query(alias="projectId"),
    store: ProjectStore = Depends(get_store),
):
    """Target of the success redirect: mark the project paid and credit the freelancer."""
    project = store.complete_payment(project_id)
    if not project:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Project not found")
    return project

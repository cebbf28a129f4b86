"""
Payment API: Razorpay order creation and checkout verification
"""
from fastapi import APIRouter, Depends, HTTPException, status
from datetime import datetime, timezone
import logging
import time

from ...integrations.razorpay import PaymentGatewayError, RazorpayService, get_payment_gateway
from ...schemas import CreateOrderRequest, VerifyPaymentRequest

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/payment", tags=["Payment"])


@router.post("/create-order")
async def create_order(
    order_request: CreateOrderRequest,
    gateway: RazorpayService = Depends(get_payment_gateway)
):
    """Create a gateway order; the amount is given in major units."""
    if not order_request.amount or not order_request.currency:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Amount and currency are required"
        )
    if order_request.amount <= 0:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Amount must be greater than 0"
        )

    try:
        reference = order_request.booking_reference
        receipt = reference or f"receipt_{int(time.time() * 1000)}"
        notes = {
            **order_request.metadata,
            "bookingReference": reference or "",
            "createdAt": datetime.now(timezone.utc).isoformat(),
        }

        order = await gateway.create_order(order_request.amount, order_request.currency, receipt, notes)
        return {
            "orderId": order["id"],
            "amount": order["amount"],
            "currency": order["currency"],
            "keyId": gateway.key_id,
        }

    except PaymentGatewayError as e:
        logger.error(f"Payment gateway error creating order: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={"error": "Failed to create payment order", "message": "Payment gateway unavailable"}
        )
    except Exception as e:
        logger.error(f"Error creating payment order: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={"error": "Failed to create payment order", "message": "Please try again later"}
        )


@router.post("/verify")
async def verify_payment(
    verify_request: VerifyPaymentRequest,
    gateway: RazorpayService = Depends(get_payment_gateway)
):
    """
    Verify a checkout signature, then fetch the payment from the gateway.

    A signature mismatch is final: the payment is never treated as
    completed whatever the client reports.
    """
    order_id = verify_request.order_id
    payment_id = verify_request.payment_id
    signature = verify_request.signature

    if not order_id or not payment_id or not signature:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Order ID, payment ID, and signature are required"
        )

    if not gateway.verify_signature(order_id, payment_id, signature):
        logger.warning(f"⚠️ Invalid payment signature for order {order_id}")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={
                "success": False,
                "error": "Invalid payment signature",
                "message": "Payment verification failed",
            }
        )

    try:
        payment = await gateway.fetch_payment(payment_id)
        logger.info(f"✅ Payment {payment_id} verified for order {order_id}")
        return {
            "success": True,
            "paymentId": payment_id,
            "orderId": order_id,
            "paymentDetails": {
                "id": payment.get("id"),
                "amount": payment.get("amount"),
                "currency": payment.get("currency"),
                "status": payment.get("status"),
                "method": payment.get("method"),
                "email": payment.get("email"),
                "contact": payment.get("contact"),
                "createdAt": payment.get("created_at"),
            },
        }

    except Exception as e:
        logger.error(f"Error verifying payment {payment_id}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={"success": False, "error": "Failed to verify payment", "message": "Please try again later"}
        )

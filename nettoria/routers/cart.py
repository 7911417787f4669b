"""
Cart Router

Shopping cart endpoints for the storefront pages.

Response format:
- success: {"success": true, "data": ...}
- failure: {"success": false, "error": {"message": ...}} (see api.index)
"""
from fastapi import APIRouter, Depends, Header, HTTPException, Request

from nettoria.cart import CartManager, CartStorage, LineItem, generate_code
from nettoria.errors import ERROR_INTERNAL, CartStorageError
from nettoria.logging import get_logger, sanitize_string_for_logging
from .models import (
    AddToCartRequest,
    ConfirmSelectionRequest,
    SelectServiceRequest,
    UpdateCartItemRequest,
)

logger = get_logger(__name__)

router = APIRouter(prefix="/cart", tags=["cart"])

DEFAULT_SESSION = "anonymous"


def get_cart_manager(
    request: Request,
    x_session_id: str | None = Header(default=None),
) -> CartManager:
    """Build a manager for the caller's session over the app's backend."""
    namespace = (x_session_id or DEFAULT_SESSION).strip() or DEFAULT_SESSION
    storage = CartStorage(request.app.state.cart_backend, namespace=namespace)
    return CartManager(storage)


def _ok(data) -> dict:
    return {"success": True, "data": data}


def _format_item(item: LineItem) -> dict:
    return {
        **item.to_dict(),
        "unit_price": item.get_final_price(),
        "total_price": item.get_total_price(),
    }


def _format_cart(manager: CartManager) -> dict:
    cart = manager.cart
    return {
        "items": [_format_item(item) for item in cart],
        "item_count": cart.get_item_count(),
        "summary": manager.get_summary().to_dict(),
    }


@router.get("")
def get_cart(manager: CartManager = Depends(get_cart_manager)):
    """Get the session's cart with per-item prices and the summary."""
    return _ok(_format_cart(manager))


@router.post("/add")
def add_to_cart(request: AddToCartRequest, manager: CartManager = Depends(get_cart_manager)):
    """Add an item, replacing any item with the same code."""
    code = request.code or generate_code(request.type)
    added = manager.add_item(
        name=request.name,
        code=code,
        quantity=request.quantity,
        price=request.price,
        type=request.type,
        extras=request.extras,
        duration=request.duration,
    )
    if not added:
        raise HTTPException(status_code=500, detail=ERROR_INTERNAL)
    return _ok(_format_cart(manager))


@router.patch("/items/{code}")
def update_cart_item(
    code: str,
    request: UpdateCartItemRequest,
    manager: CartManager = Depends(get_cart_manager),
):
    """Edit an item in place."""
    item = manager.update_item(code, request.to_patch())
    return _ok({"item": _format_item(item), "cart": _format_cart(manager)})


@router.delete("/items/{code}")
def remove_cart_item(code: str, manager: CartManager = Depends(get_cart_manager)):
    """Remove an item; unknown codes are a no-op."""
    removed = manager.remove_item(code)
    if not removed:
        logger.info(f"Remove ignored, no item {sanitize_string_for_logging(code)}")
    return _ok({"removed": removed, "cart": _format_cart(manager)})


@router.delete("/clear")
def clear_cart(manager: CartManager = Depends(get_cart_manager)):
    manager.clear_cart()
    return _ok(_format_cart(manager))


@router.post("/reset")
def reset_cart(manager: CartManager = Depends(get_cart_manager)):
    """Clear the cart and every pending selection/edit slot."""
    manager.reset()
    return _ok(_format_cart(manager))


@router.get("/total")
def get_cart_total(manager: CartManager = Depends(get_cart_manager)):
    return _ok(manager.get_total_price())


@router.get("/summary")
def get_cart_summary(manager: CartManager = Depends(get_cart_manager)):
    return _ok(manager.get_summary().to_dict())


# ==================== SERVICE SELECTION ====================

@router.post("/select")
def select_service(request: SelectServiceRequest, manager: CartManager = Depends(get_cart_manager)):
    """Remember the catalog service chosen for configuration."""
    if not manager.select_service(request.model_dump(exclude_none=True)):
        raise CartStorageError()
    return _ok(manager.get_selected_service())


@router.get("/select")
def get_selected_service(manager: CartManager = Depends(get_cart_manager)):
    return _ok(manager.get_selected_service())


@router.post("/select/confirm")
def confirm_selected_service(
    request: ConfirmSelectionRequest,
    manager: CartManager = Depends(get_cart_manager),
):
    """Add the selected service with its duration and extras."""
    item = manager.add_selected_service(duration=request.duration, extras=request.extras)
    return _ok({"item": _format_item(item), "cart": _format_cart(manager)})


# ==================== EDITING ====================

@router.post("/items/{code}/edit")
def start_edit(code: str, manager: CartManager = Depends(get_cart_manager)):
    """Open an item for editing; it stays in the cart meanwhile."""
    return _ok(manager.start_edit(code))


@router.post("/edit/finish")
def finish_edit(request: UpdateCartItemRequest, manager: CartManager = Depends(get_cart_manager)):
    item = manager.finish_edit(request.to_patch())
    return _ok({"item": _format_item(item), "cart": _format_cart(manager)})


@router.delete("/edit")
def cancel_edit(manager: CartManager = Depends(get_cart_manager)):
    manager.cancel_edit()
    return _ok(None)

from typing import Optional
from sqlalchemy.exc import IntegrityError

GENERIC_REFERENCE_MESSAGE = "Dữ liệu tham chiếu không hợp lệ"

# Constraint name -> client-facing message
CONSTRAINT_MESSAGES = {
    "fk_products_seller_id": "Thông tin người bán không tồn tại trong hệ thống",
    "fk_products_category_id": "Danh mục sản phẩm không tồn tại trong hệ thống",
    "fk_orders_buyer_id": "Người mua không tồn tại trong hệ thống",
    "fk_order_items_product_id": "Sản phẩm đang được tham chiếu bởi đơn hàng",
    "fk_order_items_order_id": "Đơn hàng không tồn tại trong hệ thống",
    "fk_product_images_product_id": "Sản phẩm không tồn tại trong hệ thống",
    "users_email_key": "Email đã được sử dụng",
    "users_username_key": "Tên đăng nhập đã được sử dụng",
    "categories_name_key": "Danh mục đã tồn tại",
}


def constraint_name(exc: IntegrityError) -> Optional[str]:
    """Read the violated constraint from the driver's structured diagnostics.

    psycopg exposes ``orig.diag.constraint_name``; drivers without
    diagnostics (sqlite) yield None.
    """
    orig = getattr(exc, "orig", None)
    diag = getattr(orig, "diag", None)
    name = getattr(diag, "constraint_name", None)
    return name or None


def describe_integrity_error(exc: IntegrityError) -> str:
    name = constraint_name(exc)
    if name is None:
        return GENERIC_REFERENCE_MESSAGE
    return CONSTRAINT_MESSAGES.get(name, GENERIC_REFERENCE_MESSAGE)

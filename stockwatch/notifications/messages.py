from html import escape

from stockwatch.core.types import AlertCategory, Channel, Message


def _qty(value):
    return "{:g}".format(value)


def _expiry_label(candidate):
    expires_at = candidate.product.expires_at
    if expires_at is None:
        return "N/A"
    return expires_at.date().isoformat()


def build_subject(candidate):
    if candidate.category == AlertCategory.EXPIRY:
        return "Product Expiring Soon: {}".format(candidate.product.name)
    return "Low Stock Alert: {}".format(candidate.product.name)


def _detail_rows(candidate):
    product = candidate.product
    rows = [
        ("Product Name", product.name),
        ("SKU", product.sku),
    ]
    if candidate.category == AlertCategory.EXPIRY:
        rows.extend(
            [
                ("Expiry Date", _expiry_label(candidate)),
                ("Days Until Expiry", str(candidate.days_until_expiry)),
                ("Current Quantity", "{} {}".format(_qty(product.quantity), product.unit)),
            ]
        )
    else:
        rows.extend(
            [
                ("Current Quantity", "{} {}".format(_qty(product.quantity), product.unit)),
                ("Reorder Level", "{} {}".format(_qty(product.reorder_level), product.unit)),
            ]
        )
    rows.append(("Location", product.location or "N/A"))
    return rows


def build_email_body(candidate):
    if candidate.category == AlertCategory.EXPIRY:
        heading = "Product Expiration Alert"
        intro = "the following product will expire soon"
        action = "Please take appropriate action."
    else:
        heading = "Low Stock Alert"
        intro = "the following product is below reorder level"
        action = "Please take appropriate action to reorder this product."

    items = "\n".join(
        "    <li><strong>{}:</strong> {}</li>".format(escape(label), escape(value))
        for label, value in _detail_rows(candidate)
    )
    return (
        "<h2>{}</h2>\n"
        "<p>This is an automated notification to inform you that {}:</p>\n"
        "<ul>\n{}\n</ul>\n"
        "<p>{}</p>"
    ).format(heading, intro, items, action)


def build_sms_body(candidate):
    product = candidate.product
    quantity = "{} {}".format(_qty(product.quantity), product.unit)
    if candidate.category == AlertCategory.EXPIRY:
        condition = "will expire in {} days".format(candidate.days_until_expiry)
    else:
        condition = "is below reorder level ({} {})".format(_qty(product.reorder_level), product.unit)
    return "ALERT: {} (SKU: {}) {}. Current qty: {}. Location: {}".format(
        product.name,
        product.sku,
        condition,
        quantity,
        product.location or "N/A",
    )


def build_message(candidate, channel):
    """Subject and body for one candidate on one channel. No side effects."""
    channel = Channel(channel)
    if channel == Channel.EMAIL:
        body = build_email_body(candidate)
    else:
        body = build_sms_body(candidate)
    return Message(subject=build_subject(candidate), body=body)


__all__ = ["build_email_body", "build_message", "build_sms_body", "build_subject"]

def _optional(value):
    value = (value or "").strip()
    return value or None


def parse_medicine_form(form):
    """Validate the add/edit medicine form. Returns (fields, error_message)."""
    name = (form.get("name") or "").strip()
    if not name:
        return None, "Medicine name is required"

    try:
        price = round(float(form.get("price", "")), 2)
    except ValueError:
        return None, "Price must be a number"
    if price < 0.01:
        return None, "Price must be greater than 0"

    try:
        stock = int(form.get("stock", ""))
    except ValueError:
        return None, "Stock must be a whole number"
    if stock < 0:
        return None, "Stock cannot be negative"

    return {
        "name": name,
        "description": _optional(form.get("description")),
        "price": price,
        "stock": stock,
        "image": _optional(form.get("image")),
    }, None

from pagination import page_window


def page_strip(current_page, total_pages):
    parts = []
    for item in page_window(current_page, total_pages):
        if item == current_page:
            parts.append(f"[{item}]")
        else:
            parts.append(str(item))
    return " ".join(parts)


def render_status(context, width):
    """
    context keys: notification, title, mode, loading, page, total_records,
                  filtered, filter_count, armed
    """
    note = context.get("notification")
    if note is not None:
        prefix = "!" if note.kind == "error" else "*"
        text = f" {prefix} {note.message}"
        return text.ljust(width)[:width]

    title = context.get("title", "")
    mode = context.get("mode", "GRID")
    page = context.get("page")

    if context.get("loading") or page is None:
        info = "Loading..."
    else:
        info = page.showing_text()
        if context.get("filtered") and not page.is_empty:
            info += f" (filtered from {context.get('total_records', 0)} total)"
        if page.total_pages > 1:
            info += f" | {page_strip(page.current_page, page.total_pages)}"

    segments = [f" {title}", mode, info]
    filter_count = context.get("filter_count", 0)
    if filter_count:
        segments.append(f"Clear all ({filter_count})")
    if context.get("armed"):
        segments.append("Delete? x/y confirm, Esc cancel")
    text = " | ".join(segments)
    return text.ljust(width)[:width]

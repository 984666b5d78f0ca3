"""Small HTML pages for the link-driven endpoints (cancel, redirect)."""

from html import escape

PAGE_TEMPLATE = """<!DOCTYPE html>
<html>
  <head>
    <meta charset="utf-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>{title} - Egress</title>
    <style>
      body {{
        font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif;
        display: flex;
        align-items: center;
        justify-content: center;
        min-height: 100vh;
        margin: 0;
        background: #000;
        color: #fff;
      }}
      .container {{ text-align: center; padding: 40px; max-width: 600px; }}
      h1 {{ font-size: 24px; margin-bottom: 16px; }}
      p {{ color: #999; }}
      .error {{ color: #dc3545; }}
      .details {{ background: #1a1a1a; padding: 20px; border-radius: 8px; font-family: monospace; }}
      .search-btn {{ display: inline-block; background: #0ea5e9; color: #fff; padding: 12px 24px;
                     text-decoration: none; border-radius: 6px; margin: 6px; }}
      ol {{ text-align: left; color: #ccc; line-height: 1.8; }}
    </style>
  </head>
  <body>
    <div class="container">
{body}
    </div>
  </body>
</html>"""


def render_page(title: str, body: str) -> str:
    return PAGE_TEMPLATE.format(title=escape(title), body=body)


def cancelled_page(service_name: str, deleted: bool = False) -> str:
    verb = "Deleted" if deleted else "Cancelled"
    message = (
        "Reminder deleted successfully."
        if deleted
        else "Reminder cancelled successfully. You will not receive any further notifications."
    )
    body = f"""      <h1>&#10003; {verb}</h1>
      <p>{message}</p>
      <div class="details">
        <div>TARGET: {escape(service_name)}</div>
        <div>STATUS: Cancelled</div>
      </div>"""
    return render_page(f"Reminder {verb}", body)


def already_cancelled_page() -> str:
    body = """      <h1>Already Cancelled</h1>
      <p>This reminder has already been cancelled.</p>"""
    return render_page("Already Cancelled", body)


def not_found_page() -> str:
    body = """      <h1>Reminder Not Found</h1>
      <p>This reminder does not exist or the link is no longer valid.</p>"""
    return render_page("Reminder Not Found", body)


def error_page(message: str) -> str:
    body = f"""      <h1 class="error">Error</h1>
      <p>{escape(message)}</p>"""
    return render_page("Error", body)


def cancellation_help_page(service_name: str, search_urls: dict[str, str]) -> str:
    service = escape(service_name)
    body = f"""      <h1>Cancel {service}</h1>
      <p>We don't have a direct link for this service yet, but here's how to cancel:</p>
      <ol>
        <li>Log into your {service} account</li>
        <li>Go to Account Settings or the Billing/Subscription section</li>
        <li>Look for "Cancel Subscription" or "Manage Subscription"</li>
        <li>Follow their cancellation process</li>
      </ol>
      <a class="search-btn" href="{escape(search_urls['google'])}" target="_blank" rel="noopener noreferrer">Search Google</a>
      <a class="search-btn" href="{escape(search_urls['duckduckgo'])}" target="_blank" rel="noopener noreferrer">Search DuckDuckGo</a>"""
    return render_page(f"Cancel {service_name}", body)

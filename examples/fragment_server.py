"""
Fragment server example.

Serves registered components as HTML fragments for HTMX swaps:

    ┌──────────────┐      ┌──────────────────┐      ┌──────────────┐
    │  Browser     │ ──▶  │  APIRouter       │ ──▶  │ FragmentRuntime │
    │  (hx-get)    │      │  /fragments/{id} │      │ (Jinja engine)  │
    └──────────────┘      └──────────────────┘      └──────────────┘

Run:
    uvicorn examples.fragment_server:app --reload

Then:
    curl "http://localhost:8000/fragments/cart.badge?count=3"
    curl "http://localhost:8000/fragments/cart.badge?count=3&locale=de"
"""

import logging

from fastapi import FastAPI, Request
from starlette.responses import Response

from fragmently import create_runtime
from fragmently.adapters import AdapterOptions, create_fragment_router
from fragmently.presets import htmx_preset

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)

runtime = create_runtime(htmx_preset(locale="en").to_runtime_config())

runtime.register_component(
    "cart.badge",
    lambda: (
        '<span class="badge" data-locale="{{ __context.locale }}">'
        "{{ count }} item{{ 's' if count != '1' }}</span>"
    ),
    {"category": "cart", "tags": ["interactive"]},
)
runtime.register_component(
    "cart.summary",
    lambda: "<section>{{ slots.rows }}<p>Total: {{ total }}</p></section>",
    {
        "category": "cart",
        "styles": "section { padding: 1rem; }",
        "description": "Cart summary card",
    },
)

app = FastAPI(title="Fragment server")
app.include_router(
    create_fragment_router(
        runtime,
        prefix="/fragments",
        options=AdapterOptions(cache_control="no-store"),
    )
)


@app.post("/cart/add")
async def add_to_cart(request: Request) -> Response:
    """Render the updated badge and tell HTMX to refresh listeners."""
    htmx = await runtime.get_service("htmx")
    html = await runtime.render_to_string("cart.badge", props={"count": "4"})

    headers = {}
    if htmx.is_htmx_request(request.headers):
        headers = htmx.response_headers(trigger="cart-updated")
    return Response(content=html, media_type="text/html", headers=headers)

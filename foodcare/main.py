from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from foodcare.core.config import settings
from foodcare.core.log_config import configure_logging
from foodcare.routers import admin_subscriptions, subscription_reminders, subscriptions

configure_logging()

OPENAPI_TAGS = [
    {"name": "Subscriptions", "description": "Customer subscriptions: create, pause, resume, cancel."},
    {
        "name": "Subscription Reminders",
        "description": "Pre-delivery reminders and customer confirmations.",
    },
    {"name": "Admin Subscriptions", "description": "Subscription views and manual reminders."},
]

app = FastAPI(
    title=settings.APP_NAME,
    version=settings.version,
    description=(
        "Recurring product deliveries with pre-delivery reminders. "
        "Customers confirm, pause or cancel each upcoming delivery from a one-time link."
    ),
    openapi_tags=OPENAPI_TAGS,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        o.strip() for o in settings.CORS_ORIGINS.split(",") if o.strip()
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(subscriptions.router, prefix="/subscriptions", tags=["Subscriptions"])
app.include_router(
    subscription_reminders.router,
    prefix="/subscription-reminders",
    tags=["Subscription Reminders"],
)
app.include_router(
    admin_subscriptions.router,
    prefix="/admin/subscriptions",
    tags=["Admin Subscriptions"],
)


@app.get("/", tags=["Health"])
async def root() -> dict[str, str]:
    return {"name": settings.APP_NAME, "version": settings.version, "status": "ok"}

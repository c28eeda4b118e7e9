"""
Platform Shell - FastAPI Backend
Read-only observability API for the sales/campaign operations dashboard.

Run: uvicorn platform_shell.api.app:app --reload --port 8000
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from platform_shell import config
from platform_shell.api.basic_auth import BasicAuthMiddleware
from platform_shell.api.routers import campaigns, contacts, portfolio, seo
from platform_shell.logging_config import setup_logging

setup_logging()

app = FastAPI(
    title="Platform Shell",
    description="Observability API for campaign execution, contact funnels, and Sales Engine proxies.",
    version="1.0.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(BasicAuthMiddleware)

# ─── ROUTERS ─────────────────────────────────────────────────
app.include_router(contacts.router)
app.include_router(campaigns.router)
app.include_router(portfolio.router)
app.include_router(seo.router)


@app.get("/")
def index():
    return {"service": "platform-shell", "version": app.version, "docs": "/docs"}


@app.get("/api/health")
def health():
    return {
        "status": "healthy",
        "database_configured": config.is_database_configured(),
        "sales_engine_configured": config.sales_engine_base_url() is not None,
        "basic_auth_enabled": config.basic_auth_credentials() is not None,
        "config_errors": config.validate(),
    }


if __name__ == "__main__":
    import uvicorn
    config.print_config()
    uvicorn.run(app, host=config.API_HOST, port=config.API_PORT)

import logging
from typing import Optional

from fastapi import FastAPI
import uvicorn

from gigboard.routers import projects as projects_router
from gigboard.routers import files as files_router
from gigboard.routers import messaging as messaging_router
from gigboard.routers import bids as bids_router
from gigboard.routers import freelancers as freelancers_router
from gigboard.routers import payments as payments_router
from gigboard.store import ProjectStore

def create_app(store: Optional[ProjectStore] = None) -> FastAPI:
    app = FastAPI(title="gigboard")
    if store is not None:
        app.state.store = store

    app.include_router(projects_router.router)
    app.include_router(files_router.router)
    app.include_router(messaging_router.router)
    app.include_router(bids_router.router)
    app.include_router(freelancers_router.router)
    app.include_router(payments_router.router)

    @app.get("/")
    async def root():
        return {"message": "Welcome to the gigboard freelance marketplace"}

    return app

app = create_app()

def main():
    """Run the FastAPI application."""
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    uvicorn.run(
        "gigboard.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
        log_level="info"
    )

if __name__ == "__main__":
    main()

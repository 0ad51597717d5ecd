import logging
import sys
from datetime import datetime

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from bookreader import __version__
from bookreader.routers import books, highlights, reader

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s - %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)

logger = logging.getLogger(__name__)


def create_app() -> FastAPI:
    app = FastAPI(title="Book Reader API", version=__version__)

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        start_time = datetime.now()
        logger.info(f">>> Incoming request: {request.method} {request.url.path}")

        try:
            response = await call_next(request)
            duration = (datetime.now() - start_time).total_seconds()
            logger.info(
                f"<<< Response: {request.method} {request.url.path} - Status: {response.status_code} - Duration: {duration:.3f}s"
            )
            return response
        except Exception as e:
            duration = (datetime.now() - start_time).total_seconds()
            logger.error(
                f"!!! Request failed: {request.method} {request.url.path} - Duration: {duration:.3f}s - Error: {str(e)}",
                exc_info=True,
            )
            return JSONResponse(
                status_code=500, content={"detail": f"Internal server error: {str(e)}"}
            )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/")
    async def read_root():
        return {"message": "Book Reader API", "status": "running"}

    @app.get("/health")
    async def health_check():
        return {"status": "healthy"}

    # Include routers
    app.include_router(books.router)
    app.include_router(reader.router)
    app.include_router(highlights.router)

    return app


app = create_app()

if __name__ == "__main__":
    import uvicorn

    uvicorn.run("main:app", host="0.0.0.0", port=8000, reload=True)

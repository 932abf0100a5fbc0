"""
Main entry point for the portfolio site.
This file imports the FastAPI app from the portfolio_site package.
"""
from portfolio_site.main import app

if __name__ == "__main__":
    import uvicorn
    from portfolio_site.core.config import API_HOST, API_PORT, DEBUG, LOG_LEVEL

    uvicorn.run(
        "main:app",
        host=API_HOST,
        port=API_PORT,
        reload=DEBUG,
        log_level=LOG_LEVEL.lower()
    )

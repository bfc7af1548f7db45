import uvicorn
from api.main import app
from utils.config import settings

if __name__ == "__main__":
    if settings.is_production():
        uvicorn.run(
            "api.main:app",
            host="0.0.0.0",
            port=settings.PORT,
            access_log=True,
            log_level="info"
        )
    else:
        # Development settings
        uvicorn.run(
            "api.main:app",
            host="127.0.0.1",
            port=settings.PORT,
            reload=True,
            log_level="debug"
        )

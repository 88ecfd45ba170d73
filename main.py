from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from core.logger import logger
from core.settings import settings
from database.database import database
from presentation.employee import router as employee_router


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifecycle."""
    # Startup
    logger.info('[STARTUP] Starting application...')
    try:
        await database.connect()
        await database.create_tables()
        logger.info('[STARTUP] Application started')
    except Exception as e:
        logger.error(f'[STARTUP] Startup failed: {e}')
        raise

    yield

    # Shutdown
    logger.info('[SHUTDOWN] Stopping application...')
    try:
        await database.dispose()
        logger.info('[SHUTDOWN] Application stopped')
    except Exception as e:
        logger.error(f'[SHUTDOWN] Error during shutdown: {e}')


app = FastAPI(
    title=settings.APP_NAME,
    description='API for managing employees and their reporting hierarchy',
    version=settings.APP_VERSION,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=['GET', 'POST', 'PATCH', 'DELETE'],
    allow_headers=['Content-Type', 'Authorization'],
)

app.include_router(employee_router)


@app.get('/', tags=['health'])
async def root():
    """Health check endpoint."""
    return {
        'status': 'ok',
        'message': f'{settings.APP_NAME} is running',
        'db_connected': await database.is_connected(),
    }


if __name__ == '__main__':
    import uvicorn

    uvicorn.run(
        'main:app',
        host='0.0.0.0',
        port=8000,
        reload=True,
    )

from contextlib import asynccontextmanager

from fastapi import FastAPI
from db import Base, engine
from routers import matching_router, messages_router, profiles_router
import models


@asynccontextmanager
async def lifespan(app: FastAPI):
    Base.metadata.create_all(bind=engine)
    yield


app = FastAPI(title="ClinicMatch Service", lifespan=lifespan)

app.include_router(profiles_router.router)
app.include_router(matching_router.router)
app.include_router(messages_router.router)


@app.get("/")
def read_root():
    return {"message": "ClinicMatch Service is running!"}


@app.get("/health")
def health_check():
    return {"status": "healthy", "service": "clinicmatch"}

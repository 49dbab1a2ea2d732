import logging

from fastapi import FastAPI

from clinicpay import config
from clinicpay.routes import router
from clinicpay.database import Base, engine
from clinicpay import models  # noqa: F401  registers the payments table

logging.basicConfig(
    level=config.log_level(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)

app = FastAPI(title="Clinic Payment Reconciliation Service")

app.include_router(router)

Base.metadata.create_all(bind=engine)

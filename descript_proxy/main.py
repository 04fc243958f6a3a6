import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

# config loads .env on import, before anything reads the environment
from descript_proxy.config import ALLOWED_ORIGINS, LOG_LEVEL

logging.basicConfig(level=LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s - %(message)s")

app = FastAPI(title="Descript Transcript Proxy", version="1.0.0")

# --- CORS -----------------------------------------------------------------
app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["*"],
)


@app.get("/health")
def health():
    return {"ok": True}


# --- Routers --------------------------------------------------------------
from descript_proxy.routes import transcript, webhook_proxy


app.include_router(webhook_proxy.router)
app.include_router(transcript.router)

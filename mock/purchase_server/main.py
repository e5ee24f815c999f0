from fastapi import FastAPI, HTTPException
from fastapi.responses import JSONResponse
from pathlib import Path
import json
import os

app = FastAPI(title="Mock Purchase Server", version="1.0.0")
# Support both local development and Docker
DATA_DIR = Path("/purchase_stub") if os.path.exists("/purchase_stub") else Path(__file__).resolve().parents[1] / "purchase_stub"

@app.get("/health")
def health(): return {"status": "ok"}

@app.get("/purchases/{purchase_id}")
def get_purchase(purchase_id: str):
    file = DATA_DIR / f"purchase_{purchase_id}.json"
    if not file.exists():
        raise HTTPException(status_code=404, detail="purchase not found")
    return JSONResponse(content=json.loads(file.read_text()))

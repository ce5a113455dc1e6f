"""
Fake recall registry for exercising FirebaseRegistry without a real database.

Serves the Firebase REST shape on port 9000:
  GET /2024/recalls.json  →  {"<id>": {"productName": ..., "recallReason": ...,
                                        "identificationInfo": ..., "url": ...}, ...}

Usage:
    python -m recallscan.scripts.fake_registry_server
    REGISTRY_ADAPTER=firebase FIREBASE_DATABASE_URL=http://127.0.0.1:9000 \
        python -m uvicorn recallscan.services.api:app --port 8000

FLAKY=1 makes every other request answer 503 so the retry path gets exercised.
"""
import os

import uvicorn
from fastapi import FastAPI
from fastapi.responses import JSONResponse

app = FastAPI(title="fake-recall-registry")

RECALLS = {
    "-Nx01": {
        "productName": "Acme - Blender",
        "recallReason": "blade assembly can detach during use",
        "identificationInfo": "model numbers starting with BL-19 sold in 2019",
        "url": "https://recall.example/acme-blender",
    },
    "-Nx02": {
        "productName": "Globex - Space Heater",
        "recallReason": "fire risk from overheating power cord",
        "identificationInfo": "serial numbers 4000 to 4999",
        "url": "https://recall.example/globex-heater",
    },
}

_requests = 0


@app.get("/{year}/recalls.json")
async def recalls(year: str):
    global _requests
    _requests += 1
    if os.getenv("FLAKY") and _requests % 2:
        print(f"[registry] GET /{year}/recalls.json → 503 (flaky)")
        return JSONResponse({"error": "temporarily unavailable"}, status_code=503,
                            headers={"Retry-After": "1"})
    print(f"[registry] GET /{year}/recalls.json → {len(RECALLS)} records")
    return RECALLS if year == "2024" else None


if __name__ == "__main__":
    print("Fake recall registry starting on http://localhost:9000")
    uvicorn.run(app, host="0.0.0.0", port=9000)

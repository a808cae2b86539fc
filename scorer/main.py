from fastapi import FastAPI, Depends, HTTPException, status, Header
from fastapi.middleware.cors import CORSMiddleware

from scorer.routes.validate_csv import router as validate_csv_router
from scorer.routes.process_pending import router as process_pending_router
from scorer.routes.precheck import router as precheck_router
from scorer.routes.leaderboard import router as leaderboard_router
from scorer.routes.status import router as status_router
from scorer.utils.config import HOST, PORT, backend_api_key


def require_api_key(authorization: str | None = Header(default=None)):
    expected_key = backend_api_key()
    if not expected_key:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Server not configured: BACKEND_API_KEY missing")
    if not authorization or not authorization.startswith("Bearer "):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Missing bearer token")
    token = authorization.removeprefix("Bearer ").strip()
    if token != expected_key:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Invalid token")


app = FastAPI(title="Competition Submission Scorer", version="1.0.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/")
def root():
    return {"service": "submission-scorer", "status": "ok"}


# Protected routes
app.include_router(validate_csv_router, dependencies=[Depends(require_api_key)])
app.include_router(process_pending_router, dependencies=[Depends(require_api_key)])
app.include_router(precheck_router, dependencies=[Depends(require_api_key)])
app.include_router(leaderboard_router, dependencies=[Depends(require_api_key)])
# Health check stays open
app.include_router(status_router)


def run():
    import uvicorn
    uvicorn.run("scorer.main:app", host=HOST, port=PORT, reload=False)


if __name__ == "__main__":
    run()

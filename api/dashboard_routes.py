"""FastAPI app for the live garbage collection tracker."""
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from api.simulation_api import router as simulation_router
from api.citizens_api import router as citizens_router

app = FastAPI(
    title="Live Garbage Collection Tracker",
    description="Time-synchronized truck positions and citizen collection status",
    version="1.0.0"
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(simulation_router)
app.include_router(citizens_router)

@app.get("/health")
async def health():
    return {"status": "ok"}

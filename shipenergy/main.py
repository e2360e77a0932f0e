from fastapi import FastAPI

from shipenergy.routers import auth, energy_points, ships

app = FastAPI(
    title="Ship Energy Points",
    description="Energy Point token pools for ships and their crews",
    version="0.1.0",
)

app.include_router(auth.router)
app.include_router(ships.router)
app.include_router(energy_points.router)


@app.get("/health")
async def health_check():
    return {"status": "ok"}

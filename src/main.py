from .core import app
from .auth.views import router as auth_router
from .kanban.views import routers as kanban_routers

app.include_router(auth_router)
for router in kanban_routers:
    app.include_router(router)


@app.get("/health")
async def health():
    return {"status": "ok"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("src.main:app", host="0.0.0.0", port=8000)

# server.py — local / Render launcher
import uvicorn

from swertres import config

if __name__ == "__main__":
    uvicorn.run("swertres.main:app", host=config.HOST, port=config.PORT)

import uvicorn

from portal.app import app
from portal.config import PORTAL_HOST, PORTAL_PORT


if __name__ == "__main__":
    uvicorn.run(app, host=PORTAL_HOST, port=PORTAL_PORT)

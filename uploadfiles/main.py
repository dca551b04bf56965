"""robyn-uploadfiles - multipart upload validation and storage powered by Robyn."""

from robyn import Robyn

from uploadfiles.api.uploads import router as upload_router
from uploadfiles.core.logger import logger
from uploadfiles.core.settings import settings as st

app = Robyn(__file__)

# Routers
app.include_router(upload_router)


def main() -> None:
    logger.info("🚀 STARTING %s | HOST=%s | PORT=%s", st.API_NAME, st.API_HOST, st.API_PORT)
    app.start(host=st.API_HOST, port=st.API_PORT)


if __name__ == "__main__":
    main()

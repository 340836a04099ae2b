import logging
import sys


def configure_logging(level: int = logging.INFO) -> None:
    """
    Configure logging for the whole app.
    Call this once in FastAPI startup and at the top of the Streamlit entrypoint.
    """
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )


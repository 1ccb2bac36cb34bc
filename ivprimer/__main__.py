"""``python -m ivprimer`` renders the tutorial with the default configuration."""
import logging
import os

from ._logging import setup_logging
from .config import TutorialConfig
from .report import TutorialDocument

logger = logging.getLogger("ivprimer")


def main() -> None:
    setup_logging(
        os.environ.get("IVPRIMER_LOG_LEVEL", "INFO"),
        log_file=os.environ.get("IVPRIMER_LOG_FILE"),
    )
    path = TutorialDocument(TutorialConfig()).render()
    logger.info(f"Done: open {path}")


if __name__ == "__main__":
    main()

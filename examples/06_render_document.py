"""
Render the full tutorial to Markdown with figures, as `python -m ivprimer` does.
"""

from ivprimer import TutorialConfig, TutorialDocument
from ivprimer._logging import setup_logging

setup_logging("INFO")

config = TutorialConfig().with_output_dir("ivprimer_output")
path = TutorialDocument(config).render()
print(f"Open {path}")

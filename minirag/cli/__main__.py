# =============================================================================
# minirag/cli/__main__.py - Package Entry Point
# =============================================================================
#
# `python -m minirag.cli` delegates to the ingestion CLI, the most common
# operation. Run the other tools directly:
#     python -m minirag.cli.ask "What is Qdrant?"
#     python -m minirag.cli.evaluate --questions config/eval_questions.yaml
# =============================================================================

"""Allow ``python -m minirag.cli`` execution."""

import sys

from minirag.cli.ingest import main

sys.exit(main())

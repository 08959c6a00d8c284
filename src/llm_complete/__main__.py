import sys

from llm_complete.cli import main

sys.exit(main())

"""Allow running the pipeline with ``python -m recipe_pipeline``."""
from .cli import main

if __name__ == "__main__":
    main()

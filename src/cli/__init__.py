"""CLI tools for newsrag.

- ``python -m src.cli ingest`` — ingest articles for a topic into ChromaDB
- ``python -m src.cli ask`` — answer a question from the corpus
- ``python -m src.cli stats`` — show the corpus size

All commands use argparse and build their dependencies through
``src.main.build_components``.
"""

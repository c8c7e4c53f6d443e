"""SpaceRAG: document spaces with retrieval-augmented, cited answers."""

__version__ = "0.1.0"

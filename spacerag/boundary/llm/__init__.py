"""
Model provider boundary.

Builds langchain-core Embeddings and BaseChatModel implementations from
configuration. Callers depend only on the langchain-core interfaces.

Exports: create_embeddings, create_chat_model, FixedDimensionEmbeddings
"""

from spacerag.boundary.llm.chat_models import create_chat_model
from spacerag.boundary.llm.embeddings import FixedDimensionEmbeddings, create_embeddings

__all__ = ["create_embeddings", "create_chat_model", "FixedDimensionEmbeddings"]

"""Vector store provider adapters.

Imports are per-module so selecting Qdrant never imports chromadb and
vice versa::

    from minirag.providers.vector_store.qdrant_provider import QdrantProvider
    from minirag.providers.vector_store.chromadb_provider import ChromaDBProvider
"""

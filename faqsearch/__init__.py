"""
faqsearch - small semantic search over a question/answer corpus.
Embeddings are stored in SQLite and ranked by cosine distance with a linear scan.
"""

__version__ = "0.1.0"

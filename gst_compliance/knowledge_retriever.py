import re
from dataclasses import dataclass
from pathlib import Path
from typing import FrozenSet, List
import numpy as np
from loguru import logger

from .domain_knowledge import KNOWLEDGE_CATEGORIES


TOKEN_PATTERN = re.compile(r"[a-z0-9]+")

STOP_WORDS = frozenset("""
a about after all also an and any are as at be been before being but by can could did do does for from
had has have how i if in into is it its may me might my no not of on or our per should so such than that
the their them then there these they this those to under until was we were what when where which while who
will with within would you your
""".split())


@dataclass(frozen=True)
class KnowledgeDocument:
    """static corpus entry"""
    id: str
    content: str
    tags: FrozenSet[str]


@dataclass(frozen=True)
class RetrievalResult:
    """document with its relevance to a query"""
    document: KnowledgeDocument
    score: float

    def to_dict(self):
        return {"id": self.document.id, "relevance": round(self.score, 4)}


def tokenize(text):
    """lowercase alphanumeric tokens without stop words"""
    return [t for t in TOKEN_PATTERN.findall((text or "").lower()) if t not in STOP_WORDS]


def builtin_documents():
    docs = []
    for category, entries in KNOWLEDGE_CATEGORIES.items():
        for entry in entries:
            docs.append(KnowledgeDocument(
                id=entry["id"],
                content=entry["content"],
                tags=frozenset(entry.get("tags", [])) | {category},
            ))
    return docs


def load_directory_documents(knowledge_dir):
    """every *.txt file in the directory becomes a document named after the file"""
    docs = []
    if knowledge_dir is None:
        return docs

    knowledge_dir = Path(knowledge_dir)
    if not knowledge_dir.is_dir():
        logger.warning(f"Knowledge directory not found: {knowledge_dir}")
        return docs

    for path in sorted(knowledge_dir.glob("*.txt")):
        try:
            content = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            logger.warning(f"Could not read {path.name}: {e}")
            continue
        docs.append(KnowledgeDocument(id=path.stem, content=content, tags=frozenset({"file"})))
        logger.debug(f"Loaded knowledge file {path.name} ({len(content)} chars)")

    return docs


class KnowledgeRetriever:
    """
    TF-IDF retrieval over a fixed GST knowledge corpus
    index is built once in __init__ and read-only afterwards
    """

    def __init__(self, documents):
        self.documents = list(documents)
        self.vocabulary = {}

        tokenized = [tokenize(doc.content) for doc in self.documents]
        for tokens in tokenized:
            for token in tokens:
                if token not in self.vocabulary:
                    self.vocabulary[token] = len(self.vocabulary)

        # raw term counts, one row per document
        self.term_counts = np.zeros((len(self.documents), len(self.vocabulary)), dtype=float)
        for row, tokens in enumerate(tokenized):
            for token in tokens:
                self.term_counts[row, self.vocabulary[token]] += 1

        n_docs = len(self.documents)
        doc_freq = (self.term_counts > 0).sum(axis=0)
        if n_docs:
            self.idf = 1.0 + np.log(n_docs / (1.0 + doc_freq))
        else:
            self.idf = np.zeros(0)

        logger.success(f"Knowledge base ready: {n_docs} documents, {len(self.vocabulary)} terms")

    @classmethod
    def from_directory(cls, knowledge_dir=None):
        """built-in documents plus any text files from knowledge_dir"""
        documents = builtin_documents() + load_directory_documents(knowledge_dir)
        return cls(documents)

    def score(self, query):
        """relevance of every document to the query, in corpus order"""
        if not self.documents:
            return np.zeros(0)

        term_ids = [self.vocabulary[t] for t in tokenize(query) if t in self.vocabulary]
        if not term_ids:
            return np.zeros(len(self.documents))

        # repeated query terms count once per occurrence
        return self.term_counts[:, term_ids] @ self.idf[term_ids]

    def retrieve(self, query, max_results=3) -> List[RetrievalResult]:
        """top documents for the query, zero scores excluded"""
        if max_results <= 0:
            return []

        scores = self.score(query)
        order = np.argsort(-scores, kind="stable")

        results = []
        for idx in order:
            if scores[idx] <= 0:
                break
            results.append(RetrievalResult(document=self.documents[idx], score=float(scores[idx])))
            if len(results) >= max_results:
                break

        shown = (query or "")[:80]
        if results:
            logger.info(f"Retrieved {len(results)} documents for '{shown}' (top: {results[0].document.id}, {results[0].score:.3f})")
        else:
            logger.info(f"No relevant documents for '{shown}'")

        return results

    def get_document(self, doc_id):
        for doc in self.documents:
            if doc.id == doc_id:
                return doc
        return None

    def get_statistics(self):
        """stats about the corpus"""
        tag_counts = {}
        for doc in self.documents:
            for tag in doc.tags:
                tag_counts[tag] = tag_counts.get(tag, 0) + 1

        return {
            "total_documents": len(self.documents),
            "vocabulary_size": len(self.vocabulary),
            "tags": tag_counts,
        }

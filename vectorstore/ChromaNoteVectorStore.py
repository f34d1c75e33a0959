# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2025-11-16
# Updated: 2026-01-16
# Description: ChromaNoteVectorStore
# -----------------------------------------------------------------------------
from concurrent.futures import ThreadPoolExecutor, TimeoutError as FutureTimeout
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Sequence

import chromadb
import numpy as np

from config.Config import Config
from errors.VectorizationErrors import StoreFailureError
from utility.logging_utils import get_class_logger
from vectorstore.NoteVectorStore import NoteVectorStore, ScoredPoint, decode_payload, encode_payload


@dataclass
class ChromaNoteVectorStore(NoteVectorStore):
    """
    NoteVectorStore on top of a Chroma collection (cosine space).

    Chroma reports cosine *distance*; hits are converted to similarity
    (1 - distance) so callers compare scores against thresholds in [0, 1].
    """
    cfg: Config
    client: Any = None
    timeout_seconds: Optional[float] = None
    logger: Any = None
    _collections: Dict[str, Any] = field(default_factory=dict, init=False, repr=False)

    def __post_init__(self) -> None:
        self.logger = self.logger or get_class_logger(self.__class__)
        self.timeout_seconds = self.timeout_seconds or self.cfg.vector.provider_timeout_seconds
        self._executor = ThreadPoolExecutor(max_workers=4, thread_name_prefix="chroma")

        if self.client is None:
            self.client = self._init_client()

    def _init_client(self):
        if self.cfg.uses_chroma_cloud:
            self.logger.info(
                "Initialising Chroma Cloud client (tenant=%s, database=%s)",
                self.cfg.chroma_tenant,
                self.cfg.chroma_database,
            )
            return chromadb.CloudClient(
                tenant=self.cfg.chroma_tenant,
                database=self.cfg.chroma_database,
                api_key=self.cfg.chroma_api_key,
            )

        if self.cfg.chroma_endpoint:
            self.logger.info("Initialising Chroma HTTP client (endpoint=%s)", self.cfg.chroma_endpoint)
            return chromadb.HttpClient(host=self.cfg.chroma_endpoint)

        self.logger.warning("No Chroma endpoint configured; using in-process ephemeral client")
        return chromadb.EphemeralClient()

    def _collection(self, name: str):
        col = self._collections.get(name)
        if col is None:
            col = self.client.get_or_create_collection(
                name=name,
                metadata={"hnsw:space": "cosine"},
            )
            self._collections[name] = col
            self.logger.info("Chroma collection ready: '%s'", name)
        return col

    def _call(self, op: str, collection: str, fn: Callable[[], Any]) -> Any:
        """Run a Chroma call with a bounded wait; any failure becomes StoreFailureError."""
        future = self._executor.submit(fn)
        try:
            return future.result(timeout=self.timeout_seconds)
        except FutureTimeout as e:
            future.cancel()
            raise StoreFailureError(
                f"Chroma {op} timed out after {self.timeout_seconds:.1f}s",
                key={"collection": collection},
            ) from e
        except StoreFailureError:
            raise
        except Exception as e:
            raise StoreFailureError(
                f"Chroma {op} failed: {e}",
                key={"collection": collection},
            ) from e

    def test_connection(self) -> bool:
        """
        Simple health check: does the Chroma server answer a heartbeat?
        """
        try:
            self._call("heartbeat", "*", self.client.heartbeat)
            return True
        except StoreFailureError as e:
            self.logger.error("Chroma connection failed: %s", e)
            return False

    def upsert(
            self,
            collection: str,
            point_id: str,
            vector: Sequence[float],
            payload: Dict[str, Any],
    ) -> None:
        vec = vector.tolist() if hasattr(vector, "tolist") else list(vector)
        metadata = encode_payload(payload)
        document = payload.get("source_text") or ""

        self._call(
            "upsert",
            collection,
            lambda: self._collection(collection).upsert(
                ids=[point_id],
                embeddings=[vec],
                metadatas=[metadata],
                documents=[document],
            ),
        )
        self.logger.debug("Upserted point '%s' into '%s'", point_id, collection)

    def search(
            self,
            collection: str,
            vector: Sequence[float],
            limit: int,
            score_threshold: Optional[float] = None,
            where: Optional[Dict[str, Any]] = None,
    ) -> List[ScoredPoint]:
        vec = vector.tolist() if hasattr(vector, "tolist") else list(vector)

        def _query() -> Dict[str, Any]:
            col = self._collection(collection)
            available = col.count()
            if available == 0:
                return {}
            query_kwargs: Dict[str, Any] = {
                "query_embeddings": [vec],
                "n_results": min(limit, available),
                "include": ["metadatas", "distances"],
            }
            if where is not None:
                query_kwargs["where"] = where
            return col.query(**query_kwargs)

        res = self._call("search", collection, _query)

        ids0 = (res.get("ids") or [[]])[0] if res else []
        metas0 = (res.get("metadatas") or [[]])[0] if res else []
        dists0 = (res.get("distances") or [[]])[0] if res else []

        points: List[ScoredPoint] = []
        for i, point_id in enumerate(ids0):
            dist = dists0[i] if i < len(dists0) else None
            md = metas0[i] if i < len(metas0) else None
            score = 1.0 - float(dist) if dist is not None else 0.0
            if score_threshold is not None and score < score_threshold:
                continue
            points.append(ScoredPoint(id=point_id, score=score, payload=decode_payload(md)))

        points.sort(key=lambda p: p.score, reverse=True)
        self.logger.info(
            "Chroma search complete: returned %d points (requested %d) from '%s'",
            len(points),
            limit,
            collection,
        )
        return points

    def delete(self, collection: str, point_ids: Sequence[str]) -> None:
        # preserves order while de-duplicating
        unique_ids = list(dict.fromkeys(point_ids))
        if not unique_ids:
            return
        self._call("delete", collection, lambda: self._collection(collection).delete(ids=unique_ids))
        self.logger.debug("Deleted %d points from '%s'", len(unique_ids), collection)

    def get_vector(self, collection: str, point_id: str) -> Optional[np.ndarray]:
        res = self._call(
            "get",
            collection,
            lambda: self._collection(collection).get(ids=[point_id], include=["embeddings"]),
        )
        embeddings = res.get("embeddings") if res else None
        if embeddings is None or len(embeddings) == 0:
            return None
        return np.asarray(embeddings[0], dtype=np.float32)

    def count(self, collection: str) -> int:
        return int(self._call("count", collection, lambda: self._collection(collection).count()))

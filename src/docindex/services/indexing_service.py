"""
Indexing Service for docindex.

Keeps a vector store consistent with a documentation tree: new and modified
files are chunked, embedded and stored, unchanged files are skipped by
fingerprint, and files that disappeared have their rows removed.
"""

import asyncio
import logging
import threading
import time
from pathlib import Path
from typing import Callable, Optional, TypeVar

from docindex.core.change_tracker import ChangeTracker
from docindex.core.chunker import ChunkerInterface, EmbeddedChunk, create_chunker
from docindex.core.file_scanner import DocumentFile, DocumentScanner, FileScannerInterface
from docindex.core.index_state import IndexState
from docindex.infrastructure.embedding import EmbeddingClientError, EmbeddingClientInterface
from docindex.infrastructure.index_state import IndexStateStore
from docindex.infrastructure.text_extractor import (
    DocumentTextExtractor,
    ExtractionError,
    TextExtractorInterface,
)
from docindex.infrastructure.vector_store import ChunkRecord, VectorStoreInterface
from docindex.services.indexing_models import IndexingError, IndexingResult

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Failures that cost a single file, never the whole run
_PER_FILE_ERRORS = (
    ExtractionError,
    EmbeddingClientError,
    IndexingError,
    asyncio.TimeoutError,
    OSError,
)


def _run_in_daemon_thread(func: Callable[..., T], *args) -> "asyncio.Future[T]":
    """
    Run a blocking call on a fresh daemon thread and expose it as a future.

    A call that outlives its timeout is abandoned: the thread is not part of
    any executor, so neither ``asyncio.run`` nor interpreter exit waits for it.
    """
    loop = asyncio.get_running_loop()
    future: asyncio.Future[T] = loop.create_future()

    def resolve(setter: Callable, value) -> None:
        # Already cancelled when the call outlived its timeout
        if not future.done():
            setter(value)

    def deliver(setter: Callable, value) -> None:
        try:
            loop.call_soon_threadsafe(resolve, setter, value)
        except RuntimeError:
            # The loop closed while the call was still running
            pass

    def worker() -> None:
        try:
            result = func(*args)
        except Exception as e:
            deliver(future.set_exception, e)
        else:
            deliver(future.set_result, result)

    threading.Thread(target=worker, name="docindex-extract", daemon=True).start()
    return future


class IndexingService:
    """
    Service for synchronizing a documentation tree into a vector store.

    Files are processed one at a time: a file's rows are replaced (delete then
    insert) before the next file starts, and its fingerprint is recorded only
    after that mutation succeeded. The fingerprint file is written once, at
    the end of a run that did not abort.
    """

    def __init__(
        self,
        embedding_client: EmbeddingClientInterface,
        vector_store: VectorStoreInterface,
        state_store: IndexStateStore,
        file_scanner: Optional[FileScannerInterface] = None,
        chunker: Optional[ChunkerInterface] = None,
        text_extractor: Optional[TextExtractorInterface] = None,
        change_tracker: Optional[ChangeTracker] = None,
        extraction_timeout: float = 30.0,
        progress_callback: Optional[Callable[[int, int, str], None]] = None,
    ):
        """
        Initialize the indexing service.

        Args:
            embedding_client: Client for generating embeddings
            vector_store: Store for chunk rows
            state_store: Persistence of per-file fingerprints
            file_scanner: Discovery of candidate files (default: DocumentScanner)
            chunker: Text chunker (default: 1000 characters, 200 overlap)
            text_extractor: Text/PDF extractor (default: DocumentTextExtractor)
            change_tracker: Fingerprint comparison (default: hash and mtime)
            extraction_timeout: Seconds allowed for extracting one file
            progress_callback: Optional callback(current, total, message)
        """
        self._embedding_client = embedding_client
        self._vector_store = vector_store
        self._state_store = state_store
        self._file_scanner = file_scanner or DocumentScanner()
        self._chunker = chunker or create_chunker()
        self._text_extractor = text_extractor or DocumentTextExtractor()
        self._change_tracker = change_tracker or ChangeTracker()
        self._extraction_timeout = extraction_timeout
        self._progress_callback = progress_callback

    def _report_progress(self, current: int, total: int, message: str) -> None:
        """Report progress if callback is set."""
        if self._progress_callback:
            self._progress_callback(current, total, message)
        logger.debug(f"Progress: {current}/{total} - {message}")

    async def synchronize(self, root_path: Path, force: bool = False) -> IndexingResult:
        """
        Bring the store in line with the files under root_path.

        Args:
            root_path: Documentation root
            force: Drop the collection and all fingerprints, then rebuild

        Returns:
            IndexingResult with statistics

        Raises:
            VectorStoreError: If the store cannot be reached or written
            IndexStateError: If the fingerprint file cannot be read or written
            FileNotFoundError: If root_path does not exist
            NotADirectoryError: If root_path is not a directory
        """
        start_time = time.time()
        result = IndexingResult()
        root = Path(root_path).resolve()

        if force:
            self._report_progress(0, 0, "Dropping existing index...")
            await self._vector_store.drop()
            self._state_store.clear()
            logger.info(f"Forced rebuild of index for {root}")

        state = self._state_store.load()

        self._report_progress(0, 0, "Scanning files...")
        files = self._file_scanner.scan(root)
        result.total_files = len(files)

        if not force:
            result.deleted_files = await self._remove_deleted_files(root, state, files)

        total = len(files)
        for i, file in enumerate(files, start=1):
            try:
                if not force and not self._change_tracker.has_changed(
                    file.file_path, state.get(file.file_path)
                ):
                    result.skipped += 1
                    logger.debug(f"Unchanged, skipping: {file.relative_path}")
                else:
                    chunk_count = await self._index_file(file, state)
                    if chunk_count == 0:
                        result.failed_files.append(file.relative_path)
                    else:
                        result.processed += 1
                        result.total_chunks += chunk_count
            except _PER_FILE_ERRORS as e:
                result.failed_files.append(file.relative_path)
                logger.warning(
                    f"Failed to index {file.relative_path}: {e!r}",
                    extra={"file_path": file.file_path, "error_type": type(e).__name__},
                )
            self._report_progress(i, total, f"Indexed {file.relative_path}")

        self._state_store.save(state)

        result.duration_seconds = time.time() - start_time
        logger.info(
            "Indexing completed",
            extra={
                "processed": result.processed,
                "skipped": result.skipped,
                "deleted_files": result.deleted_files,
                "failed_files": len(result.failed_files),
                "total_chunks": result.total_chunks,
                "duration_seconds": result.duration_seconds,
            },
        )
        return result

    async def _remove_deleted_files(
        self, root: Path, state: IndexState, files: list[DocumentFile]
    ) -> int:
        """Delete rows and fingerprints of recorded files that were not discovered."""
        current = {f.file_path for f in files}
        live_relative_paths = {f.relative_path for f in files}
        missing = sorted(path for path in state.files if path not in current)
        if not missing:
            return 0

        self._report_progress(0, len(missing), "Removing deleted files...")
        for i, file_path in enumerate(missing, start=1):
            relative_path = self._stored_relative_path(root, file_path, state)
            if relative_path is None:
                logger.warning(
                    f"Cannot tell which rows belong to {file_path} (outside {root}), "
                    f"leaving them in the store"
                )
            elif relative_path in live_relative_paths:
                # A discovered file owns rows under this path now
                logger.debug(f"Keeping rows of {relative_path}, now owned by a live file")
            else:
                removed = await self._vector_store.delete_by_file(relative_path)
                logger.debug(f"Removed {removed} rows for deleted file {relative_path}")
            state.remove(file_path)
            self._report_progress(i, len(missing), f"Removed {file_path}")

        logger.info(f"Removed {len(missing)} deleted files from the index")
        return len(missing)

    @staticmethod
    def _stored_relative_path(root: Path, file_path: str, state: IndexState) -> Optional[str]:
        """Relative path a fingerprinted file's rows were stored under."""
        previous = state.get(file_path)
        if previous is not None and previous.relative_path:
            return previous.relative_path
        try:
            return Path(file_path).relative_to(root).as_posix()
        except ValueError:
            return None

    async def _extract_text(self, file: DocumentFile) -> str:
        """
        Extract a file's text within the extraction timeout.

        Any error from the extractor, expected or not, becomes an
        ExtractionError so it only costs this file.
        """
        future = _run_in_daemon_thread(self._text_extractor.extract, file.file_path)
        try:
            return await asyncio.wait_for(future, timeout=self._extraction_timeout)
        except (ExtractionError, asyncio.TimeoutError):
            raise
        except Exception as e:
            raise ExtractionError(
                f"Unexpected {type(e).__name__} extracting {file.relative_path}: {e}"
            ) from e

    async def _index_file(self, file: DocumentFile, state: IndexState) -> int:
        """
        Replace a file's rows and record its fingerprint.

        Returns:
            Number of chunks stored; 0 when the file has no text, in which case
            neither the store nor the fingerprint is touched
        """
        # Taken before reading so an edit made during indexing shows up next run
        fingerprint = self._change_tracker.fingerprint(file.file_path)

        text = await self._extract_text(file)
        chunks = self._chunker.chunk(file, text)
        if not chunks:
            logger.warning(f"No text extracted from {file.relative_path}, skipping")
            return 0

        vectors = await self._embedding_client.embed_batch([chunk.text for chunk in chunks])
        if len(vectors) != len(chunks):
            raise IndexingError(
                f"Embedding count mismatch for {file.relative_path}: "
                f"expected {len(chunks)}, got {len(vectors)}",
                file_path=file.relative_path,
                expected=len(chunks),
                actual=len(vectors),
            )
        dimension = self._embedding_client.get_dimension()
        for vector in vectors:
            if len(vector) != dimension:
                raise IndexingError(
                    f"Embedding width mismatch for {file.relative_path}: "
                    f"expected {dimension}, got {len(vector)}",
                    file_path=file.relative_path,
                    expected=dimension,
                    actual=len(vector),
                )

        records = [
            ChunkRecord.from_embedded_chunk(EmbeddedChunk(chunk=chunk, vector=vector))
            for chunk, vector in zip(chunks, vectors)
        ]

        await self._vector_store.delete_by_file(file.relative_path)
        await self._vector_store.insert(records)

        fingerprint.chunk_count = len(records)
        fingerprint.relative_path = file.relative_path
        state.set(file.file_path, fingerprint)
        logger.debug(f"Indexed {file.relative_path}: {len(records)} chunks")
        return len(records)

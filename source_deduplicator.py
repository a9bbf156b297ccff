"""Extract and deduplicate grounding citation URLs."""

import logging
from typing import Iterable, List, Optional, Sequence, Tuple

from models import GroundingChunk, SourceLink

logger = logging.getLogger(__name__)


def _present(uri: Optional[str]) -> Optional[str]:
    if uri and uri.strip():
        return uri.strip()
    return None


def collect_source_urls(chunks: Optional[Iterable[GroundingChunk]]) -> Tuple[str, ...]:
    """
    Collect unique source URLs from grounding chunks.

    Each chunk contributes its map URI if present, else its web URI. Chunks
    with neither are skipped. Order of first appearance is kept so display
    labels stay stable.

    Args:
        chunks: Grounding chunks from the route generator (may be None or empty)

    Returns:
        Tuple of distinct URLs
    """
    urls = {}
    skipped = 0
    for chunk in chunks or ():
        uri = _present(chunk.maps_uri) or _present(chunk.web_uri)
        if uri is None:
            skipped += 1
            continue
        urls.setdefault(uri, None)

    if skipped:
        logger.debug(f"Skipped {skipped} grounding chunks without a URI")
    return tuple(urls)


def label_sources(urls: Sequence[str]) -> List[SourceLink]:
    """Label URLs for display as 'Source 1', 'Source 2', ..."""
    return [SourceLink(label=f"Source {i}", url=url) for i, url in enumerate(urls, 1)]

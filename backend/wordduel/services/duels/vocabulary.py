import random
from typing import List, Optional

from wordduel.models import Word
from .errors import InsufficientWords


class VocabularySource:
    """Supplies frozen word snapshots for a challenger's duel."""

    def sample_words(self, owner_id: int, n: int, language: Optional[str] = None) -> List[dict]:
        raise NotImplementedError


class DatabaseVocabularySource(VocabularySource):
    """Draws a uniform random subset of the owner's eligible vocabulary."""

    def __init__(self, rng: Optional[random.Random] = None):
        self._rng = rng or random.Random()

    def eligible_words(self, owner_id: int, language: Optional[str] = None) -> List[Word]:
        query = Word.query.filter(
            Word.user_id == owner_id,
            Word.original_word != '',
            Word.translated_word != '',
        )
        if language:
            query = query.filter(Word.language == language)
        return query.order_by(Word.id).all()

    def sample_words(self, owner_id: int, n: int, language: Optional[str] = None) -> List[dict]:
        candidates = self.eligible_words(owner_id, language)
        if len(candidates) < n:
            raise InsufficientWords(f'At least {n} words are required, found {len(candidates)}')
        return [w.to_snapshot() for w in self._rng.sample(candidates, n)]

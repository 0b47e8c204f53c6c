from typing import Optional


def resolve_winner(challenger_id: int, opponent_id: int,
                   challenger_score: int, opponent_score: int,
                   challenger_time_ms: int, opponent_time_ms: int) -> Optional[int]:
    """Pick the duel winner from final totals.

    Higher score wins; on equal scores the lower cumulative response time
    wins; equal score and time is a draw (None).
    """
    if challenger_score != opponent_score:
        return challenger_id if challenger_score > opponent_score else opponent_id
    if challenger_time_ms != opponent_time_ms:
        return challenger_id if challenger_time_ms < opponent_time_ms else opponent_id
    return None

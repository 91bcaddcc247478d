from .round_stats_repo import RoundStatsRepositoryDB

__all__ = ["RoundStatsRepositoryDB"]

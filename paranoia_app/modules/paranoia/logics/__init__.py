from .registry import CATEGORIES, collect, collect_all

__all__ = ['CATEGORIES', 'collect', 'collect_all']
